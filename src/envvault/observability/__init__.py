"""Public observability primitives: structured logging with redaction."""

from envvault.observability.logging import (
    DEFAULT_LOGGER_NAME,
    JsonLineFormatter,
    LoggingConfig,
    LoggingHandle,
    LogRedactor,
    default_log_redactor,
    get_active_logging_handle,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)

__all__ = [
    "DEFAULT_LOGGER_NAME",
    "JsonLineFormatter",
    "LogRedactor",
    "LoggingConfig",
    "LoggingHandle",
    "default_log_redactor",
    "get_active_logging_handle",
    "setup_logging",
    "setup_structured_logging",
    "shutdown_logging",
]
