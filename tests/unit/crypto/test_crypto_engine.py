"""
envvault — unit tests for the crypto engine

File: tests/unit/crypto/test_crypto_engine.py
Last updated: 2026-10-19

Purpose
- Validate AES-256-GCM envelope encryption: format, round trip, tamper detection,
  wrong-key behavior, and the bulk field helpers.

What this test file should cover
- Envelope layout ``encrypted:`` + base64(IV[16] || tag[16] || ciphertext).
- Fresh IV per call; authentication failures as ``DecryptionError``.
- ``auto_decrypt`` tolerance and logging without secret values.

Non-functional requirements
- Uses a small scrypt cost so the suite stays fast.
"""

from __future__ import annotations

import base64
import logging

import pytest

from envvault.constants import ENCRYPTED_PREFIX, IV_LENGTH, TAG_LENGTH
from envvault.crypto import CryptoEngine, KeyMaterial, is_encrypted
from envvault.errors import DecryptionError, ErrorCode, InvalidKeyError, KeyNotSetError

try:
    from hypothesis import given, settings
    from hypothesis import strategies as st
except ModuleNotFoundError:
    HYPOTHESIS_AVAILABLE = False
else:
    HYPOTHESIS_AVAILABLE = True

FAST_N = 2**10
SALT = b"0123456789abcdef"


@pytest.fixture(scope="module")
def engine() -> CryptoEngine:
    return CryptoEngine.from_passphrase("correct horse battery staple", salt=SALT, n=FAST_N)


@pytest.fixture(scope="module")
def other_engine() -> CryptoEngine:
    return CryptoEngine.from_passphrase("a different passphrase", salt=SALT, n=FAST_N)


def test_envelope_layout(engine: CryptoEngine) -> None:
    envelope = engine.encrypt("hunter2!")

    assert envelope.startswith(ENCRYPTED_PREFIX)
    raw = base64.b64decode(envelope[len(ENCRYPTED_PREFIX) :], validate=True)
    assert len(raw) == IV_LENGTH + TAG_LENGTH + len(b"hunter2!")


def test_round_trip_including_empty_and_unicode(engine: CryptoEngine) -> None:
    for plaintext in ("", "s3cret-p@ss", "päss wörd ✓", "x" * 4096):
        assert engine.decrypt(engine.encrypt(plaintext)) == plaintext


def test_encryption_is_not_deterministic(engine: CryptoEngine) -> None:
    first = engine.encrypt("same")
    second = engine.encrypt("same")

    assert first != second
    assert engine.decrypt(first) == engine.decrypt(second) == "same"


def test_decrypt_accepts_bare_base64_payload(engine: CryptoEngine) -> None:
    envelope = engine.encrypt("value")

    assert engine.decrypt(envelope[len(ENCRYPTED_PREFIX) :]) == "value"


def test_wrong_key_fails_with_decryption_error(
    engine: CryptoEngine, other_engine: CryptoEngine
) -> None:
    envelope = engine.encrypt("value")

    with pytest.raises(DecryptionError) as excinfo:
        other_engine.decrypt(envelope)

    assert excinfo.value.code is ErrorCode.DECRYPTION_FAILED
    assert "value" not in str(excinfo.value)


@pytest.mark.parametrize("region", ["iv", "tag", "ciphertext"])
def test_tampering_any_region_is_detected(engine: CryptoEngine, region: str) -> None:
    envelope = engine.encrypt("tamper me")
    raw = bytearray(base64.b64decode(envelope[len(ENCRYPTED_PREFIX) :]))
    index = {"iv": 0, "tag": IV_LENGTH, "ciphertext": IV_LENGTH + TAG_LENGTH}[region]
    raw[index] ^= 0x01
    forged = ENCRYPTED_PREFIX + base64.b64encode(bytes(raw)).decode("ascii")

    with pytest.raises(DecryptionError):
        engine.decrypt(forged)


@pytest.mark.parametrize(
    "payload",
    [
        "encrypted:not base64!!",
        "encrypted:" + base64.b64encode(b"short").decode("ascii"),
        "encrypted:",
    ],
)
def test_malformed_payloads_raise_decryption_error(engine: CryptoEngine, payload: str) -> None:
    with pytest.raises(DecryptionError):
        engine.decrypt(payload)


def test_engine_without_key_refuses_to_work() -> None:
    engine = CryptoEngine()

    assert engine.has_key is False
    with pytest.raises(KeyNotSetError):
        engine.encrypt("x")
    with pytest.raises(KeyNotSetError):
        engine.decrypt("encrypted:AAAA")
    assert engine.auto_decrypt({"A": "plain"}) == {"A": "plain"}


def test_auto_decrypt_without_key_loads_plain_config() -> None:
    config = {"HOST": "localhost", "PORT": 3306, "DEBUG": False}

    assert CryptoEngine().auto_decrypt(config) == config


def test_auto_decrypt_without_key_keeps_envelopes_and_warns(
    engine: CryptoEngine, caplog: pytest.LogCaptureFixture
) -> None:
    stored = {"HOST": "localhost", "DB_PASSWORD": engine.encrypt("s3cr3t12")}

    with caplog.at_level(logging.WARNING, logger="envvault.crypto.engine"):
        result = CryptoEngine().auto_decrypt(stored)

    assert result == stored
    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.field == "DB_PASSWORD"  # type: ignore[attr-defined]
    assert record.error_code == "E5001"  # type: ignore[attr-defined]
    assert "s3cr3t12" not in caplog.text



def test_is_encrypted_is_a_pure_prefix_check() -> None:
    assert is_encrypted("encrypted:garbage") is True
    assert CryptoEngine.is_encrypted("encrypted:") is True
    assert is_encrypted("plain") is False
    assert is_encrypted(42) is False
    assert is_encrypted(None) is False


def test_same_passphrase_and_salt_derive_the_same_key() -> None:
    first = CryptoEngine.from_passphrase("pw", salt=SALT, n=FAST_N)
    second = CryptoEngine.from_passphrase("pw", salt=SALT.hex(), n=FAST_N)

    assert first.key == second.key
    assert second.decrypt(first.encrypt("shared")) == "shared"


def test_missing_salt_generates_a_fresh_one() -> None:
    first = CryptoEngine.from_passphrase("pw", n=FAST_N)
    second = CryptoEngine.from_passphrase("pw", n=FAST_N)

    assert first.key is not None and second.key is not None
    assert first.key.salt != second.key.salt
    assert len(first.key.salt_hex) == 32


def test_legacy_salt_is_opt_in_and_exclusive() -> None:
    legacy = CryptoEngine.from_passphrase("pw", legacy_salt=True, n=FAST_N)

    assert legacy.key is not None
    assert legacy.key.salt == b"ldesign-env-salt"
    with pytest.raises(InvalidKeyError):
        CryptoEngine.from_passphrase("pw", salt=SALT, legacy_salt=True, n=FAST_N)


def test_with_passphrase_returns_a_new_engine(engine: CryptoEngine) -> None:
    original_key = engine.key
    switched = engine.with_passphrase("another", salt=SALT, n=FAST_N)

    assert switched is not engine
    assert engine.key is original_key
    assert switched.key != engine.key


def test_empty_passphrase_is_rejected() -> None:
    with pytest.raises(InvalidKeyError):
        CryptoEngine.from_passphrase("", salt=SALT, n=FAST_N)


def test_key_material_hides_key_bytes_and_checks_length() -> None:
    material = KeyMaterial(key=b"k" * 32, salt=SALT)

    assert "kkkk" not in repr(material)
    with pytest.raises(InvalidKeyError):
        KeyMaterial(key=b"short")


def test_generate_key_is_64_hex_chars() -> None:
    first = CryptoEngine.generate_key()
    second = CryptoEngine.generate_key()

    assert len(first) == 64
    int(first, 16)
    assert first != second


def test_secret_lifecycle(engine: CryptoEngine) -> None:
    config = {"DB_HOST": "localhost", "DB_PASSWORD": "hunter2!", "PORT": 3306}

    stored = engine.encrypt_fields(config, ["DB_PASSWORD", "PORT", "MISSING"])

    assert stored["DB_HOST"] == "localhost"
    assert stored["PORT"] == 3306
    assert "MISSING" not in stored
    assert is_encrypted(stored["DB_PASSWORD"])
    assert config["DB_PASSWORD"] == "hunter2!"

    assert engine.decrypt_fields(stored, ["DB_PASSWORD"]) == config
    assert engine.auto_decrypt(stored) == config


def test_encrypt_fields_does_not_double_encrypt(engine: CryptoEngine) -> None:
    once = engine.encrypt_fields({"S": "v"}, ["S"])
    twice = engine.encrypt_fields(once, ["S"])

    assert twice == once
    assert engine.decrypt(twice["S"]) == "v"


def test_decrypt_fields_propagates_failures(
    engine: CryptoEngine, other_engine: CryptoEngine
) -> None:
    stored = engine.encrypt_fields({"S": "v"}, ["S"])

    with pytest.raises(DecryptionError):
        other_engine.decrypt_fields(stored, ["S"])


def test_auto_decrypt_keeps_raw_value_and_logs_field_only(
    engine: CryptoEngine, other_engine: CryptoEngine, caplog: pytest.LogCaptureFixture
) -> None:
    foreign = other_engine.encrypt("not-yours")
    stored = {"GOOD": engine.encrypt("mine"), "BAD": foreign, "PLAIN": "p"}

    with caplog.at_level(logging.WARNING, logger="envvault.crypto.engine"):
        result = engine.auto_decrypt(stored)

    assert result == {"GOOD": "mine", "BAD": foreign, "PLAIN": "p"}
    assert len(caplog.records) == 1
    record = caplog.records[0]
    assert record.field == "BAD"  # type: ignore[attr-defined]
    assert record.error_code == "E5003"  # type: ignore[attr-defined]
    assert "not-yours" not in caplog.text
    assert foreign not in caplog.text


def test_repr_never_shows_key(engine: CryptoEngine) -> None:
    assert repr(engine) == "CryptoEngine(keyed)"
    assert repr(CryptoEngine()) == "CryptoEngine(unkeyed)"


def test_property_round_trip_and_tamper_detection(engine: CryptoEngine) -> None:
    if not HYPOTHESIS_AVAILABLE:
        pytest.skip("hypothesis is not installed")

    @settings(max_examples=40, deadline=None)
    @given(plaintext=st.text(max_size=64), data=st.data())
    def _check(plaintext: str, data: st.DataObject) -> None:
        envelope = engine.encrypt(plaintext)
        assert engine.decrypt(envelope) == plaintext

        raw = bytearray(base64.b64decode(envelope[len(ENCRYPTED_PREFIX) :]))
        index = data.draw(st.integers(min_value=0, max_value=len(raw) - 1))
        bit = data.draw(st.integers(min_value=0, max_value=7))
        raw[index] ^= 1 << bit
        forged = ENCRYPTED_PREFIX + base64.b64encode(bytes(raw)).decode("ascii")
        with pytest.raises(DecryptionError):
            engine.decrypt(forged)

    _check()
