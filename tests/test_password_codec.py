# --------------------------------------------------------------
# File: test_password_codec.py
# Description: Pruebas del codec de contraseñas PBKDF2 + AES-CBC.
# --------------------------------------------------------------

import base64
import importlib
from datetime import datetime

import pytest

from aeskit.errors import ConfigurationError, PaddingError, PreconditionError
from aeskit.models import LEGACY_PBKDF2, Pbkdf2Params
from aeskit.password_codec import (
    PasswordCodec,
    format_timestamp,
    iv_from_timestamp,
    parse_timestamp,
)

SALT = "yash@gmail.com"
RAW = "Yash@001"
CREATED = datetime(2023, 12, 29, 10, 9, 34)


@pytest.fixture
def codec():
    return PasswordCodec()


def test_encode_with_timestamp_is_deterministic(codec):
    """Comprueba que la misma terna (secreto, salt, fecha) produzca el mismo registro.

    Returns:
        None: Las aserciones comparan ambos registros.
    """
    first = codec.encode(RAW, SALT, CREATED)
    second = codec.encode(RAW, SALT, CREATED)
    assert first == second
    assert codec.decode(first, SALT, CREATED) == RAW


def test_encode_without_timestamp_is_random(codec):
    first = codec.encode(RAW, SALT)
    second = codec.encode(RAW, SALT)
    assert first != second
    assert codec.decode(first, SALT) == RAW
    assert codec.decode(second, SALT) == RAW


def test_record_layout(codec):
    """Verifica el empaquetado salt[24] ‖ IV[16] ‖ ciphertext.

    Returns:
        None: Las aserciones revisan cada segmento del registro.
    """
    raw = base64.b64decode(codec.encode(RAW, SALT, CREATED))
    assert raw[:24] == SALT.encode("utf-8").ljust(24, b"\x00")
    assert raw[24:40] == b"2023-12-29 10:09"
    assert len(raw[40:]) == 16


def test_long_salt_is_truncated_in_record_but_not_in_key(codec):
    """Dos salts con los mismos 24 primeros bytes derivan claves distintas."""
    salt_a = "a-very-long-user-name@example.com"
    salt_b = "a-very-long-user-name@example.org"
    record = codec.encode(RAW, salt_a, CREATED)

    assert base64.b64decode(record)[:24] == salt_a.encode("utf-8")[:24]
    assert codec.decode(record, salt_a) == RAW
    assert codec.encode(RAW, salt_b, CREATED) != record
    assert not codec.matches(record, salt_b, RAW)


def test_multibyte_secret_roundtrip(codec):
    secret = "contraseña-€-🔐"
    assert codec.decode(codec.encode(secret, SALT), SALT) == secret


def test_matches(codec):
    """Evalúa la verificación por decodificación con entradas válidas e inválidas.

    Returns:
        None: Solo la contraseña correcta con su salt coincide.
    """
    record = codec.encode(RAW, SALT, CREATED)
    assert codec.matches(record, SALT, RAW)
    assert not codec.matches(record, SALT, "Yash@002")
    assert not codec.matches(record, "other@gmail.com", RAW)
    assert not codec.matches("no es base64!", SALT, RAW)
    assert not codec.matches(base64.b64encode(b"x" * 30).decode(), SALT, RAW)
    assert not codec.matches(record, SALT, None)


def test_matches_encoded(codec):
    record = codec.encode(RAW, SALT, CREATED)
    assert codec.matches_encoded(record, SALT, RAW, CREATED)
    assert codec.matches_encoded(record, SALT, RAW, "2023-12-29 10:09:34")
    assert not codec.matches_encoded(record, SALT, "Yash@002", CREATED)
    assert not codec.matches_encoded(record, SALT, RAW, datetime(2024, 1, 1, 0, 0, 0))
    with pytest.raises(PreconditionError):
        codec.matches_encoded(record, SALT, RAW, None)


def test_decode_rejects_foreign_timestamp(codec):
    record = codec.encode(RAW, SALT, CREATED)
    with pytest.raises(PaddingError):
        codec.decode(record, SALT, datetime(2024, 1, 1, 0, 0, 0))


def test_decode_rejects_truncated_record(codec):
    record = base64.b64decode(codec.encode(RAW, SALT, CREATED))
    with pytest.raises(PaddingError):
        codec.decode(base64.b64encode(record[:40]).decode("ascii"), SALT)


def test_preconditions(codec):
    with pytest.raises(PreconditionError):
        codec.encode(RAW, "")
    with pytest.raises(PreconditionError):
        codec.encode(None, SALT)
    with pytest.raises(PreconditionError):
        codec.decode("", SALT)
    with pytest.raises(PreconditionError):
        codec.encode(RAW, SALT, "29/12/2023")


def test_legacy_and_default_params_are_incompatible():
    """Comprueba que el PRF forme parte del formato: SHA1 y SHA256 no se mezclan.

    Returns:
        None: Cada codec decodifica solo sus propios registros.
    """
    legacy = PasswordCodec(secret="shared-secret", params=LEGACY_PBKDF2)
    modern = PasswordCodec(secret="shared-secret", params=Pbkdf2Params())

    legacy_record = legacy.encode(RAW, SALT, CREATED)
    modern_record = modern.encode(RAW, SALT, CREATED)

    assert legacy_record != modern_record
    assert legacy.decode(legacy_record, SALT) == RAW
    assert modern.decode(modern_record, SALT) == RAW
    assert not modern.matches(legacy_record, SALT, RAW)


def test_secret_is_required(monkeypatch):
    monkeypatch.delenv("AESKIT_PASSWORD_SECRET", raising=False)
    import aeskit.config as config_module

    importlib.reload(config_module)
    with pytest.raises(ConfigurationError):
        PasswordCodec()


def test_secret_from_file(tmp_path, monkeypatch):
    """Carga la passphrase desde fichero con prioridad sobre la variable."""
    secret_file = tmp_path / "SecretPasswordKey.key"
    secret_file.write_text("file-secret\n", encoding="utf-8")
    monkeypatch.setenv("AESKIT_PASSWORD_SECRET_FILE", str(secret_file))
    import aeskit.config as config_module

    importlib.reload(config_module)
    from_file = PasswordCodec()
    explicit = PasswordCodec(secret="file-secret")
    assert from_file.encode(RAW, SALT, CREATED) == explicit.encode(RAW, SALT, CREATED)


def test_params_from_environment(monkeypatch):
    monkeypatch.setenv("AESKIT_PBKDF2_HASH", "SHA1")
    monkeypatch.setenv("AESKIT_PBKDF2_ITERATIONS", "1024")
    monkeypatch.setenv("AESKIT_PBKDF2_KEY_BITS", "128")
    import aeskit.config as config_module

    importlib.reload(config_module)
    assert PasswordCodec().params == LEGACY_PBKDF2


def test_invalid_params_in_environment(monkeypatch):
    monkeypatch.setenv("AESKIT_PBKDF2_ITERATIONS", "muchas")
    import aeskit.config as config_module

    importlib.reload(config_module)
    with pytest.raises(ConfigurationError):
        PasswordCodec()


def test_repr_hides_secret():
    codec = PasswordCodec(secret="do-not-print-me")
    assert "do-not-print-me" not in repr(codec)


def test_timestamp_helpers():
    assert format_timestamp(CREATED) == "2023-12-29 10:09:34"
    assert parse_timestamp("2023-12-29 10:09:34") == CREATED
    assert iv_from_timestamp(CREATED) == b"2023-12-29 10:09"
    # Los segundos quedan fuera del IV.
    assert iv_from_timestamp(CREATED.replace(second=59)) == iv_from_timestamp(CREATED)


def test_timestamp_of_wrong_type(codec):
    """Una fecha que no es datetime ni cadena es un error de precondición.

    Returns:
        None: encode lo rechaza y matches_encoded lo trata como no coincidencia.
    """
    record = codec.encode(RAW, SALT, CREATED)
    with pytest.raises(PreconditionError):
        iv_from_timestamp(12345)
    with pytest.raises(PreconditionError):
        codec.encode(RAW, SALT, 12345)
    assert not codec.matches_encoded(record, SALT, RAW, 12345)
