# --------------------------------------------------------------
# File: test_crypto_kdf.py
# Description: Pruebas de la derivación PBKDF2-HMAC.
# --------------------------------------------------------------

import pytest

from aeskit.crypto_kdf import derive_password_key
from aeskit.errors import PreconditionError
from aeskit.models import DEFAULT_PBKDF2, LEGACY_PBKDF2, Pbkdf2Params


@pytest.mark.parametrize(
    "iterations, expected",
    [
        (1, "0c60c80f961f0e71f3a9b524af601206"),
        (2, "ea6c014dc72d6f8ccd1ed92ace1d41f0"),
    ],
)
def test_pbkdf2_sha1_reference_vectors(iterations, expected):
    """Contrasta la derivación con los vectores de RFC 6070 (primeros 16 bytes).

    Returns:
        None: Las aserciones comparan la salida hexadecimal.
    """
    params = Pbkdf2Params(hash_name="sha1", iterations=iterations, key_bits=128)
    assert derive_password_key("password", b"salt", params).hex() == expected


@pytest.mark.parametrize("bits", [128, 192, 256])
def test_key_length_follows_params(bits):
    params = Pbkdf2Params(key_bits=bits)
    assert len(derive_password_key("secret", b"user@example.com", params)) == bits // 8


def test_derivation_depends_on_every_input():
    """Comprueba que salt, passphrase y PRF alteren la clave derivada."""
    base = derive_password_key("secret", b"salt-a", DEFAULT_PBKDF2)
    assert base == derive_password_key("secret", b"salt-a", DEFAULT_PBKDF2)
    assert base != derive_password_key("secret", b"salt-b", DEFAULT_PBKDF2)
    assert base != derive_password_key("secreto", b"salt-a", DEFAULT_PBKDF2)
    assert base != derive_password_key("secret", b"salt-a", LEGACY_PBKDF2)


def test_empty_inputs_are_rejected():
    with pytest.raises(PreconditionError):
        derive_password_key("", b"salt")
    with pytest.raises(PreconditionError):
        derive_password_key("secret", b"")
