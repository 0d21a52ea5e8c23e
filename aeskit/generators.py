# --------------------------------------------------------------
# File: generators.py
# Description: Generación aleatoria de passphrases y salts.
# --------------------------------------------------------------
"""Generadores basados en `secrets` para passphrases de aplicación y salts."""

import secrets

from aeskit.errors import PreconditionError
from aeskit.models import SALT_SIZE, b64encode

CHARACTERS = (
    "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
    "!@#$%^&*()-_=+[{]}|;:'\",<.>/?"
)
PASSWORD_LENGTH = 64


def generate_random_password(length: int = PASSWORD_LENGTH) -> str:
    """Genera una passphrase aleatoria apta para `AESKIT_PASSWORD_SECRET`."""

    if length <= 0:
        raise PreconditionError("La longitud debe ser positiva.")
    return "".join(secrets.choice(CHARACTERS) for _ in range(length))


def generate_random_salt(size: int = SALT_SIZE) -> str:
    """Genera `size` bytes aleatorios codificados en Base64.

    Una salt de 16 bytes da 24 caracteres Base64; una de 24 bytes, 32.
    """

    if size <= 0:
        raise PreconditionError("El tamaño de la salt debe ser positivo.")
    return b64encode(secrets.token_bytes(size))
