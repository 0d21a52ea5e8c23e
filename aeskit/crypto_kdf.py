# --------------------------------------------------------------
# File: crypto_kdf.py
# Description: Derivación de claves AES mediante PBKDF2-HMAC.
# --------------------------------------------------------------
"""Funciones de derivación de claves para el codec de contraseñas."""

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from pydantic import ValidationError

from aeskit import config
from aeskit.errors import ConfigurationError, PreconditionError
from aeskit.models import DEFAULT_PBKDF2, Pbkdf2Params

_HASHES = {
    "sha1": hashes.SHA1,
    "sha256": hashes.SHA256,
    "sha512": hashes.SHA512,
}


def derive_password_key(
    secret: str, salt: bytes, params: Pbkdf2Params = DEFAULT_PBKDF2
) -> bytes:
    """Deriva una clave AES con PBKDF2-HMAC.

    Args:
        secret (str): Passphrase secreta de la aplicación (se codifica en UTF-8).
        salt (bytes): Salt asociada al registro.
        params (Pbkdf2Params): Función HMAC, iteraciones y longitud de clave.

    Returns:
        bytes: Clave derivada de `params.key_bits` bits.

    """

    if not secret:
        raise PreconditionError("La passphrase de derivación es obligatoria.")
    if not salt:
        raise PreconditionError("La salt de derivación es obligatoria.")

    kdf = PBKDF2HMAC(
        algorithm=_HASHES[params.hash_name](),
        length=params.key_bits // 8,
        salt=salt,
        iterations=params.iterations,
    )
    return kdf.derive(secret.encode("utf-8"))


def load_pbkdf2_params() -> Pbkdf2Params:
    """Construye los parámetros PBKDF2 a partir de la configuración de entorno.

    Raises:
        ConfigurationError: Si algún valor no es válido.

    """

    try:
        return Pbkdf2Params(
            hash_name=config.PBKDF2_HASH.lower(),
            iterations=int(config.PBKDF2_ITERATIONS),
            key_bits=int(config.PBKDF2_KEY_BITS),
        )
    except (ValueError, ValidationError) as exc:
        raise ConfigurationError(f"Parámetros PBKDF2 inválidos: {exc}") from exc
