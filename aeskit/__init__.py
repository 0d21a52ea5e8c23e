# --------------------------------------------------------------
# File: __init__.py
# Description: Exposición pública de utilidades criptográficas AES.
# --------------------------------------------------------------
"""Inicializa el paquete `aeskit` y documenta sus módulos principales."""

__all__ = [
    "config",
    "crypto_kdf",
    "crypto_sym",
    "errors",
    "generators",
    "key_store",
    "models",
    "password_codec",
    "password_policy",
]
