# --------------------------------------------------------------
# File: errors.py
# Description: Jerarquía de excepciones tipadas de la capa criptográfica.
# --------------------------------------------------------------
"""Excepciones públicas de `aeskit`.

Las excepciones de bajo nivel de `cryptography` (``InvalidTag``,
``ValueError``) se traducen a esta jerarquía en el límite del motor de
cifrado, de modo que el llamante pueda distinguir un fallo de
autenticación de un error de configuración o de E/S.
"""


class CryptoError(Exception):
    """Error base de todas las operaciones criptográficas."""


class ConfigurationError(CryptoError):
    """Transformación no soportada, IV ausente o ajustes inválidos."""


class PreconditionError(CryptoError, ValueError):
    """Argumento nulo, vacío o de longitud incorrecta."""


class InvalidKeyError(CryptoError):
    """El material de clave no corresponde al tamaño esperado."""


class IntegrityError(CryptoError):
    """El contenido cifrado no supera las comprobaciones de integridad."""


class AuthenticationError(IntegrityError):
    """La etiqueta GCM no coincide: datos manipulados o clave incorrecta."""


class PaddingError(IntegrityError):
    """Relleno, longitud de bloque, Base64 o UTF-8 inválidos al descifrar."""
