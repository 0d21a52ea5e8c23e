# --------------------------------------------------------------
# File: crypto_sym.py
# Description: Cifrado y descifrado AES en modos ECB, CBC y GCM.
# --------------------------------------------------------------
"""Rutinas de cifrado simétrico con formato de intercambio Base64.

El blob producido es ``Base64(IV ‖ ciphertext)`` para CBC,
``Base64(nonce ‖ ciphertext ‖ tag)`` para GCM y ``Base64(ciphertext)``
para ECB. El modo no se incluye en el blob.

SECURITY: ECB no oculta patrones del texto en claro y solo se mantiene
por compatibilidad. Un IV derivado de `iv_from_date` o `iv_from_string`
es determinista; reutilizarlo con la misma clave para textos distintos
rompe la confidencialidad en CBC y la autenticidad en GCM.
"""

from __future__ import annotations

import logging
import os
import struct
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from aeskit.errors import (
    AuthenticationError,
    ConfigurationError,
    PaddingError,
    PreconditionError,
)
from aeskit.models import (
    CIPHER_PROFILES,
    IV_LENGTH,
    CipherMode,
    CipherProfile,
    EncryptedBlob,
    KeySize,
    SymmetricKey,
)

logger = logging.getLogger(__name__)

KeyLike = Union[SymmetricKey, bytes]

_BLOCK_SIZE_BITS = algorithms.AES.block_size
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_TRANSFORMATIONS = {profile.transformation: mode for mode, profile in CIPHER_PROFILES.items()}


def get_cipher_profile(transformation: str) -> CipherProfile:
    """Resuelve una cadena de transformación a su perfil de modo.

    Args:
        transformation (str): Nombre ``Algoritmo/Modo/Relleno``.

    Returns:
        CipherProfile: Parámetros fijos del modo.

    Raises:
        ConfigurationError: Si la transformación no está soportada.

    """

    mode = _TRANSFORMATIONS.get(transformation)
    if mode is None:
        raise ConfigurationError(f"Transformación no soportada: {transformation}")
    return mode.profile


def _resolve_mode(mode: Union[CipherMode, str]) -> CipherMode:
    try:
        return CipherMode(mode)
    except ValueError as exc:
        raise ConfigurationError(f"Modo de cifrado no soportado: {mode}") from exc


def _key_bytes(key: Optional[KeyLike]) -> bytes:
    if isinstance(key, SymmetricKey):
        return key.material
    if not key:
        raise PreconditionError("La clave es obligatoria.")
    if KeySize.from_byte_length(len(key)) is None:
        raise PreconditionError(f"Longitud de clave AES inválida: {len(key)} bytes")
    return bytes(key)


def _checked_iv(mode: CipherMode, iv: Optional[bytes]) -> Optional[bytes]:
    profile = mode.profile
    if not profile.requires_iv:
        if iv is not None:
            raise ConfigurationError(f"El modo {mode.value} no admite IV.")
        return None
    if iv is None:
        raise ConfigurationError(
            f"El modo {mode.value} requiere un IV de {profile.iv_length} bytes."
        )
    if len(iv) != profile.iv_length:
        raise PreconditionError(
            f"El IV debe tener {profile.iv_length} bytes, recibidos {len(iv)}"
        )
    return bytes(iv)


def _block_cipher(key: bytes, iv: Optional[bytes]) -> Cipher:
    return Cipher(algorithms.AES(key), modes.ECB() if iv is None else modes.CBC(iv))


def encrypt_bytes(
    data: bytes, key: KeyLike, mode: Union[CipherMode, str], iv: Optional[bytes] = None
) -> EncryptedBlob:
    """Cifra bytes y devuelve el blob estructurado.

    Args:
        data (bytes): Datos en claro.
        key (KeyLike): Clave AES de 128, 192 o 256 bits.
        mode (CipherMode): Modo de cifrado.
        iv (Optional[bytes]): IV de 16 bytes (CBC) o nonce (GCM); ``None`` en ECB.

    Returns:
        EncryptedBlob: IV y ciphertext (con tag en GCM).

    """

    if data is None:
        raise PreconditionError("El texto en claro es obligatorio.")
    mode = _resolve_mode(mode)
    key_bytes = _key_bytes(key)
    iv = _checked_iv(mode, iv)
    logger.debug("Cifrando %d bytes con %s (AES-%d)", len(data), mode.transformation, len(key_bytes) * 8)

    if mode is CipherMode.GCM:
        # AESGCM añade la etiqueta de 128 bits al final del ciphertext.
        ciphertext = AESGCM(key_bytes).encrypt(iv, bytes(data), None)
    else:
        padder = padding.PKCS7(_BLOCK_SIZE_BITS).padder()
        padded = padder.update(bytes(data)) + padder.finalize()
        encryptor = _block_cipher(key_bytes, iv).encryptor()
        ciphertext = encryptor.update(padded) + encryptor.finalize()
    return EncryptedBlob(iv=iv, ciphertext=ciphertext)


def decrypt_bytes(blob: EncryptedBlob, key: KeyLike, mode: Union[CipherMode, str]) -> bytes:
    """Descifra un blob estructurado.

    Raises:
        AuthenticationError: Si la etiqueta GCM no se verifica.
        PaddingError: Si el relleno o la longitud de bloque son inválidos.

    """

    mode = _resolve_mode(mode)
    key_bytes = _key_bytes(key)
    iv = _checked_iv(mode, blob.iv)
    logger.debug("Descifrando %d bytes con %s", len(blob.ciphertext), mode.transformation)

    if mode is CipherMode.GCM:
        try:
            return AESGCM(key_bytes).decrypt(iv, blob.ciphertext, None)
        except InvalidTag as exc:
            raise AuthenticationError("La etiqueta de autenticación GCM no es válida.") from exc

    try:
        decryptor = _block_cipher(key_bytes, iv).decryptor()
        padded = decryptor.update(blob.ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(_BLOCK_SIZE_BITS).unpadder()
        return unpadder.update(padded) + unpadder.finalize()
    except ValueError as exc:
        raise PaddingError(f"No se pudo descifrar en {mode.value}: {exc}") from exc


def encrypt(
    plaintext: str, key: KeyLike, mode: Union[CipherMode, str], iv: Optional[bytes] = None
) -> str:
    """Cifra texto UTF-8 y devuelve el blob en Base64.

    Args:
        plaintext (str): Texto en claro; se admite la cadena vacía.
        key (KeyLike): Clave AES.
        mode (CipherMode): Modo de cifrado.
        iv (Optional[bytes]): IV o nonce de 16 bytes para CBC y GCM.

    Returns:
        str: ``Base64(IV|∅ ‖ ciphertext[‖tag])``.

    Raises:
        ConfigurationError: Si falta el IV en CBC/GCM o se pasa uno en ECB.
        PreconditionError: Si faltan argumentos o sus longitudes son inválidas.

    """

    if plaintext is None:
        raise PreconditionError("El texto en claro es obligatorio.")
    return encrypt_bytes(plaintext.encode("utf-8"), key, mode, iv).to_base64()


def decrypt(blob: str, key: KeyLike, mode: Union[CipherMode, str]) -> str:
    """Descifra un blob Base64 producido por `encrypt` con el mismo modo.

    Args:
        blob (str): Blob en Base64.
        key (KeyLike): Clave AES usada al cifrar.
        mode (CipherMode): Modo usado al cifrar.

    Returns:
        str: Texto en claro original.

    Raises:
        AuthenticationError: Si la etiqueta GCM no coincide.
        PaddingError: Si el blob está corrupto, truncado o no es UTF-8.

    """

    if not blob:
        raise PreconditionError("El blob cifrado es obligatorio.")
    mode = _resolve_mode(mode)
    data = decrypt_bytes(EncryptedBlob.from_base64(blob, mode), key, mode)
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise PaddingError("El texto descifrado no es UTF-8 válido.") from exc


def iv_from_string(value: str) -> bytes:
    """Genera un IV de 16 bytes a partir de una cadena.

    Los bytes UTF-8 se truncan o se rellenan con ceros; todo lo que
    exceda de 16 bytes se descarta.
    """

    if value is None:
        raise PreconditionError("La cadena del IV es obligatoria.")
    return value.encode("utf-8")[:IV_LENGTH].ljust(IV_LENGTH, b"\x00")


def iv_from_date(value: Union[datetime, int]) -> bytes:
    """Genera un IV determinista a partir de una marca temporal.

    Los 8 primeros bytes contienen los milisegundos desde la época en
    big-endian; los 8 restantes son cero.

    Args:
        value (Union[datetime, int]): Fecha (las fechas sin zona se tratan
            como UTC) o milisegundos desde la época.

    Returns:
        bytes: IV de 16 bytes.

    """

    if value is None:
        raise PreconditionError("La fecha del IV es obligatoria.")
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        millis = (value - _EPOCH) // timedelta(milliseconds=1)
    else:
        millis = int(value)
    return struct.pack(">qq", millis, 0)


def random_iv() -> bytes:
    """Devuelve un IV aleatorio de 16 bytes."""

    return os.urandom(IV_LENGTH)
