# --------------------------------------------------------------
# File: models.py
# Description: Modelos de datos comunes utilizados por la capa criptográfica.
# --------------------------------------------------------------
"""Modelos Pydantic y enumeraciones que describen claves, modos y formatos."""

from __future__ import annotations

import base64
import binascii
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from aeskit.errors import PaddingError

IV_LENGTH = 16
GCM_TAG_LENGTH = 128
SALT_SIZE = 24
KEY_FILE_PREFIX = "secret_"
KEY_FILE_EXT = ".key"


def b64encode(data: bytes) -> str:
    """Codifica en Base64 estándar con relleno."""

    return base64.b64encode(data).decode("ascii")


def b64decode(value: str) -> bytes:
    """Decodifica Base64 estándar de forma estricta.

    Raises:
        PaddingError: Si la cadena no es Base64 válido.

    """

    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PaddingError(f"Base64 inválido: {exc}") from exc


class KeySize(int, Enum):
    """Tamaños de clave AES soportados y su convención de fichero."""

    AES_128 = 128
    AES_192 = 192
    AES_256 = 256

    @property
    def bits(self) -> int:
        return int(self.value)

    @property
    def byte_length(self) -> int:
        return self.value // 8

    @property
    def file_name(self) -> str:
        """Nombre del fichero de clave, p. ej. ``secret_128bit.key``."""

        return f"{KEY_FILE_PREFIX}{self.value}bit{KEY_FILE_EXT}"

    @classmethod
    def from_byte_length(cls, length: int) -> Optional["KeySize"]:
        for size in cls:
            if size.byte_length == length:
                return size
        return None


class CipherProfile(BaseModel):
    """Registro inmutable con los parámetros fijos de un modo AES.

    Attributes:
        transformation (str): Nombre ``Algoritmo/Modo/Relleno``.
        requires_iv (bool): Si el modo necesita IV o nonce.
        iv_length (int): Longitud del IV en bytes (0 si no aplica).
        tag_length_bits (int): Longitud de la etiqueta de autenticación.
        padded (bool): Si se aplica relleno PKCS#7.

    """

    model_config = ConfigDict(frozen=True)

    transformation: str
    requires_iv: bool
    iv_length: int = 0
    tag_length_bits: int = 0
    padded: bool


class CipherMode(str, Enum):
    """Modos AES soportados; el conjunto es cerrado."""

    ECB = "ECB"
    CBC = "CBC"
    GCM = "GCM"

    @property
    def profile(self) -> CipherProfile:
        return CIPHER_PROFILES[self]

    @property
    def transformation(self) -> str:
        return CIPHER_PROFILES[self].transformation


CIPHER_PROFILES = {
    CipherMode.ECB: CipherProfile(
        transformation="AES/ECB/PKCS5Padding", requires_iv=False, padded=True
    ),
    CipherMode.CBC: CipherProfile(
        transformation="AES/CBC/PKCS5Padding",
        requires_iv=True,
        iv_length=IV_LENGTH,
        padded=True,
    ),
    CipherMode.GCM: CipherProfile(
        transformation="AES/GCM/NoPadding",
        requires_iv=True,
        iv_length=IV_LENGTH,
        tag_length_bits=GCM_TAG_LENGTH,
        padded=False,
    ),
}


class SymmetricKey(BaseModel):
    """Clave AES inmutable identificada por su tamaño.

    Attributes:
        size (KeySize): Tamaño declarado de la clave.
        material (bytes): Bytes crudos de la clave; nunca aparecen en `repr`.

    """

    model_config = ConfigDict(frozen=True)

    size: KeySize
    material: bytes = Field(repr=False)

    @model_validator(mode="after")
    def _check_length(self) -> "SymmetricKey":
        if len(self.material) != self.size.byte_length:
            raise ValueError(
                f"La clave AES-{self.size.bits} requiere {self.size.byte_length} bytes, "
                f"recibidos {len(self.material)}"
            )
        return self

    @property
    def bits(self) -> int:
        return self.size.bits


class EncryptedBlob(BaseModel):
    """Formato de intercambio ``IV|∅ ‖ ciphertext[‖tag]``.

    El modo no viaja dentro del blob: el llamante debe conocerlo para
    descifrar.

    """

    model_config = ConfigDict(frozen=True)

    iv: Optional[bytes] = None
    ciphertext: bytes

    @model_validator(mode="after")
    def _check_iv(self) -> "EncryptedBlob":
        if self.iv is not None and len(self.iv) != IV_LENGTH:
            raise ValueError(f"El IV debe tener {IV_LENGTH} bytes")
        return self

    def to_bytes(self) -> bytes:
        return combine(self.iv or b"", self.ciphertext)

    def to_base64(self) -> str:
        return b64encode(self.to_bytes())

    @classmethod
    def from_base64(cls, value: str, mode: CipherMode) -> "EncryptedBlob":
        """Separa IV y ciphertext según el modo indicado.

        Args:
            value (str): Blob codificado en Base64.
            mode (CipherMode): Modo usado al cifrar.

        Returns:
            EncryptedBlob: IV (``None`` en ECB) y ciphertext.

        Raises:
            PaddingError: Si el Base64 es inválido o el blob está truncado.

        """

        data = b64decode(value)
        if not mode.profile.requires_iv:
            return cls(iv=None, ciphertext=data)
        if len(data) < IV_LENGTH:
            raise PaddingError(
                f"Blob truncado: {len(data)} bytes, se esperaban al menos {IV_LENGTH} de IV"
            )
        return cls(iv=data[:IV_LENGTH], ciphertext=data[IV_LENGTH:])


class PasswordRecord(BaseModel):
    """Registro de contraseña ``salt[24] ‖ IV[16] ‖ ciphertext``."""

    model_config = ConfigDict(frozen=True)

    salt: bytes = Field(min_length=SALT_SIZE, max_length=SALT_SIZE)
    iv: bytes = Field(min_length=IV_LENGTH, max_length=IV_LENGTH)
    ciphertext: bytes

    def to_base64(self) -> str:
        return b64encode(self.salt + self.iv + self.ciphertext)

    @classmethod
    def from_base64(cls, value: str) -> "PasswordRecord":
        data = b64decode(value)
        header = SALT_SIZE + IV_LENGTH
        if len(data) <= header:
            raise PaddingError(
                f"Registro truncado: {len(data)} bytes, se esperaban más de {header}"
            )
        return cls(
            salt=data[:SALT_SIZE],
            iv=data[SALT_SIZE:header],
            ciphertext=data[header:],
        )


class Pbkdf2Params(BaseModel):
    """Parámetros de derivación PBKDF2 para el codec de contraseñas.

    Attributes:
        hash_name (str): Función pseudoaleatoria HMAC (``sha1``, ``sha256``, ``sha512``).
        iterations (int): Número de iteraciones.
        key_bits (int): Longitud de la clave derivada en bits.

    """

    model_config = ConfigDict(frozen=True)

    hash_name: Literal["sha1", "sha256", "sha512"] = "sha256"
    iterations: int = Field(default=1024, gt=0)
    key_bits: Literal[128, 192, 256] = 128


DEFAULT_PBKDF2 = Pbkdf2Params()
# Compatible con registros antiguos derivados con HMAC-SHA1.
LEGACY_PBKDF2 = Pbkdf2Params(hash_name="sha1", iterations=1024, key_bits=128)


def combine(iv: bytes, data: bytes) -> bytes:
    """Concatena IV y datos cifrados."""

    return iv + data
