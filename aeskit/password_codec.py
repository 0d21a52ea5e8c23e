# --------------------------------------------------------------
# File: password_codec.py
# Description: Codificación reversible de contraseñas con PBKDF2 y AES-CBC.
# --------------------------------------------------------------
"""Codec de contraseñas con salt por usuario y fecha de creación opcional.

El registro resultante es ``Base64(salt[24] ‖ IV[16] ‖ ciphertext)``. La
clave AES se deriva en cada llamada con PBKDF2 a partir de la passphrase
de la aplicación y de la salt completa proporcionada por el llamante.

Con fecha de creación el IV es la cadena ``yyyy-MM-dd HH:mm:ss``
truncada a 16 bytes, de modo que `encode` es determinista para un mismo
trío (secreto, salt, fecha). Los segundos quedan fuera del IV: dos
registros con la misma salt creados en el mismo minuto comparten IV.
Sin fecha el IV es aleatorio y `encode` no es reproducible.
"""

from __future__ import annotations

import hmac
import logging
from datetime import datetime
from typing import Optional, Union

from aeskit import config
from aeskit.crypto_kdf import derive_password_key, load_pbkdf2_params
from aeskit.crypto_sym import decrypt_bytes, encrypt_bytes, random_iv
from aeskit.errors import ConfigurationError, CryptoError, PaddingError, PreconditionError
from aeskit.models import (
    IV_LENGTH,
    SALT_SIZE,
    CipherMode,
    EncryptedBlob,
    PasswordRecord,
    Pbkdf2Params,
)

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

Timestamp = Union[datetime, str]


def format_timestamp(value: datetime) -> str:
    """Formatea una fecha como ``yyyy-MM-dd HH:mm:ss``."""

    return value.strftime(DATE_FORMAT)


def parse_timestamp(value: str) -> datetime:
    """Interpreta una cadena ``yyyy-MM-dd HH:mm:ss``.

    Raises:
        PreconditionError: Si la cadena no sigue el formato.

    """

    try:
        return datetime.strptime(value, DATE_FORMAT)
    except (TypeError, ValueError) as exc:
        raise PreconditionError(f"Fecha inválida, se esperaba {DATE_FORMAT}: {value!r}") from exc


def _fit(data: bytes, size: int) -> bytes:
    return data[:size].ljust(size, b"\x00")


def iv_from_timestamp(value: Timestamp) -> bytes:
    """IV determinista a partir de la fecha formateada."""

    if isinstance(value, str):
        value = parse_timestamp(value)
    if not isinstance(value, datetime):
        raise PreconditionError(
            f"La fecha debe ser datetime o cadena {DATE_FORMAT}, recibido {type(value).__name__}"
        )
    return _fit(format_timestamp(value).encode("utf-8"), IV_LENGTH)


class PasswordCodec:
    """Codifica, decodifica y verifica contraseñas de forma reversible.

    La passphrase y los parámetros PBKDF2 se fijan en la construcción y no
    cambian; cada llamada deriva su propia clave y crea su propio cifrador,
    por lo que una instancia puede compartirse entre hilos.

    Args:
        secret (Optional[str]): Passphrase de derivación. Por defecto se lee
            de `AESKIT_PASSWORD_SECRET_FILE` o `AESKIT_PASSWORD_SECRET`.
        params (Optional[Pbkdf2Params]): Parámetros PBKDF2. Por defecto se
            leen de la configuración (HMAC-SHA256, 1024 iteraciones, 128 bits).
            Use `LEGACY_PBKDF2` para registros creados con HMAC-SHA1.

    """

    def __init__(self, secret: Optional[str] = None, params: Optional[Pbkdf2Params] = None):
        if secret is None:
            secret = config.load_password_secret()
        if not secret:
            raise ConfigurationError(
                "No hay passphrase configurada (AESKIT_PASSWORD_SECRET o AESKIT_PASSWORD_SECRET_FILE)."
            )
        self._secret = secret
        self.params = params if params is not None else load_pbkdf2_params()

    def __repr__(self) -> str:
        return f"PasswordCodec(params={self.params!r})"

    def _derive_key(self, salt: str) -> bytes:
        if not salt:
            raise PreconditionError("La salt es obligatoria.")
        return derive_password_key(self._secret, salt.encode("utf-8"), self.params)

    def encode(self, raw_secret: str, salt: str, timestamp: Optional[Timestamp] = None) -> str:
        """Cifra la contraseña y empaqueta salt, IV y ciphertext.

        Args:
            raw_secret (str): Contraseña en claro.
            salt (str): Salt del usuario (p. ej. su email).
            timestamp (Optional[Timestamp]): Fecha de creación; hace el
                resultado determinista.

        Returns:
            str: Registro en Base64.

        """

        if raw_secret is None:
            raise PreconditionError("La contraseña es obligatoria.")
        key = self._derive_key(salt)
        iv = iv_from_timestamp(timestamp) if timestamp is not None else random_iv()

        blob = encrypt_bytes(raw_secret.encode("utf-8"), key, CipherMode.CBC, iv)
        record = PasswordRecord(
            salt=_fit(salt.encode("utf-8"), SALT_SIZE),
            iv=blob.iv,
            ciphertext=blob.ciphertext,
        )
        return record.to_base64()

    def decode(self, record: str, salt: str, timestamp: Optional[Timestamp] = None) -> str:
        """Recupera la contraseña en claro de un registro.

        Si se indica `timestamp`, el IV del registro debe coincidir con el
        derivado de esa fecha.

        Raises:
            PaddingError: Si el registro está corrupto, la salt o la
                passphrase no corresponden, o el IV no casa con la fecha.

        """

        if not record:
            raise PreconditionError("El registro es obligatorio.")
        key = self._derive_key(salt)
        parsed = PasswordRecord.from_base64(record)

        if timestamp is not None and not hmac.compare_digest(parsed.iv, iv_from_timestamp(timestamp)):
            raise PaddingError("El IV del registro no corresponde a la fecha indicada.")

        data = decrypt_bytes(EncryptedBlob(iv=parsed.iv, ciphertext=parsed.ciphertext), key, CipherMode.CBC)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise PaddingError("La contraseña descifrada no es UTF-8 válido.") from exc

    def matches(self, record: str, salt: str, raw_secret: str) -> bool:
        """Decodifica el registro y lo compara en tiempo constante.

        Cualquier fallo de descifrado cuenta como no coincidencia.
        """

        if raw_secret is None:
            return False
        try:
            decoded = self.decode(record, salt)
        except CryptoError as exc:
            logger.debug("Registro no verificable: %s", exc)
            return False
        return hmac.compare_digest(decoded.encode("utf-8"), raw_secret.encode("utf-8"))

    def matches_encoded(self, record: str, salt: str, raw_secret: str, timestamp: Timestamp) -> bool:
        """Vuelve a codificar con la fecha de creación y compara los registros.

        Solo tiene sentido con fecha: sin ella el IV es aleatorio y el
        registro nunca se reproduce.
        """

        if timestamp is None:
            raise PreconditionError("La comparación por recodificación requiere la fecha de creación.")
        if raw_secret is None or not record:
            return False
        try:
            expected = self.encode(raw_secret, salt, timestamp)
        except CryptoError as exc:
            logger.debug("No se pudo recodificar la contraseña: %s", exc)
            return False
        return hmac.compare_digest(expected.encode("utf-8"), record.encode("utf-8"))
