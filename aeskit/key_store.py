# --------------------------------------------------------------
# File: key_store.py
# Description: Generación, persistencia y carga de claves AES en disco.
# --------------------------------------------------------------
"""Almacén de claves AES basado en ficheros ``secret_<bits>bit.key``.

SECURITY: las claves se guardan en claro (bytes crudos, sin cabecera ni
comprobación de integridad). La única protección es el permiso ``0600``
del fichero; quien pueda leer el directorio puede leer la clave.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from typing import Optional, Union

from pydantic import ValidationError

from aeskit import config
from aeskit.errors import InvalidKeyError, PreconditionError
from aeskit.models import KEY_FILE_EXT, KeySize, SymmetricKey

__all__ = [
    "generate_key",
    "get_or_create_key",
    "key_fingerprint",
    "key_path",
    "load_key_from_file",
    "print_key_info",
    "save_key_to_file",
]

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def _resolve_size(size: Union[KeySize, int]) -> KeySize:
    try:
        return KeySize(size)
    except ValueError as exc:
        raise PreconditionError(f"Tamaño de clave AES no soportado: {size}") from exc


def key_path(size: Union[KeySize, int], directory: PathLike) -> str:
    """Ruta del fichero de clave para un tamaño dentro de `directory`."""

    return os.path.join(os.fspath(directory), _resolve_size(size).file_name)


def generate_key(size: Union[KeySize, int]) -> SymmetricKey:
    """Genera material de clave aleatorio sin persistirlo."""

    size = _resolve_size(size)
    return SymmetricKey(size=size, material=os.urandom(size.byte_length))


def save_key_to_file(path: PathLike, key: SymmetricKey) -> None:
    """Publica la clave en `path` sin sobrescribir nunca un fichero existente.

    La clave se escribe primero en un temporal del mismo directorio y se
    enlaza después con ``os.link``, que falla si el destino ya existe.
    Así ningún lector ve un fichero a medio escribir.

    Args:
        path (PathLike): Ruta final del fichero de clave.
        key (SymmetricKey): Clave que se guardará.

    Raises:
        FileExistsError: Si ya existe una clave en `path`.
        OSError: Ante cualquier otro fallo de E/S.

    """

    path = os.fspath(path)
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=KEY_FILE_EXT)
    try:
        with os.fdopen(fd, "wb") as handler:
            handler.write(key.material)
            handler.flush()
            os.fsync(handler.fileno())
        os.link(tmp_path, path)
    finally:
        os.unlink(tmp_path)
    logger.info("Clave AES-%d guardada en %s", key.bits, os.path.abspath(path))


def load_key_from_file(path: PathLike, size: Optional[Union[KeySize, int]] = None) -> SymmetricKey:
    """Carga una clave AES desde disco validando su longitud.

    Args:
        path (PathLike): Fichero con los bytes crudos de la clave.
        size (Optional[KeySize]): Tamaño esperado; si se omite se infiere
            de la longitud del fichero.

    Returns:
        SymmetricKey: Clave cargada.

    Raises:
        InvalidKeyError: Si la longitud no corresponde a un tamaño AES.
        OSError: Si el fichero no puede leerse.

    """

    with open(path, "rb") as handler:
        material = handler.read()

    if size is None:
        size = KeySize.from_byte_length(len(material))
        if size is None:
            raise InvalidKeyError(
                f"{os.fspath(path)} contiene {len(material)} bytes; no es una clave AES"
            )
    else:
        size = _resolve_size(size)

    try:
        return SymmetricKey(size=size, material=material)
    except ValidationError as exc:
        raise InvalidKeyError(
            f"{os.fspath(path)} contiene {len(material)} bytes; AES-{size.bits} "
            f"requiere {size.byte_length}"
        ) from exc


def get_or_create_key(size: Union[KeySize, int], directory: Optional[PathLike] = None) -> SymmetricKey:
    """Carga la clave del tamaño pedido o la crea una única vez.

    Args:
        size (KeySize): Tamaño de la clave (128, 192 o 256 bits).
        directory (Optional[PathLike]): Directorio de claves; por defecto
            `AESKIT_KEY_DIR`.

    Returns:
        SymmetricKey: Clave existente o recién generada.

    """

    size = _resolve_size(size)
    path = key_path(size, directory if directory is not None else config.KEY_DIR)

    if os.path.exists(path):
        logger.info("Fichero de clave existente: %s", os.path.abspath(path))
        return load_key_from_file(path, size)

    logger.info("Generando nueva clave AES-%d", size.bits)
    key = generate_key(size)
    try:
        save_key_to_file(path, key)
    except FileExistsError:
        # Otro proceso publicó la clave entre la comprobación y el enlace.
        logger.info("La clave %s ya fue creada por otro proceso", os.path.abspath(path))
        return load_key_from_file(path, size)
    return key


def key_fingerprint(key: SymmetricKey) -> str:
    """Huella SHA-256 (hex, 16 caracteres) que identifica la clave sin revelarla."""

    return hashlib.sha256(key.material).hexdigest()[:16]


def print_key_info(key: SymmetricKey) -> None:
    """Registra tamaño y huella de la clave; nunca su material."""

    logger.info("Clave AES-%d huella=%s", key.bits, key_fingerprint(key))
