# --------------------------------------------------------------
# File: conftest.py
# Description: Fixtures compartidas para aislar configuración y directorio de claves.
# --------------------------------------------------------------

import importlib
from typing import Iterator

import pytest

_AESKIT_VARS = (
    "AESKIT_PASSWORD_SECRET_FILE",
    "AESKIT_PBKDF2_HASH",
    "AESKIT_PBKDF2_ITERATIONS",
    "AESKIT_PBKDF2_KEY_BITS",
    "AESKIT_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_config(tmp_path, monkeypatch) -> Iterator[None]:
    """Aísla AESKIT_KEY_DIR y la passphrase, y recarga aeskit.config para cada prueba.

    Args:
        tmp_path (Path): Carpeta temporal proporcionada por pytest.
        monkeypatch (pytest.MonkeyPatch): Fixture para ajustar variables de entorno.

    Returns:
        Iterator[None]: Control del fixture autouse durante la ejecución de cada test.
    """
    monkeypatch.setenv("AESKIT_KEY_DIR", str(tmp_path / "_keys"))
    monkeypatch.setenv("AESKIT_PASSWORD_SECRET", "B&^0QUV^?^SQ.{D|]C[[(+hm'^e7|FJ}Ga-4$T54")
    for name in _AESKIT_VARS:
        monkeypatch.delenv(name, raising=False)

    import aeskit.config as config_module

    importlib.reload(config_module)

    yield


@pytest.fixture
def key_dir(tmp_path):
    """Directorio de claves vacío dentro de tmp_path."""
    return tmp_path / "keys"
