# --------------------------------------------------------------
# File: config.py
# Description: Ajustes de entorno para claves, PBKDF2 y logging.
# --------------------------------------------------------------
import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

KEY_DIR = os.getenv("AESKIT_KEY_DIR", "./_keys")
PASSWORD_SECRET = os.getenv("AESKIT_PASSWORD_SECRET")
PASSWORD_SECRET_FILE = os.getenv("AESKIT_PASSWORD_SECRET_FILE")
PBKDF2_HASH = os.getenv("AESKIT_PBKDF2_HASH", "sha256")
PBKDF2_ITERATIONS = os.getenv("AESKIT_PBKDF2_ITERATIONS", "1024")
PBKDF2_KEY_BITS = os.getenv("AESKIT_PBKDF2_KEY_BITS", "128")
LOG_LEVEL = os.getenv("AESKIT_LOG_LEVEL", "INFO").upper()


def load_password_secret() -> Optional[str]:
    """Devuelve la passphrase PBKDF2 configurada.

    El fichero indicado en `AESKIT_PASSWORD_SECRET_FILE` tiene prioridad
    sobre la variable `AESKIT_PASSWORD_SECRET`. Se eliminan los saltos de
    línea finales del fichero.

    Returns:
        Optional[str]: Passphrase o ``None`` si no hay ninguna configurada.

    """

    if PASSWORD_SECRET_FILE:
        with open(PASSWORD_SECRET_FILE, "r", encoding="utf-8") as handler:
            return handler.read().rstrip("\r\n")
    return PASSWORD_SECRET
