# --------------------------------------------------------------
# File: password_policy.py
# Description: Reglas de validación de contraseñas antes de codificarlas.
# --------------------------------------------------------------
"""Utilidades para comprobar el patrón de contraseñas de usuario."""

from __future__ import annotations

import re
from typing import List, Tuple

MIN_LENGTH = 8
MAX_LENGTH = 30
SYMBOLS = "!@#$%&*()+=^"

LOWER = re.compile(r"[a-z]")
UPPER = re.compile(r"[A-Z]")
DIGIT = re.compile(r"[0-9]")
SYMBOL = re.compile(f"[{re.escape(SYMBOLS)}]")
WHITESPACE = re.compile(r"\s")

PASSWORD_PATTERN = re.compile(
    rf"^(?=.*[0-9])(?=.*[a-z])(?=.*[A-Z])(?=.*[{re.escape(SYMBOLS)}])(?=\S+$)"
    rf".{{{MIN_LENGTH},{MAX_LENGTH}}}$"
)


def is_valid_password_pattern(password: str) -> bool:
    """Indica si la contraseña cumple el patrón completo de la política."""

    if password is None:
        return False
    return PASSWORD_PATTERN.fullmatch(password) is not None


def check_password_strength(password: str) -> Tuple[bool, List[str]]:
    """Evalúa la contraseña y devuelve cumplimiento y motivos de rechazo.

    Args:
        password (str): Contraseña propuesta por el usuario.

    Returns:
        Tuple[bool, List[str]]: Resultado de validación y lista de motivos.

    """

    password = password or ""
    reasons: List[str] = []

    if not MIN_LENGTH <= len(password) <= MAX_LENGTH:
        reasons.append(f"Longitud entre {MIN_LENGTH} y {MAX_LENGTH}.")
    if not DIGIT.search(password):
        reasons.append("Incluye al menos un dígito.")
    if not LOWER.search(password):
        reasons.append("Incluye al menos una minúscula.")
    if not UPPER.search(password):
        reasons.append("Incluye al menos una mayúscula.")
    if not SYMBOL.search(password):
        reasons.append(f"Incluye al menos un símbolo de: {SYMBOLS}")
    if WHITESPACE.search(password):
        reasons.append("No se permiten espacios en blanco.")

    return not reasons, reasons
