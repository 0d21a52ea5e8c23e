# --------------------------------------------------------------
# File: __main__.py
# Description: Demostración de claves, modos AES y codec de contraseñas.
# --------------------------------------------------------------
"""Ejecuta ``python -m aeskit`` para recorrer todas las combinaciones."""

import logging
from datetime import datetime, timezone

from aeskit import config
from aeskit.crypto_sym import decrypt, encrypt, iv_from_date, iv_from_string
from aeskit.generators import generate_random_password
from aeskit.key_store import get_or_create_key, print_key_info
from aeskit.models import CipherMode, KeySize
from aeskit.password_codec import PasswordCodec, parse_timestamp

logger = logging.getLogger("aeskit")

MESSAGE = "Hello AES, I'm Yash."


def main() -> None:
    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    for size in KeySize:
        key = get_or_create_key(size, config.KEY_DIR)
        print_key_info(key)
        for mode in CipherMode:
            iv = None if mode is CipherMode.ECB else iv_from_string(f"IVFor-{mode.value}")
            blob = encrypt(MESSAGE, key, mode, iv)
            logger.info("AES-%d %s cifrado=%s descifrado=%s", size.bits, mode.value, blob, decrypt(blob, key, mode))

    # IV derivado de la fecha actual: único solo mientras no se repita el milisegundo.
    key = get_or_create_key(KeySize.AES_192, config.KEY_DIR)
    blob = encrypt(MESSAGE, key, CipherMode.CBC, iv_from_date(datetime.now(timezone.utc)))
    logger.info("CBC con IV de fecha: %s", decrypt(blob, key, CipherMode.CBC))

    codec = PasswordCodec(secret=config.load_password_secret() or generate_random_password())
    created = parse_timestamp("2023-12-29 10:09:34")
    record = codec.encode("Yash@001", "yash@gmail.com", created)
    logger.info("Registro con fecha: %s", record)
    logger.info("Coincide: %s", codec.matches(record, "yash@gmail.com", "Yash@001"))
    logger.info("Coincide por recodificación: %s", codec.matches_encoded(record, "yash@gmail.com", "Yash@001", created))


if __name__ == "__main__":
    main()
