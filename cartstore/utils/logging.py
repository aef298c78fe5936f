# cartstore/utils/logging.py
import logging
import sys

from cartstore.utils.settings import LOG_LEVEL

ROOT_LOGGER = "cartstore"


def setup_logging(level: str | int | None = None) -> logging.Logger:
    """
    Konfiguracja loggera pakietu:
    - jeden handler na stderr
    - wspolny format z timestampem i poziomem
    - wielokrotne wywolanie nie dubluje handlerow
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level or LOG_LEVEL)

    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
