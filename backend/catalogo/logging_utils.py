import logging
import os
from typing import Optional


_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def _coerce_level(value) -> int:
    if isinstance(value, str):
        return _LEVELS.get(value.upper().strip(), logging.INFO)
    if isinstance(value, int):
        return value
    return logging.INFO


def get_logger(name: str) -> logging.Logger:
    """Return a logger whose top-level package logger writes to stdout.

    - Honors LOG_LEVEL (default INFO).
    - The handler lives on the package logger ("catalogo"), so module loggers
      such as "catalogo.services.product_service" share one handler.
    """
    root_name = name.split(".")[0]
    package_logger = logging.getLogger(root_name)
    if not getattr(package_logger, "_catalogo_configured", False):
        level = _coerce_level(os.environ.get("LOG_LEVEL", "INFO"))
        package_logger.setLevel(level)

        handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(fmt=FORMAT, datefmt=DATEFMT))
        package_logger.addHandler(handler)
        package_logger._catalogo_configured = True  # type: ignore[attr-defined]

    return logging.getLogger(name)


def set_level(name: str, level: Optional[str]) -> None:
    """Change the level of ``name``'s package logger and its handlers."""
    resolved = _coerce_level(level)
    package_logger = get_logger(name.split(".")[0])
    package_logger.setLevel(resolved)
    for handler in package_logger.handlers:
        handler.setLevel(resolved)
