"""Logging configuration for brand-match.

All modules log through children of the `brand_match` logger, obtained with
`get_logger("matching.orchestrator")` and similar. Scorers never log; the
orchestrator, normalizer and store services do.
"""

import logging
import sys
from pathlib import Path

LOGGER_NAME = "brand_match"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def _default_level() -> str:
    from brand_match.config.settings import get_settings

    return get_settings().log_level


def configure_logging(
    level: str | None = None,
    log_file: Path | str | None = None,
    format_string: str = LOG_FORMAT,
    date_format: str = DATE_FORMAT,
) -> logging.Logger:
    """Configure and return the `brand_match` logger.

    Handlers are attached once; later calls only change levels. Messages do
    not propagate to the root logger while configured.

    Args:
        level: Log level name. Defaults to the `log_level` setting.
        log_file: Optional file that receives the same records as stderr.
        format_string: Format string for log messages.
        date_format: Format string for timestamps.

    Returns:
        The application logger.
    """
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    log_level = getattr(logging, (level or _default_level()).upper(), logging.INFO)
    logger.setLevel(log_level)

    if _configured:
        for handler in logger.handlers:
            handler.setLevel(log_level)
        return logger

    logger.handlers.clear()
    formatter = logging.Formatter(format_string, datefmt=date_format)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.propagate = False
    _configured = True
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return the `brand_match.<name>` child logger."""
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Detach handlers and restore propagation (for tests)."""
    global _configured

    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True

    _configured = False
