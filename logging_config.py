import logging
import os
from logging.handlers import RotatingFileHandler

LOGS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "logs")
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(filename)s:%(lineno)d %(funcName)s()] %(message)s"


def _configured_level():
    """Log level from settings.toml [env].log_level, INFO when unavailable."""
    try:
        from settings_service import SettingsService
        level = logging.getLevelName(SettingsService().log_level.upper())
    except (OSError, KeyError, ValueError):
        return logging.INFO
    return level if isinstance(level, int) else logging.INFO


def _log_path(log_file: str) -> str:
    # Absolute paths are used as given; anything else lands in LOGS_DIR by file name
    if os.path.isabs(log_file):
        return log_file
    os.makedirs(LOGS_DIR, exist_ok=True)
    return os.path.join(LOGS_DIR, os.path.basename(log_file))


def setup_logging(name="lodestone", log_file="lodestone_app.log", level=None, max_bytes=5*1024*1024, backup_count=3):
    """Return a logger writing to a rotating file and to stderr.

    Calling it again for the same name replaces the handlers, so Streamlit
    reruns don't duplicate output.

    Args:
        name: Logger name, usually __name__.
        log_file: File name under ./logs/, or an absolute path.
        level: Logger level; defaults to [env].log_level in settings.toml.
        max_bytes: Rotation size.
        backup_count: Rotated files kept.

    Example:
        logger = setup_logging(__name__, log_file="generator_service.log")
    """
    logger = logging.getLogger(name)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [
        RotatingFileHandler(_log_path(log_file), maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"),
        logging.StreamHandler(),
    ]
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level if level is not None else _configured_level())
    return logger
