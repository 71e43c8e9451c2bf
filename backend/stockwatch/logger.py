import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from stockwatch.core.config import Settings, settings

DEFAULT_LOG_DIR = Path(__file__).resolve().parent.parent / "logs"

CONSOLE_FORMAT = "[%(levelname)s] %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def resolve_level(value) -> int:
    """'debug' / 'INFO' / 10 -> logging level; unknown names fall back to INFO."""
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).strip().upper())
    return level if isinstance(level, int) else logging.INFO


def log_file_path(config: Settings) -> Optional[Path]:
    if not config.LOG_FILE:
        return None
    log_dir = Path(config.LOG_DIR) if config.LOG_DIR else DEFAULT_LOG_DIR
    log_dir.mkdir(exist_ok=True, parents=True)
    return log_dir / config.LOG_FILE


def get_logger(name: str, config: Optional[Settings] = None):
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    config = config or settings
    logger.setLevel(resolve_level(config.LOG_LEVEL))

    sh = logging.StreamHandler()
    sh.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    logger.addHandler(sh)

    path = log_file_path(config)
    if path is not None:
        fh = RotatingFileHandler(path, maxBytes=config.LOG_MAX_BYTES, backupCount=config.LOG_BACKUP_COUNT)
        fh.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(fh)
    return logger
