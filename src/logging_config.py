import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional

DEFAULT_LOG_DIR = Path(__file__).parent.parent / "logs"
LOG_FILE_NAME = "promotion_projector.log"
LOG_LEVEL_ENV = "PROMOTION_PROJECTOR_LOG_LEVEL"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

FILE_HANDLER_NAME = "promotion_projector.file"
CONSOLE_HANDLER_NAME = "promotion_projector.console"


def _resolve_level(log_level: Optional[str]) -> int:
    name = log_level or os.environ.get(LOG_LEVEL_ENV) or "INFO"
    return getattr(logging, name.upper(), logging.INFO)


def setup_logging(
    log_level: Optional[str] = None, log_dir: Optional[Path] = None
) -> Optional[Path]:
    """Send projector logs to the console and a rotating file.

    The level comes from *log_level*, then ``PROMOTION_PROJECTOR_LOG_LEVEL``,
    then INFO. The file always records DEBUG, which includes every single
    promotion the cascade makes.

    Handlers installed by other tools (pytest capture, a host application)
    are left alone; only a second call from this project is a no-op.

    Returns:
        Path of the log file, or None if logging was already configured.
    """
    root_logger = logging.getLogger()
    if any(h.get_name() == FILE_HANDLER_NAME for h in root_logger.handlers):
        return None

    level = _resolve_level(log_level)
    log_dir = Path(log_dir) if log_dir is not None else DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root_logger.setLevel(logging.DEBUG)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # 5MB per file, 3 backups
    file_handler = logging.handlers.RotatingFileHandler(
        log_file, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.set_name(FILE_HANDLER_NAME)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.getLogger(__name__).info(
        "Logging initialized (console=%s, file=%s)", logging.getLevelName(level), log_file
    )
    return log_file
