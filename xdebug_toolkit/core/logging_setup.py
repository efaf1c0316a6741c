import sys
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from . import config


class ColorLogFormatter(logging.Formatter):
    """Console formatter that colors each record by level when writing to a terminal."""

    BASE_FORMAT = '%(asctime)s [%(levelname)-7s] %(name)s: %(message)s'
    DATE_FORMAT = '%H:%M:%S'
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: "\x1b[38;20m",    # grey
        logging.WARNING: "\x1b[33;20m",  # yellow
        logging.ERROR: "\x1b[31;20m",    # red
        logging.CRITICAL: "\x1b[31;1m",  # bold red
    }

    def __init__(self, use_color: bool = True):
        super().__init__(self.BASE_FORMAT, datefmt=self.DATE_FORMAT)
        self.use_color = use_color

    def format(self, record):
        message = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_color else None
        return f"{color}{message}{self.RESET}" if color else message


def configure_logging(verbose: bool = False, log_dir: Optional[Path] = None) -> Optional[Path]:
    """
    Sets up root logging: colored stderr console plus a rotating file log.
    The console stays quiet (WARNING) unless verbose, since stdout carries the
    tool's actual output. Returns the log file path, or None if file logging is off.
    """
    log_dir = log_dir if log_dir is not None else config.LOG_DIR

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
    console_handler.setFormatter(ColorLogFormatter(use_color=sys.stderr.isatty()))
    root_logger.addHandler(console_handler)

    if not config.ensure_dir(log_dir):
        logging.warning(f"LOGGING: LOG_DIR '{log_dir}' could not be ensured. Skipping file logging.")
        return None

    log_file_path = log_dir / config.LOG_FILE_NAME
    try:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=5 * 1024 * 1024, backupCount=3, encoding='utf-8'
        )
    except OSError as log_e:
        logging.error(f"LOGGING: Failed to set up file logging at {log_file_path}: {log_e}")
        return None
    file_handler.setFormatter(logging.Formatter(ColorLogFormatter.BASE_FORMAT, datefmt=ColorLogFormatter.DATE_FORMAT))
    file_handler.setLevel(logging.DEBUG)
    root_logger.addHandler(file_handler)
    logging.debug(f"LOGGING: File logging initialized at: {log_file_path}")
    return log_file_path
