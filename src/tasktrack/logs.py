import logging
import os
import sys
from pathlib import Path

LOG_DIR = Path.home() / ".local" / "share" / "tasktrack" / "logs"
LOG_FILE = "tasktrack.log"

FILE_FORMAT = '[%(asctime)s] %(levelname)-8s [%(name)s:%(funcName)s:%(lineno)d] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

def _debug_enabled() -> bool:
    return os.getenv('TASKTRACK_DEBUG', '').lower() in ('1', 'true', 'yes')

def _console_level() -> int:
    """
    Level for terminal output.

    TASKTRACK_DEBUG wins over TASKTRACK_LOG_LEVEL; unknown level names and
    an unset environment both mean WARNING.
    """
    if _debug_enabled():
        return logging.DEBUG
    name = os.getenv('TASKTRACK_LOG_LEVEL', '').upper()
    level = logging.getLevelName(name) if name else logging.WARNING
    return level if isinstance(level, int) else logging.WARNING

def setup_logging(log_dir: Path = None):
    """
    Route the ``tasktrack`` loggers to a log file and to stderr.

    The file receives every record with its origin. stderr only gets
    records at the console level, so stdout stays free for command output.
    Calling this again replaces the handlers of the previous call.
    """
    log_dir = Path(log_dir) if log_dir else LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    to_file = logging.FileHandler(log_dir / LOG_FILE)
    to_file.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
    to_file.setLevel(logging.DEBUG)

    to_console = logging.StreamHandler(sys.stderr)
    to_console.setFormatter(logging.Formatter(
        '%(levelname)-8s [%(name)s] %(message)s' if _debug_enabled() else '%(levelname)s: %(message)s'
    ))
    to_console.setLevel(_console_level())

    logger = logging.getLogger('tasktrack')
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.DEBUG)
    logger.addHandler(to_file)
    logger.addHandler(to_console)
    logger.propagate = False
    return logger

def get_logger(name: str = None):
    """Get a logger instance for a specific module."""
    if name:
        return logging.getLogger(f'tasktrack.{name}')
    return logging.getLogger('tasktrack')
