import logging
import sys
from pathlib import Path

from .exceptions import ConfigurationError


def _open_log_file(log_file: str) -> logging.FileHandler:
    try:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(log_file)
    except OSError as e:
        raise ConfigurationError(f"Could not open log file {log_file}: {e}",
                                 field="log_file", log_file=log_file)


def setup_logging(log_level: str = "INFO", log_file: str = None):
    """Configure the root logger for a CLI run

    The log file is opened before any handler is replaced, so an unusable
    path raises ConfigurationError and leaves logging untouched.
    """
    file_handler = _open_log_file(log_file) if log_file else None

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, log_level.upper()))

    # Re-running main() in the same process must not stack handlers
    logger.handlers.clear()

    # stdout belongs to forge and the prompts
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if file_handler is not None:
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
