import logging
from pathlib import Path

LOGGER_NAME = "crfbatch"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'

def setup_logging(log_path: Path, debug: bool = False) -> logging.Logger:
    """
    Attach a file sink to the crfbatch package logger.

    Every module logs through `logging.getLogger(__name__)`, so all records
    under `crfbatch.*` end up in one file. The root logger is left alone.
    Calling this again replaces the previous file handler.

    Args:
        log_path: File to append log records to (parent dirs are created)
        debug: If True, log at DEBUG level (command lines, timings)
    """
    log_file = Path(log_path)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    handler = logging.FileHandler(log_file)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if debug else logging.INFO)
    logger.propagate = False

    logger.info(f"Logging initialized: {log_file} (debug={'ON' if debug else 'OFF'})")
    return logger
