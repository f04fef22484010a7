# logger_setup.py
import logging
import logging.config
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

LOGGER_NAME = "seqvec"

def setup_logging(
    log_dir: Union[str, Path] = "./logs",
    console: bool = True,
    level: str = "INFO",
    console_level: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
    fmt: str = "{asctime} {levelname:<7} {name} - {message}",
) -> tuple:
    """
    Setup logging with a per-run file handler and an optional console handler.

    Console output goes to stderr so that dumps written to stdout stay clean.

    Args:
        log_dir: Directory for the run's log file (ignored when log_file is set)
        console: Whether to enable console logging
        level: Level of the ``seqvec`` logger
        console_level: Separate level for console (defaults to level)
        log_file: Explicit log file path

    Returns:
        (logger, summary_logger)
    """
    if log_file is not None:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
    else:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = Path(log_dir) / f"{LOGGER_NAME}_{ts}.log"

    handlers = {
        "file": {
            "class": "logging.FileHandler",
            "formatter": "plain",
            "filename": str(log_path),
            "encoding": "utf-8",
            "mode": "w",
            "level": "DEBUG",
        }
    }
    if console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "console",
            "stream": "ext://sys.stderr",
            "level": (console_level or level).upper(),
        }

    config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "plain": {"format": fmt, "style": "{"},
            "console": {"format": "{levelname:<7} {message}", "style": "{"},
            "summary": {"format": "{asctime} SUMMARY - {message}", "style": "{"},
        },
        "handlers": {
            **handlers,
            "summary_file": {
                "class": "logging.FileHandler",
                "formatter": "summary",
                "filename": str(log_path),
                "encoding": "utf-8",
                "mode": "a",
                "level": "INFO",
            },
        },
        "loggers": {
            LOGGER_NAME: {
                "level": level.upper(),
                "handlers": list(handlers),
                "propagate": False,
            },
            f"{LOGGER_NAME}.summary": {
                "level": "INFO",
                "handlers": ["summary_file"] + (["console"] if console else []),
                "propagate": False,
            },
        },
        "root": {"handlers": []},
    }

    logging.config.dictConfig(config)
    logging.captureWarnings(True)

    logger = logging.getLogger(LOGGER_NAME)
    summary_logger = logging.getLogger(f"{LOGGER_NAME}.summary")

    logger.debug("Logging initialised. File: %s", log_path)
    return logger, summary_logger
