"""Logging configuration setup."""

import copy
import logging
import logging.config
import os
import sys
from datetime import datetime
from typing import Optional, Tuple

from audit_sentinel.constants import DEFAULT_LOG_LEVEL, LOG_DIR

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

BASE_LOG_CFG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple_file": {
            "format": ("%(asctime)s - %(name)25s:%(lineno)-4d - " "%(levelname)-7s - %(message)s"),
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "console": {
            "format": "%(levelname)s: %(message)s",
        },
    },
    "handlers": {
        "file_handler": {
            "class": "logging.FileHandler",
            "level": "DEBUG",
            "formatter": "simple_file",
            "filename": "temp_log_name.log",
            "encoding": "utf-8",
        },
        "console_handler": {
            "class": "logging.StreamHandler",
            "level": "WARNING",
            "formatter": "console",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        "audit_sentinel": {
            "handlers": ["file_handler", "console_handler"],
            "propagate": False,
            "level": "INFO",
        },
        "audit_sentinel.config": {
            "handlers": ["file_handler", "console_handler"],
            "propagate": False,
            "level": "INFO",
        },
    },
    "root": {
        "handlers": ["file_handler"],
        "level": "WARNING",
    },
}


def setup_logging(
    log_lvl_str: str = DEFAULT_LOG_LEVEL,
    *,
    log_dir: Optional[str] = LOG_DIR,
    quiet: bool = False,
) -> Tuple[Optional[str], str]:
    """
    Set up the logging system.

    Logs go to a timestamped file under *log_dir* (skipped when
    *log_dir* is ``None``); warnings and errors are echoed to stderr.

    Args:
        log_lvl_str: The desired log level string (e.g., 'debug', 'info').
        log_dir: Directory for the log file, or ``None`` for no file.
        quiet: If *True*, suppress ``print()`` output and the stderr echo.

    Returns:
        A tuple of (log_file_path or None, validated_log_level).
    """
    log_lvl_valid = log_lvl_str.upper()
    if log_lvl_valid not in VALID_LEVELS:
        if not quiet:
            print(f"Warning: invalid log level '{log_lvl_str}'. Using 'INFO'.")
        log_lvl_valid = "INFO"

    log_cfg: dict = copy.deepcopy(BASE_LOG_CFG)
    handlers = ["file_handler", "console_handler"]

    log_fpath: Optional[str] = None
    if log_dir is not None:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        os.makedirs(log_dir, exist_ok=True)
        log_fpath = os.path.join(log_dir, f"audit_sentinel_{ts}_{log_lvl_valid}.log")
        log_cfg["handlers"]["file_handler"]["filename"] = log_fpath
    else:
        del log_cfg["handlers"]["file_handler"]
        handlers.remove("file_handler")

    if quiet:
        del log_cfg["handlers"]["console_handler"]
        handlers.remove("console_handler")

    for logger_cfg in log_cfg["loggers"].values():
        logger_cfg["handlers"] = list(handlers)
        logger_cfg["level"] = log_lvl_valid

    log_cfg["root"]["handlers"] = [h for h in handlers if h == "file_handler"]
    log_cfg["root"]["level"] = log_lvl_valid if log_lvl_valid == "DEBUG" else "WARNING"

    try:
        logging.config.dictConfig(log_cfg)
        if not quiet and log_fpath is not None:
            print(
                f"Logging initialized. File log level: {log_lvl_valid}, log file: {log_fpath}",
                file=sys.stderr,
            )
    except Exception as e_log_cfg:
        if not quiet:
            print(f"Error applying logging configuration: {e_log_cfg}", file=sys.stderr)

    return log_fpath, log_lvl_valid
