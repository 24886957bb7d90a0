"""
Centralized logging configuration for chronotoken.

Log file: <log_root>/chronotoken.log (with rotation)

Usage:
    from chronotoken.logging_config import setup_logging
    setup_logging(log_root)  # Call once at startup

All chronotoken.* loggers write DEBUG to file, WARNING+ to console.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime


# Global configuration
ROOT_LOGGER_NAME = "chronotoken"
LOG_FILE_NAME = "chronotoken.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

_logging_initialized = False


def setup_logging(
    log_root: Path | str,
    log_level: int = logging.DEBUG,
    console_level: int = logging.WARNING,
) -> Path:
    """
    Configure the logging system for chronotoken.

    Args:
        log_root: Directory the log file goes in
        log_level: Level for file logging (default: DEBUG)
        console_level: Level for console output (default: WARNING)

    Returns:
        Path to the log file
    """
    global _logging_initialized

    root_path = Path(log_root)
    root_path.mkdir(parents=True, exist_ok=True)
    log_path = root_path / LOG_FILE_NAME

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Re-initialization replaces handlers
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    file_formatter = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d | %(levelname)-8s | %(name)-35s | %(funcName)-25s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    file_handler = RotatingFileHandler(
        log_path,
        maxBytes=MAX_LOG_SIZE,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)

    console_formatter = logging.Formatter(
        fmt="%(levelname)-8s | %(name)-25s | %(message)s"
    )
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if not _logging_initialized:
        root_logger.info("=" * 80)
        root_logger.info(f"chronotoken logging initialized at {datetime.now().isoformat()}")
        root_logger.info(f"Log file: {log_path.absolute()}")
        root_logger.info("=" * 80)
        _logging_initialized = True

    return log_path


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger configured as child of the chronotoken logger
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# =============================================================================
# Structured Logging Helpers
# =============================================================================


def log_read(
    logger: logging.Logger,
    token_id: int,
    operation: str,
    success: bool = True,
    attempt: int | None = None,
    details: str | None = None,
) -> None:
    """Log a read against the external ledger."""
    status = "OK" if success else "FAILED"
    attempt_str = f" | attempt={attempt}" if attempt else ""
    details_str = f" | {details}" if details else ""
    level = logging.DEBUG if success else logging.WARNING
    logger.log(level, f"READ | token={token_id} | {operation} | {status}{attempt_str}{details_str}")


def log_refresh(
    logger: logging.Logger,
    sequence: int,
    action: str,
    token_count: int | None = None,
    duration_ms: int | None = None,
    details: str | None = None,
) -> None:
    """Log refresh lifecycle (start, applied, discarded, cancelled)."""
    count_str = f" | tokens={token_count}" if token_count is not None else ""
    duration_str = f" | {duration_ms}ms" if duration_ms else ""
    details_str = f" | {details}" if details else ""
    logger.info(f"REFRESH {sequence:05d} | {action}{count_str}{duration_str}{details_str}")


def log_codec(
    logger: logging.Logger,
    operation: str,
    token_id: int | None = None,
    details: str | None = None,
) -> None:
    """Log descriptor encoding/decoding."""
    token_str = f" | token={token_id}" if token_id is not None else ""
    details_str = f" | {details}" if details else ""
    logger.debug(f"CODEC | {operation}{token_str}{details_str}")


def log_mint(
    logger: logging.Logger,
    minter: str,
    offset_minutes: int,
    token_id: int | None = None,
    rejected: str | None = None,
) -> None:
    """Log a mint attempt."""
    if rejected:
        logger.warning(f"MINT | minter={minter} | offset={offset_minutes} | REJECTED | {rejected}")
    else:
        logger.info(f"MINT | minter={minter} | offset={offset_minutes} | token={token_id}")
