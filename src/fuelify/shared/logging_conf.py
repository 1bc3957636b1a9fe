# src/fuelify/shared/logging_conf.py
"""
Logging Configuration - Logging Setup and Configuration

Configures the root logger once, at process start: one format for every
module, a stdout handler, and an optional size-rotated log file. Uvicorn
is started with ``log_config=None`` so its access and error logs flow
through the same handlers.

Files that USE this module:
- fuelify.app (setup_logging function for logging initialization)

Files that this module USES:
- None (pure configuration module)
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "fuelify.log"

PathLike = Union[str, Path]


def resolve_log_path(log_file: Optional[PathLike], log_dir: Optional[PathLike]) -> Optional[Path]:
    """
    Work out where the log file goes, creating its directory.

    ``log_dir`` wins over ``log_file``; the file inside it is always fuelify.log.
    """
    if log_dir:
        path = Path(log_dir) / LOG_FILE_NAME
    elif log_file:
        path = Path(log_file)
    else:
        return None
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _rotating_handler(path: Path, max_bytes: int, backup_count: int) -> logging.Handler:
    return RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")


def setup_logging(
    level=logging.INFO,
    log_file: Optional[PathLike] = None,
    log_dir: Optional[PathLike] = None,
    log_to_stdout: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
) -> Optional[Path]:
    """
    Configure application-wide logging settings.

    Args:
        level: Logging level (default: logging.INFO)
        log_file: Optional path to log file (enables file logging)
        log_dir: Optional directory for log files; the file is named fuelify.log
        log_to_stdout: Whether to attach a stdout handler
        max_bytes: Maximum size per log file before rotation (default: 10MB)
        backup_count: Number of backup log files to keep (default: 5)

    Returns:
        Path of the log file if file logging is enabled, None otherwise
    """
    log_path = resolve_log_path(log_file, log_dir)

    handlers: list[logging.Handler] = []
    if log_to_stdout or log_path is None:
        # Stdout is also the fallback when file logging is off
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_path is not None:
        handlers.append(_rotating_handler(log_path, max_bytes, backup_count))

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)
    for handler in handlers:
        handler.setFormatter(formatter)

    # force=True replaces handlers left by an earlier call or by a library
    logging.basicConfig(level=level, handlers=handlers, force=True)

    logging.getLogger(__name__).info(
        "Logging configured: %s, level=%s",
        f"file={log_path}" if log_path else "stdout",
        logging.getLevelName(level),
    )
    return log_path
