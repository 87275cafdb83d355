"""Logging configuration: brief console output plus a detailed per-session log file"""
import logging
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

KEEP_SESSIONS = 5
MAX_LOG_BYTES = 10 * 1024 * 1024

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s'

# Below WARNING these are dropped entirely, console and file alike
NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "google_genai")


def _prune_sessions(log_path: Path, keep: int) -> None:
    """Delete old session files so that `keep` remain after the new one is created"""
    sessions = sorted(log_path.parent.glob(f"{log_path.stem}_*.log"), reverse=True)
    for old in sessions[keep - 1:]:
        try:
            old.unlink()
        except OSError:
            logging.getLogger(__name__).debug(f"Could not delete old log {old}")


def setup_logging(
    log_file: str = "logs/sprint-lab.log",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Configure the root logger.

    Each call starts a new session file `<stem>_<YYYYmmdd_HHMMSS>.log` next to
    `log_file`, keeps the last 5 sessions and rotates a session at 10MB.

    Args:
        log_file: Base path to log file (relative to project root)
        console_level: Console logging level
        file_level: File logging level

    Returns:
        Path of the session log file
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    _prune_sessions(log_path, KEEP_SESSIONS)

    started = datetime.now().strftime("%Y%m%d_%H%M%S")
    session_log = log_path.parent / f"{log_path.stem}_{started}.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root.addHandler(console)

    file_handler = RotatingFileHandler(session_log, maxBytes=MAX_LOG_BYTES, backupCount=KEEP_SESSIONS, encoding='utf-8')
    file_handler.setLevel(file_level)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(
        f"Logging configured: console={logging.getLevelName(console_level)}, "
        f"file={session_log} ({logging.getLevelName(file_level)})"
    )
    return session_log
