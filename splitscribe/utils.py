import logging
import os
from pathlib import Path
from typing import Optional
from logging.handlers import TimedRotatingFileHandler
from rich.logging import RichHandler

from splitscribe.constants import LOGGER_NAME, LOG_DIR_ENV
from splitscribe.core.console import console as console_manager

def default_log_dir() -> Path:
    """$SPLITSCRIBE_LOG_DIR, then XDG state home, then ~/.local/state."""
    override = os.environ.get(LOG_DIR_ENV)
    if override:
        return Path(override)
    xdg_state = os.environ.get("XDG_STATE_HOME")
    if xdg_state:
        return Path(xdg_state) / "splitscribe" / "logs"
    return Path.home() / ".local" / "state" / "splitscribe" / "logs"

def setup_logging(log_dir: Optional[str] = None, debug: bool = False) -> logging.Logger:
    """Configures logging to the error console and a rotating file.

    Args:
        log_dir: Directory for log files. If None, see ``default_log_dir``.
        debug: If True, mirror DEBUG records to the error console. Otherwise
            console output is left to the console manager and only the file
            receives records.
    """
    log_path = Path(log_dir) if log_dir else default_log_dir()

    # Silence noisy 3rd party loggers
    for logger_name in ("httpx", "httpcore", "openai", "urllib3"):
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    logger = logging.getLogger(LOGGER_NAME)
    logger.propagate = False

    # Re-running setup replaces handlers from a previous invocation
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_manager.configure(debug=debug)
    # Handlers filter by level
    logger.setLevel(logging.DEBUG)

    if debug:
        console_handler = RichHandler(
            console=console_manager.err_console,
            rich_tracebacks=True,
            markup=False,
            show_time=True,
            show_path=False
        )
        console_handler.setLevel(logging.DEBUG)
        logger.addHandler(console_handler)

    try:
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            str(log_path / "app.log"), when="midnight", interval=1, backupCount=30, encoding="utf-8"
        )
        file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(file_handler)
    except OSError as e:
        # Handlers are not set up yet, so this cannot go through the logger
        console_manager.warning(f"Warning: Could not create log file in {log_path}: {e}")
        console_manager.warning("Logging to console only.")

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())

    return logger
