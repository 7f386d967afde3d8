"""
Process-wide logging for Arisa.

Every module asks for ``get_logger("<component>")`` and receives the
``arisa.<component>`` logger, which writes colored lines to the terminal
through prompt_toolkit and plain lines to one file per session under
``logs/``. Only the newest ``ARISA_MAX_SESSION_LOGS`` session files are kept.
"""

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from prompt_toolkit import print_formatted_text
from prompt_toolkit.formatted_text import ANSI

LOGS_DIR: Path = Path(os.getenv("ARISA_LOGS_DIR") or (Path(__file__).parents[3] / "logs")).resolve()
LOGS_DIR.mkdir(parents=True, exist_ok=True)

MAX_SESSION_LOGS: int = int(os.getenv("ARISA_MAX_SESSION_LOGS", "10"))

LOG_FORMAT: str = "[%(asctime)s] [%(levelname)s] [%(name)s:%(funcName)s:%(lineno)d] %(message)s"
DATE_FORMAT: str = "%Y-%m-%d %H-%M-%S"

RESET_COLOR = "\033[0m"
LOG_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[1;31m",
}

NOISY_LOGGERS = (
    "discord",
    "discord.gateway",
    "discord.client",
    "discord.http",
    "discord.state",
    "aiohttp",
    "aiohttp.access",
    "asyncio",
)

LOG_FILEPATH: Path | None = None


class ColorFormatter(logging.Formatter):
    """Formatter that paints the whole line in the color of its level."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        color = LOG_COLORS.get(record.levelname)
        if not color:
            return line
        return f"{color}{line}{RESET_COLOR}"


class PromptToolkitHandler(logging.Handler):
    """Console handler that writes through ``print_formatted_text``.

    Printing through prompt_toolkit keeps lines intact when a prompt is
    active and lets the ANSI escapes from :class:`ColorFormatter` render on
    terminals that need translation.
    """

    def __init__(self, formatter: logging.Formatter | None = None):
        super().__init__()
        if formatter is not None:
            self.setFormatter(formatter)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            print_formatted_text(ANSI(self.format(record)))
        except Exception:
            self.handleError(record)


def should_use_color() -> bool:
    try:
        return sys.stderr.isatty()
    except Exception:
        return False


plain_formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
console_formatter = ColorFormatter(LOG_FORMAT, datefmt=DATE_FORMAT) if should_use_color() else plain_formatter


def prune_session_logs(keep: int = MAX_SESSION_LOGS) -> int:
    """Delete all but the newest ``keep`` session files and return how many went."""
    sessions = sorted(LOGS_DIR.glob("*.log"), key=lambda path: path.stat().st_mtime, reverse=True)
    removed = 0
    for stale in sessions[max(keep, 0):]:
        try:
            stale.unlink()
            removed += 1
        except OSError:
            continue
    return removed


def get_log_filepath() -> Path:
    """Return this session's log file, choosing its name on first use.

    Choosing the name also prunes older session files so the directory
    keeps at most ``MAX_SESSION_LOGS`` files including the new one.
    """
    global LOG_FILEPATH

    if LOG_FILEPATH is None:
        prune_session_logs(MAX_SESSION_LOGS - 1)
        LOG_FILEPATH = LOGS_DIR / f"{datetime.now().strftime(DATE_FORMAT)}.log"
    return LOG_FILEPATH


def _level_from_env() -> int:
    return getattr(logging, os.getenv("ARISA_LOG_LEVEL", "DEBUG").upper(), logging.DEBUG)


def _console_handler(level: int) -> logging.Handler:
    handler = PromptToolkitHandler(formatter=console_formatter)
    handler.setLevel(level)
    return handler


def _file_handler() -> logging.Handler:
    handler = logging.FileHandler(get_log_filepath(), encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(plain_formatter)
    return handler


def setup_logger(logger_name: str) -> logging.Logger:
    """Attach the console and session-file handlers to ``arisa.<logger_name>``.

    Parameters
    ----------
    logger_name:
        Component name, e.g. ``"crypto_cog"``.

    Returns
    -------
    logging.Logger
        The configured logger. Calling again with the same name returns it
        unchanged.
    """
    logger = logging.getLogger(f"arisa.{logger_name}")
    if logger.handlers:
        return logger

    level = _level_from_env()
    logger.setLevel(level)
    logger.propagate = False
    logger.addHandler(_console_handler(level))
    logger.addHandler(_file_handler())
    return logger


def get_logger(logger_name: str) -> logging.Logger:
    return setup_logger(logger_name)


def handle_exception(exception_type, exception_instance, exception_traceback) -> None:
    """``sys.excepthook`` that records uncaught exceptions in the session log.

    Ctrl+C still goes to the interpreter's default hook.
    """
    if issubclass(exception_type, KeyboardInterrupt):
        sys.__excepthook__(exception_type, exception_instance, exception_traceback)
        return
    get_logger("uncaught").critical(
        "Uncaught exception", exc_info=(exception_type, exception_instance, exception_traceback)
    )


def quiet_library_loggers(names=NOISY_LOGGERS) -> None:
    """Raise third-party loggers to ERROR and detach their own handlers."""
    for name in names:
        library_logger = logging.getLogger(name)
        library_logger.setLevel(logging.ERROR)
        library_logger.propagate = False
        library_logger.handlers = []


quiet_library_loggers()
sys.excepthook = handle_exception
