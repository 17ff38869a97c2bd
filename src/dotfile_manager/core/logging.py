"""Logging configuration for dotfile-manager.

Console output goes through rich on standard error, so it never mixes with
command output. An optional log file receives every record at debug level in
a plain format.

Example:
    ```python
    from dotfile_manager.core.logging import setup_logging

    setup_logging(debug=True, log_file="~/.cache/dotfile-manager.log")

    import logging
    logger = logging.getLogger(__name__)
    logger.info("Linked %s", path)
    ```
"""

import logging
import sys
from pathlib import Path
from types import TracebackType
from typing import Optional, Type

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

FILE_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def _console_handler(debug: bool) -> logging.Handler:
    # Paths are logged verbatim; rich markup would eat "[...]" in file names.
    handler = RichHandler(
        console=console,
        show_path=debug,
        enable_link_path=debug,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=debug,
    )
    handler.setLevel(logging.DEBUG if debug else logging.INFO)
    return handler


def _file_handler(log_file: str) -> logging.Handler:
    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    return handler


def _log_uncaught(
    exc_type: Type[BaseException],
    exc_value: BaseException,
    exc_traceback: Optional[TracebackType],
) -> None:
    """Log uncaught exceptions, except keyboard interrupts."""
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc_value, exc_traceback)
        return
    logger.critical("Uncaught exception", exc_info=(exc_type, exc_value, exc_traceback))


def setup_logging(debug: bool = False, log_file: Optional[str] = None) -> None:
    """Set up logging for a command line run.

    Replaces any handlers already on the root logger, so calling this again
    reconfigures logging instead of duplicating output.

    Args:
        debug: Whether to show debug records on the console (default: False).
        log_file: Optional path to a log file that receives debug records.
                 ``~`` is expanded and parent directories are created.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    # The file always gets debug records, even when the console does not.
    root_logger.setLevel(logging.DEBUG if debug or log_file else logging.INFO)

    root_logger.addHandler(_console_handler(debug))
    if log_file:
        root_logger.addHandler(_file_handler(log_file))

    sys.excepthook = _log_uncaught
    logger.debug("Logging initialized (debug=%s, log_file=%s)", debug, log_file)
