import logging
import sys
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Names of the handlers setup_logging owns
CONSOLE_HANDLER = "pageclip.console"
FILE_HANDLER = "pageclip.file"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    format_string: str = LOG_FORMAT,
    force: bool = False,
) -> logging.Logger:
    """
    Configure the ``pageclip`` logger.

    Records go to stdout and, when ``log_file`` is given, to that file as
    well. Handlers from an earlier call are kept unless ``force`` is set, so
    repeated calls from the CLI and library code do not duplicate output.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR); unknown names mean INFO
        log_file: Optional path of a UTF-8 log file
        format_string: Format for every handler
        force: Replace handlers installed by an earlier call; others are left alone

    Returns:
        The package logger
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    logger = logging.getLogger("pageclip")
    logger.setLevel(numeric_level)

    installed = [h for h in logger.handlers if h.get_name() in (CONSOLE_HANDLER, FILE_HANDLER)]
    if force:
        for handler in installed:
            logger.removeHandler(handler)
            handler.close()
        installed = []

    if not installed:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.set_name(CONSOLE_HANDLER)
        handlers: list[logging.Handler] = [console_handler]
        if log_file:
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.set_name(FILE_HANDLER)
            handlers.append(file_handler)

        formatter = logging.Formatter(format_string)
        for handler in handlers:
            handler.setLevel(numeric_level)
            handler.setFormatter(formatter)
            logger.addHandler(handler)

    # Records stop here; the root logger would print them a second time
    logger.propagate = False

    return logger
