import logging as root_logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

_ROOT_LOGGER_NAME = "entitysearch"


def setup_logging(
    level="INFO",
    pretty: bool = False,
    console: Optional[Console] = None,
    propagate: bool = False,
):
    """
    Configures the logging strategy for the entitysearch package.

    This function initializes the 'entitysearch' logger namespace and provides two
    output modes: a 'pretty' mode rendered through Rich, and a standard stream
    mode for basic environments (CI logs, piped output).
    Existing handlers are cleared first, so calling it again reconfigures the
    logger instead of duplicating entries.

    Args:
        level (str): The logging threshold (e.g., "DEBUG", "INFO", "WARNING").
            Defaults to "INFO".
        pretty (bool): If True, enables Rich terminal output with colors,
            timestamps, and formatted tracebacks.
        console (Optional[rich.console.Console]): An optional Rich Console
            instance. Sharing the console used for result tables keeps log lines
            and tables from interleaving. Defaults to a new Console(stderr=True).
        propagate (bool): Whether records bubble up to the root logger.

    Notes:
        - Propagation is disabled by default to prevent duplicate output in
          test runners like pytest.
    """
    logger = root_logging.getLogger(_ROOT_LOGGER_NAME)

    # Clear existing handlers to prevent duplicates
    if logger.hasHandlers():
        logger.handlers.clear()

    if pretty:
        console = console or Console(stderr=True)

        handler = RichHandler(
            level=level,
            console=console,
            show_time=True,
            show_path=True,
            markup=True,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        formatter = root_logging.Formatter(
            fmt="[dim white]%(name)s[/dim white]: %(message)s", datefmt="[%X]"
        )
        handler.setFormatter(formatter)
        init_message = f"Logging initialized at level: [bold]{level}[/bold]"
        extra = {"markup": True}
    else:
        handler = root_logging.StreamHandler(sys.stderr)
        # Standard format: Time [Level] Name: Message
        formatter = root_logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        init_message = f"Logging initialized at level: {level}"
        extra = {}

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate

    logger.debug(init_message, extra=extra)


def get_logger(name: Optional[str] = None):
    """
    Retrieves a logger instance within the entitysearch namespace.

    Args:
        name (Optional[str]): The name of the logger, typically `__name__`
            (e.g., 'entitysearch.comm.client'). If None, the top-level
            'entitysearch' logger is returned.

    Returns:
        logging.Logger: The requested logger.
    """
    if name is not None:
        return root_logging.getLogger(name=name)
    else:
        return root_logging.getLogger(_ROOT_LOGGER_NAME)
