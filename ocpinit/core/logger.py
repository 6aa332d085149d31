"""Logging for ocpinit: Rich console output plus optional log files."""
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

console = Console(stderr=True)

ROOT_LOGGER = "ocpinit"
FILE_FORMAT = "%(asctime)s | %(name)s | %(levelname)s | %(message)s"

# One handler per resolved log file, so repeated CLI invocations in one
# process never write each record twice
_file_handlers: Dict[Path, logging.FileHandler] = {}


def setup_file_logging(log_file: Union[str, Path], verbose: bool = False) -> logging.FileHandler:
    """Send ocpinit log records to a file as well as the console.

    Args:
        log_file: Path to the log file; parent directories are created
        verbose: Record DEBUG messages instead of INFO and above

    Returns:
        The FileHandler attached for this path. Calling again with the same
        path reuses it and only updates the level.
    """
    target = Path(log_file).expanduser().resolve()
    level = logging.DEBUG if verbose else logging.INFO
    root_logger = logging.getLogger(ROOT_LOGGER)

    handler = _file_handlers.get(target)
    if handler is None:
        target.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(target)
        handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root_logger.addHandler(handler)
        _file_handlers[target] = handler
        root_logger.info(f"Logging scaffold runs to {target}")

    handler.setLevel(level)
    if root_logger.level == logging.NOTSET or root_logger.level > level:
        root_logger.setLevel(level)
    return handler


def close_file_logging(log_file: Optional[Union[str, Path]] = None) -> None:
    """Detach and close one file handler, or all of them."""
    root_logger = logging.getLogger(ROOT_LOGGER)
    if log_file is None:
        targets = list(_file_handlers)
    else:
        targets = [Path(log_file).expanduser().resolve()]
    for target in targets:
        handler = _file_handlers.pop(target, None)
        if handler is not None:
            root_logger.removeHandler(handler)
            handler.close()


def set_verbose(verbose: bool) -> None:
    """Switch every ocpinit logger between INFO and DEBUG."""
    level = logging.DEBUG if verbose else logging.INFO
    for name, logger in logging.Logger.manager.loggerDict.items():
        if name.startswith(ROOT_LOGGER) and isinstance(logger, logging.Logger):
            logger.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger with a Rich console handler attached once."""
    logger = logging.getLogger(name)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=console, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger
