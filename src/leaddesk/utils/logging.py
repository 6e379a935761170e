"""
Rich console logging shared by the importer, the services and the API
"""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.traceback import install as install_traceback

from leaddesk.core.config import settings

install_traceback(show_locals=False)

_console = Console()

# One handler for every leaddesk logger so import progress and request logs interleave in order
_handler = RichHandler(
    console=_console,
    show_time=True,
    show_path=True,
    show_level=True,
    rich_tracebacks=True,
    markup=True,
    log_time_format="[%Y-%m-%d %H:%M:%S]",
)
_handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%Y-%m-%d %H:%M:%S]"))


def _level(name: Optional[str]) -> int:
    return getattr(logging, (name or settings.log_level).upper(), logging.INFO)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Logger writing through the shared Rich handler.
    Messages may carry Rich markup, e.g. "[green]✅ Imported[/green]".

    Args:
        name: Logger name (typically __name__)
        level: Level override; defaults to `log_level` from config.yaml
    """
    logger = logging.getLogger(name)
    logger.setLevel(_level(level))
    if _handler not in logger.handlers:
        logger.addHandler(_handler)
    logger.propagate = False
    return logger


def get_shared_logger() -> logging.Logger:
    """Logger for run-level messages: startup, shutdown, import summaries"""
    return get_logger("leaddesk")


app_logger = get_shared_logger()
