"""
Logging setup for the lab manager service.

Log records go to the console and, when ``LOG_FILE`` is set, to that
file as well.  ``DEBUG=true`` forces debug output regardless of
``LOG_LEVEL``.  Handlers installed here are tagged so that calling
``setup_logging`` again (every ``create_app`` does) replaces them
instead of stacking duplicates, while handlers installed by someone
else (pytest's capture, uvicorn) are left alone.
"""

import logging
from pathlib import Path
from typing import Optional

from .config import settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_TAG = "_lab_manager_handler"


def resolve_level(level: Optional[str] = None, debug: Optional[bool] = None) -> int:
    """Numeric level for the root logger.  Unknown names fall back to INFO."""
    if settings.debug if debug is None else debug:
        return logging.DEBUG
    name = (level or settings.log_level).upper()
    numeric = logging.getLevelName(name)
    return numeric if isinstance(numeric, int) else logging.INFO


def setup_logging(
    level: Optional[str] = None,
    logfile: Optional[str] = None,
    debug: Optional[bool] = None,
) -> logging.Logger:
    """Configure the root logger and return it.

    ``level``, ``logfile`` and ``debug`` default to ``LOG_LEVEL``,
    ``LOG_FILE`` and ``DEBUG`` from the settings.
    """
    root = logging.getLogger()
    for handler in [h for h in root.handlers if getattr(h, _HANDLER_TAG, False)]:
        root.removeHandler(handler)
        handler.close()

    root.setLevel(resolve_level(level, debug))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = [logging.StreamHandler()]
    logfile = logfile if logfile is not None else settings.log_file
    if logfile:
        log_path = Path(logfile).resolve()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
    for handler in handlers:
        setattr(handler, _HANDLER_TAG, True)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    return root
