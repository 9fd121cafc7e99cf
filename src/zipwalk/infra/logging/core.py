from __future__ import annotations

"""
Logging Core Orchestrator.

Idempotent setup of the root logger. Records are pushed onto a queue by
a single QueueHandler and written by a QueueListener thread, so slow log
files never stall a walk over a large tree.
"""

import atexit
import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import List, Optional

from zipwalk.infra.logging.config import LoggingConfig, parse_level
from zipwalk.infra.logging.handlers import (
    create_console_handler,
    create_rotating_file_handler,
    is_our_handler,
    tag_handler,
)

_CONFIGURED_FLAG_ATTR: str = "_zipwalk_configured"
_QUEUE_LISTENER_ATTR: str = "_zipwalk_queue_listener"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Configure the root logger once, or again when 'force' is set.

    Args:
        cfg: Logging settings.
        force: Replace handlers installed by a previous call.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    level_int = parse_level(cfg.level)
    root.setLevel(level_int)
    shutdown_logging()

    handlers_list: List[logging.Handler] = []
    if cfg.console:
        handlers_list.append(create_console_handler(level_int, logging.Formatter(cfg.console_fmt)))
    if cfg.log_file:
        fh = create_rotating_file_handler(
            cfg.log_file,
            level_int,
            logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt),
            cfg.max_bytes,
            cfg.backup_count,
        )
        if fh is not None:
            handlers_list.append(fh)

    if not handlers_list:
        return root

    try:
        log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
        listener = QueueListener(log_queue, *handlers_list, respect_handler_level=True)
        listener.start()
    except RuntimeError as e:
        # Thread creation failed: attach the handlers directly
        sys.stderr.write(f"WARNING: logging queue unavailable, writing synchronously: {e}\n")
        for h in handlers_list:
            root.addHandler(h)
        setattr(root, _CONFIGURED_FLAG_ATTR, True)
        return root

    root.addHandler(tag_handler(QueueHandler(log_queue)))
    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    setattr(root, _CONFIGURED_FLAG_ATTR, True)
    atexit.register(_stop_listener, listener)
    return root


def shutdown_logging() -> None:
    """
    Flush and detach everything 'configure_logging' installed.

    Safe to call when logging was never configured.
    """
    root = logging.getLogger()

    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener is not None:
        _stop_listener(listener)
        setattr(root, _QUEUE_LISTENER_ATTR, None)

    for h in list(root.handlers):
        if is_our_handler(h):
            root.removeHandler(h)
            h.close()

    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _stop_listener(listener: Optional[QueueListener]) -> None:
    """Stop a listener whose thread may already have been joined."""
    if listener is None or getattr(listener, "_thread", None) is None:
        return
    listener.stop()
    for h in listener.handlers:
        h.close()
