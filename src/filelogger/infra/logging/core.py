from __future__ import annotations

"""
Logging Core Orchestrator.

Maintains the idempotent lifecycle of the root logger configuration. File
persistence goes through the rotating file engine, which already performs
its I/O on a dedicated worker, so emitting a record never blocks the
calling thread on disk access.
"""

import logging
import sys
from typing import List

from filelogger.infra.logging.config import _LEVEL_MAP, LoggingConfig
from filelogger.infra.logging.handlers import (
    _create_file_logger_handler,
    _is_our_handler,
    _tag_handler,
)

# Internal state flag for idempotency
_CONFIGURED_FLAG_ATTR: str = "_filelogger_configured"


# ==============================================================================
# PUBLIC API
# ==============================================================================

def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Execute idempotent configuration of the root logger.

    Checks an internal flag to avoid redundant handler attachments unless
    explicit re-configuration is requested. Re-configuration closes the
    previously attached file engine before creating a new one.

    Args:
        cfg: Structural configuration for the logging system.
        force: If True, bypass idempotency checks and re-initialize handlers.

    Returns:
        logging.Logger: The initialized root logger instance.
    """
    root = logging.getLogger()

    try:
        # 1. Idempotency Check
        already_configured = bool(getattr(root, _CONFIGURED_FLAG_ATTR, False))
        if already_configured and not force:
            return root

        level_int = _parse_level(cfg.level)
        root.setLevel(level_int)

        # Cleanup existing infrastructure to prevent handler leakage
        _remove_our_handlers(root)

        # 2. Handler Definition
        handlers_list: List[logging.Handler] = []

        if cfg.console:
            sh = logging.StreamHandler(sys.stderr)
            sh.setLevel(level_int)
            sh.setFormatter(logging.Formatter(cfg.console_fmt))
            _tag_handler(sh)
            handlers_list.append(sh)

        if cfg.log_directory:
            fh = _create_file_logger_handler(cfg, level_int)
            if fh:
                handlers_list.append(fh)

        for handler in handlers_list:
            root.addHandler(handler)

        setattr(root, _CONFIGURED_FLAG_ATTR, True)
        return root

    # Fallback to emergency console logging if the infrastructure fails
    except Exception:
        fallback = logging.getLogger()
        fallback.setLevel(logging.INFO)
        _remove_our_handlers(fallback)

        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(logging.Formatter("CRITICAL FALLBACK | %(levelname)s | %(message)s"))
        _tag_handler(sh)
        fallback.addHandler(sh)

        fallback.warning("Logging infrastructure failed. Switched to emergency console.", exc_info=True)
        return fallback


def shutdown_logging() -> None:
    """
    Detach and close every handler installed by configure_logging().

    Flushes and closes the file engine; safe to call repeatedly.
    """
    root = logging.getLogger()
    _remove_our_handlers(root)
    if hasattr(root, _CONFIGURED_FLAG_ATTR):
        delattr(root, _CONFIGURED_FLAG_ATTR)


def get_logger(name: str) -> logging.Logger:
    """
    Acquire a named logger instance compliant with the global configuration.

    Args:
        name: Hierarchical name for the logger (usually __name__).

    Returns:
        logging.Logger: The requested logger instance.
    """
    return logging.getLogger(name)


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _parse_level(level: str) -> int:
    """Convert a string-based logging level to its numeric constant."""
    if not level:
        return logging.INFO
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.INFO)

def _remove_our_handlers(root: logging.Logger) -> None:
    """Identify and detach all internally-managed handlers from the root."""
    for h in list(root.handlers):
        if _is_our_handler(h):
            root.removeHandler(h)
            h.close()
