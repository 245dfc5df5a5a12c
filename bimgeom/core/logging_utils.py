"""Logging utilities for bimgeom.

Provides a consistent logger hierarchy and formatting without modifying the
process root logger. All bimgeom code should obtain loggers via get_logger().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_ROOT_NAME = 'bimgeom'
_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')


def _ensure_root(attach_stream: bool = False) -> logging.Logger:
    """Return the 'bimgeom' logger, isolated from the process root logger.

    When attach_stream is True and only NullHandlers are present (added by the
    package __init__), they are replaced with a single stdout StreamHandler.
    """
    root = logging.getLogger(_ROOT_NAME)
    if attach_stream:
        has_non_null = any(not isinstance(h, logging.NullHandler) for h in root.handlers)
        if not has_non_null:
            for h in list(root.handlers):
                root.removeHandler(h)
            handler = logging.StreamHandler(stream=sys.stdout)
            handler.setFormatter(_FORMAT)
            root.addHandler(handler)
        # Do not propagate to the process root once we own the output
        root.propagate = False
    return root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else default


def configure_logging(level: Union[str, int] = 'INFO') -> None:
    """Attach console output to the 'bimgeom' logger family and set its level.

    This does NOT modify the process root logger.
    """
    root = _ensure_root(attach_stream=True)
    root.setLevel(_to_level(level))


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger under the 'bimgeom' namespace.

    If a level is provided, it sets the logger's level; otherwise the logger
    is left at NOTSET so it inherits from the 'bimgeom' parent configured via
    configure_logging().
    """
    if name != _ROOT_NAME and not name.startswith(_ROOT_NAME + '.'):
        name = f'{_ROOT_NAME}.{name}'
    log = logging.getLogger(name)
    if level is not None:
        log.setLevel(_to_level(level))
    return log


__all__ = ['get_logger', 'configure_logging']
