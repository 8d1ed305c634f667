# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
PyMM010 Utilities Module

Provides common utilities for thread safety, async offloading and logging setup.
"""

from typing import List

__all__: List[str] = [
    'AtomicCounter',
    'TrafficStatistics',
    'run_in_thread',
    'connection_executor',
    'configure_logging'
]

LOG_FORMAT = '%(asctime)s %(name)s %(levelname)s: %(message)s'


def __getattr__(name: str):
    """Lazy import helper for better startup performance"""
    if name == 'AtomicCounter':
        from .threadsafe import AtomicCounter
        return AtomicCounter
    if name == 'TrafficStatistics':
        from .threadsafe import TrafficStatistics
        return TrafficStatistics
    if name == 'run_in_thread':
        from .async_thread import run_in_thread
        return run_in_thread
    if name == 'connection_executor':
        from .async_thread import connection_executor
        return connection_executor
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def configure_logging(level: str = "INFO") -> None:
    """
    Configure package-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    import logging
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(level=numeric, format=LOG_FORMAT)
