# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
Thread-safe Data Structures

Provides:
- AtomicCounter: Thread-safe integer counter
- TrafficStatistics: named counters kept by the handshake engine
"""

import threading
import logging
from typing import Dict

logger = logging.getLogger(__name__)


class AtomicCounter:
    """
    Thread-safe atomic counter with increment/reset operations.

    Args:
        initial: Initial value (default 0)
    """
    def __init__(self, initial: int = 0):
        self._value = initial
        self._lock = threading.RLock()

    def increment(self, amount: int = 1) -> int:
        """
        Increment counter and return new value.

        Args:
            amount: Value to add (default 1)
        """
        with self._lock:
            self._value += amount
            return self._value

    def set(self, value: int) -> None:
        """Set counter to specific value."""
        with self._lock:
            self._value = value

    def get(self) -> int:
        """Get current value."""
        with self._lock:
            return self._value

    def __repr__(self) -> str:
        return f"AtomicCounter(value={self.get()})"


class TrafficStatistics:
    """
    Frame and error counters for one connection.

    Example:
        stats = TrafficStatistics()
        stats.frames_sent.increment()
        stats.snapshot()  # {'frames_sent': 1, ...}
    """
    FIELDS = ('frames_sent', 'frames_received', 'acks_sent', 'errors')

    def __init__(self):
        self.frames_sent = AtomicCounter()
        self.frames_received = AtomicCounter()
        self.acks_sent = AtomicCounter()
        self.errors = AtomicCounter()

    def snapshot(self) -> Dict[str, int]:
        """Current values of all counters"""
        return {name: getattr(self, name).get() for name in self.FIELDS}

    def reset(self) -> None:
        """Zero all counters"""
        for name in self.FIELDS:
            getattr(self, name).set(0)
        logger.debug("Traffic statistics reset")

    def __repr__(self) -> str:
        return f"TrafficStatistics({self.snapshot()})"
