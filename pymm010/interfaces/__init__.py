# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
PyMM010 Transport Interfaces

Provides:
- BaseTransport: contract consumed by the handshake engine
- SerialTransport: pyserial implementation (7E1)
- create_transport: connection string factory
"""

from .transport import (
    BaseTransport,
    TransportManager,
    READ_CHUNK_SIZE
)
from .serial_port import SerialTransport
from ..core.exceptions import TransportError

__all__ = [
    'BaseTransport',
    'TransportManager',
    'SerialTransport',
    'READ_CHUNK_SIZE',
    'TransportError',
    'create_transport'
]


def create_transport(connection_string: str, **kwargs) -> BaseTransport:
    """
    Create transport from connection string.

    Formats:
    - Serial: "serial:/dev/ttyUSB0:9600" or "serial:COM4" (9600 baud)

    Args:
        connection_string: Transport-specific connection string
        **kwargs: Additional transport options

    Returns:
        Configured (unopened) transport instance
    """
    scheme, sep, rest = connection_string.partition(":")
    if not sep or not rest:
        raise TransportError(f"Unknown transport: {connection_string}")

    if scheme.lower() == "serial":
        port, _, baud = rest.rpartition(":")
        if not port or not baud.isdigit():
            port, baud = rest, ""
        if baud:
            kwargs.setdefault("baudrate", int(baud))
        return TransportManager.create("serial", port, **kwargs)

    raise TransportError(f"Unknown transport: {connection_string}")
