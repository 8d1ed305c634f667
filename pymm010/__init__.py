# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
PyMM010 - MM010 banknote dispenser driver

Provides:
- Request/response frame encoding with XOR checksum
- ACK/data/ACK/EOT handshake engine with bounded reads
- Command surface for status, purge, dispense, diagnostics and parameters
- pyserial transport (7 data bits, even parity, 1 stop bit)
"""

__version__ = "0.1.0"

# Core protocol
from .core.constants import (
    CommandCode,
    ResponseCode,
    StatusCode,
    Baud,
    ParameterItem,
    describe_status
)
from .core.framing import (
    build_request_frame,
    parse_response_frame,
    checksum
)
from .core.handshake import (
    HandshakeEngine,
    HandshakeState
)
from .core.responses import (
    Status,
    CommandResult,
    PurgeResult,
    DispenseResult,
    DiagnosticResult,
    ParameterValue
)
from .core.config import (
    DispenserConfig,
    DEFAULT_CONFIG
)

# Transports
from .interfaces import (
    BaseTransport,
    SerialTransport,
    create_transport
)

# Command surface
from .dispenser import (
    MM010Dispenser,
    open_connection
)
from .dispenser_async import AsyncMM010Dispenser

# Exceptions
from .core.exceptions import (
    MM010Error,
    TransportError,
    ConnectionClosedError,
    RetryExhaustedError,
    FrameError,
    ChecksumError,
    ResponseNotAckError,
    ResponseNotEotError,
    IllegalCommandError,
    ConfigError
)

# Utilities
from .utils import configure_logging

__all__ = [
    # Core
    'CommandCode',
    'ResponseCode',
    'StatusCode',
    'Baud',
    'ParameterItem',
    'describe_status',
    'build_request_frame',
    'parse_response_frame',
    'checksum',
    'HandshakeEngine',
    'HandshakeState',
    'Status',
    'CommandResult',
    'PurgeResult',
    'DispenseResult',
    'DiagnosticResult',
    'ParameterValue',
    'DispenserConfig',
    'DEFAULT_CONFIG',

    # Interfaces
    'BaseTransport',
    'SerialTransport',
    'create_transport',
    'MM010Dispenser',
    'AsyncMM010Dispenser',
    'open_connection',

    # Exceptions
    'MM010Error',
    'TransportError',
    'ConnectionClosedError',
    'RetryExhaustedError',
    'FrameError',
    'ChecksumError',
    'ResponseNotAckError',
    'ResponseNotEotError',
    'IllegalCommandError',
    'ConfigError',

    # Utilities
    'configure_logging',
    'get_version',

    # Metadata
    '__version__'
]


def get_version() -> str:
    """Return the package version."""
    return __version__
