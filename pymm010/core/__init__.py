# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
PyMM010 Core Module - MM010 protocol engine

Contains:
- Frame encoding/decoding and the XOR checksum
- Request/response handshake engine
- Typed reply decoders
- Configuration and exceptions
"""

# Wire constants
from .constants import (
    CommandCode,
    ResponseCode,
    StatusCode,
    Baud,
    ParameterItem,
    describe_status
)

# Frame construction and parsing
from .framing import (
    RequestFrame,
    build_request_frame,
    parse_response_frame,
    checksum,
    verify_checksum,
    encode_field,
    decode_field
)

# Handshake
from .handshake import (
    HandshakeEngine,
    HandshakeState
)

# Replies
from .responses import (
    Status,
    CommandResult,
    PurgeResult,
    DispenseResult,
    DiagnosticResult,
    ParameterValue
)

# Configuration
from .config import (
    DispenserConfig,
    DEFAULT_CONFIG
)

# Exceptions
from .exceptions import (
    MM010Error,
    TransportError,
    ConnectionClosedError,
    RetryExhaustedError,
    FrameError,
    ChecksumError,
    HandshakeError,
    ResponseNotAckError,
    ResponseNotEotError,
    IllegalCommandError,
    ConfigError
)

# Public API
__all__ = [
    # Constants
    'CommandCode',
    'ResponseCode',
    'StatusCode',
    'Baud',
    'ParameterItem',
    'describe_status',

    # Framing
    'RequestFrame',
    'build_request_frame',
    'parse_response_frame',
    'checksum',
    'verify_checksum',
    'encode_field',
    'decode_field',

    # Handshake
    'HandshakeEngine',
    'HandshakeState',

    # Replies
    'Status',
    'CommandResult',
    'PurgeResult',
    'DispenseResult',
    'DiagnosticResult',
    'ParameterValue',

    # Configuration
    'DispenserConfig',
    'DEFAULT_CONFIG',

    # Exceptions
    'MM010Error',
    'TransportError',
    'ConnectionClosedError',
    'RetryExhaustedError',
    'FrameError',
    'ChecksumError',
    'HandshakeError',
    'ResponseNotAckError',
    'ResponseNotEotError',
    'IllegalCommandError',
    'ConfigError'
]
