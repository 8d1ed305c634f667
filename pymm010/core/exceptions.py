# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pymm010.core.exceptions

Exception hierarchy for the MM010 driver.

Every error raised by the package derives from MM010Error so callers can
catch the whole family at once, or pick the specific failure kind:

- TransportError: port read/write/open failure
- RetryExhaustedError: no complete reply within the read attempt ceiling
- FrameError: frame markers missing or misplaced
- ChecksumError: XOR checksum mismatch
- ResponseNotAckError / ResponseNotEotError: handshake order violated
- IllegalCommandError: device rejected a parameter operation
- ConnectionClosedError: operation attempted without an open port
- ConfigError: invalid configuration value
"""

from typing import Optional


class MM010Error(Exception):
    """Base exception for all MM010 driver errors"""


class TransportError(MM010Error):
    """Transport read/write failure"""


class ConnectionClosedError(TransportError):
    """Operation attempted on a closed connection"""


class RetryExhaustedError(MM010Error):
    """Read loop hit its attempt ceiling before a reply was complete"""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class FrameError(MM010Error):
    """Malformed response frame"""


class ChecksumError(FrameError):
    """Response checksum does not match the frame contents"""

    def __init__(self, message: str, expected: int = 0, received: int = 0):
        super().__init__(message)
        self.expected = expected
        self.received = received


class HandshakeError(MM010Error):
    """Reply code bytes arrived out of protocol order"""


class ResponseNotAckError(HandshakeError):
    """First reply code was not ACK"""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class ResponseNotEotError(HandshakeError):
    """Closing reply code was not EOT"""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class IllegalCommandError(MM010Error):
    """Device refused a parameter read or write"""

    def __init__(self, message: str, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class ConfigError(MM010Error, ValueError):
    """Invalid driver configuration"""
