# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pymm010.core.framing

MM010 frame encoding and decoding.

Request frame::

    +------+------+------+---------+-----------------+------+----------+
    | 0x04 | 0x30 | 0x02 | command |  payload (0..n) | 0x03 | checksum |
    +------+------+------+---------+-----------------+------+----------+

Response data frame::

    +------+------+------+-----------------+------+----------+
    | 0x01 | 0x30 | 0x02 |  payload (0..n) | 0x03 | checksum |
    +------+------+------+-----------------+------+----------+

There is no length field; the frame length is implied by the markers.
The checksum is the XOR of every byte from the start marker through the
end-of-text marker inclusive.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .constants import (
    REQUEST_START,
    RESPONSE_START,
    DEVICE_ADDRESS,
    TEXT_START,
    TEXT_END,
    FIELD_OFFSET,
    MAX_FIELD_VALUE,
    MIN_RESPONSE_FRAME,
)
from .exceptions import FrameError, ChecksumError

logger = logging.getLogger(__name__)

# Bytes preceding the command byte in a request
_REQUEST_HEADER = bytes([REQUEST_START, DEVICE_ADDRESS, TEXT_START])
_RESPONSE_HEADER_LEN = 3


def checksum(data: bytes) -> int:
    """
    XOR-fold of all bytes, left to right.

    Args:
        data: Exactly the bytes covered by the checksum
            (start marker through end-of-text marker)

    Returns:
        Single checksum byte
    """
    chk = 0
    for byte in data:
        chk ^= byte
    return chk


def verify_checksum(data: bytes, received: int) -> bool:
    """Check a received checksum byte against the covered bytes"""
    return checksum(data) == received


def encode_field(value: int) -> int:
    """
    Shift a numeric field into the printable range.

    Raises:
        ValueError: If value does not fit after the +0x20 offset
    """
    if not 0 <= value <= MAX_FIELD_VALUE:
        raise ValueError(f"Field value {value} out of range 0-{MAX_FIELD_VALUE}")
    return value + FIELD_OFFSET


def decode_field(byte: int) -> int:
    """
    Undo the +0x20 offset of a numeric payload field.

    Field content is never a framing error: bytes below the offset wrap
    modulo 256, as the device's own byte arithmetic does.
    """
    return (byte - FIELD_OFFSET) & 0xFF


def format_bytes(data: bytes) -> str:
    """Upper-case hex dump used for traffic logging"""
    return data.hex(" ").upper()


@dataclass(frozen=True)
class RequestFrame:
    """A host to device request"""

    command: int
    payload: bytes = b""

    def __post_init__(self) -> None:
        if not 0 <= self.command <= 0xFF:
            raise ValueError(f"Command code {self.command} is not a byte")

    def encode(self) -> bytes:
        """Serialize with markers and trailing checksum"""
        body = _REQUEST_HEADER + bytes([self.command]) + bytes(self.payload) + bytes([TEXT_END])
        return body + bytes([checksum(body)])

    @classmethod
    def decode(cls, data: bytes) -> RequestFrame:
        """
        Parse an encoded request (used by device simulators and tests).

        Raises:
            FrameError: On missing markers
            ChecksumError: On checksum mismatch
        """
        if len(data) < len(_REQUEST_HEADER) + 3:
            raise FrameError(f"Request frame too short ({len(data)} bytes)")
        if data[:len(_REQUEST_HEADER)] != _REQUEST_HEADER:
            raise FrameError("Request frame header invalid")

        body, received = data[:-1], data[-1]
        expected = checksum(body)
        if expected != received:
            raise ChecksumError(
                f"Request checksum mismatch: expected 0x{expected:02X}, got 0x{received:02X}",
                expected=expected,
                received=received,
            )
        if body[-1] != TEXT_END:
            raise FrameError("Request frame missing end-of-text marker")

        command = body[len(_REQUEST_HEADER)]
        return cls(command=command, payload=bytes(body[len(_REQUEST_HEADER) + 1:-1]))

    def __repr__(self) -> str:
        return (
            f"RequestFrame(command=0x{self.command:02X}, "
            f"payload={format_bytes(self.payload) if self.payload else '(empty)'})"
        )


def build_request_frame(command: int, payload: bytes = b"") -> bytes:
    """
    Build a request frame ready to write to the port.

    Args:
        command: Command code byte
        payload: Already encoded payload bytes (may be empty)

    Returns:
        Complete frame including checksum
    """
    return RequestFrame(command, bytes(payload)).encode()


def parse_response_frame(data: bytes) -> bytes:
    """
    Validate a response data frame and return its payload.

    Validation order: start marker and device address, then checksum,
    then the text start and end markers.

    Args:
        data: Complete frame as accumulated from the port

    Returns:
        Bytes strictly between the text start and text end markers

    Raises:
        FrameError: On missing or misplaced markers
        ChecksumError: On checksum mismatch
    """
    view = memoryview(bytes(data))

    if len(view) < 2 or view[0] != RESPONSE_START or view[1] != DEVICE_ADDRESS:
        raise FrameError("Response format invalid: missing start marker or device address")
    if len(view) < MIN_RESPONSE_FRAME:
        raise FrameError(f"Response frame too short ({len(view)} bytes)")

    end = len(view) - 1
    received = view[end]
    expected = checksum(view[:end])
    if expected != received:
        raise ChecksumError(
            f"Response checksum mismatch: expected 0x{expected:02X}, got 0x{received:02X}",
            expected=expected,
            received=received,
        )

    if view[2] != TEXT_START or view[end - 1] != TEXT_END:
        raise FrameError("Response format invalid: text markers misplaced")

    return view[_RESPONSE_HEADER_LEN:end - 1].tobytes()


def find_frame_end(buffer: bytes, start: int = 0) -> Optional[int]:
    """
    Locate the end of a response frame inside an accumulation buffer.

    Payload bytes may equal the end-of-text value, so a frame is complete
    only at an end-of-text marker past the header whose following byte is
    the checksum of everything from the frame start through that marker.

    Args:
        buffer: Bytes accumulated so far
        start: Offset of the frame's first byte

    Returns:
        Offset one past the checksum byte, or None if incomplete
    """
    pos = start + _RESPONSE_HEADER_LEN
    last = len(buffer) - 1
    chk = checksum(buffer[start:pos])
    while pos < last:
        chk ^= buffer[pos]
        if buffer[pos] == TEXT_END and buffer[pos + 1] == chk:
            return pos + 2
        pos += 1
    return None


def has_frame_tail(buffer: bytes, start: int = 0) -> bool:
    """
    True when the buffer ends like a frame (end-of-text then one byte).

    Used once the line has gone quiet to hand a frame with a bad checksum
    to parse_response_frame instead of waiting for more bytes.
    """
    return len(buffer) - start >= MIN_RESPONSE_FRAME and buffer[-2] == TEXT_END
