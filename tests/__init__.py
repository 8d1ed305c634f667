# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
PyMM010 Test Package Initialization

Provides:
- ScriptedTransport: in-memory transport replaying canned reads
- Reply builders for response frames and full handshakes
"""

from typing import List, Optional, Union

from pymm010.core.constants import (
    RESPONSE_START,
    DEVICE_ADDRESS,
    TEXT_START,
    TEXT_END,
    ResponseCode,
)
from pymm010.core.exceptions import ConnectionClosedError
from pymm010.core.framing import checksum
from pymm010.interfaces.transport import BaseTransport, READ_CHUNK_SIZE

ACK = bytes([ResponseCode.ACK])
NAK = bytes([ResponseCode.NACK])
EOT = bytes([ResponseCode.EOT])

Chunk = Union[bytes, Exception]


def response_frame(payload: bytes) -> bytes:
    """Encode a device response data frame around payload"""
    body = bytes([RESPONSE_START, DEVICE_ADDRESS, TEXT_START]) + payload + bytes([TEXT_END])
    return body + bytes([checksum(body)])


def full_reply(payload: bytes) -> List[bytes]:
    """Read chunks of a well-behaved reply: ACK, data frame, EOT"""
    return [ACK, response_frame(payload), EOT]


class ScriptedTransport(BaseTransport):
    """
    Transport that replays a scripted list of read results.

    Each read() consumes one entry: bytes are returned (truncated to
    max_bytes, remainder kept for the next read), exceptions are raised.
    Once the script is exhausted reads time out (return b"").
    """

    def __init__(self, reads: Optional[List[Chunk]] = None, open_: bool = True,
                 write_error: Optional[Exception] = None):
        self.reads: List[Chunk] = list(reads or [])
        self.writes: List[bytes] = []
        self.read_calls = 0
        self.write_error = write_error
        self._open = open_

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self._open = False

    def feed(self, *chunks: Chunk) -> None:
        self.reads.extend(chunks)

    def read(self, max_bytes: int = READ_CHUNK_SIZE) -> bytes:
        if not self._open:
            raise ConnectionClosedError("Not connected")
        self.read_calls += 1
        if not self.reads:
            return b""
        chunk = self.reads.pop(0)
        if isinstance(chunk, Exception):
            raise chunk
        if len(chunk) > max_bytes:
            self.reads.insert(0, chunk[max_bytes:])
            chunk = chunk[:max_bytes]
        return chunk

    def write(self, data: bytes) -> int:
        if not self._open:
            raise ConnectionClosedError("Not connected")
        if self.write_error is not None:
            raise self.write_error
        self.writes.append(bytes(data))
        return len(data)

    @property
    def written(self) -> bytes:
        return b"".join(self.writes)
