# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pymm010.core.handshake

MM010 request/response handshake.

Handles:
- Request transmission (single write per frame)
- Response code byte detection (ACK/NACK/EOT)
- Bounded accumulation of the response data frame
- Host acknowledgement and the terminating EOT wait
- Per-call state tracking and traffic statistics

A full reply is always ACK -> data frame -> (host ACK) -> EOT. Reads are
bounded by DispenserConfig.max_read_attempts; each attempt is one blocking
transport read that may return nothing when its timeout expires.

Bytes received past a code byte or a complete frame stay buffered and are
consumed by the next read of the same cycle. They are discarded when the
next request is sent.
"""

import logging
import threading
from enum import Enum
from typing import Optional, Type

from .config import DispenserConfig, DEFAULT_CONFIG
from .constants import ResponseCode
from .exceptions import (
    MM010Error,
    ConnectionClosedError,
    RetryExhaustedError,
    ResponseNotAckError,
    ResponseNotEotError,
    TransportError,
)
from .framing import (
    build_request_frame,
    parse_response_frame,
    find_frame_end,
    has_frame_tail,
    format_bytes,
)
from ..interfaces.transport import BaseTransport, READ_CHUNK_SIZE
from ..utils.threadsafe import TrafficStatistics

logger = logging.getLogger(__name__)
traffic_logger = logging.getLogger("pymm010.traffic")

_CODE_NAMES = {
    ResponseCode.ACK: "ACK",
    ResponseCode.NACK: "NAK",
    ResponseCode.EOT: "EOT",
}


class HandshakeState(Enum):
    """Progress of one command cycle"""
    IDLE = 0
    REQUEST_SENT = 1
    AWAITING_ACK = 2
    AWAITING_DATA = 3
    AWAITING_EOT = 4
    COMPLETE = 5
    FAILED = 6


class HandshakeEngine:
    """
    Protocol engine bound to one transport.

    The engine does not open or close the transport; it only checks that it
    is open before touching it. transact() holds the engine lock for the
    whole send + response cycle, so concurrent callers are serialized.

    Args:
        transport: Byte channel to the dispenser
        config: Read bounds, traffic logging and ACK strictness
    """

    def __init__(self, transport: BaseTransport, config: DispenserConfig = DEFAULT_CONFIG):
        self.transport = transport
        self.config = config
        self.lock = threading.RLock()
        self.stats = TrafficStatistics()

        self.state = HandshakeState.IDLE
        self.failure: Optional[Type[MM010Error]] = None
        self.last_code_byte: Optional[int] = None
        self._pending = bytearray()

    # ---------- request side ----------
    def send_request(self, command: int, payload: bytes = b"") -> None:
        """
        Build a request frame and write it in one write.

        Raises:
            ConnectionClosedError: If the transport is not open
            TransportError: On write failure
        """
        self._ensure_open()
        frame = build_request_frame(command, payload)
        self._pending.clear()

        self._log_traffic("-> %s", format_bytes(frame))
        self.transport.write(frame)
        self.stats.frames_sent.increment()
        logger.debug(f"Sent request (cmd=0x{command:02X}, len={len(payload)})")

    def ack(self) -> None:
        """Send a bare ACK code byte"""
        self._write_code(ResponseCode.ACK)
        self.stats.acks_sent.increment()

    def nack(self) -> None:
        """Send a bare NAK code byte"""
        self._write_code(ResponseCode.NACK)

    # ---------- response side ----------
    def read_response_code(self) -> ResponseCode:
        """
        Read one response code byte.

        Unrecognized bytes are returned as ResponseCode.ERROR; the raw value
        is kept in last_code_byte.

        Raises:
            TransportError: On read failure
            RetryExhaustedError: If no byte arrived within the attempt ceiling
        """
        attempts = 0
        while not self._pending:
            if attempts >= self.config.max_read_attempts:
                raise RetryExhaustedError(
                    f"Read tries exceeded waiting for response code ({attempts} attempts)",
                    attempts=attempts,
                )
            attempts += 1
            self._pending.extend(self._read_chunk())

        byte = self._pending.pop(0)
        self.last_code_byte = byte
        code = ResponseCode.from_byte(byte)
        if code is ResponseCode.ERROR:
            self._log_traffic("<- ?? %02X", byte)
        else:
            self._log_traffic("<- %s", _CODE_NAMES[code])
        return code

    def read_response_data(self) -> bytes:
        """
        Accumulate and validate one response data frame.

        Returns:
            Frame payload (between the text markers)

        Raises:
            TransportError: On read failure
            RetryExhaustedError: If the frame did not complete in time
            FrameError: On misplaced markers
            ChecksumError: On checksum mismatch
        """
        attempts = 0
        end = find_frame_end(self._pending)
        while end is None:
            if attempts >= self.config.max_read_attempts:
                raise RetryExhaustedError(
                    f"Read tries exceeded waiting for response data "
                    f"({attempts} attempts, {len(self._pending)} bytes buffered)",
                    attempts=attempts,
                )
            attempts += 1
            chunk = self._read_chunk()
            if not chunk and has_frame_tail(self._pending):
                # line is quiet on a frame whose checksum does not match
                end = len(self._pending)
                break
            self._pending.extend(chunk)
            end = find_frame_end(self._pending)

        raw = bytes(self._pending[:end])
        del self._pending[:end]

        payload = parse_response_frame(raw)
        self._log_traffic("<- %s", format_bytes(payload))
        self.stats.frames_received.increment()
        return payload

    def read_response(self) -> bytes:
        """
        Run the full reply handshake: ACK, data frame, host ACK, EOT.

        Returns:
            Validated payload of the data frame

        Raises:
            ResponseNotAckError: First code byte was not ACK
            ResponseNotEotError: Closing code byte was not EOT
            MM010Error: Any transport, retry or frame error on the way
        """
        try:
            self.state = HandshakeState.AWAITING_ACK
            code = self.read_response_code()
            if code is not ResponseCode.ACK:
                raise ResponseNotAckError(
                    f"Response not ACK (got 0x{self.last_code_byte:02X})",
                    code=self.last_code_byte,
                )

            self.state = HandshakeState.AWAITING_DATA
            payload = self.read_response_data()
            self._acknowledge()

            self.state = HandshakeState.AWAITING_EOT
            code = self.read_response_code()
            if code is not ResponseCode.EOT:
                raise ResponseNotEotError(
                    f"Response not EOT (got 0x{self.last_code_byte:02X})",
                    code=self.last_code_byte,
                )
        except MM010Error as e:
            self._fail(e)
            raise

        self.state = HandshakeState.COMPLETE
        return payload

    def transact(self, command: int, payload: bytes = b"", expect_response: bool = True) -> Optional[bytes]:
        """
        Send a request and, unless told otherwise, read the full reply.

        The engine lock is held for the whole exchange.

        Args:
            command: Command code
            payload: Encoded payload bytes
            expect_response: False for commands the device does not answer

        Returns:
            Reply payload, or None when no response is expected
        """
        with self.lock:
            self.state = HandshakeState.IDLE
            self.failure = None
            try:
                self.send_request(command, payload)
            except MM010Error as e:
                self._fail(e)
                raise
            self.state = HandshakeState.REQUEST_SENT

            if not expect_response:
                self.state = HandshakeState.COMPLETE
                return None
            return self.read_response()

    def reset_buffer(self) -> None:
        """Drop any buffered, unconsumed bytes"""
        self._pending.clear()

    # ---------- internals ----------
    def _ensure_open(self) -> None:
        if not self.transport.is_open:
            raise ConnectionClosedError("Connection is not open")

    def _read_chunk(self) -> bytes:
        self._ensure_open()
        return self.transport.read(READ_CHUNK_SIZE)

    def _write_code(self, code: ResponseCode) -> None:
        self._ensure_open()
        self._log_traffic("-> %s", _CODE_NAMES[code])
        self.transport.write(bytes([code]))

    def _acknowledge(self) -> None:
        try:
            self.ack()
        except TransportError as e:
            if self.config.strict_ack:
                raise
            logger.warning(f"Acknowledgement write failed, continuing: {e}")

    def _fail(self, error: MM010Error) -> None:
        self.state = HandshakeState.FAILED
        self.failure = type(error)
        self.stats.errors.increment()
        logger.debug(f"Handshake failed: {error}")

    def _log_traffic(self, msg: str, *args) -> None:
        if self.config.log_traffic:
            traffic_logger.info(msg, *args)

    def __repr__(self) -> str:
        return f"HandshakeEngine(transport={self.transport!r}, state={self.state.name})"
