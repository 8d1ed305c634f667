# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pymm010.interfaces.serial_port

Serial port transport for the MM010 dispenser.

The dispenser line runs 7 data bits, even parity, 1 stop bit. Reads use
the port timeout so the handshake engine regains control periodically.
"""

import logging
from typing import Optional

import serial

from ..core.config import DEFAULT_READ_TIMEOUT
from ..core.constants import Baud
from ..core.exceptions import TransportError, ConnectionClosedError
from .transport import BaseTransport, TransportManager, READ_CHUNK_SIZE

logger = logging.getLogger(__name__)


class SerialTransport(BaseTransport):
    """
    pyserial backed transport.

    Args:
        port: Device path (e.g. /dev/ttyUSB0, COM4)
        baudrate: Line speed
        timeout: Per-read timeout in seconds
        write_timeout: Per-write timeout in seconds
    """

    def __init__(
        self,
        port: str,
        baudrate: int = Baud.B9600,
        timeout: float = DEFAULT_READ_TIMEOUT,
        write_timeout: Optional[float] = None,
    ):
        self.port = port
        self.baudrate = int(baudrate)
        self.timeout = timeout
        self.write_timeout = timeout if write_timeout is None else write_timeout
        self._serial: Optional[serial.Serial] = None

    @property
    def is_open(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def open(self) -> None:
        if self.is_open:
            return
        if not self.port:
            raise TransportError("Serial port path is required")
        try:
            self._serial = serial.Serial(
                port=self.port,
                baudrate=self.baudrate,
                bytesize=serial.SEVENBITS,
                parity=serial.PARITY_EVEN,
                stopbits=serial.STOPBITS_ONE,
                timeout=self.timeout,
                write_timeout=self.write_timeout,
            )
            logger.info(f"Opened serial port {self.port}@{self.baudrate} (7E1)")
        except (serial.SerialException, OSError, ValueError) as e:
            self._serial = None
            raise TransportError(f"Serial open failed: {e}") from e

    def close(self) -> None:
        if not self._serial:
            return
        try:
            self._serial.close()
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Serial close failed: {e}") from e
        finally:
            self._serial = None
            logger.info(f"Closed serial port {self.port}")

    def read(self, max_bytes: int = READ_CHUNK_SIZE) -> bytes:
        if not self.is_open:
            raise ConnectionClosedError("Not connected")
        try:
            waiting = self._serial.in_waiting
            return self._serial.read(min(waiting, max_bytes) or 1)
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Serial read failed: {e}") from e

    def write(self, data: bytes) -> int:
        if not self.is_open:
            raise ConnectionClosedError("Not connected")
        try:
            written = self._serial.write(data)
            self._serial.flush()
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Serial write failed: {e}") from e
        return len(data) if written is None else written

    def __repr__(self) -> str:
        return f"SerialTransport(port={self.port!r}, baudrate={self.baudrate}, open={self.is_open})"


TransportManager.register('serial', SerialTransport)
