# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pymm010.dispenser

MM010 banknote dispenser command surface.

Each operation sends one request frame and runs one full reply handshake
(ACK -> data -> host ACK -> EOT) while holding the connection lock, then
decodes the reply payload into a typed result. There is no state shared
between calls apart from the open/closed connection.

Usage::

    with open_connection("/dev/ttyUSB0", Baud.B9600) as dispenser:
        print(dispenser.status())
        result = dispenser.dispense(3)
"""

import logging
from typing import Dict, Optional, Union

from .core.config import DispenserConfig, DEFAULT_CONFIG
from .core.constants import Baud, CommandCode
from .core.exceptions import ConnectionClosedError
from .core.handshake import HandshakeEngine, HandshakeState
from .core.responses import (
    Status,
    CommandResult,
    PurgeResult,
    DispenseResult,
    DiagnosticResult,
    ParameterValue,
    encode_count,
    format_parameter_request,
    parse_parameter_reply,
)
from .interfaces.serial_port import SerialTransport
from .interfaces.transport import BaseTransport

logger = logging.getLogger(__name__)


class MM010Dispenser:
    """
    Connection to one MM010 dispenser.

    Args:
        config: Connection settings (port path, baud rate, read bounds)
        transport: Pre-built transport; a SerialTransport is created from
            config when omitted

    Concurrent calls on one instance are serialized by the handshake
    engine lock; close() waits for an in-flight command to finish.
    """

    def __init__(
        self,
        config: DispenserConfig = DEFAULT_CONFIG,
        transport: Optional[BaseTransport] = None,
    ):
        self.config = config
        if transport is None:
            transport = SerialTransport(
                config.port,
                baudrate=config.baudrate,
                timeout=config.read_timeout,
                write_timeout=config.write_timeout,
            )
        self.transport = transport
        self.engine = HandshakeEngine(transport, config)

    # ---------- lifecycle ----------
    @property
    def is_open(self) -> bool:
        return self.transport.is_open

    def open(self) -> 'MM010Dispenser':
        """Open the transport (no-op when already open)"""
        with self.engine.lock:
            if not self.transport.is_open:
                self.transport.open()
                self.engine.reset_buffer()
                logger.info(f"Dispenser connection opened on {self.config.port or self.transport!r}")
        return self

    def close(self) -> None:
        """Close the transport once no command is in flight"""
        with self.engine.lock:
            if self.transport.is_open:
                self.transport.close()
                logger.info("Dispenser connection closed")
            self.engine.reset_buffer()

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    # ---------- operations ----------
    def status(self) -> Status:
        """Query sensor flags and average note dimensions"""
        return Status.from_payload(self._command(CommandCode.STATUS))

    def purge(self) -> PurgeResult:
        """Move any notes in the transport to the reject bin"""
        return PurgeResult.from_payload(self._command(CommandCode.PURGE))

    def dispense(self, count: int) -> DispenseResult:
        """Dispense count notes to the exit"""
        return DispenseResult.from_payload(
            self._command(CommandCode.DISPENSE, encode_count(count))
        )

    def test_dispense(self, count: int) -> DispenseResult:
        """Dispense count notes straight to the reject bin"""
        return DispenseResult.from_payload(
            self._command(CommandCode.TEST_DISPENSE, encode_count(count))
        )

    def reset(self) -> None:
        """
        Restart the dispenser.

        The device reboots instead of answering, so only the request is sent.
        """
        self._ensure_open()
        self.engine.transact(CommandCode.RESET, expect_response=False)
        logger.info("Reset request sent")

    def last_status(self) -> DispenseResult:
        """Result of the most recent dispense operation"""
        return DispenseResult.from_payload(self._command(CommandCode.LAST_STATUS))

    def configuration_status(self) -> DiagnosticResult:
        """Configuration switches and firmware settings"""
        return DiagnosticResult.from_payload(self._command(CommandCode.CONFIGURATION_STATUS))

    def double_detect_diagnostics(self) -> DiagnosticResult:
        """Double detect sensor readings"""
        return DiagnosticResult.from_payload(self._command(CommandCode.DOUBLE_DETECT_DIAGNOSTICS))

    def sensor_diagnostics(self) -> DiagnosticResult:
        """Feed, exit and timing wheel sensor readings"""
        return DiagnosticResult.from_payload(self._command(CommandCode.SENSOR_DIAGNOSTICS))

    def single_note_dispense(self) -> DispenseResult:
        """Pick one note and hold it before the exit"""
        return DispenseResult.from_payload(self._command(CommandCode.SINGLE_NOTE_DISPENSE))

    def single_note_eject(self) -> CommandResult:
        """Eject the note held by single_note_dispense"""
        return CommandResult.from_payload(self._command(CommandCode.SINGLE_NOTE_EJECT))

    def test_mode(self) -> CommandResult:
        """Enter the dispenser's test mode"""
        return CommandResult.from_payload(self._command(CommandCode.TEST_MODE))

    def read_parameter(self, item: int) -> ParameterValue:
        """
        Read a parameter item.

        Raises:
            IllegalCommandError: If the device rejects the read
        """
        payload = self._command(CommandCode.READ_PARAMETER, format_parameter_request(item))
        return parse_parameter_reply(item, payload)

    def write_parameter(self, item: int, value: Union[str, int]) -> ParameterValue:
        """
        Write a parameter item.

        Raises:
            IllegalCommandError: If the device rejects the write
        """
        payload = self._command(CommandCode.WRITE_PARAMETER, format_parameter_request(item, value))
        return parse_parameter_reply(item, payload)

    def ack(self) -> None:
        """Send a bare ACK to the device"""
        with self.engine.lock:
            self.engine.ack()

    def nack(self) -> None:
        """Send a bare NAK to the device"""
        with self.engine.lock:
            self.engine.nack()

    # ---------- introspection ----------
    @property
    def state(self) -> HandshakeState:
        """State reached by the most recent command"""
        return self.engine.state

    def statistics(self) -> Dict[str, int]:
        """Frames sent/received, ACKs sent and failed cycles"""
        return self.engine.stats.snapshot()

    # ---------- internals ----------
    def _ensure_open(self) -> None:
        if not self.transport.is_open:
            raise ConnectionClosedError("Connection is not open")

    def _command(self, command: CommandCode, payload: bytes = b"") -> bytes:
        self._ensure_open()
        logger.debug(f"Running {command.name}")
        return self.engine.transact(command, payload)

    def __repr__(self) -> str:
        return f"MM010Dispenser(port={self.config.port!r}, open={self.is_open})"


def open_connection(
    path: str,
    baud: int = Baud.B9600,
    log_traffic: bool = False,
    **options,
) -> MM010Dispenser:
    """
    Open a dispenser connection on a serial port.

    Args:
        path: Serial device path
        baud: Line speed
        log_traffic: Log raw traffic on the pymm010.traffic logger
        **options: Further DispenserConfig fields

    Returns:
        An open MM010Dispenser

    Raises:
        TransportError: If the port cannot be opened
        ConfigError: On invalid settings
    """
    config = DispenserConfig(port=path, baudrate=baud, log_traffic=log_traffic, **options)
    return MM010Dispenser(config).open()
