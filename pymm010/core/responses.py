# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pymm010.core.responses

Typed results decoded from MM010 reply payloads.

Every operation reply starts with a result/status byte, optionally followed
by numeric fields carried with the +0x20 offset. Parameter replies carry an
acceptance byte followed by ASCII text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple, Union

from .constants import (
    StatusCode,
    PARAMETER_ACCEPTED,
    decode_status_code,
    describe_status,
)
from .exceptions import FrameError, IllegalCommandError
from .framing import decode_field, encode_field

logger = logging.getLogger(__name__)

MAX_PARAMETER_ITEM = 999


def _require(payload: bytes, length: int, what: str) -> None:
    if len(payload) < length:
        raise FrameError(
            f"{what} reply too short: expected at least {length} bytes, got {len(payload)}"
        )


@dataclass(frozen=True)
class Status:
    """Machine status (command 0x40)"""

    feed_sensor_blocked: bool
    exit_sensor_blocked: bool
    reset_since_last_status: bool
    timing_wheel_sensor_blocked: bool
    calibrating_double_detect: bool
    average_thickness: int
    average_length: int

    @classmethod
    def from_payload(cls, payload: bytes) -> Status:
        _require(payload, 4, "Status")
        flags, extra = payload[0], payload[1]
        return cls(
            feed_sensor_blocked=bool(flags & (1 << 0)),
            exit_sensor_blocked=bool(flags & (1 << 1)),
            reset_since_last_status=bool(flags & (1 << 3)),
            timing_wheel_sensor_blocked=bool(flags & (1 << 4)),
            calibrating_double_detect=bool(extra & (1 << 4)),
            average_thickness=decode_field(payload[2]),
            average_length=decode_field(payload[3]),
        )


@dataclass(frozen=True)
class CommandResult:
    """Reply carrying only a result code"""

    status: Union[StatusCode, int]

    @property
    def ok(self) -> bool:
        return self.status == StatusCode.GOOD_OPERATION

    @property
    def description(self) -> str:
        return describe_status(self.status)

    @classmethod
    def from_payload(cls, payload: bytes) -> CommandResult:
        _require(payload, 1, "Command")
        return cls(status=decode_status_code(payload[0]))


@dataclass(frozen=True)
class PurgeResult(CommandResult):
    """Purge reply: result code and number of notes purged"""

    purged: int = 0

    @classmethod
    def from_payload(cls, payload: bytes) -> PurgeResult:
        _require(payload, 2, "Purge")
        return cls(status=decode_status_code(payload[0]), purged=decode_field(payload[1]))


@dataclass(frozen=True)
class DispenseResult(CommandResult):
    """Dispense style reply: result code, notes dispensed, notes rejected"""

    dispensed: int = 0
    rejected: int = 0

    @classmethod
    def from_payload(cls, payload: bytes) -> DispenseResult:
        _require(payload, 3, "Dispense")
        return cls(
            status=decode_status_code(payload[0]),
            dispensed=decode_field(payload[1]),
            rejected=decode_field(payload[2]),
        )


@dataclass(frozen=True)
class DiagnosticResult(CommandResult):
    """
    Configuration/diagnostic reply.

    values holds the data bytes with the +0x20 offset removed; raw keeps
    them as received for fields that carry sensor bits.
    """

    values: Tuple[int, ...] = ()
    raw: bytes = b""

    @classmethod
    def from_payload(cls, payload: bytes) -> DiagnosticResult:
        _require(payload, 1, "Diagnostic")
        return cls(
            status=decode_status_code(payload[0]),
            values=tuple(decode_field(b) for b in payload[1:]),
            raw=bytes(payload[1:]),
        )


@dataclass(frozen=True)
class ParameterValue:
    """Parameter read/write reply"""

    item: int
    value: str


def encode_count(count: int) -> bytes:
    """Encode a note count argument as a single offset byte"""
    return bytes([encode_field(count)])


def format_parameter_request(item: int, value: Union[str, int, None] = None) -> bytes:
    """
    Build the textual parameter payload.

    Returns:
        b"D/iii" for reads, b"D/iii/value" for writes

    Raises:
        ValueError: On item numbers outside 0-999 or non-ASCII values
    """
    if not 0 <= int(item) <= MAX_PARAMETER_ITEM:
        raise ValueError(f"Parameter item {item} out of range 0-{MAX_PARAMETER_ITEM}")
    text = f"D/{int(item):03d}"
    if value is not None:
        text += f"/{value}"
    try:
        return text.encode("ascii")
    except UnicodeEncodeError as e:
        raise ValueError(f"Parameter value must be ASCII: {value!r}") from e


def parse_parameter_reply(item: int, payload: bytes) -> ParameterValue:
    """
    Validate the acceptance byte of a parameter reply and extract its text.

    The text after the acceptance byte is either the bare value or an echo of
    the request ("D/iii/value"); the echo prefix is stripped.

    Raises:
        IllegalCommandError: If the device did not accept the operation
        FrameError: If the reply is empty or not ASCII
    """
    _require(payload, 1, "Parameter")
    marker = payload[0]
    if marker != PARAMETER_ACCEPTED:
        raise IllegalCommandError(
            f"Parameter operation on item {int(item):03d} rejected: {describe_status(marker)}",
            code=marker,
        )
    try:
        text = payload[1:].decode("ascii")
    except UnicodeDecodeError as e:
        raise FrameError(f"Parameter reply is not ASCII: {payload[1:].hex(' ')}") from e

    prefix = f"D/{int(item):03d}"
    if text.startswith(prefix + "/"):
        text = text[len(prefix) + 1:]
    elif text == prefix:
        text = ""
    return ParameterValue(item=int(item), value=text)
