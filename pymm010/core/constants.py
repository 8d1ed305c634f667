# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pymm010.core.constants

Wire-level constants for the MM010 dispenser protocol.

Defines:
- Frame markers and the device address byte
- Response code bytes (ACK/NACK/EOT)
- Command codes, one per dispenser operation
- Result status codes and their descriptions
- Supported baud rates and well-known parameter items
"""

from enum import IntEnum
from typing import Dict, Union

# Frame markers
REQUEST_START = 0x04
RESPONSE_START = 0x01
DEVICE_ADDRESS = 0x30
TEXT_START = 0x02
TEXT_END = 0x03

# Numeric payload fields travel ASCII shifted
FIELD_OFFSET = 0x20
MAX_FIELD_VALUE = 0xFF - FIELD_OFFSET

# Smallest response frame: SOH ID STX ETX CHK
MIN_RESPONSE_FRAME = 5


class ResponseCode(IntEnum):
    """Single code byte read at the start and end of every reply"""
    ERROR = 0x00   # Anything unrecognized
    ACK = 0x06
    NACK = 0x15
    EOT = 0x04

    @classmethod
    def from_byte(cls, value: int) -> 'ResponseCode':
        if value in (cls.ACK, cls.NACK, cls.EOT):
            return cls(value)
        return cls.ERROR


class CommandCode(IntEnum):
    """Request command bytes"""
    STATUS = 0x40
    PURGE = 0x41
    DISPENSE = 0x42
    TEST_DISPENSE = 0x43
    RESET = 0x44
    LAST_STATUS = 0x45
    CONFIGURATION_STATUS = 0x46
    DOUBLE_DETECT_DIAGNOSTICS = 0x47
    SENSOR_DIAGNOSTICS = 0x48
    SINGLE_NOTE_DISPENSE = 0x4A
    SINGLE_NOTE_EJECT = 0x4B
    READ_PARAMETER = 0x52
    TEST_MODE = 0x54
    WRITE_PARAMETER = 0x57


class StatusCode(IntEnum):
    """Result code carried in the first payload byte of operation replies"""
    GOOD_OPERATION = 0x20
    FEED_FAILURE = 0x21
    MISTRACKED_NOTE_AT_EXIT = 0x24
    TOO_LONG_AT_EXIT = 0x25
    BLOCKED_EXIT = 0x26
    TRANSPORT_ERROR = 0x2A
    DOUBLE_DETECT_ERROR = 0x2C
    DIVERTED_ERROR = 0x2D
    WRONG_COUNT = 0x2E
    NOTE_MISSING_AT_DD = 0x2F
    REJECT_RATE_EXCEEDED = 0x30
    NON_VOLATILE_RAM_ERROR = 0x34
    OPERATION_TIMEOUT = 0x36
    INTERNAL_QUEUE_ERROR = 0x37
    INVALID_COMMAND = 0x4F


STATUS_DESCRIPTIONS: Dict[int, str] = {
    StatusCode.GOOD_OPERATION: "Good operation",
    StatusCode.FEED_FAILURE: "Feed failure",
    StatusCode.MISTRACKED_NOTE_AT_EXIT: "Mistracked note at exit",
    StatusCode.TOO_LONG_AT_EXIT: "Note too long at exit",
    StatusCode.BLOCKED_EXIT: "Exit blocked",
    StatusCode.TRANSPORT_ERROR: "Note transport error",
    StatusCode.DOUBLE_DETECT_ERROR: "Double detect error",
    StatusCode.DIVERTED_ERROR: "Note diverted",
    StatusCode.WRONG_COUNT: "Wrong count",
    StatusCode.NOTE_MISSING_AT_DD: "Note missing at double detect",
    StatusCode.REJECT_RATE_EXCEEDED: "Reject rate exceeded",
    StatusCode.NON_VOLATILE_RAM_ERROR: "Non-volatile RAM error",
    StatusCode.OPERATION_TIMEOUT: "Operation timeout",
    StatusCode.INTERNAL_QUEUE_ERROR: "Internal queue error",
    StatusCode.INVALID_COMMAND: "Invalid command",
}

# First payload byte of an accepted parameter read/write
PARAMETER_ACCEPTED = StatusCode.GOOD_OPERATION


class Baud(IntEnum):
    """Baud rates supported by the dispenser"""
    B1200 = 1200
    B2400 = 2400
    B4800 = 4800
    B9600 = 9600


class ParameterItem(IntEnum):
    """Well-known parameter items (any 0-999 item may be addressed)"""
    PROGRAM_ID = 1
    BAUD_RATE = 2
    DISPENSE_COUNTER = 3
    REJECT_COUNTER = 4
    MACHINE_STATUS = 5


def decode_status_code(value: int) -> Union[StatusCode, int]:
    """Map a raw result byte to StatusCode, keeping unknown bytes as int"""
    try:
        return StatusCode(value)
    except ValueError:
        return value


def describe_status(value: int) -> str:
    """Human readable text for a result byte"""
    return STATUS_DESCRIPTIONS.get(value, f"Unknown status 0x{value:02X}")
