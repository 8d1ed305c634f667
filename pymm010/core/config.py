# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pymm010.core.config

Connection configuration for the MM010 dispenser.

The read loop ceiling is expressed as max_read_attempts x read_timeout;
the defaults give 1050 attempts of 5 seconds each.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .constants import Baud
from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_READ_TIMEOUT = 5.0
DEFAULT_MAX_READ_ATTEMPTS = 1050

_TRUE_STRINGS = ("1", "true", "yes", "on")
_FALSE_STRINGS = ("0", "false", "no", "off", "")


@dataclass(frozen=True)
class DispenserConfig:
    """
    Dispenser connection settings.

    Attributes:
        port: Serial device path (e.g. /dev/ttyUSB0 or COM4)
        baudrate: Line speed, one of Baud
        read_timeout: Seconds a single blocking read may wait
        write_timeout: Seconds a single write may wait
        max_read_attempts: Reads allowed per code byte or data frame
        log_traffic: Emit raw traffic lines on the pymm010.traffic logger
        strict_ack: Raise when the acknowledgement write fails
            (False keeps the legacy behaviour of only logging it)
    """

    port: str = ""
    baudrate: int = Baud.B9600
    read_timeout: float = DEFAULT_READ_TIMEOUT
    write_timeout: float = DEFAULT_READ_TIMEOUT
    max_read_attempts: int = DEFAULT_MAX_READ_ATTEMPTS
    log_traffic: bool = False
    strict_ack: bool = True

    def __post_init__(self) -> None:
        if self.baudrate not in set(Baud):
            raise ConfigError(
                f"Unsupported baud rate {self.baudrate}, "
                f"expected one of {[int(b) for b in Baud]}"
            )
        if self.read_timeout <= 0:
            raise ConfigError("read_timeout must be positive")
        if self.write_timeout <= 0:
            raise ConfigError("write_timeout must be positive")
        if self.max_read_attempts < 1:
            raise ConfigError("max_read_attempts must be at least 1")

    @property
    def read_deadline(self) -> float:
        """Worst-case seconds spent waiting for one code byte or frame"""
        return self.max_read_attempts * self.read_timeout

    def with_changes(self, **changes) -> DispenserConfig:
        """Return a copy with the given fields replaced"""
        return replace(self, **changes)

    @classmethod
    def from_env(
        cls,
        prefix: str = "MM010_",
        environ: Optional[Mapping[str, str]] = None,
    ) -> DispenserConfig:
        """
        Build a configuration from environment variables.

        Recognised names (with the default prefix): MM010_PORT,
        MM010_BAUDRATE, MM010_READ_TIMEOUT, MM010_WRITE_TIMEOUT,
        MM010_MAX_READ_ATTEMPTS, MM010_LOG_TRAFFIC, MM010_STRICT_ACK.
        Missing variables keep their defaults.

        Raises:
            ConfigError: On values that do not parse or validate
        """
        env = os.environ if environ is None else environ
        kwargs = {}

        def lookup(name: str) -> Optional[str]:
            return env.get(prefix + name)

        try:
            if lookup("PORT") is not None:
                kwargs["port"] = lookup("PORT")
            if lookup("BAUDRATE") is not None:
                kwargs["baudrate"] = int(lookup("BAUDRATE"))
            if lookup("READ_TIMEOUT") is not None:
                kwargs["read_timeout"] = float(lookup("READ_TIMEOUT"))
            if lookup("WRITE_TIMEOUT") is not None:
                kwargs["write_timeout"] = float(lookup("WRITE_TIMEOUT"))
            if lookup("MAX_READ_ATTEMPTS") is not None:
                kwargs["max_read_attempts"] = int(lookup("MAX_READ_ATTEMPTS"))
        except ValueError as e:
            raise ConfigError(f"Invalid environment configuration: {e}") from e

        for name, field_name in (("LOG_TRAFFIC", "log_traffic"),
                                 ("STRICT_ACK", "strict_ack")):
            raw = lookup(name)
            if raw is not None:
                kwargs[field_name] = _parse_bool(prefix + name, raw)

        config = cls(**kwargs)
        logger.debug(f"Loaded configuration from environment: {config}")
        return config


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_STRINGS:
        return True
    if value in _FALSE_STRINGS:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


DEFAULT_CONFIG = DispenserConfig()
