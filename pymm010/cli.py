# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pymm010.cli

Command line access to an MM010 dispenser.

Run with:
    pymm010 --port /dev/ttyUSB0 status
    pymm010 --port COM4 --baud 9600 --log-traffic dispense 2
    pymm010 --port /dev/ttyUSB0 read-param 1

Settings not given on the command line fall back to MM010_* environment
variables (see DispenserConfig.from_env).
"""

import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from .core.config import DispenserConfig
from .core.constants import Baud, describe_status
from .core.exceptions import MM010Error
from .core.responses import CommandResult
from .dispenser import MM010Dispenser
from .utils import configure_logging

logger = logging.getLogger(__name__)

# command name -> (MM010Dispenser method, argument names)
COMMANDS = {
    "status": ("status", ()),
    "purge": ("purge", ()),
    "dispense": ("dispense", ("count",)),
    "test-dispense": ("test_dispense", ("count",)),
    "reset": ("reset", ()),
    "last-status": ("last_status", ()),
    "config-status": ("configuration_status", ()),
    "dd-diagnostics": ("double_detect_diagnostics", ()),
    "sensor-diagnostics": ("sensor_diagnostics", ()),
    "single-dispense": ("single_note_dispense", ()),
    "single-eject": ("single_note_eject", ()),
    "test-mode": ("test_mode", ()),
    "read-param": ("read_parameter", ("item",)),
    "write-param": ("write_parameter", ("item", "value")),
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pymm010",
        description="Control an MM010 banknote dispenser over a serial line",
    )
    parser.add_argument("--port", help="Serial device path (default: $MM010_PORT)")
    parser.add_argument("--baud", type=int, choices=[int(b) for b in Baud],
                        help="Baud rate (default: 9600)")
    parser.add_argument("--timeout", type=float, help="Per-read timeout in seconds")
    parser.add_argument("--attempts", type=int, help="Read attempts per reply")
    parser.add_argument("--log-traffic", action="store_true", help="Log raw frames")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True
    for name, (_, arg_names) in COMMANDS.items():
        cmd = sub.add_parser(name, help=f"Run the {name} operation")
        for arg_name in arg_names:
            if arg_name == "value":
                cmd.add_argument(arg_name, help="Value text to write")
            else:
                cmd.add_argument(arg_name, type=int)
    return parser


def build_config(args: argparse.Namespace) -> DispenserConfig:
    """Merge command line options over the environment configuration"""
    config = DispenserConfig.from_env()
    changes = {}
    if args.port:
        changes["port"] = args.port
    if args.baud:
        changes["baudrate"] = args.baud
    if args.timeout is not None:
        changes["read_timeout"] = args.timeout
        changes["write_timeout"] = args.timeout
    if args.attempts is not None:
        changes["max_read_attempts"] = args.attempts
    if args.log_traffic:
        changes["log_traffic"] = True
    return config.with_changes(**changes) if changes else config


def format_result(result) -> str:
    if result is None:
        return "OK"
    if dataclasses.is_dataclass(result):
        lines = []
        for field in dataclasses.fields(result):
            value = getattr(result, field.name)
            lines.append(f"{field.name}: {value}")
        if isinstance(result, CommandResult):
            lines.append(f"description: {describe_status(result.status)}")
        return "\n".join(lines)
    return str(result)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(args.log_level)
        config = build_config(args)
    except ValueError as e:
        parser.error(str(e))

    if not config.port:
        parser.error("no serial port given (use --port or MM010_PORT)")

    method_name, arg_names = COMMANDS[args.command]
    call_args = [getattr(args, name) for name in arg_names]

    try:
        with MM010Dispenser(config) as dispenser:
            result = getattr(dispenser, method_name)(*call_args)
    except MM010Error as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid argument: {e}")
        return 2

    print(format_result(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
