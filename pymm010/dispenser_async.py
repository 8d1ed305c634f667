# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pymm010.dispenser_async

asyncio facade over MM010Dispenser.

The protocol itself stays synchronous: each command runs on a worker thread
through run_in_thread, still serialized by the connection lock. The caller
may bound how long it waits with a deadline. When the deadline expires the
awaiting task is cancelled but the worker thread finishes its handshake; the
next command on the same connection waits for it. Each facade owns a
single worker thread, so other connections are not held up.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional, Union

import async_timeout

from .core.config import DispenserConfig, DEFAULT_CONFIG
from .core.responses import (
    Status,
    CommandResult,
    PurgeResult,
    DispenseResult,
    DiagnosticResult,
    ParameterValue,
)
from .dispenser import MM010Dispenser
from .interfaces.transport import BaseTransport
from .utils.async_thread import connection_executor, run_in_thread

logger = logging.getLogger(__name__)


class AsyncMM010Dispenser:
    """
    Asynchronous MM010 dispenser client.

    Args:
        config: Connection settings
        transport: Optional pre-built transport
        deadline: Seconds to wait for any single command (None = config.read_deadline)
    """

    def __init__(
        self,
        config: DispenserConfig = DEFAULT_CONFIG,
        transport: Optional[BaseTransport] = None,
        deadline: Optional[float] = None,
    ):
        self.dispenser = MM010Dispenser(config, transport)
        self.deadline = deadline
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def is_open(self) -> bool:
        return self.dispenser.is_open

    async def _run(self, func: Callable[..., Any], *args) -> Any:
        limit = self.deadline if self.deadline is not None else self.dispenser.config.read_deadline
        async with async_timeout.timeout(limit):
            return await run_in_thread(self._get_executor(), func, *args)

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = connection_executor()
        return self._executor

    async def open(self) -> 'AsyncMM010Dispenser':
        await self._run(self.dispenser.open)
        return self

    async def close(self) -> None:
        """Close the connection and release its worker thread"""
        executor = self._get_executor()
        await run_in_thread(executor, self.dispenser.close)
        executor.shutdown(wait=False)
        self._executor = None

    async def __aenter__(self):
        return await self.open()

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def status(self) -> Status:
        return await self._run(self.dispenser.status)

    async def purge(self) -> PurgeResult:
        return await self._run(self.dispenser.purge)

    async def dispense(self, count: int) -> DispenseResult:
        return await self._run(self.dispenser.dispense, count)

    async def test_dispense(self, count: int) -> DispenseResult:
        return await self._run(self.dispenser.test_dispense, count)

    async def reset(self) -> None:
        await self._run(self.dispenser.reset)

    async def last_status(self) -> DispenseResult:
        return await self._run(self.dispenser.last_status)

    async def configuration_status(self) -> DiagnosticResult:
        return await self._run(self.dispenser.configuration_status)

    async def double_detect_diagnostics(self) -> DiagnosticResult:
        return await self._run(self.dispenser.double_detect_diagnostics)

    async def sensor_diagnostics(self) -> DiagnosticResult:
        return await self._run(self.dispenser.sensor_diagnostics)

    async def single_note_dispense(self) -> DispenseResult:
        return await self._run(self.dispenser.single_note_dispense)

    async def single_note_eject(self) -> CommandResult:
        return await self._run(self.dispenser.single_note_eject)

    async def test_mode(self) -> CommandResult:
        return await self._run(self.dispenser.test_mode)

    async def read_parameter(self, item: int) -> ParameterValue:
        return await self._run(self.dispenser.read_parameter, item)

    async def write_parameter(self, item: int, value: Union[str, int]) -> ParameterValue:
        return await self._run(self.dispenser.write_parameter, item, value)

    def statistics(self) -> Dict[str, int]:
        return self.dispenser.statistics()

    def __repr__(self) -> str:
        return f"AsyncMM010Dispenser({self.dispenser!r})"
