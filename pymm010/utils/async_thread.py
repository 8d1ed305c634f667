# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
Asynchronous Thread Utilities

Provides:
- connection_executor: Single-worker executor owned by one dispenser connection
- run_in_thread: Execute a blocking call on such an executor without
  blocking the event loop

A command abandoned by its awaiting task keeps its worker thread until the
handshake gives up (up to DispenserConfig.read_deadline). Each connection
has its own worker, so a stuck connection never delays another one.
"""

import asyncio
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from functools import partial
from typing import Any, Callable

logger = logging.getLogger(__name__)

WORKER_PREFIX = 'MM010Worker'


def connection_executor() -> ThreadPoolExecutor:
    """Create the single-worker executor for one connection"""
    return ThreadPoolExecutor(max_workers=1, thread_name_prefix=WORKER_PREFIX)


async def run_in_thread(executor: Executor, func: Callable[..., Any], *args, **kwargs) -> Any:
    """
    Run blocking function on a thread pool executor.

    Args:
        executor: Executor owned by the connection
        func: Blocking callable to execute
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Result of func(*args, **kwargs)

    Example:
        async def main():
            status = await run_in_thread(executor, dispenser.status)
    """
    loop = asyncio.get_running_loop()
    wrapped = partial(func, *args, **kwargs)
    name = getattr(func, '__name__', repr(func))
    logger.debug(f"Executing {name} in thread pool")
    try:
        result = await loop.run_in_executor(executor, wrapped)
    except Exception as e:
        logger.error(f"Thread execution of {name} failed: {e}")
        raise
    logger.debug(f"Completed {name} in thread pool")
    return result
