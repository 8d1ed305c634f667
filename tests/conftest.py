# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
Shared pytest fixtures and configuration.
"""

import logging
from typing import Generator

import pytest

from pymm010.core.config import DispenserConfig
from pymm010.core.handshake import HandshakeEngine
from pymm010.dispenser import MM010Dispenser

from . import ScriptedTransport


@pytest.fixture(scope="session", autouse=True)
def configure_logging() -> Generator[None, None, None]:
    """Configure logging for all tests"""
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    yield


@pytest.fixture
def config() -> DispenserConfig:
    """Short read bound so exhausted loops finish quickly"""
    return DispenserConfig(port="/dev/ttyTEST0", read_timeout=0.01, max_read_attempts=5)


@pytest.fixture
def transport() -> ScriptedTransport:
    return ScriptedTransport()


@pytest.fixture
def engine(transport, config) -> HandshakeEngine:
    return HandshakeEngine(transport, config)


@pytest.fixture
def dispenser(transport, config) -> MM010Dispenser:
    return MM010Dispenser(config, transport=transport)


def pytest_configure(config: pytest.Config) -> None:
    """Pytest configuration hook"""
    config.addinivalue_line(
        "markers",
        "hardware: mark test that requires an attached dispenser"
    )
