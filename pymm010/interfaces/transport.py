# SPDX-License-Identifier: LGPL-3.0-or-later
# Copyright (C) 2025-2026 Kris Kirby, KE4AHR

"""
pymm010.interfaces.transport

Base transport interface.

The handshake engine only needs a byte channel with blocking reads that
honour a timeout (returning zero bytes when it expires) and blocking writes.
Concrete transports wrap their own I/O errors in TransportError.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Type

from ..core.exceptions import TransportError

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 256


class BaseTransport(ABC):
    """
    Abstract byte-oriented duplex channel.

    Usage::

        with SerialTransport("/dev/ttyUSB0") as port:
            port.write(frame)
            data = port.read()
    """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """True while the channel can be read and written"""

    @abstractmethod
    def open(self) -> None:
        """
        Open the underlying channel.

        Raises:
            TransportError: If the channel cannot be opened
        """

    @abstractmethod
    def close(self) -> None:
        """Close the underlying channel (no-op when already closed)"""

    @abstractmethod
    def read(self, max_bytes: int = READ_CHUNK_SIZE) -> bytes:
        """
        Blocking read of up to max_bytes.

        Returns:
            The bytes read; empty when the read timeout expired

        Raises:
            TransportError: On read failure
        """

    @abstractmethod
    def write(self, data: bytes) -> int:
        """
        Blocking write of all of data.

        Returns:
            Number of bytes written

        Raises:
            TransportError: On write failure
        """

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(open={self.is_open})"


class TransportManager:
    """
    Registry of transport classes by scheme name.

    Example:
        TransportManager.create('serial', '/dev/ttyUSB0', baudrate=9600)
    """
    _transport_types: Dict[str, Type[BaseTransport]] = {}

    @classmethod
    def register(cls, name: str, transport_class: Type[BaseTransport]) -> None:
        """Register a transport type"""
        cls._transport_types[name.lower()] = transport_class

    @classmethod
    def create(cls, transport_type: str, *args, **kwargs) -> BaseTransport:
        """
        Create a transport instance.

        Args:
            transport_type: Registered transport name
            *args: Positional args for transport constructor
            **kwargs: Keyword args for transport constructor

        Raises:
            TransportError: For unknown transport types
        """
        trans_type = transport_type.lower()
        if trans_type not in cls._transport_types:
            raise TransportError(f"Unknown transport type: {transport_type}")
        return cls._transport_types[trans_type](*args, **kwargs)
