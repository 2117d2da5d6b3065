"""
Asyncio LDS-01 Driver
=====================

Cooperative counterpart of LDS01Driver built on pyserial-asyncio.
The only suspension point is waiting for the next chunk of bytes.

Usage
-----
>>> async def main():
...     async with AsyncLDS01Driver(LidarConfig(port="/dev/ttyUSB0")) as lidar:
...         async for scan in lidar:
...             print(scan.rpm)
>>>
>>> asyncio.run(main())
"""

import asyncio
import logging
from collections import deque
from typing import Deque, Optional

import serial
import serial_asyncio

from ..base import LidarConfig, RotationScan
from ..errors import DriverClosedError, TransportError
from ..reader import ScanReader
from ..tools import log_exceptions

logger = logging.getLogger(__name__)


class AsyncLDS01Driver:
    """
    LDS-01 driver on top of an asyncio StreamReader.

    Like the blocking driver it never writes to the device; the
    StreamWriter is only kept to close the transport.
    """

    def __init__(self, config: Optional[LidarConfig] = None):
        self.config = config if config is not None else LidarConfig()
        self._stream: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._reader = ScanReader(self.config)
        self._pending: Deque[RotationScan] = deque()

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    @property
    def rpm(self) -> float:
        """Rotation speed from the last valid packet."""
        return self._reader.speed / 10.0

    async def open(self) -> None:
        """
        Open the serial port.

        Raises:
            TransportError: The port could not be opened
        """
        if self._stream is not None:
            return
        try:
            self._stream, self._writer = await serial_asyncio.open_serial_connection(
                url=self.config.port, baudrate=self.config.baudrate,
                exclusive=self.config.exclusive)
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Unable to open {self.config.port}: {e}") from e

        logger.info("Opened %s @ %d baud (asyncio)", self.config.port, self.config.baudrate)
        self._reader.reset()
        self._pending.clear()

    async def read(self) -> RotationScan:
        """
        Wait for the next complete rotation.

        Raises:
            TransportError: The port failed, timed out, reached EOF or is closed
            DesynchronizationExceeded: Too many rejected packets without a rotation
        """
        while not self._pending:
            chunk = await self._read_chunk()
            self._pending.extend(self._reader.process(chunk))
        return self._pending.popleft()

    @log_exceptions
    async def _read_chunk(self) -> bytes:
        if self._stream is None:
            raise DriverClosedError()

        try:
            chunk = await asyncio.wait_for(
                self._stream.read(self.config.read_size), self.config.timeout)
        except asyncio.TimeoutError as e:
            raise TransportError(
                f"No data from {self.config.port} within {self.config.timeout}s") from e
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Read from {self.config.port} failed: {e}") from e

        if not chunk:
            raise TransportError(f"{self.config.port} closed by the device")
        return chunk

    async def close(self) -> None:
        """Close the port. Safe to call more than once."""
        if self._writer is not None:
            self._writer.close()
            try:
                await self._writer.wait_closed()
            except (serial.SerialException, OSError) as e:
                logger.debug("Error while closing %s: %s", self.config.port, e)
            logger.info("Closed %s", self.config.port)
        self._stream = None
        self._writer = None

    def __aiter__(self):
        return self

    async def __anext__(self) -> RotationScan:
        if self._stream is None:
            raise StopAsyncIteration
        return await self.read()

    async def __aenter__(self) -> 'AsyncLDS01Driver':
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
