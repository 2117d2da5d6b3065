"""
Blocking LDS-01 Driver
======================

Reads the LDS-01 over a pyserial port and returns one RotationScan per
call to read().

Usage
-----
>>> from lds_driver import LidarConfig
>>> from lds_driver.drivers import LDS01Driver
>>>
>>> with LDS01Driver(LidarConfig(port="/dev/ttyUSB0")) as lidar:
...     scan = lidar.read()
...     print(f"{scan.rpm:.1f} rpm, range at 0 deg: {scan.distances[0]} mm")
"""

import logging
from collections import deque
from typing import Deque, Iterator, Optional

import serial

from ..base import LidarBase, LidarConfig, RotationScan
from ..errors import DriverClosedError, TransportError
from ..reader import ScanReader
from ..tools import log_exceptions

logger = logging.getLogger(__name__)


class LDS01Driver(LidarBase):
    """
    LDS-01 driver on top of a blocking serial.Serial.

    The driver never writes to the port. Bytes are read in chunks of
    config.read_size and pushed through a ScanReader; rotations that
    complete inside one chunk are queued and handed out one per read().
    """

    def __init__(self, config: Optional[LidarConfig] = None):
        """
        Initialize LDS-01 driver.

        Parameters
        ----------
        config : LidarConfig, optional
            Sensor configuration. Key fields:
            - port: Serial port (e.g., "/dev/ttyUSB0")
            - baudrate: 230400 for the LDS-01
            - timeout: Seconds without data before read() fails
        """
        super().__init__(config)
        self._serial: Optional[serial.Serial] = None
        self._reader = ScanReader(self.config)
        self._pending: Deque[RotationScan] = deque()

    @property
    def port(self) -> str:
        """Configured serial port."""
        return self.config.port

    @property
    def baud_rate(self) -> int:
        """Configured baud rate."""
        return self.config.baudrate

    @property
    def speed(self) -> int:
        """Raw speed field of the last valid packet (rpm * 10)."""
        return self._reader.speed

    @property
    def rpm(self) -> float:
        """Rotation speed from the last valid packet."""
        return self._reader.speed / 10.0

    def initialize(self) -> bool:
        """
        Open the serial port.

        Returns
        -------
        bool
            True if the port is open

        Raises
        ------
        TransportError
            The port could not be opened
        """
        if self._serial is not None and self._serial.is_open:
            return True

        try:
            self._serial = serial.Serial(
                self.config.port,
                baudrate=self.config.baudrate,
                timeout=self.config.timeout,
                exclusive=self.config.exclusive,
            )
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Unable to open {self.config.port}: {e}") from e

        logger.info("Opened %s @ %d baud", self.config.port, self.config.baudrate)
        self._reader.reset()
        self._pending.clear()
        self._initialized = True
        return True

    def read(self) -> RotationScan:
        """
        Block until the next complete rotation.

        Returns
        -------
        RotationScan
            Next rotation in the order it was received

        Raises
        ------
        TransportError
            The port failed, timed out or is closed
        DesynchronizationExceeded
            Too many rejected packets without a rotation
        """
        while not self._pending:
            self._pending.extend(self._reader.process(self._read_chunk()))
        return self._pending.popleft()

    def get_scan(self) -> Optional[RotationScan]:
        """
        Get the next scan from the LiDAR.

        Returns
        -------
        RotationScan or None
            Next rotation, or None if the driver is not running
        """
        if not self._running:
            return None
        return self.read()

    def __iter__(self) -> Iterator[RotationScan]:
        while self._running:
            yield self.read()

    @log_exceptions
    def _read_chunk(self) -> bytes:
        if self._serial is None or not self._serial.is_open:
            raise DriverClosedError()

        try:
            waiting = self._serial.in_waiting or self.config.read_size
            chunk = self._serial.read(min(waiting, self.config.read_size))
        except (serial.SerialException, OSError) as e:
            raise TransportError(f"Read from {self.config.port} failed: {e}") from e

        if not chunk:
            raise TransportError(
                f"No data from {self.config.port} within {self.config.timeout}s")
        return chunk

    def shutdown(self) -> None:
        """Close the port."""
        if self._serial is not None:
            self._serial.close()
            self._serial = None
            logger.info("Closed %s", self.config.port)
        self._initialized = False
        self._running = False
