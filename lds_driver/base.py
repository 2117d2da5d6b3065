"""
Abstract LiDAR Interface
========================

Common data types and the abstract driver interface for the LDS-01.

The interface is designed to be:
1. Transport-agnostic (blocking, asyncio or simulated byte sources)
2. Raw: scans carry device units, no unit or frame conversion

Example Implementation
----------------------
>>> class MyLidar(LidarBase):
...     def initialize(self) -> bool:
...         self._source = open_my_source(self.config.port)
...         return True
...
...     def get_scan(self) -> Optional[RotationScan]:
...         for chunk in self._source:
...             scans = self._reader.process(chunk)
...             if scans:
...                 return scans[0]
...         return None
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from .protocol import (
    DEFAULT_BAUD_RATE,
    DEFAULT_PORT,
    POINTS_PER_ROTATION,
    ROTATION_SIZE,
)


def _empty_points() -> np.ndarray:
    return np.zeros(POINTS_PER_ROTATION, dtype=np.uint16)


@dataclass
class RotationScan:
    """
    One complete, checksum-verified rotation.

    Attributes
    ----------
    distances : np.ndarray
        360 uint16 distances in raw device units (mm), index = angle in degrees
    intensities : np.ndarray
        360 uint16 intensities, same indexing as distances
    speed : int
        Speed reported by the most recent packet (rpm * 10)
    timestamp : float
        Time the rotation was completed (seconds since epoch)
    """
    distances: np.ndarray = field(default_factory=_empty_points)
    intensities: np.ndarray = field(default_factory=_empty_points)
    speed: int = 0
    timestamp: float = 0.0

    @property
    def rpm(self) -> float:
        """Rotation speed in revolutions per minute."""
        return self.speed / 10.0

    @property
    def readings(self) -> List[Tuple[int, int]]:
        """(distance, intensity) pairs in angular order."""
        return list(zip(self.distances.tolist(), self.intensities.tolist()))

    def __len__(self) -> int:
        return len(self.distances)

    def __eq__(self, other) -> bool:
        if not isinstance(other, RotationScan):
            return NotImplemented
        return (self.speed == other.speed
                and np.array_equal(self.distances, other.distances)
                and np.array_equal(self.intensities, other.intensities))


@dataclass
class LidarConfig:
    """
    Configuration for an LDS-01 connection.

    Attributes
    ----------
    port : str
        Serial port or device path
    baudrate : int
        Serial baudrate, fixed at 230400 by the device
    timeout : float
        Serial read timeout in seconds; a read that returns nothing within
        this time is a transport failure
    read_size : int
        Bytes requested per read
    max_packet_failures : int
        Rejected packets tolerated without a completed rotation (0 = no limit)
    max_bytes_without_scan : int
        Bytes tolerated without a completed rotation (0 = no limit)
    exclusive : bool
        Open the port in exclusive mode (POSIX only)
    """
    port: str = DEFAULT_PORT
    baudrate: int = DEFAULT_BAUD_RATE
    timeout: float = 1.0
    read_size: int = ROTATION_SIZE
    max_packet_failures: int = 120
    max_bytes_without_scan: int = 10 * ROTATION_SIZE
    exclusive: bool = False


class LidarBase(ABC):
    """
    Abstract base class for LiDAR sensors.

    The minimum implementation requires:
    - initialize(): Connect to hardware
    - get_scan(): Return next scan data
    - shutdown(): Clean up resources

    start() and stop() only toggle the running state: the LDS-01 driver is
    receive-only and never writes to the device.
    """

    def __init__(self, config: Optional[LidarConfig] = None):
        """
        Initialize with configuration.

        Parameters
        ----------
        config : LidarConfig, optional
            Sensor configuration, defaults to LidarConfig()
        """
        self.config = config if config is not None else LidarConfig()
        self._initialized = False
        self._running = False

    @property
    def is_initialized(self) -> bool:
        """Check if sensor is initialized."""
        return self._initialized

    @property
    def is_running(self) -> bool:
        """Check if sensor is actively scanning."""
        return self._running

    @abstractmethod
    def initialize(self) -> bool:
        """
        Initialize connection to LiDAR hardware.

        Returns
        -------
        bool
            True if initialization successful
        """
        pass

    def start(self) -> bool:
        """Begin delivering scans."""
        if not self._initialized:
            return False
        self._running = True
        return True

    def stop(self) -> bool:
        """Stop delivering scans."""
        self._running = False
        return True

    @abstractmethod
    def get_scan(self) -> Optional[RotationScan]:
        """
        Get the next scan.

        Returns
        -------
        RotationScan or None
            Next complete rotation, or None if not running
        """
        pass

    @abstractmethod
    def shutdown(self) -> None:
        """
        Clean up resources and disconnect.
        """
        pass

    def __enter__(self):
        """Context manager entry."""
        self.initialize()
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.stop()
        self.shutdown()
