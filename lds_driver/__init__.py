"""
LDS-01 Driver Library
=====================

Receive-only driver for the ROBOTIS HLS-LFCD LDS-01 2D laser rangefinder.

This library provides:
- Frame synchronization and scan assembly for the LDS-01 packet stream
- Common data types (RotationScan, LidarConfig, Packet)
- Blocking, asyncio and simulated drivers in the drivers subpackage

Usage
-----
>>> from lds_driver import LidarConfig
>>> from lds_driver.drivers import LDS01Driver
>>>
>>> config = LidarConfig(port="/dev/ttyUSB0")
>>> with LDS01Driver(config) as lidar:
...     scan = lidar.read()

Driving the core from your own byte source
------------------------------------------
>>> from lds_driver import ScanReader
>>>
>>> reader = ScanReader()
>>> for chunk in my_byte_source():
...     for scan in reader.process(chunk):
...         handle(scan)
"""

from .base import LidarBase, LidarConfig, RotationScan
from .protocol import (
    DEFAULT_BAUD_RATE,
    DEFAULT_PORT,
    PACKET_SIZE,
    POINTS_PER_ROTATION,
    SECTORS_PER_ROTATION,
    Packet,
    Reading,
    checksum,
    encode_packet,
)
from .errors import (
    LdsError,
    TransportError,
    DriverClosedError,
    PacketError,
    ChecksumMismatch,
    InvalidSectorIndex,
    DesynchronizationExceeded,
)
from .framing import FrameSynchronizer
from .assembler import ScanAssembler
from .reader import ScanReader, iter_scans, aiter_scans

__all__ = [
    "LidarBase",
    "LidarConfig",
    "RotationScan",
    "DEFAULT_BAUD_RATE",
    "DEFAULT_PORT",
    "PACKET_SIZE",
    "POINTS_PER_ROTATION",
    "SECTORS_PER_ROTATION",
    "Packet",
    "Reading",
    "checksum",
    "encode_packet",
    "LdsError",
    "TransportError",
    "DriverClosedError",
    "PacketError",
    "ChecksumMismatch",
    "InvalidSectorIndex",
    "DesynchronizationExceeded",
    "FrameSynchronizer",
    "ScanAssembler",
    "ScanReader",
    "iter_scans",
    "aiter_scans",
]

__version__ = "0.1.0"
