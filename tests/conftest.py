"""
Shared fixtures for the LDS-01 driver tests.

Packets are built with recognizable values: reading i of sector s has
distance 1000 + 6*s + i and intensity 10*s + i, so every point of an
assembled scan can be checked against its angle.
"""

import pytest

from lds_driver.protocol import (
    READINGS_PER_SECTOR,
    SECTORS_PER_ROTATION,
    encode_packet,
)


def sector_readings(sector: int, offset: int = 0):
    return [(10 * sector + i, 1000 + offset + READINGS_PER_SECTOR * sector + i)
            for i in range(READINGS_PER_SECTOR)]


def build_packet(sector: int, speed: int = 3000, offset: int = 0) -> bytes:
    return encode_packet(sector, speed, sector_readings(sector, offset))


def build_rotation(speed: int = 3000, start: int = 0, offset: int = 0):
    """List of 60 packets, one per sector, starting at `start`."""
    return [build_packet((start + i) % SECTORS_PER_ROTATION, speed, offset)
            for i in range(SECTORS_PER_ROTATION)]


@pytest.fixture
def packet_factory():
    return build_packet


@pytest.fixture
def rotation_factory():
    return build_rotation


@pytest.fixture
def rotation_bytes():
    """One full rotation, sectors 0..59, as a single byte string."""
    return b"".join(build_rotation())
