"""
Scan assembler for the LDS-01.

Validates candidate packets and stitches 60 consecutive sectors into one
RotationScan. Sectors must arrive in cyclic order; anything else (a
backward jump after a device restart, a duplicate, or a gap left by a
corrupted packet) throws away the partial rotation and starts a new one
at the sector just received. Data from two different revolutions is never
merged into one scan.
"""

import logging
import time
from typing import Optional

import numpy as np

from .base import RotationScan
from .errors import PacketError
from .protocol import (
    POINTS_PER_ROTATION,
    READINGS_PER_SECTOR,
    SECTORS_PER_ROTATION,
    Packet,
)

logger = logging.getLogger(__name__)


class ScanAssembler:
    """
    Accumulates validated packets into complete rotations.

    accept() raises PacketError subclasses for rejected candidates and
    returns a RotationScan once every sector has been filled.
    """

    def __init__(self):
        self._distances = np.zeros(POINTS_PER_ROTATION, dtype=np.uint16)
        self._intensities = np.zeros(POINTS_PER_ROTATION, dtype=np.uint16)
        self._start = 0
        self._count = 0
        self.speed = 0

        # Statistics
        self.packets_ok = 0
        self.packets_rejected = 0
        self.restarts = 0
        self.scans = 0

    @property
    def expected_index(self) -> int:
        """Sector that continues the rotation in progress."""
        return (self._start + self._count) % SECTORS_PER_ROTATION

    @property
    def sectors_filled(self) -> int:
        """Number of contiguous sectors collected so far."""
        return self._count

    def accept(self, data: bytes) -> Optional[RotationScan]:
        """
        Validate one candidate packet and add it to the rotation.

        Args:
            data: PACKET_SIZE bytes starting at the marker

        Returns:
            The completed RotationScan if this packet finished a rotation,
            otherwise None

        Raises:
            ChecksumMismatch: Packet is corrupt
            InvalidSectorIndex: Index byte is not a sector
        """
        try:
            packet = Packet.from_bytes(data)
        except PacketError:
            self.packets_rejected += 1
            raise
        self.packets_ok += 1
        return self.add(packet)

    def add(self, packet: Packet) -> Optional[RotationScan]:
        """Add an already decoded packet. Returns a RotationScan when complete."""
        self.speed = packet.speed

        if packet.index != self.expected_index:
            if self._count:
                self.restarts += 1
                logger.debug(
                    "Sequence restart: got sector %d, expected %d (%d sectors dropped)",
                    packet.index, self.expected_index, self._count)
            self._start = packet.index
            self._count = 0

        offset = packet.index * READINGS_PER_SECTOR
        for i, (intensity, distance) in enumerate(packet.readings):
            self._distances[offset + i] = distance
            self._intensities[offset + i] = intensity
        self._count += 1

        if self._count < SECTORS_PER_ROTATION:
            return None

        scan = RotationScan(
            distances=self._distances.copy(),
            intensities=self._intensities.copy(),
            speed=self.speed,
            timestamp=time.time(),
        )
        self.scans += 1
        self._start = (packet.index + 1) % SECTORS_PER_ROTATION
        self._count = 0
        self._distances[:] = 0
        self._intensities[:] = 0
        return scan

    def reset(self) -> None:
        """Drop the partial rotation; the next rotation is expected to start at sector 0."""
        self._start = 0
        self._count = 0
        self._distances[:] = 0
        self._intensities[:] = 0
