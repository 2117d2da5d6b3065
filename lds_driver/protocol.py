"""
LDS-01 Wire Protocol
====================

Packet layout of the HLS-LFCD LDS-01 serial stream.

The device streams 42-byte packets continuously, 60 packets per rotation.
Every packet covers a 6 degree sector with one reading per degree.

Packet Layout
-------------
    offset  size  field
    0       1     marker (0xFA)
    1       1     index (0xA0 + sector, sector in 0..59)
    2       2     speed (uint16 LE, rpm * 10)
    4       36    6 readings of 6 bytes:
                      intensity (uint16 LE)
                      distance  (uint16 LE, mm)
                      reserved  (2 bytes)
    40      1     reserved
    41      1     checksum

Checksum
--------
    checksum = (0xFF - sum(packet[0:40])) & 0xFF

Only byte 41 carries the checksum. Byte 40 is outside the summed range
and is not checked.
"""

import struct
from dataclasses import dataclass
from typing import NamedTuple, Sequence, Tuple

from .errors import ChecksumMismatch, InvalidSectorIndex, PacketError


# Framing
MARKER = 0xFA
INDEX_BASE = 0xA0
PACKET_SIZE = 42

# Geometry
SECTORS_PER_ROTATION = 60
READINGS_PER_SECTOR = 6
POINTS_PER_ROTATION = SECTORS_PER_ROTATION * READINGS_PER_SECTOR

# Field offsets
READINGS_OFFSET = 4
READING_SIZE = 6
RESERVED_OFFSET = READINGS_OFFSET + READINGS_PER_SECTOR * READING_SIZE
CHECKSUM_OFFSET = PACKET_SIZE - 1

# Serial defaults
DEFAULT_PORT = "/dev/ttyUSB0"
DEFAULT_BAUD_RATE = 230400

# Bytes covered by one full rotation of packets
ROTATION_SIZE = PACKET_SIZE * SECTORS_PER_ROTATION

_HEADER = struct.Struct("<BBH")
_READING = struct.Struct("<HHxx")


class Reading(NamedTuple):
    """One (intensity, distance) pair in raw device units."""
    intensity: int
    distance: int


def _check_u16(name: str, value: int) -> None:
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"{name} does not fit in 16 bits: {value}")


def checksum(data: bytes) -> int:
    """
    Compute the LDS-01 packet checksum.

    Args:
        data: Packet bytes; only the 40 bytes before the reserved
              byte are summed.

    Returns:
        int: 8-bit checksum value
    """
    return (0xFF - sum(data[:RESERVED_OFFSET])) & 0xFF


@dataclass(frozen=True)
class Packet:
    """
    One decoded LDS-01 packet.

    Attributes:
        index: Sector number (0..59), already stripped of the 0xA0 base
        speed: Rotation speed as reported by the device (rpm * 10)
        readings: Six readings in angular order
        checksum: Checksum value transmitted with the packet
    """
    index: int
    speed: int
    readings: Tuple[Reading, ...]
    checksum: int = 0

    @property
    def angle(self) -> int:
        """Angle in degrees of the first reading in this sector."""
        return self.index * READINGS_PER_SECTOR

    @classmethod
    def from_bytes(cls, data: bytes) -> 'Packet':
        """
        Decode and validate a candidate packet.

        Args:
            data: Exactly PACKET_SIZE bytes starting at the marker

        Returns:
            Packet instance

        Raises:
            PacketError: Wrong length or missing marker
            ChecksumMismatch: Transmitted and recomputed checksum differ
            InvalidSectorIndex: Index byte outside the sector range
        """
        if len(data) != PACKET_SIZE:
            raise PacketError(
                f"Packet must be {PACKET_SIZE} bytes, got {len(data)}")

        expected = checksum(data)
        received = data[CHECKSUM_OFFSET]
        if received != expected:
            raise ChecksumMismatch(expected, received)

        marker, raw_index, speed = _HEADER.unpack_from(data, 0)
        if marker != MARKER:
            raise PacketError(f"Bad marker byte 0x{marker:02X}")

        sector = raw_index - INDEX_BASE
        if not 0 <= sector < SECTORS_PER_ROTATION:
            raise InvalidSectorIndex(raw_index)

        readings = tuple(
            Reading(*_READING.unpack_from(data, READINGS_OFFSET + i * READING_SIZE))
            for i in range(READINGS_PER_SECTOR)
        )
        return cls(index=sector, speed=speed, readings=readings, checksum=expected)

    def to_bytes(self) -> bytes:
        """
        Encode the packet as it appears on the wire.

        The checksum is always recomputed; the `checksum` attribute is ignored.
        The reserved byte before it is written as zero.

        Raises:
            ValueError: Index, reading count or a 16-bit field out of range
        """
        if not 0 <= self.index < SECTORS_PER_ROTATION:
            raise ValueError(f"Sector index out of range: {self.index}")
        if len(self.readings) != READINGS_PER_SECTOR:
            raise ValueError(
                f"Expected {READINGS_PER_SECTOR} readings, got {len(self.readings)}")
        _check_u16("speed", self.speed)
        for intensity, distance in self.readings:
            _check_u16("intensity", intensity)
            _check_u16("distance", distance)

        buf = bytearray(PACKET_SIZE)
        _HEADER.pack_into(buf, 0, MARKER, INDEX_BASE + self.index, self.speed)
        for i, (intensity, distance) in enumerate(self.readings):
            _READING.pack_into(buf, READINGS_OFFSET + i * READING_SIZE,
                               intensity, distance)

        buf[CHECKSUM_OFFSET] = checksum(buf)
        return bytes(buf)


def encode_packet(index: int, speed: int, readings: Sequence[Tuple[int, int]]) -> bytes:
    """Shorthand for Packet(...).to_bytes() with plain (intensity, distance) tuples."""
    return Packet(index, speed, tuple(Reading(*r) for r in readings)).to_bytes()
