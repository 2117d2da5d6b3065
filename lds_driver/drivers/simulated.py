"""
Simulated LDS-01 for testing without hardware.

Synthesizes the device's byte stream for a room with walls at roughly 3 m
and pushes it through the same ScanReader as the real drivers, so framing,
checksums and rotation assembly are exercised end to end.
"""

import math
import random
from typing import Iterator, List, Optional

from ..base import LidarBase, LidarConfig, RotationScan
from ..protocol import (
    CHECKSUM_OFFSET,
    MARKER,
    READINGS_PER_SECTOR,
    RESERVED_OFFSET,
    SECTORS_PER_ROTATION,
    encode_packet,
)
from ..reader import ScanReader

# Bytes covered by the checksum, past the marker and index
_CHECKED_BYTES = list(range(2, RESERVED_OFFSET)) + [CHECKSUM_OFFSET]


class SimulatedLDS01(LidarBase):
    """
    Dummy LDS-01 producing a valid packet stream.

    Parameters
    ----------
    config : LidarConfig, optional
        read_size is used as the chunk size of the simulated stream
    rpm : float
        Reported rotation speed
    noise_rate : float
        Probability that a burst of garbage bytes, possibly holding a false
        marker, is inserted before a packet
    corrupt_rate : float
        Probability that a packet has one checksummed bit flipped
    seed : int, optional
        Seed for the random generator, for reproducible streams
    """

    def __init__(self, config: Optional[LidarConfig] = None, rpm: float = 300.0,
                 noise_rate: float = 0.0, corrupt_rate: float = 0.0,
                 seed: Optional[int] = None):
        super().__init__(config)
        self.rpm = rpm
        self.noise_rate = noise_rate
        self.corrupt_rate = corrupt_rate
        self._random = random.Random(seed)
        self._reader = ScanReader(self.config)
        self._chunks: Optional[Iterator[bytes]] = None
        self._pending: List[RotationScan] = []
        self._rotation = 0

    def initialize(self) -> bool:
        self._reader.reset()
        self._chunks = self.chunks()
        self._initialized = True
        return True

    def sector_readings(self, sector: int):
        """(intensity, distance) pairs for one sector of the current rotation."""
        t = self._rotation * 0.1
        readings = []
        for i in range(READINGS_PER_SECTOR):
            angle = math.radians(sector * READINGS_PER_SECTOR + i)
            distance = 3000 + 500 * math.sin(4 * angle + t)
            distance += self._random.uniform(-100, 100)
            readings.append((100 + self._random.randint(0, 1000), int(max(0, distance))))
        return readings

    def packets(self) -> Iterator[bytes]:
        """Endless stream of encoded packets, starting at sector 0."""
        speed = int(round(self.rpm * 10))
        while True:
            for sector in range(SECTORS_PER_ROTATION):
                packet = encode_packet(sector, speed, self.sector_readings(sector))
                if self.corrupt_rate and self._random.random() < self.corrupt_rate:
                    packet = self._corrupt(packet)
                if self.noise_rate and self._random.random() < self.noise_rate:
                    yield self._noise()
                yield packet
            self._rotation += 1

    def chunks(self) -> Iterator[bytes]:
        """The packet stream re-cut into read_size chunks, as a serial port would deliver it."""
        size = self.config.read_size
        buf = bytearray()
        for data in self.packets():
            buf.extend(data)
            while len(buf) >= size:
                yield bytes(buf[:size])
                del buf[:size]

    def get_scan(self) -> Optional[RotationScan]:
        if not self._running or self._chunks is None:
            return None
        while not self._pending:
            self._pending.extend(self._reader.process(next(self._chunks)))
        return self._pending.pop(0)

    def shutdown(self) -> None:
        self._chunks = None
        self._pending.clear()
        self._initialized = False
        self._running = False

    def _corrupt(self, packet: bytes) -> bytes:
        data = bytearray(packet)
        pos = self._random.choice(_CHECKED_BYTES)
        data[pos] ^= 1 << self._random.randrange(8)
        return bytes(data)

    def _noise(self) -> bytes:
        """Random burst; half of them open with a false marker."""
        length = self._random.randint(1, 64)
        data = bytearray(self._random.getrandbits(8) for _ in range(length))
        if self._random.random() < 0.5:
            data[0] = MARKER
        return bytes(data)
