"""
Read loop core shared by every transport.

ScanReader pairs one FrameSynchronizer with one ScanAssembler. Transports
push raw chunks into process() and get completed rotations back in the
order they were assembled. The reader does no I/O, so the same object
serves blocking, asyncio and simulated sources.
"""

import logging
from typing import AsyncIterable, AsyncIterator, Iterable, Iterator, List, Optional

from .assembler import ScanAssembler
from .base import LidarConfig, RotationScan
from .errors import DesynchronizationExceeded, PacketError
from .framing import FrameSynchronizer
from .tools import hexdump

logger = logging.getLogger(__name__)


class ScanReader:
    """
    Bytes in, rotations out.

    Rejected packets and received bytes are counted from the last completed
    rotation. When either count passes its configured limit,
    DesynchronizationExceeded is raised and both counters start over, so
    the caller can keep reading after handling it.
    """

    def __init__(self, config: Optional[LidarConfig] = None):
        self.config = config if config is not None else LidarConfig()
        self.synchronizer = FrameSynchronizer()
        self.assembler = ScanAssembler()

        self.packet_failures = 0
        self.bytes_since_scan = 0

    @property
    def speed(self) -> int:
        """Speed reported by the most recent valid packet (rpm * 10)."""
        return self.assembler.speed

    def process(self, chunk: bytes) -> List[RotationScan]:
        """
        Feed one chunk and drain every candidate packet.

        Args:
            chunk: Bytes as returned by the transport (may be empty)

        Returns:
            Rotations completed by this chunk, oldest first

        Raises:
            DesynchronizationExceeded: Failure budget spent without a rotation
        """
        self.synchronizer.feed(chunk)
        self.bytes_since_scan += len(chunk)

        scans = []
        for frame in self.synchronizer.packets():
            try:
                scan = self.assembler.accept(frame)
            except PacketError as e:
                logger.debug("Rejected packet [%s]: %s", hexdump(frame), e)
                self.synchronizer.reject()
                self.packet_failures += 1
                continue
            if scan is not None:
                scans.append(scan)
                self.packet_failures = 0
                self.bytes_since_scan = 0

        if not scans:
            self._check_budget()
        return scans

    def reset(self) -> None:
        """Forget buffered bytes, the partial rotation and the failure counters."""
        self.synchronizer.reset()
        self.assembler.reset()
        self.packet_failures = 0
        self.bytes_since_scan = 0

    def _check_budget(self) -> None:
        max_failures = self.config.max_packet_failures
        max_bytes = self.config.max_bytes_without_scan
        if ((max_failures and self.packet_failures > max_failures)
                or (max_bytes and self.bytes_since_scan > max_bytes)):
            error = DesynchronizationExceeded(self.packet_failures, self.bytes_since_scan)
            logger.warning("%s", error)
            self.packet_failures = 0
            self.bytes_since_scan = 0
            raise error


def iter_scans(chunks: Iterable[bytes],
               config: Optional[LidarConfig] = None) -> Iterator[RotationScan]:
    """
    Yield rotations assembled from any iterable of byte chunks.

    Example:
        >>> with open("capture.bin", "rb") as f:
        ...     for scan in iter_scans(iter(lambda: f.read(512), b"")):
        ...         print(scan.rpm)
    """
    reader = ScanReader(config)
    for chunk in chunks:
        yield from reader.process(chunk)


async def aiter_scans(chunks: AsyncIterable[bytes],
                      config: Optional[LidarConfig] = None) -> AsyncIterator[RotationScan]:
    """Async counterpart of iter_scans() for async iterables of chunks."""
    reader = ScanReader(config)
    async for chunk in chunks:
        for scan in reader.process(chunk):
            yield scan
