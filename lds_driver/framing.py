"""
Frame synchronizer for the LDS-01 byte stream.

Turns arbitrarily chunked serial data into 42-byte candidate packets that
start with the 0xFA marker. No validation is done here: a candidate that
later fails its checksum is handed back with reject(), and the search
resumes one byte after the rejected marker.
"""

import logging
from typing import Iterator, Optional

from .protocol import MARKER, PACKET_SIZE

logger = logging.getLogger(__name__)


class FrameSynchronizer:
    """
    Marker-based framing over an append-only byte buffer.

    Example:
        >>> sync = FrameSynchronizer()
        >>> sync.feed(chunk)
        >>> for frame in sync.packets():
        ...     try:
        ...         assembler.accept(frame)
        ...     except PacketError:
        ...         sync.reject()
    """

    def __init__(self, packet_size: int = PACKET_SIZE, marker: int = MARKER):
        self.packet_size = packet_size
        self.marker = marker

        self._buffer = bytearray()
        self._last: Optional[bytes] = None
        self.discarded = 0  # total bytes dropped while hunting for a marker

    @property
    def buffered(self) -> int:
        """Number of bytes waiting in the buffer."""
        return len(self._buffer)

    def feed(self, data: bytes) -> None:
        """Append received bytes. Empty chunks are fine."""
        if data:
            self._buffer.extend(data)

    def next_packet(self) -> Optional[bytes]:
        """
        Try to extract the next candidate packet.

        Returns:
            PACKET_SIZE bytes starting with the marker, or None if the buffer
            does not hold a complete candidate yet
        """
        pos = self._buffer.find(self.marker)
        if pos < 0:
            # A single-byte marker cannot be split across chunks, so nothing
            # in the buffer can become the start of a packet.
            self._drop(len(self._buffer))
            return None

        if pos > 0:
            self._drop(pos)

        if len(self._buffer) < self.packet_size:
            return None

        frame = bytes(self._buffer[:self.packet_size])
        del self._buffer[:self.packet_size]
        self._last = frame
        return frame

    def packets(self) -> Iterator[bytes]:
        """Yield every candidate currently extractable. Safe to call again after feed()."""
        while True:
            frame = self.next_packet()
            if frame is None:
                return
            yield frame

    def reject(self) -> None:
        """
        Resynchronize after the last candidate failed validation.

        Everything after the rejected marker goes back to the front of the
        buffer, so the next search starts one byte past it.
        """
        if self._last is None:
            return
        self._buffer[:0] = self._last[1:]
        self._last = None
        self.discarded += 1

    def reset(self) -> None:
        """Drop all buffered data."""
        self._buffer.clear()
        self._last = None

    def _drop(self, count: int) -> None:
        if count:
            del self._buffer[:count]
            self.discarded += count
            logger.debug("Skipped %d bytes looking for marker", count)
