"""
Exceptions raised by the LDS-01 driver.

PacketError and its subclasses are recovered inside the read loop by
resynchronizing; only TransportError and DesynchronizationExceeded reach
the caller of read().
"""


class LdsError(Exception):
    """Base class for LDS-01 driver errors."""


class TransportError(LdsError):
    """The byte source failed (port unplugged, timed out, closed)."""


class DriverClosedError(TransportError):
    """read() was called on a driver that is not open."""

    def __init__(self, message: str = "Driver is closed"):
        super().__init__(message)


class PacketError(LdsError):
    """A candidate packet was rejected."""


class ChecksumMismatch(PacketError):
    """Recomputed checksum differs from the transmitted one."""

    def __init__(self, expected: int, received: int):
        self.expected = expected
        self.received = received
        super().__init__(
            f"Checksum mismatch: expected 0x{expected:02X}, got 0x{received:02X}")


class InvalidSectorIndex(PacketError):
    """Index byte does not name one of the 60 sectors."""

    def __init__(self, raw_index: int):
        self.raw_index = raw_index
        super().__init__(f"Invalid sector index byte 0x{raw_index:02X}")


class DesynchronizationExceeded(LdsError):
    """No rotation could be assembled within the configured failure budget."""

    def __init__(self, packet_failures: int, bytes_received: int):
        self.packet_failures = packet_failures
        self.bytes_received = bytes_received
        super().__init__(
            f"No valid rotation after {packet_failures} rejected packets "
            f"and {bytes_received} bytes")
