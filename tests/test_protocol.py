"""
Unit tests for the LDS-01 packet codec

Tests protocol.py encoding, decoding and checksum
"""

import pytest

from lds_driver.errors import ChecksumMismatch, InvalidSectorIndex, PacketError
from lds_driver.protocol import (
    CHECKSUM_OFFSET,
    INDEX_BASE,
    MARKER,
    PACKET_SIZE,
    RESERVED_OFFSET,
    Packet,
    Reading,
    checksum,
    encode_packet,
)


def _with_index_byte(packet: bytes, raw_index: int) -> bytes:
    """Rewrite the index byte and fix up the checksum."""
    data = bytearray(packet)
    data[1] = raw_index
    data[CHECKSUM_OFFSET] = checksum(data)
    return bytes(data)


class TestChecksum:
    """Test the 8-bit packet checksum."""

    def test_all_zero_readings(self):
        """0xFA + 0xA0 sum to 410, so the checksum is (0xFF - 410) & 0xFF."""
        packet = encode_packet(0, 0, [(0, 0)] * 6)
        assert checksum(packet) == 0x65
        assert packet[RESERVED_OFFSET:] == b"\x00\x65"

    def test_checksum_ignores_trailing_bytes(self):
        packet = bytearray(encode_packet(5, 1234, [(1, 2)] * 6))
        before = checksum(packet)
        packet[40] ^= 0xFF
        packet[41] ^= 0xFF
        assert checksum(packet) == before

    def test_fits_in_one_byte(self):
        packet = encode_packet(59, 0xFFFF, [(0xFFFF, 0xFFFF)] * 6)
        assert 0 <= checksum(packet) <= 0xFF


class TestEncoding:
    """Test field layout of encoded packets."""

    def test_length_and_marker(self, packet_factory):
        packet = packet_factory(0)
        assert len(packet) == PACKET_SIZE
        assert packet[0] == MARKER

    def test_index_byte(self, packet_factory):
        assert packet_factory(0)[1] == INDEX_BASE
        assert packet_factory(59)[1] == INDEX_BASE + 59

    def test_speed_little_endian(self):
        packet = encode_packet(0, 0x0BB8, [(0, 0)] * 6)
        assert packet[2:4] == b"\xB8\x0B"

    def test_reading_layout(self):
        """Intensity first, then distance, both LE, then two reserved bytes."""
        readings = [(0x1234, 0x0ABC)] + [(0, 0)] * 5
        packet = encode_packet(0, 0, readings)
        assert packet[4:10] == b"\x34\x12\xBC\x0A\x00\x00"

    def test_rejects_bad_index(self):
        with pytest.raises(ValueError):
            encode_packet(60, 0, [(0, 0)] * 6)

    def test_rejects_wrong_reading_count(self):
        with pytest.raises(ValueError):
            encode_packet(0, 0, [(0, 0)] * 5)

    @pytest.mark.parametrize("speed, reading", [
        (0x10000, (0, 0)),
        (-1, (0, 0)),
        (0, (0x10000, 0)),
        (0, (0, 0x10000)),
        (0, (0, -1)),
    ])
    def test_rejects_values_wider_than_16_bits(self, speed, reading):
        with pytest.raises(ValueError):
            encode_packet(0, speed, [reading] + [(0, 0)] * 5)


class TestDecoding:
    """Test Packet.from_bytes()."""

    def test_round_trip(self):
        readings = tuple(Reading(100 + i, 2000 + i) for i in range(6))
        original = Packet(index=17, speed=3010, readings=readings)

        decoded = Packet.from_bytes(original.to_bytes())

        assert decoded.index == 17
        assert decoded.speed == 3010
        assert decoded.readings == readings
        assert decoded.checksum == checksum(original.to_bytes())
        assert decoded.angle == 17 * 6

    def test_round_trip_extreme_values(self):
        readings = tuple(Reading(0xFFFF, 0) for _ in range(6))
        decoded = Packet.from_bytes(Packet(59, 0xFFFF, readings).to_bytes())
        assert decoded.speed == 0xFFFF
        assert decoded.readings == readings

    def test_wrong_length(self, packet_factory):
        with pytest.raises(PacketError):
            Packet.from_bytes(packet_factory(0)[:-1])

    def test_bad_transmitted_checksum(self, packet_factory):
        data = bytearray(packet_factory(3))
        data[41] = (data[41] + 1) & 0xFF
        with pytest.raises(ChecksumMismatch) as info:
            Packet.from_bytes(bytes(data))
        assert info.value.expected == checksum(data)
        assert info.value.received == data[CHECKSUM_OFFSET]

    def test_reserved_byte_is_not_checked(self, packet_factory):
        """Only the last byte carries the checksum; byte 40 may hold anything."""
        data = bytearray(packet_factory(3))
        data[RESERVED_OFFSET] = 0x5A
        packet = Packet.from_bytes(bytes(data))
        assert packet.index == 3
        assert packet.checksum == data[CHECKSUM_OFFSET]

    def test_every_single_bit_flip_is_detected(self, packet_factory):
        """Flipping any bit of the summed bytes or the checksum must be detected."""
        packet = packet_factory(42)
        for pos in list(range(RESERVED_OFFSET)) + [CHECKSUM_OFFSET]:
            for bit in range(8):
                data = bytearray(packet)
                data[pos] ^= 1 << bit
                with pytest.raises(ChecksumMismatch):
                    Packet.from_bytes(bytes(data))

    def test_index_out_of_range(self, packet_factory):
        data = _with_index_byte(packet_factory(59), INDEX_BASE + 60)
        with pytest.raises(InvalidSectorIndex) as info:
            Packet.from_bytes(data)
        assert info.value.raw_index == INDEX_BASE + 60

    def test_index_below_base(self, packet_factory):
        data = _with_index_byte(packet_factory(0), 0x00)
        with pytest.raises(InvalidSectorIndex):
            Packet.from_bytes(data)

    def test_errors_share_a_base(self):
        assert issubclass(ChecksumMismatch, PacketError)
        assert issubclass(InvalidSectorIndex, PacketError)
