"""
Unit tests for the frame synchronizer

Tests framing.py marker search, buffering and resynchronization
"""

import random

import pytest

from lds_driver.framing import FrameSynchronizer
from lds_driver.protocol import PACKET_SIZE


@pytest.fixture
def sync():
    return FrameSynchronizer()


def collect(sync, data: bytes, chunk_size: int):
    """Feed data in chunks of chunk_size and return every candidate produced."""
    frames = []
    for i in range(0, len(data), chunk_size):
        sync.feed(data[i:i + chunk_size])
        frames.extend(sync.packets())
    return frames


class TestBuffering:
    """Test feed() and next_packet() on well-formed input."""

    def test_empty_buffer(self, sync):
        assert sync.next_packet() is None
        assert list(sync.packets()) == []

    def test_feed_empty_chunk(self, sync):
        sync.feed(b"")
        assert sync.buffered == 0
        assert sync.next_packet() is None

    def test_single_packet(self, sync, packet_factory):
        packet = packet_factory(0)
        sync.feed(packet)
        assert sync.next_packet() == packet
        assert sync.next_packet() is None
        assert sync.buffered == 0

    def test_waits_for_full_packet(self, sync, packet_factory):
        packet = packet_factory(1)
        sync.feed(packet[:-1])
        assert sync.next_packet() is None
        assert sync.buffered == PACKET_SIZE - 1

        sync.feed(packet[-1:])
        assert sync.next_packet() == packet

    def test_packets_is_restartable(self, sync, packet_factory):
        first, second = packet_factory(0), packet_factory(1)
        sync.feed(first)
        assert list(sync.packets()) == [first]
        sync.feed(second)
        assert list(sync.packets()) == [second]

    def test_many_packets_in_one_chunk(self, sync, rotation_factory):
        rotation = rotation_factory()
        sync.feed(b"".join(rotation))
        assert list(sync.packets()) == rotation


class TestMarkerSearch:
    """Test skipping of bytes that precede a marker."""

    def test_garbage_before_marker_is_dropped(self, sync, packet_factory):
        packet = packet_factory(2)
        sync.feed(b"\x01\x02\x03" + packet)
        assert sync.next_packet() == packet
        assert sync.discarded == 3

    def test_no_marker_discards_buffer(self, sync):
        sync.feed(bytes(range(0, 0xFA)))
        assert sync.next_packet() is None
        assert sync.buffered == 0
        assert sync.discarded == 0xFA

    def test_partial_packet_kept_from_marker(self, sync, packet_factory):
        packet = packet_factory(3)
        sync.feed(b"\x00" * 10 + packet[:20])
        assert sync.next_packet() is None
        assert sync.buffered == 20

    def test_false_marker_is_emitted(self, sync):
        """Framing does not judge content: any marker with 42 bytes behind it is a candidate."""
        data = b"\xFA" + b"\x11" * (PACKET_SIZE - 1)
        sync.feed(data)
        assert sync.next_packet() == data


class TestResynchronization:
    """Test reject()."""

    def test_reject_resumes_after_marker(self, sync, packet_factory):
        packet = packet_factory(4)
        noise = b"\xFA" + b"\x01" * 9
        sync.feed(noise + packet)

        bogus = sync.next_packet()
        assert bogus == (noise + packet)[:PACKET_SIZE]

        sync.reject()
        assert sync.next_packet() == packet
        assert sync.next_packet() is None

    def test_reject_without_candidate_is_noop(self, sync, packet_factory):
        packet = packet_factory(0)
        sync.feed(packet)
        sync.reject()
        assert sync.next_packet() == packet

    def test_reject_only_once_per_candidate(self, sync, packet_factory):
        sync.feed(b"\xFA" + b"\x00" * 5 + packet_factory(0))
        sync.next_packet()
        sync.reject()
        buffered = sync.buffered
        sync.reject()
        assert sync.buffered == buffered

    def test_reset(self, sync, packet_factory):
        sync.feed(packet_factory(0)[:30])
        sync.reset()
        assert sync.buffered == 0


class TestFragmentation:
    """Chunking of a valid stream must not change the candidates."""

    @pytest.mark.parametrize("chunk_size", [1, 2, 7, 41, 42, 43, 500])
    def test_same_candidates_for_any_chunk_size(self, rotation_factory, chunk_size):
        data = b"".join(rotation_factory() + rotation_factory(speed=2900)[:13])
        expected = collect(FrameSynchronizer(), data, len(data))

        assert len(expected) == 73
        assert collect(FrameSynchronizer(), data, chunk_size) == expected

    def test_random_chunking(self, rotation_factory):
        data = b"".join(rotation_factory())
        rng = random.Random(1234)
        sync = FrameSynchronizer()
        frames = []
        pos = 0
        while pos < len(data):
            size = rng.randint(0, 50)
            sync.feed(data[pos:pos + size])
            frames.extend(sync.packets())
            pos += size
        assert frames == rotation_factory()
