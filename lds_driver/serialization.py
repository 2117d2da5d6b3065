"""
Dictionary and JSON mapping for scans and packets.

Pure data conversion over the core types; nothing here touches framing or
validation. Arrays are stored as plain lists of ints.
"""

import json
from typing import Any, Dict

import numpy as np

from .base import RotationScan
from .protocol import POINTS_PER_ROTATION, Packet, Reading


def scan_to_dict(scan: RotationScan) -> Dict[str, Any]:
    return {
        "distances": scan.distances.tolist(),
        "intensities": scan.intensities.tolist(),
        "speed": int(scan.speed),
        "timestamp": scan.timestamp,
    }


def scan_from_dict(data: Dict[str, Any]) -> RotationScan:
    """
    Build a RotationScan from scan_to_dict() output.

    Raises:
        ValueError: Arrays are not POINTS_PER_ROTATION long
        KeyError: A required field is missing
    """
    distances = np.asarray(data["distances"], dtype=np.uint16)
    intensities = np.asarray(data["intensities"], dtype=np.uint16)
    if distances.shape != (POINTS_PER_ROTATION,) or intensities.shape != (POINTS_PER_ROTATION,):
        raise ValueError(f"Scan arrays must have {POINTS_PER_ROTATION} points")
    return RotationScan(
        distances=distances,
        intensities=intensities,
        speed=int(data["speed"]),
        timestamp=float(data.get("timestamp", 0.0)),
    )


def packet_to_dict(packet: Packet) -> Dict[str, Any]:
    return {
        "index": packet.index,
        "speed": packet.speed,
        "readings": [[r.intensity, r.distance] for r in packet.readings],
        "checksum": packet.checksum,
    }


def packet_from_dict(data: Dict[str, Any]) -> Packet:
    return Packet(
        index=int(data["index"]),
        speed=int(data["speed"]),
        readings=tuple(Reading(int(i), int(d)) for i, d in data["readings"]),
        checksum=int(data.get("checksum", 0)),
    )


def scan_to_json(scan: RotationScan) -> str:
    """Compact single-line JSON, one scan per line in the CLI output."""
    return json.dumps(scan_to_dict(scan), separators=(',', ':'))


def scan_from_json(text: str) -> RotationScan:
    return scan_from_dict(json.loads(text))
