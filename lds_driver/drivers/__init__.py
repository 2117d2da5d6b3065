"""
LDS-01 Driver Implementations
=============================

Available drivers:
- LDS01Driver: blocking reads through pyserial
- AsyncLDS01Driver: asyncio reads through pyserial-asyncio
- SimulatedLDS01: synthetic packet stream, no hardware needed
"""

from .serial_port import LDS01Driver
from .asyncio_port import AsyncLDS01Driver
from .simulated import SimulatedLDS01

__all__ = [
    "LDS01Driver",
    "AsyncLDS01Driver",
    "SimulatedLDS01",
]
