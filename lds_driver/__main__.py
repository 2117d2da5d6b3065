#!/usr/bin/env python3
"""
lds-read - print LDS-01 rotations from the command line

Usage:
    lds-read [--port PORT] [--baud-rate BAUD] [--async] [--simulate]
             [--count N] [--json] [--verbose]

Example:
    lds-read --port /dev/ttyUSB0 --count 10 --json
    python -m lds_driver --simulate -n 3
"""

import argparse
import asyncio
import logging
import sys

from .base import LidarConfig, RotationScan
from .errors import DesynchronizationExceeded, LdsError
from .protocol import DEFAULT_BAUD_RATE, DEFAULT_PORT
from .serialization import scan_to_json

logger = logging.getLogger("lds_driver")


def format_scan(scan: RotationScan, as_json: bool = False) -> str:
    if as_json:
        return scan_to_json(scan)
    return f"Reading: rpm={scan.rpm:.1f} ranges={scan.distances.tolist()}"


def run_blocking(driver, count: int, as_json: bool) -> int:
    """Read scans until count is reached (0 = forever). Returns scans read."""
    read = 0
    with driver:
        while count == 0 or read < count:
            try:
                scan = driver.get_scan()
            except DesynchronizationExceeded as e:
                logger.warning("%s, retrying", e)
                continue
            if scan is None:
                break
            print(format_scan(scan, as_json), flush=True)
            read += 1
    return read


async def run_async(config: LidarConfig, count: int, as_json: bool) -> int:
    from .drivers.asyncio_port import AsyncLDS01Driver

    read = 0
    async with AsyncLDS01Driver(config) as driver:
        while count == 0 or read < count:
            try:
                scan = await driver.read()
            except DesynchronizationExceeded as e:
                logger.warning("%s, retrying", e)
                continue
            print(format_scan(scan, as_json), flush=True)
            read += 1
    return read


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lds-read",
        description="Read rotations from an HLS-LFCD LDS-01 laser rangefinder",
    )
    parser.add_argument("-p", "--port", default=DEFAULT_PORT,
                        help=f"Serial port (default: {DEFAULT_PORT})")
    parser.add_argument("-b", "--baud-rate", type=int, default=DEFAULT_BAUD_RATE,
                        help=f"Baud rate (default: {DEFAULT_BAUD_RATE})")
    parser.add_argument("--timeout", type=float, default=1.0,
                        help="Seconds without data before giving up (default: 1.0)")
    parser.add_argument("--async", dest="use_async", action="store_true",
                        help="Use the asyncio transport")
    parser.add_argument("--simulate", action="store_true",
                        help="Read from a simulated device instead of a port")
    parser.add_argument("-n", "--count", type=int, default=0,
                        help="Stop after N scans (default: run until Ctrl-C)")
    parser.add_argument("--json", action="store_true",
                        help="Print one JSON object per scan")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="-v for info, -vv for debug logging")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = LidarConfig(port=args.port, baudrate=args.baud_rate, timeout=args.timeout)

    try:
        if args.simulate:
            from .drivers.simulated import SimulatedLDS01
            print("Going to simulate LDS01", file=sys.stderr)
            run_blocking(SimulatedLDS01(config), args.count, args.json)
        elif args.use_async:
            print(f"Going to open LDS01 on {config.port} with {config.baudrate}", file=sys.stderr)
            asyncio.run(run_async(config, args.count, args.json))
        else:
            from .drivers.serial_port import LDS01Driver
            print(f"Going to open LDS01 on {config.port} with {config.baudrate}", file=sys.stderr)
            run_blocking(LDS01Driver(config), args.count, args.json)
    except KeyboardInterrupt:
        print("Stopping...", file=sys.stderr)
    except LdsError as e:
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
