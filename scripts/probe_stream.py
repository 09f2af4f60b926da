#!/usr/bin/env python3
"""
Stream Probe Script
===================

Standalone script that watches a running Framecast event stream.

This script:
    1. Opens the /events stream
    2. Decodes every frame it receives
    3. Logs each event and the gap since the previous frame
    4. Reports a final summary

Prerequisites:
    - Framecast must be running with 'sse' framing
    - Install the package: pip install -e .

Usage:
    python scripts/probe_stream.py --frames 5
    python scripts/probe_stream.py --url http://localhost:3000/events --duration 60
"""

import argparse
import logging
import os
import sys
import time

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import requests

from framecast.client import StreamProtocolError, iter_frames


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%S",
)
logger = logging.getLogger(__name__)


def run_probe(url: str, max_frames: int, duration: int) -> dict:
    """
    Watch the stream until enough frames arrive or time runs out.

    Args:
        url: Stream endpoint URL
        max_frames: Stop after this many frames (0 = no limit)
        duration: Stop after this many seconds (checked per frame)

    Returns:
        Summary metrics dict
    """
    logger.info("=" * 60)
    logger.info("Framecast Stream Probe")
    logger.info("=" * 60)
    logger.info(f"Stream URL: {url}")
    logger.info(f"Max frames: {max_frames or 'unlimited'}")
    logger.info(f"Duration: {duration} seconds")
    logger.info("=" * 60)

    start_time = time.time()
    last_time = start_time
    gaps = []
    frames = 0
    errors = 0

    try:
        for frame in iter_frames(url):
            frames += 1
            gap = frame.received_at - last_time
            gaps.append(gap)
            last_time = frame.received_at

            logger.info(
                f"Frame {frame.sequence}: value={frame.value} time={frame.time} "
                f"size={frame.width}x{frame.height} gap={gap:.2f}s"
            )

            if max_frames and frames >= max_frames:
                break
            if time.time() - start_time >= duration:
                logger.info(f"Probe duration ({duration}s) reached")
                break

    except KeyboardInterrupt:
        logger.info("Probe interrupted by user")
    except (requests.RequestException, StreamProtocolError) as e:
        errors += 1
        logger.error(f"Stream error: {e}")

    total_time = time.time() - start_time

    logger.info("=" * 60)
    logger.info("FINAL SUMMARY")
    logger.info("=" * 60)
    logger.info(f"Total runtime: {total_time:.1f} seconds")
    logger.info(f"Frames received: {frames}")
    if gaps:
        logger.info(f"Gap min/max: {min(gaps):.2f}s / {max(gaps):.2f}s")
    logger.info(f"Errors: {errors}")
    logger.info("=" * 60)

    return {
        "duration": total_time,
        "frames_received": frames,
        "min_gap": min(gaps) if gaps else None,
        "max_gap": max(gaps) if gaps else None,
        "errors": errors,
    }


def main():
    parser = argparse.ArgumentParser(
        description="Watch a Framecast event stream and decode its frames"
    )
    parser.add_argument(
        "--url",
        type=str,
        default=os.environ.get("FRAMECAST_STREAM_URL", "http://localhost:3000/events"),
        help="URL of the stream endpoint",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=3,
        help="Stop after this many frames, 0 for no limit (default: 3)",
    )
    parser.add_argument(
        "--duration",
        type=int,
        default=120,
        help="Probe duration in seconds (default: 120)",
    )

    args = parser.parse_args()

    result = run_probe(
        url=args.url,
        max_frames=args.frames,
        duration=args.duration,
    )

    sys.exit(0 if result["frames_received"] > 0 and not result["errors"] else 1)


if __name__ == "__main__":
    main()
