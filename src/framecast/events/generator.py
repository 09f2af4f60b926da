"""
Random Event Generator
======================

Produces the synthetic events rendered into stream frames.

Design Rules:
    - Always succeeds
    - Uses the process-wide random source unless one is injected
    - Clock is injectable so tests can pin the time label
"""

import random
import string
from datetime import datetime
from typing import Callable, Optional

from framecast.models.event import Event


Clock = Callable[[], datetime]


def generate_token(rng: Optional[random.Random] = None) -> str:
    """
    Generate a random event token.

    Layout: 7 uppercase letters, 2 digits, 1 uppercase letter,
    1 lowercase letter.

    Args:
        rng: Random source. Defaults to the process-wide one.

    Returns:
        11-character token, e.g. "KQWZMPA07Rb"
    """
    rng = rng or random
    upper = "".join(rng.choice(string.ascii_uppercase) for _ in range(7))
    digits = "".join(rng.choice(string.digits) for _ in range(2))
    return (
        upper
        + digits
        + rng.choice(string.ascii_uppercase)
        + rng.choice(string.ascii_lowercase)
    )


def current_time(clock: Optional[Clock] = None) -> str:
    """Current local wall-clock time as zero-padded HH:MM:SS."""
    now = clock() if clock is not None else datetime.now()
    return now.strftime("%H:%M:%S")


def generate_event(
    rng: Optional[random.Random] = None,
    clock: Optional[Clock] = None,
) -> Event:
    """
    Generate a fresh event.

    Args:
        rng: Random source for the token
        clock: Callable returning the current datetime

    Returns:
        New immutable Event
    """
    return Event(value=generate_token(rng), time=current_time(clock))
