"""
Event Model
===========

The synthetic data point pushed to dashboard clients on every tick.

Event Contract:
    {
        "value": "QWERTYU42Kx",
        "time": "14:03:59"
    }

Design Rules:
    - Immutable once created
    - Created fresh on every tick, never persisted
    - Validated on construction so a malformed event cannot reach the renderer
"""

from pydantic import BaseModel, ConfigDict, Field


# 7 uppercase + 2 digits + 1 uppercase + 1 lowercase
VALUE_PATTERN = r"^[A-Z]{7}[0-9]{2}[A-Z][a-z]$"

# HH:MM:SS, 24h, zero-padded
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d:[0-5]\d$"


class Event(BaseModel):
    """
    One synthetic data event.

    Attributes:
        value: Random 11-character token
        time: Wall-clock time the event was generated (HH:MM:SS)
    """

    model_config = ConfigDict(frozen=True)

    value: str = Field(
        ...,
        pattern=VALUE_PATTERN,
        description="Random token: 7 upper, 2 digits, 1 upper, 1 lower",
    )

    time: str = Field(
        ...,
        pattern=TIME_PATTERN,
        description="Generation time as HH:MM:SS (24h)",
    )

    def __str__(self) -> str:
        return f"{self.value}@{self.time}"
