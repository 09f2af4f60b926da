"""
Event Generation Tests
======================

Token layout, time format and model validation.
"""

import random
import re

import pytest
from pydantic import ValidationError


VALUE_RE = re.compile(r"^[A-Z]{7}[0-9]{2}[A-Z][a-z]$")
TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d:[0-5]\d$")


class TestGenerateEvent:
    """Tests for generate_event and its helpers."""

    def test_value_matches_layout(self):
        """Every token is 7 upper, 2 digits, 1 upper, 1 lower."""
        from framecast.events import generate_event

        for _ in range(2000):
            event = generate_event()
            assert VALUE_RE.match(event.value), event.value
            assert len(event.value) == 11

    def test_time_matches_clock_format(self):
        """Every time label is zero-padded 24h HH:MM:SS."""
        from framecast.events import generate_event

        for _ in range(200):
            assert TIME_RE.match(generate_event().time)

    def test_time_reflects_clock(self, fixed_clock):
        """The time label comes from the injected clock."""
        from framecast.events import current_time, generate_event

        assert current_time(fixed_clock) == "07:05:09"
        assert generate_event(clock=fixed_clock).time == "07:05:09"

    def test_seeded_rng_is_reproducible(self):
        """Same seed, same token sequence."""
        from framecast.events import generate_token

        first = [generate_token(random.Random(7)) for _ in range(3)]
        second = [generate_token(random.Random(7)) for _ in range(3)]
        assert first == second

    def test_tokens_vary(self, rng):
        """Tokens are not constant across calls."""
        from framecast.events import generate_token

        tokens = {generate_token(rng) for _ in range(50)}
        assert len(tokens) > 1


class TestEventModel:
    """Tests for the Event model."""

    def test_event_is_immutable(self, sample_event):
        """Events cannot be modified after creation."""
        with pytest.raises(ValidationError):
            sample_event.value = "ZZZZZZZ00Zz"

    @pytest.mark.parametrize("value", [
        "ABCDEFG12H",       # too short
        "ABCDEFG12HiX",     # too long
        "abcdefg12Hi",      # lowercase prefix
        "ABCDEFG1AHi",      # letter in digit slot
        "ABCDEFG12hi",      # lowercase in upper slot
    ])
    def test_rejects_malformed_value(self, value):
        """Malformed tokens are rejected."""
        from framecast.models.event import Event

        with pytest.raises(ValidationError):
            Event(value=value, time="12:00:00")

    @pytest.mark.parametrize("time_label", ["24:00:00", "7:05:09", "12:60:00", "12:00"])
    def test_rejects_malformed_time(self, time_label):
        """Malformed time labels are rejected."""
        from framecast.models.event import Event

        with pytest.raises(ValidationError):
            Event(value="ABCDEFG12Hi", time=time_label)

    def test_str(self, sample_event):
        assert str(sample_event) == "ABCDEFG12Hi@13:37:00"
