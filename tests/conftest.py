"""
Test Configuration
==================

Pytest fixtures shared by the doodle-link tests.
"""

import pytest


@pytest.fixture
def screen_frame():
    """Build a single-frame screen update from 80 tokens."""

    def build(tokens=None, score=b"000", difficulty=b"0", lost=b"0"):
        if tokens is None:
            tokens = [b"20"] * 80
        return b"0" + b"".join(tokens) + score + difficulty + lost

    return build


@pytest.fixture
def screen_part():
    """Build a multi-part screen frame body (marker stripped) from 20 tokens."""

    def build(tokens, index, marker=False):
        body = b"".join(tokens) + str(index).encode("ascii")
        return b"0" + body if marker else body

    return build


@pytest.fixture
def mixed_tokens():
    """80 tokens cycling through every known tile code."""
    codes = [b"00", b"01", b"02", b"03", b"04", b"05", b"06", b"07", b"20", b"a5"]
    return [codes[i % len(codes)] for i in range(80)]
