"""Outbound command encoding.

Control commands are fixed at 23 ASCII bytes, left-justified and padded
with '-'. The device matches them byte for byte.
"""

from datetime import datetime
from enum import Enum

COMMAND_WIDTH = 23
COMMAND_PAD = "-"


def pad_command(name: str) -> bytes:
    """Pad a command name to the fixed wire width."""
    if len(name) > COMMAND_WIDTH:
        raise ValueError(f"command {name!r} longer than {COMMAND_WIDTH} bytes")
    return name.ljust(COMMAND_WIDTH, COMMAND_PAD).encode("ascii")


CONTROL_RIGHT = pad_command("control-right")
CONTROL_LEFT = pad_command("control-left")
CONTROL_FIRE = pad_command("control-fire")
LOAD_APPROVE = pad_command("load-approve")


class Gesture(Enum):
    RIGHT = "right"
    LEFT = "left"
    FIRE = "fire"


_GESTURE_COMMANDS = {
    Gesture.RIGHT: CONTROL_RIGHT,
    Gesture.LEFT: CONTROL_LEFT,
    Gesture.FIRE: CONTROL_FIRE,
}


def gesture_command(gesture: Gesture) -> bytes:
    return _GESTURE_COMMANDS[gesture]


def clock_command(when: datetime) -> bytes:
    """Encode the device clock message, e.g. clock-26/10/19-08:05:03."""
    return f"clock-{when:%y/%m/%d-%H:%M:%S}".encode("ascii")


def loading_command(data: bytes) -> bytes:
    """Encode the message carrying a previously saved blob back to the device."""
    return b"loading-" + data
