"""
Sample playback options shared by project sample slots and .ot attribute files
"""

from enum import Enum, IntEnum


class SlotType(Enum):
    """Kind of sample slot, as spelled in project files"""
    STATIC = "STATIC"
    FLEX = "FLEX"
    RECORDER = "RECORDER"

    def __str__(self) -> str:
        return self.value


class TimestretchMode(IntEnum):
    OFF = 0
    NORMAL = 2
    BEAT = 3


class LoopMode(IntEnum):
    OFF = 0
    NORMAL = 1
    PING_PONG = 2


class TrigQuantization(IntEnum):
    """Trig quantization. Stored as -1 in project files when DIRECT."""
    PATTERN_LENGTH = 0
    ONE_STEP = 1
    TWO_STEPS = 2
    THREE_STEPS = 3
    FOUR_STEPS = 4
    SIX_STEPS = 5
    EIGHT_STEPS = 6
    TWELVE_STEPS = 7
    SIXTEEN_STEPS = 8
    TWENTY_FOUR_STEPS = 9
    THIRTY_TWO_STEPS = 10
    FORTY_EIGHT_STEPS = 11
    SIXTY_FOUR_STEPS = 12
    NINETY_SIX_STEPS = 13
    ONE_TWENTY_EIGHT_STEPS = 14
    ONE_NINETY_TWO_STEPS = 15
    TWO_FIFTY_SIX_STEPS = 16
    DIRECT = 255


__all__ = ['SlotType', 'TimestretchMode', 'LoopMode', 'TrigQuantization']
