"""
Sample attributes (.ot files)

Per-audio-file playback settings stored next to the audio file:
tempo, trim and loop points, gain and up to 64 slices.
"""

from dataclasses import dataclass, field
from typing import List

from .errors import FormatError
from .options import TimestretchMode, LoopMode, TrigQuantization

SAMPLE_ATTRIBUTES_HEADER = b'FORM\x00\x00\x00\x00DPS1SMPA'
SAMPLE_ATTRIBUTES_BLANK = bytes([0, 0, 0, 0, 0, 2, 0])
SAMPLE_ATTRIBUTES_SIZE = 832
MAX_SLICES = 64

# raw gain is half-dB steps, 48 is 0 dB
GAIN_ZERO_DB = 48
DEFAULT_SAMPLE_RATE = 44100


def bars_x100(frames: int, bpm: float, sample_rate: int = DEFAULT_SAMPLE_RATE) -> int:
    """Length in bars x 100 at a tempo, rounded down to a quarter bar (4/4)"""
    beats = frames / (sample_rate * 60.0 * 4.0)
    bars = ((bpm * 4.0 * beats) + 0.5) * 0.25
    bars -= bars % 0.25
    return int(bars * 100)


@dataclass
class Slice:
    trim_start: int = 0
    trim_end: int = 0
    loop_start: int = 0


def _empty_slices() -> List[Slice]:
    return [Slice() for _ in range(MAX_SLICES)]


@dataclass
class SampleAttributes:
    """
    Decoded .ot file. Values are the device's own units:
    tempo is BPM x 24, trim and loop lengths are bars x 100,
    start/end points are in audio frames.
    """
    tempo: int = 120 * 24
    trim_len: int = 0
    loop_len: int = 0
    stretch: TimestretchMode = TimestretchMode.NORMAL
    loop_mode: LoopMode = LoopMode.OFF
    gain: int = GAIN_ZERO_DB
    quantization: TrigQuantization = TrigQuantization.DIRECT
    trim_start: int = 0
    trim_end: int = 0
    loop_start: int = 0
    slices: List[Slice] = field(default_factory=_empty_slices)
    slices_len: int = 0
    header: bytes = SAMPLE_ATTRIBUTES_HEADER
    blank: bytes = SAMPLE_ATTRIBUTES_BLANK
    checksum: int = 0

    @property
    def bpm(self) -> float:
        return self.tempo / 24

    @property
    def gain_db(self) -> float:
        return (self.gain - GAIN_ZERO_DB) / 2

    @classmethod
    def new(cls, bpm: float = 120.0, frames: int = 0, gain_db: float = 0.0,
            sample_rate: int = DEFAULT_SAMPLE_RATE,
            stretch: TimestretchMode = TimestretchMode.NORMAL,
            loop_mode: LoopMode = LoopMode.OFF,
            quantization: TrigQuantization = TrigQuantization.DIRECT,
            slices: List[Slice] = None) -> 'SampleAttributes':
        """
        Build attributes covering a whole audio file

        Args:
            bpm: Sample tempo, 30-300
            frames: Length of the audio file in frames
            sample_rate: Frames per second, for the bar length
            gain_db: Gain in dB, -24 to +24
            slices: Optional slice list, at most 64 entries

        Returns:
            SampleAttributes with trim and loop spanning the file
        """
        if not 30.0 <= bpm <= 300.0:
            raise FormatError(f"tempo out of range (30-300): {bpm}")
        if not -24.0 <= gain_db <= 24.0:
            raise FormatError(f"gain out of range (-24 to 24): {gain_db}")
        slices = list(slices or [])
        if len(slices) > MAX_SLICES:
            raise FormatError(f"too many slices: {len(slices)} (max {MAX_SLICES})")

        length = bars_x100(frames, bpm, sample_rate)
        padded = slices + [Slice() for _ in range(MAX_SLICES - len(slices))]
        return cls(
            tempo=int(bpm * 24),
            trim_len=length,
            loop_len=length,
            stretch=stretch,
            loop_mode=loop_mode,
            gain=int(round((gain_db + 24.0) * 2)),
            quantization=quantization,
            trim_start=0,
            trim_end=frames,
            loop_start=0,
            slices=padded,
            slices_len=len(slices),
        )


__all__ = [
    'SAMPLE_ATTRIBUTES_HEADER',
    'SAMPLE_ATTRIBUTES_SIZE',
    'MAX_SLICES',
    'GAIN_ZERO_DB',
    'DEFAULT_SAMPLE_RATE',
    'bars_x100',
    'Slice',
    'SampleAttributes',
]
