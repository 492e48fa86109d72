"""
Bank data model

A bank file holds 16 patterns and 4 parts, the parts twice (the live
"unsaved" state and the last explicitly saved state). Only the fields that
carry sample slot references are broken out into named attributes; the rest
of each record is kept as fixed-length raw bytes so that a decode/encode
cycle reproduces the file exactly.

Design: Pure data classes, no I/O. Codecs live in parsers/ and writers/.
"""

from dataclasses import dataclass, field, replace
from typing import List

from .slots import NO_SLOT

N_PATTERNS = 16
N_PARTS = 4
N_TRACKS = 8
N_PLOCKS = 64
N_SCENES = 16

BANK_HEADER = bytes([
    70, 79, 82, 77, 0, 0, 0, 0, 68, 80, 83, 49, 66, 65, 78, 75, 0, 0, 0, 0, 0, 23,
])
PATTERN_HEADER = b'PTRN\x00\x00\x00\x00'
AUDIO_TRACK_HEADER = b'TRAC'
MIDI_TRACK_HEADER = b'MTRA'
PART_HEADER = b'PART'

DEFAULT_PART_NAMES = [b'ONE\x00\x00\x00\x00', b'TWO\x00\x00\x00\x00', b'THREE\x00\x00', b'FOUR\x00\x00\x00']

# record sizes in bytes
PLOCK_SIZE = 32
AUDIO_TRACK_SIZE = 2338
MIDI_TRACK_SIZE = 2233
PATTERN_SIZE = 36588
PART_SIZE = 6331
BANK_SIZE = 636113


def _fill(value: int, n: int) -> bytes:
    return bytes([value]) * n


def _per_track(*chunks) -> bytes:
    block = b''.join(bytes(c) for c in chunks)
    return block * N_TRACKS


# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------

@dataclass
class AudioParameterLock:
    """Per-step parameter overrides for an audio track (255 = not locked)"""
    machine: bytes = _fill(255, 6)
    lfo: bytes = _fill(255, 6)
    amp: bytes = _fill(255, 6)
    fx1: bytes = _fill(255, 6)
    fx2: bytes = _fill(255, 6)
    static_slot_id: int = NO_SLOT
    flex_slot_id: int = NO_SLOT


def _default_audio_plocks() -> List[AudioParameterLock]:
    return [AudioParameterLock() for _ in range(N_PLOCKS)]


def _default_audio_trig_masks() -> bytes:
    # trigger, trigless, plock, oneshot, recorder[32], swing, slide
    return bytes(8 * 4) + bytes(32) + _fill(170, 8) + bytes(8)


def _default_midi_trig_masks() -> bytes:
    # trigger, trigless, plock, swing, unknown
    return bytes(8 * 3) + _fill(170, 8) + bytes(8)


@dataclass
class AudioTrackTrigs:
    track_id: int = 0
    header: bytes = AUDIO_TRACK_HEADER
    unknown_1: bytes = bytes(4)
    trig_masks: bytes = field(default_factory=_default_audio_trig_masks)
    scale_per_track: bytes = bytes([16, 2])
    swing_amount: int = 0
    pattern_settings: bytes = bytes([255, 0, 0, 0, 0])
    unknown_2: int = 0
    plocks: List[AudioParameterLock] = field(default_factory=_default_audio_plocks)
    unknown_3: bytes = bytes(64)
    trig_offsets: bytes = bytes(128)


@dataclass
class MidiTrackTrigs:
    track_id: int = 0
    header: bytes = MIDI_TRACK_HEADER
    unknown_1: bytes = bytes(4)
    trig_masks: bytes = field(default_factory=_default_midi_trig_masks)
    scale_per_track: bytes = bytes([16, 2])
    swing_amount: int = 0
    pattern_settings: bytes = bytes([255, 0, 0, 0, 0])
    plocks: bytes = _fill(255, N_PLOCKS * PLOCK_SIZE)
    trig_offsets: bytes = bytes(128)


@dataclass
class Pattern:
    header: bytes = PATTERN_HEADER
    audio_tracks: List[AudioTrackTrigs] = field(
        default_factory=lambda: [AudioTrackTrigs(track_id=i) for i in range(N_TRACKS)]
    )
    midi_tracks: List[MidiTrackTrigs] = field(
        default_factory=lambda: [MidiTrackTrigs(track_id=i) for i in range(N_TRACKS)]
    )
    scale: bytes = bytes([0, 16, 2, 16, 2, 0])
    chain_behaviour: bytes = bytes(2)
    unknown: int = 0
    part_assignment: int = 0
    tempo_1: int = 11
    tempo_2: int = 64


# ---------------------------------------------------------------------------
# Parts
# ---------------------------------------------------------------------------

@dataclass
class MachineSlot:
    """Slot assignment of one audio track's machines"""
    static_slot_id: int
    flex_slot_id: int
    unused: bytes = bytes(2)
    recorder_slot_id: int = 128

    @classmethod
    def for_track(cls, track: int) -> 'MachineSlot':
        # unused machines still point at the track's own slot
        return cls(static_slot_id=track, flex_slot_id=track, recorder_slot_id=128 + track)


# factory state of the per-track parameter blocks
DEFAULT_MACHINE_PARAMS_VALUES = _per_track(
    [64, 0, 0, 127, 0, 79],    # static
    [64, 0, 0, 127, 0, 79],    # flex
    [0, 64, 0, 0, 64, 0],      # thru
    [0] * 6,                   # neighbor
    [64, 2, 1, 127, 64, 1],    # pickup
)
DEFAULT_PARAMS_VALUES = _per_track(
    [32, 32, 32, 0, 0, 0],     # lfo
    [0, 127, 127, 64, 64, 127],  # amp
    [0, 127, 0, 64, 0, 64],    # fx1
    [47, 0, 127, 0, 127, 0],   # fx2
)
DEFAULT_MACHINE_SETUP = _per_track(
    [1, 0, 0, 0, 1, 64],
    [1, 0, 0, 0, 1, 64],
    [0] * 6,
    [0] * 6,
    [0, 0, 0, 0, 1, 64],
)
DEFAULT_PARAMS_SETUP = _per_track(
    [0] * 6,
    [1, 1, 0, 0, 0, 0],
    [0, 0, 1, 0, 3, 0],
    [0, 1, 127, 1, 0, 0],
    [0] * 6,
)
DEFAULT_MIDI_PARAMS_VALUES = _per_track(
    [48, 100, 6, 64, 64, 64],
    [32, 32, 32, 0, 0, 0],
    [64, 0, 0, 5, 0, 6],
    [64, 0, 127, 0, 0, 64],
    [0] * 6,
    [0, 0],
)
DEFAULT_MIDI_SETUP = _per_track(
    [0, 128, 128, 0, 128, 0],
    [0] * 6,
    [0, 0, 7, 0, 0, 0],
    [0, 0, 7, 1, 2, 10],
    [71, 72, 73, 74, 75, 76],
    [0] * 6,
)
DEFAULT_RECORDER_SETUP = _per_track(
    [1, 1, 64, 0, 0, 1],
    [0, 0, 0, 255, 255, 0],
)


@dataclass
class Part:
    part_id: int = 0
    header: bytes = PART_HEADER
    data_block_1: bytes = bytes(4)
    audio_track_fx1: bytes = _fill(4, N_TRACKS)
    audio_track_fx2: bytes = _fill(8, N_TRACKS)
    active_scenes: bytes = bytes([0, 8])
    volumes: bytes = _fill(108, N_TRACKS * 2)
    machine_types: bytes = bytes(N_TRACKS)
    machine_params_values: bytes = DEFAULT_MACHINE_PARAMS_VALUES
    params_values: bytes = DEFAULT_PARAMS_VALUES
    machine_setup: bytes = DEFAULT_MACHINE_SETUP
    machine_slots: List[MachineSlot] = field(
        default_factory=lambda: [MachineSlot.for_track(i) for i in range(N_TRACKS)]
    )
    params_setup: bytes = DEFAULT_PARAMS_SETUP
    midi_params_values: bytes = DEFAULT_MIDI_PARAMS_VALUES
    midi_setup: bytes = DEFAULT_MIDI_SETUP
    recorder_setup: bytes = DEFAULT_RECORDER_SETUP
    scenes: bytes = _fill(255, N_SCENES * N_TRACKS * 32)
    scene_xlvs: bytes = _fill(255, N_SCENES * 10)
    audio_lfo_designs: bytes = bytes(N_TRACKS * 16)
    audio_lfo_interpolation: bytes = bytes(N_TRACKS * 2)
    midi_lfo_designs: bytes = bytes(N_TRACKS * 16)
    midi_lfo_interpolation: bytes = bytes(N_TRACKS * 2)
    arp_mute_masks: bytes = _fill(255, 16)
    arp_sequences: bytes = bytes(N_TRACKS * 16)


# ---------------------------------------------------------------------------
# Bank
# ---------------------------------------------------------------------------

@dataclass
class Bank:
    header: bytes = BANK_HEADER
    patterns: List[Pattern] = field(
        default_factory=lambda: [Pattern() for _ in range(N_PATTERNS)]
    )
    parts_unsaved: List[Part] = field(
        default_factory=lambda: [Part(part_id=i) for i in range(N_PARTS)]
    )
    parts_saved: List[Part] = field(
        default_factory=lambda: [Part(part_id=i) for i in range(N_PARTS)]
    )
    unknown: bytes = bytes(5)
    part_names: List[bytes] = field(default_factory=lambda: list(DEFAULT_PART_NAMES))
    checksum: bytes = bytes(2)

    def check_header(self) -> bool:
        return self.header == BANK_HEADER

    def is_default(self) -> bool:
        """Factory state, ignoring the checksum bytes"""
        return replace(self, checksum=bytes(2)) == Bank()

    def part_name(self, index: int) -> str:
        return self.part_names[index].split(b'\x00', 1)[0].decode('ascii', errors='replace')


__all__ = [
    'N_PATTERNS',
    'N_PARTS',
    'N_TRACKS',
    'N_PLOCKS',
    'BANK_HEADER',
    'PATTERN_HEADER',
    'AUDIO_TRACK_HEADER',
    'MIDI_TRACK_HEADER',
    'PART_HEADER',
    'PLOCK_SIZE',
    'AUDIO_TRACK_SIZE',
    'MIDI_TRACK_SIZE',
    'PATTERN_SIZE',
    'PART_SIZE',
    'BANK_SIZE',
    'AudioParameterLock',
    'AudioTrackTrigs',
    'MidiTrackTrigs',
    'Pattern',
    'MachineSlot',
    'Part',
    'Bank',
]
