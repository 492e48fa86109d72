"""
Project data model

A project file is CRLF text made of [SECTION] blocks. Metadata and states
are small fixed key sets; settings are kept as ordered key/value pairs
because the device repeats TRIG_MODE_MIDI once per MIDI track.
"""

from dataclasses import dataclass, field, fields
from typing import List, Optional, Tuple

from .errors import VersionMismatch
from .slots import SampleSlot, default_recorder_slots

ALLOWED_OS_VERSIONS = ["1.40A", "1.40B", "1.40C"]

DEFAULT_SETTINGS: List[Tuple[str, str]] = [
    ("WRITEPROTECTED", "0"),
    ("TEMPOx24", "2880"),
    ("PATTERN_TEMPO_ENABLED", "0"),
    ("MIDI_CLOCK_SEND", "0"),
    ("MIDI_CLOCK_RECEIVE", "0"),
    ("MIDI_TRANSPORT_SEND", "0"),
    ("MIDI_TRANSPORT_RECEIVE", "0"),
    ("MIDI_PROGRAM_CHANGE_SEND", "0"),
    ("MIDI_PROGRAM_CHANGE_SEND_CH", "-1"),
    ("MIDI_PROGRAM_CHANGE_RECEIVE", "0"),
    ("MIDI_PROGRAM_CHANGE_RECEIVE_CH", "-1"),
] + [(f"MIDI_TRIG_CH{i + 1}", str(i)) for i in range(8)] + [
    ("MIDI_AUTO_CHANNEL", "10"),
    ("MIDI_SOFT_THRU", "0"),
    ("MIDI_AUDIO_TRK_CC_IN", "1"),
    ("MIDI_AUDIO_TRK_CC_OUT", "3"),
    ("MIDI_AUDIO_TRK_NOTE_IN", "1"),
    ("MIDI_AUDIO_TRK_NOTE_OUT", "3"),
    ("MIDI_MIDI_TRK_CC_IN", "1"),
    ("PATTERN_CHANGE_CHAIN_BEHAVIOR", "0"),
    ("PATTERN_CHANGE_AUTO_SILENCE_TRACKS", "0"),
    ("PATTERN_CHANGE_AUTO_TRIG_LFOS", "0"),
    ("LOAD_24BIT_FLEX", "0"),
    ("DYNAMIC_RECORDERS", "0"),
    ("RECORD_24BIT", "0"),
    ("RESERVED_RECORDER_COUNT", "8"),
    ("RESERVED_RECORDER_LENGTH", "16"),
    ("INPUT_DELAY_COMPENSATION", "0"),
    ("GATE_AB", "127"),
    ("GATE_CD", "127"),
    ("GAIN_AB", "64"),
    ("GAIN_CD", "64"),
    ("DIR_AB", "0"),
    ("DIR_CD", "0"),
    ("PHONES_MIX", "64"),
    ("MAIN_TO_CUE", "0"),
    ("MASTER_TRACK", "0"),
    ("CUE_STUDIO_MODE", "0"),
    ("MAIN_LEVEL", "64"),
    ("CUE_LEVEL", "64"),
    ("METRONOME_TIME_SIGNATURE", "3"),
    ("METRONOME_TIME_SIGNATURE_DENOMINATOR", "2"),
    ("METRONOME_PREROLL", "0"),
    ("METRONOME_CUE_VOLUME", "32"),
    ("METRONOME_MAIN_VOLUME", "0"),
    ("METRONOME_PITCH", "12"),
    ("METRONOME_TONAL", "1"),
    ("METRONOME_ENABLED", "0"),
] + [("TRIG_MODE_MIDI", "0")] * 8


@dataclass
class ProjectMetadata:
    filetype: str = "OCTATRACK DPS-1 PROJECT"
    project_version: int = 19
    os_version: str = "R0177     1.40B"

    @property
    def os_release(self) -> str:
        """Release part of OS_VERSION, e.g. '1.40B'"""
        parts = self.os_version.split()
        return parts[1] if len(parts) > 1 else ""


@dataclass
class ProjectSettings:
    entries: List[Tuple[str, str]] = field(default_factory=lambda: list(DEFAULT_SETTINGS))

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        for k, v in self.entries:
            if k.upper() == key.upper():
                return v
        return default

    def get_all(self, key: str) -> List[str]:
        return [v for k, v in self.entries if k.upper() == key.upper()]

    @property
    def tempo(self) -> float:
        return int(self.get("TEMPOx24", "2880")) / 24

    @property
    def trig_mode_midi(self) -> List[int]:
        """Trig mode per MIDI track, by ordinal occurrence"""
        return [int(v) for v in self.get_all("TRIG_MODE_MIDI")]


@dataclass
class ProjectStates:
    bank: int = 0
    pattern: int = 0
    arrangement: int = 0
    arrangement_mode: int = 0
    part: int = 0
    track: int = 0
    track_othermode: int = 0
    scene_a_mute: int = 0
    scene_b_mute: int = 0
    track_cue_mask: int = 0
    track_mute_mask: int = 0
    track_solo_mask: int = 0
    midi_track_mute_mask: int = 0
    midi_track_solo_mask: int = 0
    midi_mode: int = 0

    @classmethod
    def keys(cls) -> List[str]:
        return [f.name.upper() for f in fields(cls)]


@dataclass
class Project:
    """project.work / project.strd contents. Slot ids are 1-indexed."""
    metadata: ProjectMetadata = field(default_factory=ProjectMetadata)
    settings: ProjectSettings = field(default_factory=ProjectSettings)
    states: ProjectStates = field(default_factory=ProjectStates)
    slots: List[SampleSlot] = field(default_factory=default_recorder_slots)

    @classmethod
    def default(cls) -> 'Project':
        return cls()

    def check_os_version(self, path=None):
        """Raise VersionMismatch unless written by a supported device OS"""
        if self.metadata.os_release not in ALLOWED_OS_VERSIONS:
            raise VersionMismatch(self.metadata.os_version, path)

    def sample_slots(self) -> List[SampleSlot]:
        """Static and flex slots, without recorder buffers"""
        return [s for s in self.slots if not s.is_recorder()]


__all__ = [
    'ALLOWED_OS_VERSIONS',
    'DEFAULT_SETTINGS',
    'ProjectMetadata',
    'ProjectSettings',
    'ProjectStates',
    'Project',
]
