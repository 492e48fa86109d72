"""
octatool core
Data model for Octatrack project, bank, arrangement and sample attribute files
"""

from .errors import (
    OctatoolError,
    FormatError,
    MissingSourceAudioFile,
    InsufficientFreeSlots,
    DestinationModified,
    VersionMismatch,
    InvalidBankOrPatternIndex,
    FileConflict,
    ConfigError,
)
from .options import SlotType, TimestretchMode, LoopMode, TrigQuantization
from .slots import SampleSlot
from .bank import Bank, Pattern, Part, AudioTrackTrigs, MidiTrackTrigs, AudioParameterLock, MachineSlot
from .project import Project, ProjectMetadata, ProjectSettings, ProjectStates
from .arrangement import (
    Arrangement,
    ArrangementBlock,
    PatternRow,
    LoopOrJumpOrHaltRow,
    ReminderRow,
    EmptyRow,
)
from .sample_attributes import SampleAttributes, Slice

__all__ = [
    'OctatoolError',
    'FormatError',
    'MissingSourceAudioFile',
    'InsufficientFreeSlots',
    'DestinationModified',
    'VersionMismatch',
    'InvalidBankOrPatternIndex',
    'FileConflict',
    'ConfigError',
    'SlotType',
    'TimestretchMode',
    'LoopMode',
    'TrigQuantization',
    'SampleSlot',
    'Bank',
    'Pattern',
    'Part',
    'AudioTrackTrigs',
    'MidiTrackTrigs',
    'AudioParameterLock',
    'MachineSlot',
    'Project',
    'ProjectMetadata',
    'ProjectSettings',
    'ProjectStates',
    'Arrangement',
    'ArrangementBlock',
    'PatternRow',
    'LoopOrJumpOrHaltRow',
    'ReminderRow',
    'EmptyRow',
    'SampleAttributes',
    'Slice',
]
__version__ = '1.0.0'
