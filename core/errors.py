"""
Error hierarchy

Every failure the library can report. The CLI is the only place these are
caught and turned into exit codes.
"""

from typing import Optional


class OctatoolError(Exception):
    """Base class for all octatool errors"""


class FormatError(OctatoolError):
    """Malformed, truncated or out-of-range record data"""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)


class MissingSourceAudioFile(OctatoolError):
    """A slot referenced by the source bank points at an audio file that does not exist"""

    def __init__(self, paths):
        self.paths = list(paths)
        listing = ", ".join(str(p) for p in self.paths)
        super().__init__(f"missing source audio file(s): {listing}")


class InsufficientFreeSlots(OctatoolError):
    """Destination project cannot hold the slots the bank needs"""

    def __init__(self, sample_type, required: int, available: int):
        self.sample_type = sample_type
        self.required = required
        self.available = available
        super().__init__(
            f"insufficient free {sample_type} sample slots: "
            f"need {required}, destination has {available}"
        )


class DestinationModified(OctatoolError):
    """Destination bank is not in its factory state and no force flag was given"""

    def __init__(self, path):
        self.path = path
        super().__init__(
            f"destination bank has been modified: {path} (use --force to overwrite)"
        )


class VersionMismatch(OctatoolError):
    """Project was written by an unsupported device OS version"""

    def __init__(self, os_version: str, path=None):
        self.os_version = os_version
        self.path = path
        where = f" ({path})" if path else ""
        super().__init__(f"unsupported device OS version '{os_version}'{where}")


class InvalidBankOrPatternIndex(OctatoolError):
    """Bank or pattern index outside the 1-16 range"""

    def __init__(self, kind: str, index):
        self.kind = kind
        self.index = index
        super().__init__(f"invalid {kind} index {index}: must be between 1 and 16")


class FileConflict(OctatoolError):
    """A different file with the same name is already at the destination"""

    def __init__(self, path):
        self.path = path
        super().__init__(f"a different file already exists at {path}")


class ConfigError(OctatoolError):
    """Batch configuration file has the wrong shape"""


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
]
