"""
Default .ot files for audio samples
"""

import logging
from pathlib import Path

import soundfile as sf

from core.sample_attributes import SampleAttributes
from writers.sample_writer import write_sample_attributes_file

logger = logging.getLogger(__name__)


def create_default_attributes(audio_path, bpm: float = 120.0, gain_db: float = 0.0,
                              overwrite: bool = False) -> Path:
    """
    Write a .ot file next to an audio file, trim and loop covering all of it

    Args:
        audio_path: WAV/AIFF file
        bpm: Sample tempo
        gain_db: Sample gain
        overwrite: Replace an existing .ot file

    Returns:
        Path of the .ot file
    """
    audio_path = Path(audio_path)
    ot_path = audio_path.with_suffix('.ot')
    if ot_path.exists() and not overwrite:
        raise FileExistsError(f"{ot_path} already exists")

    info = sf.info(str(audio_path))
    attributes = SampleAttributes.new(
        bpm=bpm,
        frames=info.frames,
        gain_db=gain_db,
        sample_rate=info.samplerate,
    )
    write_sample_attributes_file(attributes, ot_path)
    logger.info(f"✓ Created {ot_path.name} ({info.frames:,} frames, {attributes.trim_len / 100:g} bars)")
    return ot_path


__all__ = ['create_default_attributes']
