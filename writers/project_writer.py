"""
Project → project file writer

Emits the device's canonical CRLF layout: banner-separated META, SETTINGS,
STATES and SAMPLE sections, closed by a banner footer.
"""

import logging
from dataclasses import asdict
from pathlib import Path
from typing import List

from core.errors import FormatError
from core.options import SlotType, TrigQuantization
from core.project import Project
from core.slots import SampleSlot

logger = logging.getLogger(__name__)

CRLF = "\r\n"
BANNER = "#" * 28


def _banner(title: str) -> str:
    return CRLF.join([BANNER, f"# {title}", BANNER])


def _section(name: str, lines: List[str]) -> str:
    return CRLF.join([f"[{name}]"] + lines + [f"[/{name}]"])


def format_sample_slot(slot: SampleSlot) -> str:
    """One [SAMPLE] block, slot id as stored on disk"""
    # recorder buffers are stored as flex slots
    sample_type = SlotType.FLEX if slot.is_recorder() else slot.sample_type
    if slot.trig_quantization == TrigQuantization.DIRECT:
        quantization = -1
    else:
        quantization = int(slot.trig_quantization)

    return _section("SAMPLE", [
        f"TYPE={sample_type.value}",
        f"SLOT={slot.slot_id:03d}",
        f"PATH={slot.path}",
        f"TRIM_BARSx100={slot.trim_bars_x100}",
        f"TSMODE={int(slot.timestretch_mode)}",
        f"LOOPMODE={int(slot.loop_mode)}",
        f"GAIN={slot.gain + 48}",
        f"TRIGQUANTIZATION={quantization}",
    ])


class ProjectWriter:
    """Write Octatrack project files"""

    def encode(self, project: Project) -> str:
        meta = project.metadata
        blocks = [
            _banner("Project Settings"),
            _section("META", [
                f"TYPE={meta.filetype}",
                f"VERSION={meta.project_version}",
                f"OS_VERSION={meta.os_version}",
            ]),
            _banner("Project Settings"),
            _section("SETTINGS", [f"{k}={v}" for k, v in project.settings.entries]),
            _banner("Project States"),
            _section("STATES", [
                f"{key.upper()}={value}" for key, value in asdict(project.states).items()
            ]),
            _banner("Samples"),
        ]
        blocks.extend(format_sample_slot(slot) for slot in project.slots)
        blocks.append(BANNER)
        return (CRLF + CRLF).join(blocks) + CRLF + CRLF

    def write(self, project: Project, filepath):
        """
        Write project to a file

        Args:
            project: Project record (1-indexed slots)
            filepath: Output project.work path
        """
        text = self.encode(project)
        try:
            data = text.encode('ascii')
        except UnicodeEncodeError as e:
            raise FormatError(f"project text must be ASCII: {e}", str(filepath)) from e
        Path(filepath).write_bytes(data)
        logger.debug(f"Written project with {len(project.slots)} slots to {filepath}")


def write_project_file(project: Project, filepath):
    """Convenience function to write a project file"""
    writer = ProjectWriter()
    writer.write(project, filepath)


__all__ = ["ProjectWriter", "write_project_file", "format_sample_slot"]
