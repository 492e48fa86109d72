"""
Project file parser (project.work / project.strd)

The file is CRLF text: [META], [SETTINGS] and [STATES] sections followed by
one [SAMPLE] block per sample slot, separated by '#' banner lines. The
parser reads sections generically, keeping key/value pairs in file order,
then maps them onto the project records.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List, Tuple

from core.errors import FormatError
from core.options import SlotType, TimestretchMode, LoopMode, TrigQuantization
from core.project import Project, ProjectMetadata, ProjectSettings, ProjectStates
from core.slots import SampleSlot

logger = logging.getLogger(__name__)

SECTION_OPEN = re.compile(r'^\[([A-Z_]+)\]$')
SECTION_CLOSE = re.compile(r'^\[/([A-Z_]+)\]$')

Section = Tuple[str, List[Tuple[str, str]]]


def split_sections(text: str) -> List[Section]:
    """
    Split project text into (NAME, [(KEY, VALUE), ...]) sections

    Duplicate keys are kept in order of appearance.
    """
    sections: List[Section] = []
    current = None

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue

        opened = SECTION_OPEN.match(line)
        if opened:
            if current is not None:
                raise FormatError(f"line {lineno}: section [{opened.group(1)}] opened inside [{current[0]}]")
            current = (opened.group(1), [])
            continue

        closed = SECTION_CLOSE.match(line)
        if closed:
            if current is None or closed.group(1) != current[0]:
                raise FormatError(f"line {lineno}: unexpected [/{closed.group(1)}]")
            sections.append(current)
            current = None
            continue

        if current is None:
            raise FormatError(f"line {lineno}: content outside of a section: {line!r}")
        if '=' not in line:
            logger.debug("Ignoring line %d without '=': %r", lineno, line)
            continue
        key, value = line.split('=', 1)
        current[1].append((key, value))

    if current is not None:
        raise FormatError(f"section [{current[0]}] is never closed")
    return sections


def _lookup(entries: List[Tuple[str, str]]) -> Dict[str, str]:
    # first occurrence wins
    table: Dict[str, str] = {}
    for key, value in entries:
        table.setdefault(key.upper(), value)
    return table


def _int_or(table: Dict[str, str], key: str, default: int) -> int:
    value = table.get(key)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        logger.warning("Unparseable %s=%r, using default %s", key, value, default)
        return default


class ProjectParser:
    """Parse Octatrack project files"""

    def parse(self, text: str) -> Project:
        sections = split_sections(text)
        by_name: Dict[str, List[Tuple[str, str]]] = {}
        samples = []
        for name, entries in sections:
            if name == 'SAMPLE':
                samples.append(entries)
            elif name in by_name:
                raise FormatError(f"duplicate [{name}] section")
            else:
                by_name[name] = entries

        for required in ('META', 'SETTINGS', 'STATES'):
            if required not in by_name:
                raise FormatError(f"missing [{required}] section")

        project = Project(
            metadata=self._parse_metadata(by_name['META']),
            settings=ProjectSettings(entries=list(by_name['SETTINGS'])),
            states=self._parse_states(by_name['STATES']),
            slots=[self._parse_sample(entries) for entries in samples],
        )

        trig_modes = project.settings.trig_mode_midi
        if len(trig_modes) != 8:
            logger.warning("Expected 8 TRIG_MODE_MIDI settings, found %d", len(trig_modes))

        logger.debug(f"Parsed project: {len(project.slots)} sample slots, OS {project.metadata.os_version}")
        return project

    def parse_file(self, filepath) -> Project:
        path = Path(filepath)
        logger.debug(f"Reading project: {path}")
        try:
            text = path.read_bytes().decode('ascii')
        except UnicodeDecodeError as e:
            raise FormatError(f"project file is not ASCII: {e}", str(path)) from e
        try:
            return self.parse(text)
        except FormatError as e:
            raise FormatError(str(e), str(path)) from e

    def _parse_metadata(self, entries) -> ProjectMetadata:
        table = _lookup(entries)
        try:
            return ProjectMetadata(
                filetype=table['TYPE'],
                project_version=int(table['VERSION']),
                os_version=table['OS_VERSION'],
            )
        except KeyError as e:
            raise FormatError(f"[META] is missing {e.args[0]}") from e
        except ValueError as e:
            raise FormatError(f"[META] has a bad VERSION: {table.get('VERSION')!r}") from e

    def _parse_states(self, entries) -> ProjectStates:
        table = _lookup(entries)
        values = {}
        for key in ProjectStates.keys():
            values[key.lower()] = _int_or(table, key, 0)
        return ProjectStates(**values)

    def _parse_sample(self, entries) -> SampleSlot:
        table = _lookup(entries)

        try:
            slot_id = int(table['SLOT'])
        except KeyError as e:
            raise FormatError("[SAMPLE] without SLOT") from e
        except ValueError as e:
            raise FormatError(f"[SAMPLE] has a bad SLOT: {table['SLOT']!r}") from e

        # recorder buffers are written as FLEX slots above 128
        if slot_id >= 129:
            sample_type = SlotType.RECORDER
        else:
            try:
                sample_type = SlotType(table.get('TYPE', '').upper())
            except ValueError as e:
                raise FormatError(f"[SAMPLE] slot {slot_id} has a bad TYPE: {table.get('TYPE')!r}") from e

        quantization = _int_or(table, 'TRIGQUANTIZATION', 255)
        if quantization < 0:
            quantization = 255

        if 'BPMX24' in table:
            bpm = _int_or(table, 'BPMX24', 2880) // 24
        else:
            bpm = _int_or(table, 'BPM', 2880) // 24

        try:
            return SampleSlot(
                sample_type=sample_type,
                slot_id=slot_id,
                path=table.get('PATH', ''),
                trim_bars_x100=_int_or(table, 'TRIM_BARSX100', 0),
                timestretch_mode=TimestretchMode(_int_or(table, 'TSMODE', 0)),
                loop_mode=LoopMode(_int_or(table, 'LOOPMODE', 0)),
                trig_quantization=TrigQuantization(quantization),
                gain=_int_or(table, 'GAIN', 48) - 48,
                bpm=bpm,
            )
        except ValueError as e:
            raise FormatError(f"[SAMPLE] slot {slot_id}: {e}") from e


def parse_project_file(filepath) -> Project:
    """Convenience function to parse a project file"""
    parser = ProjectParser()
    return parser.parse_file(filepath)


__all__ = ["ProjectParser", "parse_project_file", "split_sections"]
