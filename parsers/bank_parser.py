"""
Bank file parser (bank01.work - bank16.work)

Decodes the fixed 636,113 byte layout into core.bank records.
"""

import logging
from pathlib import Path

from core.bank import (
    Bank, Pattern, Part, AudioTrackTrigs, MidiTrackTrigs, AudioParameterLock, MachineSlot,
    BANK_SIZE, N_PATTERNS, N_PARTS, N_TRACKS, N_PLOCKS, N_SCENES, PLOCK_SIZE,
)
from core.errors import FormatError
from .binary import ByteReader, check_size

logger = logging.getLogger(__name__)


class BankParser:
    """Parse Octatrack bank files"""

    def parse(self, data: bytes) -> Bank:
        check_size(data, BANK_SIZE, "bank")
        reader = ByteReader(data, "bank")

        header = reader.take(22)
        if header[8:16] != b'DPS1BANK':
            raise FormatError(f"not a bank file (header {header[:16]!r})")

        patterns = [self._read_pattern(reader) for _ in range(N_PATTERNS)]
        parts_unsaved = [self._read_part(reader) for _ in range(N_PARTS)]
        parts_saved = [self._read_part(reader) for _ in range(N_PARTS)]
        unknown = reader.take(5)
        part_names = [reader.take(7) for _ in range(N_PARTS)]
        checksum = reader.take(2)
        reader.finish()

        bank = Bank(
            header=header,
            patterns=patterns,
            parts_unsaved=parts_unsaved,
            parts_saved=parts_saved,
            unknown=unknown,
            part_names=part_names,
            checksum=checksum,
        )
        logger.debug("Parsed bank: parts=%s", [bank.part_name(i) for i in range(N_PARTS)])
        return bank

    def parse_file(self, filepath) -> Bank:
        path = Path(filepath)
        logger.debug(f"Reading bank: {path}")
        try:
            return self.parse(path.read_bytes())
        except FormatError as e:
            raise FormatError(str(e), str(path)) from e

    # --- patterns ---

    def _read_pattern(self, reader: ByteReader) -> Pattern:
        return Pattern(
            header=reader.take(8),
            audio_tracks=[self._read_audio_track(reader) for _ in range(N_TRACKS)],
            midi_tracks=[self._read_midi_track(reader) for _ in range(N_TRACKS)],
            scale=reader.take(6),
            chain_behaviour=reader.take(2),
            unknown=reader.u8(),
            part_assignment=reader.u8(),
            tempo_1=reader.u8(),
            tempo_2=reader.u8(),
        )

    def _read_audio_track(self, reader: ByteReader) -> AudioTrackTrigs:
        header = reader.take(4)
        unknown_1 = reader.take(4)
        track_id = reader.u8()
        return AudioTrackTrigs(
            track_id=track_id,
            header=header,
            unknown_1=unknown_1,
            trig_masks=reader.take(80),
            scale_per_track=reader.take(2),
            swing_amount=reader.u8(),
            pattern_settings=reader.take(5),
            unknown_2=reader.u8(),
            plocks=[self._read_audio_plock(reader) for _ in range(N_PLOCKS)],
            unknown_3=reader.take(64),
            trig_offsets=reader.take(128),
        )

    def _read_audio_plock(self, reader: ByteReader) -> AudioParameterLock:
        return AudioParameterLock(
            machine=reader.take(6),
            lfo=reader.take(6),
            amp=reader.take(6),
            fx1=reader.take(6),
            fx2=reader.take(6),
            static_slot_id=reader.u8(),
            flex_slot_id=reader.u8(),
        )

    def _read_midi_track(self, reader: ByteReader) -> MidiTrackTrigs:
        header = reader.take(4)
        unknown_1 = reader.take(4)
        track_id = reader.u8()
        return MidiTrackTrigs(
            track_id=track_id,
            header=header,
            unknown_1=unknown_1,
            trig_masks=reader.take(40),
            scale_per_track=reader.take(2),
            swing_amount=reader.u8(),
            pattern_settings=reader.take(5),
            plocks=reader.take(N_PLOCKS * PLOCK_SIZE),
            trig_offsets=reader.take(128),
        )

    # --- parts ---

    def _read_part(self, reader: ByteReader) -> Part:
        header = reader.take(4)
        data_block_1 = reader.take(4)
        part_id = reader.u8()
        return Part(
            part_id=part_id,
            header=header,
            data_block_1=data_block_1,
            audio_track_fx1=reader.take(N_TRACKS),
            audio_track_fx2=reader.take(N_TRACKS),
            active_scenes=reader.take(2),
            volumes=reader.take(N_TRACKS * 2),
            machine_types=reader.take(N_TRACKS),
            machine_params_values=reader.take(N_TRACKS * 30),
            params_values=reader.take(N_TRACKS * 24),
            machine_setup=reader.take(N_TRACKS * 30),
            machine_slots=[self._read_machine_slot(reader) for _ in range(N_TRACKS)],
            params_setup=reader.take(N_TRACKS * 30),
            midi_params_values=reader.take(N_TRACKS * 32),
            midi_setup=reader.take(N_TRACKS * 36),
            recorder_setup=reader.take(N_TRACKS * 12),
            scenes=reader.take(N_SCENES * N_TRACKS * 32),
            scene_xlvs=reader.take(N_SCENES * 10),
            audio_lfo_designs=reader.take(N_TRACKS * 16),
            audio_lfo_interpolation=reader.take(N_TRACKS * 2),
            midi_lfo_designs=reader.take(N_TRACKS * 16),
            midi_lfo_interpolation=reader.take(N_TRACKS * 2),
            arp_mute_masks=reader.take(16),
            arp_sequences=reader.take(N_TRACKS * 16),
        )

    def _read_machine_slot(self, reader: ByteReader) -> MachineSlot:
        static_slot_id = reader.u8()
        flex_slot_id = reader.u8()
        unused = reader.take(2)
        recorder_slot_id = reader.u8()
        return MachineSlot(
            static_slot_id=static_slot_id,
            flex_slot_id=flex_slot_id,
            unused=unused,
            recorder_slot_id=recorder_slot_id,
        )


def parse_bank_file(filepath) -> Bank:
    """Convenience function to parse a bank file"""
    parser = BankParser()
    return parser.parse_file(filepath)


__all__ = ["BankParser", "parse_bank_file"]
