"""
Bank → bank file writer

Builds the 636,113 byte bank layout into a bytearray. Every array length
is checked before it is written.
"""

import logging
from pathlib import Path

from core.bank import (
    Bank, Pattern, Part, AudioTrackTrigs, MidiTrackTrigs, AudioParameterLock, MachineSlot,
    BANK_SIZE, N_PATTERNS, N_PARTS, N_TRACKS, N_PLOCKS, N_SCENES, PLOCK_SIZE,
)
from core.errors import FormatError
from .binary import put, put_u8, check_count

logger = logging.getLogger(__name__)


class BankWriter:
    """Write Octatrack bank files"""

    def encode(self, bank: Bank) -> bytes:
        data = bytearray()
        put(data, bank.header, 22, "bank header")

        check_count(bank.patterns, N_PATTERNS, "bank patterns")
        for pattern in bank.patterns:
            self._write_pattern(data, pattern)

        check_count(bank.parts_unsaved, N_PARTS, "unsaved parts")
        check_count(bank.parts_saved, N_PARTS, "saved parts")
        for part in bank.parts_unsaved + bank.parts_saved:
            self._write_part(data, part)

        put(data, bank.unknown, 5, "bank unknown bytes")
        check_count(bank.part_names, N_PARTS, "part names")
        for name in bank.part_names:
            put(data, name, 7, "part name")
        put(data, bank.checksum, 2, "bank checksum")

        if len(data) != BANK_SIZE:
            raise FormatError(f"encoded bank is {len(data)} bytes, expected {BANK_SIZE}")
        return bytes(data)

    def write(self, bank: Bank, filepath):
        """
        Write bank to a file

        Args:
            bank: Bank record
            filepath: Output bankNN.work path
        """
        data = self.encode(bank)
        Path(filepath).write_bytes(data)
        logger.debug(f"Written {len(data):,} bytes to {filepath}")

    def _write_pattern(self, data: bytearray, pattern: Pattern):
        put(data, pattern.header, 8, "pattern header")
        check_count(pattern.audio_tracks, N_TRACKS, "pattern audio tracks")
        for track in pattern.audio_tracks:
            self._write_audio_track(data, track)
        check_count(pattern.midi_tracks, N_TRACKS, "pattern MIDI tracks")
        for track in pattern.midi_tracks:
            self._write_midi_track(data, track)
        put(data, pattern.scale, 6, "pattern scale")
        put(data, pattern.chain_behaviour, 2, "pattern chain behaviour")
        put_u8(data, pattern.unknown, "pattern unknown")
        put_u8(data, pattern.part_assignment, "part assignment")
        put_u8(data, pattern.tempo_1, "tempo_1")
        put_u8(data, pattern.tempo_2, "tempo_2")

    def _write_audio_track(self, data: bytearray, track: AudioTrackTrigs):
        put(data, track.header, 4, "audio track header")
        put(data, track.unknown_1, 4, "audio track unknown_1")
        put_u8(data, track.track_id, "track id")
        put(data, track.trig_masks, 80, "audio trig masks")
        put(data, track.scale_per_track, 2, "per-track scale")
        put_u8(data, track.swing_amount, "swing amount")
        put(data, track.pattern_settings, 5, "track pattern settings")
        put_u8(data, track.unknown_2, "audio track unknown_2")
        check_count(track.plocks, N_PLOCKS, "audio parameter locks")
        for plock in track.plocks:
            self._write_audio_plock(data, plock)
        put(data, track.unknown_3, 64, "audio track unknown_3")
        put(data, track.trig_offsets, 128, "trig offsets")

    def _write_audio_plock(self, data: bytearray, plock: AudioParameterLock):
        put(data, plock.machine, 6, "plock machine")
        put(data, plock.lfo, 6, "plock lfo")
        put(data, plock.amp, 6, "plock amp")
        put(data, plock.fx1, 6, "plock fx1")
        put(data, plock.fx2, 6, "plock fx2")
        put_u8(data, plock.static_slot_id, "plock static slot")
        put_u8(data, plock.flex_slot_id, "plock flex slot")

    def _write_midi_track(self, data: bytearray, track: MidiTrackTrigs):
        put(data, track.header, 4, "MIDI track header")
        put(data, track.unknown_1, 4, "MIDI track unknown_1")
        put_u8(data, track.track_id, "track id")
        put(data, track.trig_masks, 40, "MIDI trig masks")
        put(data, track.scale_per_track, 2, "per-track scale")
        put_u8(data, track.swing_amount, "swing amount")
        put(data, track.pattern_settings, 5, "track pattern settings")
        put(data, track.plocks, N_PLOCKS * PLOCK_SIZE, "MIDI parameter locks")
        put(data, track.trig_offsets, 128, "trig offsets")

    def _write_part(self, data: bytearray, part: Part):
        put(data, part.header, 4, "part header")
        put(data, part.data_block_1, 4, "part data block")
        put_u8(data, part.part_id, "part id")
        put(data, part.audio_track_fx1, N_TRACKS, "fx1 types")
        put(data, part.audio_track_fx2, N_TRACKS, "fx2 types")
        put(data, part.active_scenes, 2, "active scenes")
        put(data, part.volumes, N_TRACKS * 2, "track volumes")
        put(data, part.machine_types, N_TRACKS, "machine types")
        put(data, part.machine_params_values, N_TRACKS * 30, "machine parameter values")
        put(data, part.params_values, N_TRACKS * 24, "track parameter values")
        put(data, part.machine_setup, N_TRACKS * 30, "machine setup")
        check_count(part.machine_slots, N_TRACKS, "machine slots")
        for slot in part.machine_slots:
            self._write_machine_slot(data, slot)
        put(data, part.params_setup, N_TRACKS * 30, "track parameter setup")
        put(data, part.midi_params_values, N_TRACKS * 32, "MIDI parameter values")
        put(data, part.midi_setup, N_TRACKS * 36, "MIDI setup")
        put(data, part.recorder_setup, N_TRACKS * 12, "recorder setup")
        put(data, part.scenes, N_SCENES * N_TRACKS * 32, "scenes")
        put(data, part.scene_xlvs, N_SCENES * 10, "scene crossfades")
        put(data, part.audio_lfo_designs, N_TRACKS * 16, "audio LFO designs")
        put(data, part.audio_lfo_interpolation, N_TRACKS * 2, "audio LFO interpolation")
        put(data, part.midi_lfo_designs, N_TRACKS * 16, "MIDI LFO designs")
        put(data, part.midi_lfo_interpolation, N_TRACKS * 2, "MIDI LFO interpolation")
        put(data, part.arp_mute_masks, 16, "arp mute masks")
        put(data, part.arp_sequences, N_TRACKS * 16, "arp sequences")

    def _write_machine_slot(self, data: bytearray, slot: MachineSlot):
        put_u8(data, slot.static_slot_id, "static machine slot")
        put_u8(data, slot.flex_slot_id, "flex machine slot")
        put(data, slot.unused, 2, "machine slot unused bytes")
        put_u8(data, slot.recorder_slot_id, "recorder machine slot")


def encode_bank(bank: Bank) -> bytes:
    return BankWriter().encode(bank)


def write_bank_file(bank: Bank, filepath):
    """Convenience function to write a bank file"""
    writer = BankWriter()
    writer.write(bank, filepath)


__all__ = ["BankWriter", "encode_bank", "write_bank_file"]
