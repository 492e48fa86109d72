"""
File transfer tests
"""

import shutil
from pathlib import Path

import pytest

from operations.planner import FileTransfer
from operations.transfer import transfer_files


def setup_source(tmp_path):
    src = tmp_path / "SRC"
    dest = tmp_path / "DEST"
    (src / "AUDIO").mkdir(parents=True)
    dest.mkdir()
    (src / "AUDIO" / "kick.wav").write_bytes(b"kick")
    (src / "AUDIO" / "kick.ot").write_bytes(b"kick-ot")
    (src / "AUDIO" / "snare.wav").write_bytes(b"snare")
    transfers = [
        FileTransfer(Path("AUDIO/kick.wav"), Path("kick.wav")),
        FileTransfer(Path("AUDIO/snare.wav"), Path("snare.wav")),
    ]
    return src, dest, transfers


def test_copies_audio_and_attributes(tmp_path):
    src, dest, transfers = setup_source(tmp_path)

    report = transfer_files(transfers, src, dest)

    assert (dest / "kick.wav").read_bytes() == b"kick"
    assert (dest / "kick.ot").read_bytes() == b"kick-ot"
    assert (dest / "snare.wav").read_bytes() == b"snare"
    assert not (dest / "snare.ot").exists()
    assert len(report.copied) == 3
    assert report.skipped == []


def test_second_run_copies_nothing(tmp_path):
    src, dest, transfers = setup_source(tmp_path)
    transfer_files(transfers, src, dest)
    before = {p.name: p.read_bytes() for p in dest.iterdir()}

    report = transfer_files(transfers, src, dest)

    assert report.copied == []
    assert {p.name: p.read_bytes() for p in dest.iterdir()} == before


def test_existing_destination_not_overwritten(tmp_path):
    src, dest, transfers = setup_source(tmp_path)
    (dest / "kick.wav").write_bytes(b"mine")

    report = transfer_files(transfers[:1], src, dest)

    assert (dest / "kick.wav").read_bytes() == b"mine"
    assert report.skipped == [dest / "kick.wav"]
    assert report.copied == [dest / "kick.ot"]


def test_absolute_source_paths(tmp_path):
    src, dest, _ = setup_source(tmp_path)
    transfers = [FileTransfer(src / "AUDIO" / "kick.wav", Path("kick.wav"))]
    transfer_files(transfers, tmp_path / "elsewhere", dest)
    assert (dest / "kick.wav").exists()


def test_interrupted_copy_leaves_no_partial_file(tmp_path, monkeypatch):
    src, dest, transfers = setup_source(tmp_path)
    real_copy = shutil.copy2

    def failing_copy(source, target):
        Path(target).write_bytes(b"ki")
        raise OSError("disk full")

    monkeypatch.setattr(shutil, "copy2", failing_copy)
    with pytest.raises(OSError):
        transfer_files(transfers[:1], src, dest)
    assert list(dest.iterdir()) == []

    monkeypatch.setattr(shutil, "copy2", real_copy)
    report = transfer_files(transfers[:1], src, dest)

    assert (dest / "kick.wav").read_bytes() == b"kick"
    assert report.copied == [dest / "kick.wav", dest / "kick.ot"]
