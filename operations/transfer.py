"""
Copy sample files into a destination project
"""

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List

from .planner import FileTransfer

logger = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".part"


@dataclass
class TransferReport:
    copied: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


def transfer_files(transfers: Iterable[FileTransfer], src_dir, dest_dir) -> TransferReport:
    """
    Copy audio files and their .ot sidecars

    Files already present at the destination are left alone, so running the
    same transfers again copies nothing. A missing source .ot is not an error.

    Args:
        transfers: Planned transfers. Relative paths resolve against src_dir
            and dest_dir.
        src_dir: Source project directory
        dest_dir: Destination project directory

    Returns:
        TransferReport of copied and skipped destination paths
    """
    report = TransferReport()
    src_dir = Path(src_dir)
    dest_dir = Path(dest_dir)

    for transfer in transfers:
        pairs = [
            (src_dir / transfer.src_audio, dest_dir / transfer.dest_audio, True),
            (src_dir / transfer.src_attributes, dest_dir / transfer.dest_attributes, False),
        ]
        for src, dest, required in pairs:
            if dest.exists():
                logger.debug(f"Already present, skipping: {dest}")
                report.skipped.append(dest)
                continue
            if not required and not src.exists():
                continue
            dest.parent.mkdir(parents=True, exist_ok=True)
            copy_atomic(src, dest)
            logger.info(f"  Copied {src.name} -> {dest}")
            report.copied.append(dest)

    logger.info(f"✓ Transferred {len(report.copied)} file(s), {len(report.skipped)} already present")
    return report


def copy_atomic(src: Path, dest: Path):
    """
    Copy src to dest through a .part sibling

    dest only appears once the copy is complete, so an interrupted copy never
    leaves a truncated file that a later run would skip as already present.
    """
    partial = dest.with_name(dest.name + PARTIAL_SUFFIX)
    try:
        shutil.copy2(src, partial)
        os.replace(partial, dest)
    except BaseException:
        partial.unlink(missing_ok=True)
        raise


__all__ = ['PARTIAL_SUFFIX', 'TransferReport', 'transfer_files', 'copy_atomic']
