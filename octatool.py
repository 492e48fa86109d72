#!/usr/bin/env python3
"""
octatool v1.0 - Octatrack project file toolkit

Copy banks between projects without breaking sample slots, inspect and
tidy project sample slots, and create default project and .ot files.

Usage:
    octatool copy-bank SRC_PROJECT 1 DEST_PROJECT 5
    octatool copy-banks batch.yaml
    octatool list-slots PROJECT
    octatool list-refs PROJECT 3 --exclude-inactive
    octatool dedup PROJECT
    octatool purge PROJECT
    octatool consolidate PROJECT --into audio-pool
    octatool purge-pool PROJECT
    octatool create-ot kick.wav --bpm 125
    octatool new project PROJECT
"""

import argparse
import sys
import logging

from core.errors import OctatoolError
from operations import (
    copy_bank,
    copy_banks_from_config,
    list_project_slots,
    list_bank_references,
    dedup_project,
    purge_project,
    consolidate_to_audio_pool,
    consolidate_to_project_pool,
    purge_project_pool,
    create_default_attributes,
    create_project,
)

VERSION = '1.0.0'

logger = logging.getLogger('octatool')


def setup_logging(verbose: bool = False):
    """Configure logging"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(levelname)-8s | %(message)s'
    )


def cmd_copy_bank(args):
    """Handle copy-bank command."""
    result = copy_bank(
        args.src_project, args.src_bank,
        args.dest_project, args.dest_bank,
        force=args.force,
    )
    print(f"New slots: {len(result.plan.new_slots())}")
    print(f"Files copied: {len(result.transfers.copied)}")
    return 0


def cmd_copy_banks(args):
    """Handle batch copy command."""
    results = copy_banks_from_config(args.config)
    print(f"Banks copied: {len(results)}")
    return 0


def cmd_list_slots(args):
    """Handle list-slots command."""
    slots = list_project_slots(args.project)
    print(f"{'TYPE':<9} {'SLOT':>4}  PATH")
    print("-" * 70)
    for slot in slots:
        print(f"{slot.sample_type.value:<9} {slot.slot_id:>4}  {slot.path}")
    print(f"\n{len(slots)} slot(s)")
    return 0


def cmd_list_refs(args):
    """Handle list-refs command."""
    refs = list_bank_references(args.project, args.bank, exclude_inactive=args.exclude_inactive)
    print(f"{'TYPE':<9} {'SLOT':>4}  KIND")
    print("-" * 70)
    for ref in refs:
        # zero-indexed internally, shown as on the device
        print(f"{ref.sample_type.value:<9} {ref.slot_id + 1:>4}  {ref.kind.value}")
    print(f"\n{len(refs)} reference(s)")
    return 0


def cmd_dedup(args):
    """Handle dedup command."""
    result = dedup_project(args.project)
    print(f"Slots merged: {len(result.reassignments)}")
    print(f"Banks rewritten: {len(result.banks_written)}")
    return 0


def cmd_purge(args):
    """Handle purge command."""
    result = purge_project(args.project)
    print(f"Slots removed: {len(result.removed)}")
    return 0


def cmd_consolidate(args):
    """Handle consolidate command."""
    if args.into == 'project':
        result = consolidate_to_project_pool(args.project)
    else:
        result = consolidate_to_audio_pool(args.project)
    print(f"Slots moved: {len(result.relocated)}")
    print(f"Files copied: {len(result.copied)}")
    return 0


def cmd_purge_pool(args):
    """Handle purge-pool command."""
    result = purge_project_pool(args.project)
    for path in result.deleted:
        print(f"  deleted {path}")
    print(f"Files deleted: {len(result.deleted)}")
    return 0


def cmd_create_ot(args):
    """Handle create-ot command."""
    for audio in args.audio_files:
        create_default_attributes(audio, bpm=args.bpm, gain_db=args.gain, overwrite=args.overwrite)
    return 0


def cmd_new_project(args):
    """Handle new project command."""
    create_project(args.project, overwrite=args.overwrite)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='octatool',
        description='octatool v1.0 - Octatrack project file toolkit',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose output')
    parser.add_argument('--version', action='version',
                        version=f'octatool v{VERSION}')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # COPY-BANK command
    copy_parser = subparsers.add_parser(
        'copy-bank',
        help='Copy a bank into another project, moving its samples along'
    )
    copy_parser.add_argument('src_project', help='Source project directory')
    copy_parser.add_argument('src_bank', type=int, help='Source bank (1-16)')
    copy_parser.add_argument('dest_project', help='Destination project directory')
    copy_parser.add_argument('dest_bank', type=int, help='Destination bank (1-16)')
    copy_parser.add_argument('-f', '--force', action='store_true',
                             help='Overwrite a destination bank that has been edited')
    copy_parser.set_defaults(func=cmd_copy_bank)

    # COPY-BANKS command
    batch_parser = subparsers.add_parser(
        'copy-banks',
        help='Run the bank copies listed in a YAML config'
    )
    batch_parser.add_argument('config', help='YAML config file')
    batch_parser.set_defaults(func=cmd_copy_banks)

    # LIST-SLOTS command
    slots_parser = subparsers.add_parser('list-slots', help='List project sample slots')
    slots_parser.add_argument('project', help='Project directory')
    slots_parser.set_defaults(func=cmd_list_slots)

    # LIST-REFS command
    refs_parser = subparsers.add_parser('list-refs', help='List the sample slots a bank uses')
    refs_parser.add_argument('project', help='Project directory')
    refs_parser.add_argument('bank', type=int, help='Bank (1-16)')
    refs_parser.add_argument('--exclude-inactive', action='store_true',
                             help='Only show slots the project actually has')
    refs_parser.set_defaults(func=cmd_list_refs)

    # DEDUP command
    dedup_parser = subparsers.add_parser('dedup', help='Merge duplicate sample slots')
    dedup_parser.add_argument('project', help='Project directory')
    dedup_parser.set_defaults(func=cmd_dedup)

    # PURGE command
    purge_parser = subparsers.add_parser('purge', help='Remove sample slots no bank uses')
    purge_parser.add_argument('project', help='Project directory')
    purge_parser.set_defaults(func=cmd_purge)

    # CONSOLIDATE command
    consolidate_parser = subparsers.add_parser(
        'consolidate',
        help='Copy slot samples into one directory and repoint the slots'
    )
    consolidate_parser.add_argument('project', help='Project directory')
    consolidate_parser.add_argument('--into', choices=['audio-pool', 'project'], default='audio-pool',
                                    help="Set AUDIO directory (default) or the project directory")
    consolidate_parser.set_defaults(func=cmd_consolidate)

    # PURGE-POOL command
    pool_parser = subparsers.add_parser(
        'purge-pool',
        help='Delete audio files in the project directory that no slot uses'
    )
    pool_parser.add_argument('project', help='Project directory')
    pool_parser.set_defaults(func=cmd_purge_pool)

    # CREATE-OT command
    ot_parser = subparsers.add_parser('create-ot', help='Write default .ot files for audio files')
    ot_parser.add_argument('audio_files', nargs='+', help='Audio files')
    ot_parser.add_argument('--bpm', type=float, default=120.0, help='Sample tempo (30-300)')
    ot_parser.add_argument('--gain', type=float, default=0.0, help='Gain in dB (-24 to 24)')
    ot_parser.add_argument('--overwrite', action='store_true', help='Replace existing .ot files')
    ot_parser.set_defaults(func=cmd_create_ot)

    # NEW command
    new_parser = subparsers.add_parser('new', help='Create default files')
    new_subparsers = new_parser.add_subparsers(dest='kind')
    new_project_parser = new_subparsers.add_parser('project', help='Create a default project directory')
    new_project_parser.add_argument('project', help='Project directory')
    new_project_parser.add_argument('--overwrite', action='store_true',
                                    help='Replace an existing project')
    new_project_parser.set_defaults(func=cmd_new_project)

    return parser


def main(argv=None):
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not getattr(args, 'func', None):
        parser.print_help()
        return 1

    setup_logging(args.verbose)

    print("=" * 70)
    print(f"octatool v{VERSION}")
    print("=" * 70)

    try:
        code = args.func(args)
        print("\n" + "=" * 70)
        print("SUCCESS" if code == 0 else "FAILED")
        print("=" * 70)
        return code

    except KeyboardInterrupt:
        print("\n\nCancelled by user")
        return 130
    except (OctatoolError, OSError) as e:
        logger.error(str(e))
        print("\n" + "=" * 70)
        print("FAILED")
        print("=" * 70)
        return 1
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
