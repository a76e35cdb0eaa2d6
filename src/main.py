"""Main entry point for the photo metadata editor."""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from src.metadata.date_format import EXIF_DATETIME_FORMAT
from src.utils.config_loader import load_config
from src.utils.logger import setup_logger

logger = None


def _add_common_arguments(subparser, with_output: bool = True):
    subparser.add_argument(
        'source',
        help='Image file or raw metadata JSON dump'
    )
    if with_output:
        subparser.add_argument(
            '--output', '-o',
            help='Write the edited raw metadata JSON here (default: stdout)'
        )
    subparser.add_argument(
        '--config',
        default='config/config.yaml',
        help='Path to configuration file'
    )


def _parse_date(value: str) -> datetime:
    for fmt in (EXIF_DATETIME_FORMAT, '%Y-%m-%dT%H:%M:%S', '%Y-%m-%d %H:%M:%S', '%Y-%m-%d'):
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise argparse.ArgumentTypeError(
        f"Invalid date: {value!r} (expected YYYY-MM-DD[ HH:MM:SS] or YYYY:MM:DD HH:MM:SS)"
    )


def _parse_field_value(value: str) -> Any:
    try:
        decoded = json.loads(value)
    except ValueError:
        return value
    if decoded is None or isinstance(decoded, dict):
        return value
    return decoded


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Inspect and edit image metadata (timestamp, location, stripping)"
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Show command
    show_parser = subparsers.add_parser(
        'show',
        help='Show grouped, human-readable metadata'
    )
    _add_common_arguments(show_parser, with_output=False)
    show_parser.add_argument(
        '--json',
        action='store_true',
        help='Print the snapshot as JSON'
    )

    # Set date command
    set_date_parser = subparsers.add_parser(
        'set-date',
        help='Set the capture timestamp'
    )
    _add_common_arguments(set_date_parser)
    set_date_parser.add_argument(
        'date',
        type=_parse_date,
        help='New timestamp, e.g. "2024-03-25 14:05:09"'
    )

    # Delete date command
    delete_date_parser = subparsers.add_parser(
        'delete-date',
        help='Remove the capture timestamp'
    )
    _add_common_arguments(delete_date_parser)

    # Set GPS command
    set_gps_parser = subparsers.add_parser(
        'set-gps',
        help='Replace the GPS location'
    )
    _add_common_arguments(set_gps_parser)
    set_gps_parser.add_argument('latitude', type=float, help='Signed decimal degrees')
    set_gps_parser.add_argument('longitude', type=float, help='Signed decimal degrees')

    # Delete GPS command
    delete_gps_parser = subparsers.add_parser(
        'delete-gps',
        help='Remove the GPS location'
    )
    _add_common_arguments(delete_gps_parser)

    # Strip command
    strip_parser = subparsers.add_parser(
        'strip',
        help='Remove all metadata except orientation'
    )
    _add_common_arguments(strip_parser)

    # Set field command
    set_field_parser = subparsers.add_parser(
        'set-field',
        help='Set one field (TIFF keys go to {TIFF}, others to {Exif})'
    )
    _add_common_arguments(set_field_parser)
    set_field_parser.add_argument('field', help='Field key, e.g. Artist')
    set_field_parser.add_argument(
        'value',
        type=_parse_field_value,
        help='New value; JSON numbers and lists are decoded, anything else is text'
    )

    # Delete field command
    delete_field_parser = subparsers.add_parser(
        'delete-field',
        help='Remove one field'
    )
    _add_common_arguments(delete_field_parser)
    delete_field_parser.add_argument('field', help='Field key, e.g. Artist')

    return parser


def main(argv=None):
    """Main entry point."""
    global logger

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        load_dotenv()

        # Load configuration
        config = load_config(args.config)

        # Setup logging
        logger = setup_logger(config)

        # Execute command
        if args.command == 'show':
            return cmd_show(config, args)
        return cmd_edit(config, args)

    except KeyboardInterrupt:
        if logger:
            logger.info("Operation cancelled by user")
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if logger:
            logger.error(f"Fatal error: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_show(config, args):
    """Print the grouped metadata snapshot."""
    from src.workflow import MetadataEditor

    editor = MetadataEditor(config)
    raw = editor.load(Path(args.source))
    snapshot = editor.inspect(raw)

    if snapshot is None:
        print("Error: metadata schema unavailable", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(snapshot.as_dict(), indent=2, ensure_ascii=False))
        return 0

    for group_name, fields in snapshot.grouped_metadata:
        print(f"\n{group_name}:")
        for key, value in fields:
            print(f"  {key}: {value}")

    print(f"\nDate: {snapshot.timestamp or '-'}")
    if snapshot.coordinate:
        print(f"Location: {snapshot.coordinate.latitude:.4f}, {snapshot.coordinate.longitude:.4f}")
    else:
        print("Location: -")

    return 0


def cmd_edit(config, args):
    """Apply one edit intent and emit the edited raw metadata."""
    from src.metadata import GeoCoordinate
    from src.workflow import MetadataEditor

    editor = MetadataEditor(config)
    raw = editor.load(Path(args.source))

    date = getattr(args, 'date', None)
    coordinate = None
    if args.command == 'set-gps':
        coordinate = GeoCoordinate(args.latitude, args.longitude)

    logger.info(f"Applying '{args.command}' to {args.source}")
    edited = editor.apply(
        raw,
        args.command,
        date=date,
        coordinate=coordinate,
        field=getattr(args, 'field', None),
        value=getattr(args, 'value', None)
    )

    output = Path(args.output) if args.output else None
    text = editor.save(edited, output)
    if output is None:
        print(text)
    else:
        print(f"Edited metadata written to {output}")

    return 0


if __name__ == '__main__':
    sys.exit(main())
