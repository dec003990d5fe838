#!/usr/bin/env python3
"""
HL7 Message Command Line Tool

Parses HL7 v2.x messages with validation, or compares two messages structurally.

Usage:
    python main.py parse message.hl7                          # Parse and print a summary
    python main.py parse message.hl7 -o message.json          # Parse and export to JSON
    python main.py parse message.hl7 -o message.csv --format csv
    python main.py diff left.hl7 right.hl7                     # Compare two messages
    python main.py diff left.hl7 right.hl7 -o diff.json       # Save the diff as JSON
"""

import argparse
import logging
import sys
from pathlib import Path

# Try importing from installed package first, fallback to src path
try:
    from definition_registry import DefinitionRegistry
    from hl7_diff import compare_hl7_messages
    from hl7_export import EXPORT_FORMATS, export_message
    from hl7_parser import Hl7Parser
except ImportError:
    # Add src to path for imports when not installed
    sys.path.insert(0, str(Path(__file__).parent / "src"))
    from definition_registry import DefinitionRegistry
    from hl7_diff import compare_hl7_messages
    from hl7_export import EXPORT_FORMATS, export_message
    from hl7_parser import Hl7Parser

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s:%(lineno)d] - %(message)s"


def build_parser(definitions_dir: str = None) -> Hl7Parser:
    return Hl7Parser(DefinitionRegistry(definitions_dir))


def read_message(path: str) -> str:
    with open(path, 'r') as f:
        return f.read()


def print_diagnostics(errors) -> None:
    for i, error in enumerate(errors[:10]):  # Show first 10 diagnostics
        location = f" {error.segment_name}-{error.field_index}" if error.field_index is not None else ""
        print(f"  {i+1}. [{error.severity}] line {error.line}{location}: {error.message}")
    if len(errors) > 10:
        print(f"  ... and {len(errors) - 10} more issues")


def parse_command(args) -> int:
    """Parse one HL7 file, print a summary and optionally export it."""
    print(f"HL7 Parser - Processing {args.input_file}")
    print("=" * 50)

    try:
        raw_message = read_message(args.input_file)
        print(f"Loaded {len(raw_message)} characters")

        result = build_parser(args.definitions_dir).parse(raw_message)

        if result.message is None:
            print("Message could not be parsed:")
            print_diagnostics(result.errors)
            return 1

        message = result.message
        print(f"\nParsing Results:")
        print(f"  Version: {message.version}")
        print(f"  Message Type: {message.message_type}")
        print(f"  Control ID: {message.control_id}")
        print(f"  Segments: {', '.join(segment.name for segment in message.segments)}")

        if result.errors:
            print(f"\nValidation found {len(result.errors)} issues:")
            print_diagnostics(result.errors)
        else:
            print("\nMessage is valid according to the definitions!")

        if args.output_file:
            content = export_message(args.format, message, raw_message)
            with open(args.output_file, 'w') as f:
                f.write(content)
            print(f"\n{args.format.upper()} output saved to: {args.output_file}")

        return 0

    except FileNotFoundError as e:
        print(f"Error: File not found: {e}")
        return 1
    except Exception as e:
        logging.getLogger(__name__).error(f"Error during HL7 processing: {e}", exc_info=True)
        print(f"Error during HL7 processing: {e}")
        return 1


def diff_command(args) -> int:
    """Compare two HL7 files segment by segment."""
    print(f"HL7 Diff - {args.left_file} vs {args.right_file}")
    print("=" * 50)

    try:
        parser = build_parser(args.definitions_dir)
        left = parser.parse(read_message(args.left_file))
        right = parser.parse(read_message(args.right_file))

        for label, path, result in (("Left", args.left_file, left), ("Right", args.right_file, right)):
            if result.message is None:
                print(f"{label} message {path} could not be parsed:")
                print_diagnostics(result.errors)

        diff = compare_hl7_messages(left.message, right.message)
        summary = diff.summary()
        print(f"\nDiff Results:")
        for diff_type in ("common", "modified", "added", "removed"):
            print(f"  {diff_type.capitalize()}: {summary[diff_type]}")

        for segment_diff in diff.segments:
            if segment_diff.type == "common": continue
            print(f"  {segment_diff.type.upper():<9} {segment_diff.segment_name}")
            for field_diff in segment_diff.field_diffs or []:
                if field_diff.diff_type == "common": continue
                print(f"      {segment_diff.segment_name}-{field_diff.field_index} {field_diff.diff_type}: "
                      f"'{field_diff.value_a or ''}' -> '{field_diff.value_b or ''}'")

        if args.output_file:
            with open(args.output_file, 'w') as f:
                f.write(diff.model_dump_json(indent=2))
            print(f"\nDiff saved to: {args.output_file}")

        return 0 if left.message is not None and right.message is not None else 1

    except FileNotFoundError as e:
        print(f"Error: File not found: {e}")
        return 1


def main(argv=None):
    """Main entry point with command line argument parsing."""

    parser = argparse.ArgumentParser(
        description="Parse, validate and compare HL7 v2.x messages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py parse adt.hl7                          # Summary only
  python main.py parse adt.hl7 -o adt.json              # Export JSON
  python main.py parse adt.hl7 -o adt.csv --format csv  # Export CSV
  python main.py diff before.hl7 after.hl7 -o diff.json
        """
    )
    parser.add_argument('--definitions-dir',
                        help='Directory with extra per-version definition files (*.json)')
    parser.add_argument('--log-level', default='WARNING',
                        help='Logging level (default: WARNING)')

    subparsers = parser.add_subparsers(dest='command', required=True)

    parse_parser = subparsers.add_parser('parse', help='Parse and validate a message')
    parse_parser.add_argument('input_file', help='Input HL7 file')
    parse_parser.add_argument('-o', '--output', dest='output_file',
                              help='Export file (written only when given)')
    parse_parser.add_argument('--format', choices=EXPORT_FORMATS, default='json',
                              help='Export format (default: json)')

    diff_parser = subparsers.add_parser('diff', help='Compare two messages')
    diff_parser.add_argument('left_file', help='Left (A) HL7 file')
    diff_parser.add_argument('right_file', help='Right (B) HL7 file')
    diff_parser.add_argument('-o', '--output', dest='output_file',
                             help='Diff JSON file (written only when given)')

    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format=LOG_FORMAT, stream=sys.stderr)

    if args.command == 'parse':
        return parse_command(args)
    return diff_command(args)


if __name__ == "__main__":
    exit(main())
