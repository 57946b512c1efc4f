# -*- coding: utf-8 -*-
"""
Command-line interface (CLI) for treedump.
Handles argument parsing and runs a scan with stdout as the document sink.
"""

import sys
import argparse
import traceback

from . import __version__
from .treedump_core import TreeDump
from .treedump_config import DEFAULT_MODEL, IGNORE_FILE_NAME, ScanConfig, get_saved_config
from .treedump_styling import TreeStyle, Colors
from .treedump_utils import TreeDumpError, log_message

# --- Argument Parsing ---
def build_parser() -> argparse.ArgumentParser:
    """Builds the argument parser."""
    parser = argparse.ArgumentParser(
        prog="treedump",
        usage="%(prog)s [options] <start_path> [file_extensions...]",
        description=f"treedump v{__version__} - Dump a directory tree and file contents as LLM context.",
        formatter_class=argparse.RawTextHelpFormatter # Preserve formatting in help
    )

    # --- Positional Arguments ---
    parser.add_argument(
        'directory',
        nargs='?',
        default=None,
        help="Path to the directory to scan."
    )
    parser.add_argument(
        'extensions',
        nargs='*',
        metavar='file_extensions',
        default=[],
        help="Optional file extensions to include (e.g., .go .js).\nIf omitted, all files are included."
    )

    # --- Filtering Group ---
    filter_group = parser.add_argument_group('Filtering Options')
    filter_group.add_argument(
        '-e', '--exclude',
        action='append',
        metavar='PATTERN',
        default=[],
        help="Add pattern to exclude (e.g., 'vendor', '*.log', 'temp/').\nCan be used multiple times."
    )
    filter_group.add_argument(
        '-t', '--exclude-tests',
        action='store_true',
        default=False,
        help="Exclude test files from known languages."
    )
    filter_group.add_argument(
        '-H', '--hidden',
        action='store_true',
        default=False,
        help="Include hidden files and directories (those starting with '.')."
    )
    filter_group.add_argument(
        '--no-default-excludes',
        action='store_false',
        dest='use_default_excludes',
        default=True,
        help="Do not exclude .git, node_modules and other common clutter by default."
    )
    filter_group.add_argument(
        '--ignore-file',
        metavar='NAME',
        default=IGNORE_FILE_NAME,
        help=f"Name of the ignore file looked up in the scanned directory (Default: {IGNORE_FILE_NAME})."
    )
    filter_group.add_argument(
        '-n', '--no-recurse',
        action='store_false',
        dest='recursive',
        default=True,
        help="Only process files directly in the start directory."
    )

    # --- Output Group ---
    output_group = parser.add_argument_group('Output Options')
    output_group.add_argument(
        '-s', '--style',
        default='unicode',
        choices=list(TreeStyle.AVAILABLE.keys()),
        help="Tree drawing style (Default: unicode)."
    )
    output_group.add_argument(
        '-c', '--count-tokens',
        action='store_true',
        default=False,
        help="Count tokens in the output and report the total on stderr."
    )
    output_group.add_argument(
        '-m', '--model',
        default=DEFAULT_MODEL,
        help=f"Tokenizer encoding or OpenAI model name used by -c (Default: {DEFAULT_MODEL})."
    )

    # --- Behavior Group ---
    behavior_group = parser.add_argument_group('Behavior Options')
    behavior_group.add_argument(
        '-v', '--verbose',
        action='store_true',
        default=False,
        help="Enable verbose output on stderr."
    )
    color_parser = behavior_group.add_mutually_exclusive_group()
    color_parser.add_argument(
        '--color',
        action='store_true',
        dest='colorize',
        default=sys.stderr.isatty(),
        help="Force colorized diagnostics (Default: auto-detect based on TTY)."
    )
    color_parser.add_argument(
        '--no-color',
        action='store_false',
        dest='colorize',
        help="Disable colorized diagnostics."
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'treedump v{__version__}'
    )
    return parser


def parse_args() -> argparse.Namespace:
    """Parses command-line arguments, seeding defaults from the user config file."""
    parser = build_parser()
    saved = get_saved_config(log_func=lambda msg, level="info": log_message(msg, level))
    if 'exclude_patterns' in saved:
        # Saved patterns seed -e; patterns given on the command line are appended
        saved['exclude'] = list(saved.pop('exclude_patterns'))
    if 'show_hidden' in saved:
        saved['hidden'] = saved.pop('show_hidden')
    parser.set_defaults(**saved)
    return parser.parse_args()


def config_from_args(args: argparse.Namespace) -> ScanConfig:
    """Turns parsed arguments into a ScanConfig."""
    return ScanConfig(
        root_dir=args.directory,
        file_types=tuple(args.extensions),
        recursive=args.recursive,
        verbose=args.verbose,
        show_hidden=args.hidden,
        exclude_tests=args.exclude_tests,
        exclude_patterns=tuple(args.exclude),
        use_default_excludes=args.use_default_excludes,
        ignore_file_name=args.ignore_file or None,
        count_tokens=args.count_tokens,
        model=args.model,
        colorize=args.colorize,
        style=args.style,
    )


# --- Main Execution Logic ---
def main():
    """Main function: parse arguments, scan, write the document to stdout."""
    try:
        args = parse_args()

        if args.directory is None:
            build_parser().print_usage(sys.stderr)
            color, reset = (Colors.RED, Colors.RESET) if args.colorize else ("", "")
            print(f"{color}Error: No directory specified.{reset}", file=sys.stderr)
            sys.exit(1)

        config = config_from_args(args)
        if config.verbose:
            log_message(f"Version: {__version__}", "info", verbose=True, colorize=config.colorize)

        try:
            dumper = TreeDump(config)
        except (FileNotFoundError, NotADirectoryError, ValueError) as e_init:
            log_message(f"Initialization Error: {e_init}", "error", colorize=config.colorize)
            sys.exit(1)
        except TreeDumpError as e_setup:
            log_message(f"Error initializing treedump: {e_setup}", "error", colorize=config.colorize)
            sys.exit(1)

        try:
            sink = sys.stdout.buffer
            dumper.run(sink)
            sink.flush()
        except TreeDumpError as e_scan:
            log_message(f"Scan failed: {e_scan}", "error", colorize=config.colorize)
            sys.exit(1)
        except OSError as e_write:
            log_message(f"Error writing output: {e_write}", "error", colorize=config.colorize)
            sys.exit(1)
        except Exception:
            print("\nAn unexpected error occurred during execution:", file=sys.stderr)
            print(traceback.format_exc(), file=sys.stderr)
            sys.exit(1)

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        sys.exit(130)  # Standard exit code for SIGINT


if __name__ == '__main__':
    main()
