from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema of the 'zipwalk' tool and translates the
parsed namespace into domain options.
"""

import argparse

from zipwalk.domain.config import WalkOptions

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the zipwalk CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="zipwalk",
        description="Walk, inspect and read files nested inside ZIP archives.",
    )

    # --- Diagnostics ---
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--log-file",
        dest="log_file",
        default=None,
        help="Also write diagnostics to this rotating log file.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- walk ---
    walk_p = sub.add_parser("walk", help="List every file, including archive members.")
    walk_p.add_argument("root", help="Directory or file to walk.")
    walk_p.add_argument(
        "--no-archives",
        action="store_true",
        help="List archives as plain files without opening them.",
    )
    walk_p.add_argument(
        "--max-depth",
        dest="max_depth",
        type=_positive_int,
        default=None,
        help="Maximum archive nesting depth to open (1 = top-level archives only).",
    )
    walk_p.add_argument(
        "--report-anomalies",
        action="store_true",
        help="Report skipped archives and unreadable members as errors.",
    )
    walk_p.add_argument("--json", dest="json_output", action="store_true", help="Emit JSON.")

    # --- stat ---
    stat_p = sub.add_parser("stat", help="Show metadata of a real or nested path.")
    stat_p.add_argument("path", help="Path such as data/outer.zip/inner.txt.")
    stat_p.add_argument("--json", dest="json_output", action="store_true", help="Emit JSON.")

    # --- cat ---
    cat_p = sub.add_parser("cat", help="Write the content of a real or nested file to stdout.")
    cat_p.add_argument("path", help="Path such as data/outer.zip/inner.txt.")

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_options(args: argparse.Namespace) -> WalkOptions:
    """
    Translate the 'walk' sub-command flags into WalkOptions.

    Args:
        args: Parsed command-line arguments.

    Returns:
        WalkOptions: Options for the walker.
    """
    return WalkOptions(
        descend_archives=not args.no_archives,
        report_anomalies=bool(args.report_anomalies),
        max_depth=args.max_depth,
    )

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{value}'")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number
