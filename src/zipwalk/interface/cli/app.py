from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, dispatch of the
walk/stat/cat sub-commands to the core services, and rendering of their
results as text or JSON.
"""

import argparse
import json
import logging
import os
import shutil
import sys
from dataclasses import asdict
from typing import Any, BinaryIO, Dict, List, Optional

from zipwalk.core.services.resolver import open_path, stat_path
from zipwalk.core.services.walker import walk
from zipwalk.domain.errors import ZipWalkError
from zipwalk.domain.node_models import NodeInfo, WalkControl
from zipwalk.infra import fs
from zipwalk.infra.logging import LoggingConfig, configure_logging, shutdown_logging
from zipwalk.interface.cli import args as cli_args

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NOT_FOUND = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    log_level = "DEBUG" if args.debug else "WARNING"
    log_file = fs.normalize_path(args.log_file, fallback=os.curdir) if args.log_file else None
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=log_file), force=True)
    logger.debug(f"CLI command '{args.command}' initiated")

    try:
        if args.command == "walk":
            return _run_walk(args)
        if args.command == "stat":
            return _run_stat(args)
        return _run_cat(args)
    except KeyboardInterrupt:
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    finally:
        shutdown_logging()

# -----------------------------------------------------------------------------
# COMMANDS
# -----------------------------------------------------------------------------

def _run_walk(args: argparse.Namespace) -> int:
    if not os.path.lexists(args.root):
        print(f"ERROR: path does not exist: {args.root}", file=sys.stderr)
        return EXIT_NOT_FOUND

    options = cli_args.args_to_options(args)
    records: List[Dict[str, Any]] = []
    failures: List[str] = []

    def visit(
            path: str,
            info: Optional[NodeInfo],
            stream: Optional[BinaryIO],
            err: Optional[BaseException],
    ) -> Optional[WalkControl]:
        if err is not None:
            failures.append(path)
            print(f"ERROR: {path}: {err}", file=sys.stderr)
            return None
        if args.json_output:
            records.append(asdict(info))
        else:
            print(_format_line(info))
        return None

    logger.info(f"Walking {args.root}")
    walk(args.root, visit, options)

    if args.json_output:
        print(json.dumps(records, ensure_ascii=False, indent=2))
    return EXIT_FAILURE if failures else EXIT_OK


def _run_stat(args: argparse.Namespace) -> int:
    try:
        info = stat_path(args.path)
    except FileNotFoundError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except (ZipWalkError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.json_output:
        print(json.dumps(asdict(info), ensure_ascii=False, indent=2))
    else:
        for key, value in asdict(info).items():
            print(f"{key}: {value}")
    return EXIT_OK


def _run_cat(args: argparse.Namespace) -> int:
    try:
        with open_path(args.path) as handle:
            shutil.copyfileobj(handle, sys.stdout.buffer)
        sys.stdout.buffer.flush()
    except FileNotFoundError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_NOT_FOUND
    except (ZipWalkError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE
    return EXIT_OK

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _format_line(info: NodeInfo) -> str:
    """Render one node as '<kind> <size> <path>'."""
    if info.is_dir:
        kind = "d"
    elif info.is_archive:
        kind = "z"
    elif info.is_symlink:
        kind = "l"
    else:
        kind = "f"
    return f"{kind} {info.size:>12} {info.path}"


if __name__ == "__main__":
    sys.exit(main())
