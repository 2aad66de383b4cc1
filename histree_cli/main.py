"""
CLI Main Entry Point

Parses command-line arguments and dispatches to subcommands.

Usage:
    python -m histree_cli verify --entry FILE --proof FILE [--namespace NS] [--anchors PATH] [--no-update] [--json]
    python -m histree_cli anchors show [--anchors PATH] [--json]
    python -m histree_cli anchors set NAMESPACE --root HEX --size N [--anchors PATH] [--force]
    python -m histree_cli config --init | --show

Environment Variables:
    HISTREE_NAMESPACE           Active namespace (default: defaultdb)
    HISTREE_ANCHOR_FILE         Path of the persisted trust anchor blob
    HISTREE_ANCHOR_AUTOSAVE     Save anchors after each advance (default: true)
    HISTREE_LOG_LEVEL           Log level (default: INFO)
    HISTREE_LOG_FILE            Optional log file
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import traceback
from pathlib import Path
from typing import Sequence

from histree.config import RuntimeConfig, get_default_config_template, set_default_config
from histree_cli.commands import anchors, verify


# Exit codes
EXIT_SUCCESS = 0
EXIT_RUNTIME_ERROR = 1
EXIT_VERIFICATION_FAILED = 2

DEFAULT_CONFIG_FILE = "histree.yaml"


def setup_logging(level: str = "INFO", log_file: str | None = None) -> None:
    """Configure logging for the CLI."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=handlers,
        force=True,
    )


def load_config(path: Path | None) -> RuntimeConfig:
    """
    Load configuration.

    Order: explicit --config file, then ./histree.yaml if present, then
    defaults; environment variables are applied last.
    """
    if path is None and Path(DEFAULT_CONFIG_FILE).exists():
        path = Path(DEFAULT_CONFIG_FILE)
    if path is not None:
        return RuntimeConfig.from_yaml(path).with_env_overrides()
    return RuntimeConfig.from_env()


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="histree",
        description="histree CLI - verify history tree proofs and manage trust anchors.",
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s 0.1.0"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help=f"Path to YAML configuration file (default: ./{DEFAULT_CONFIG_FILE} if present)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- verify command ---
    verify_parser = subparsers.add_parser(
        "verify",
        help="Verify an entry and proof against the trusted anchor",
        description="Check leaf digest, inclusion and consistency, then advance the anchor.",
    )
    verify_parser.add_argument(
        "--entry",
        type=str,
        required=True,
        help="JSON file with the entry (index, key, value; bytes as 0x hex)",
    )
    verify_parser.add_argument(
        "--proof",
        type=str,
        required=True,
        help="JSON file with the proof returned by the server",
    )
    verify_parser.add_argument(
        "--namespace", "-n",
        type=str,
        default=None,
        help="Namespace whose anchor to check against (default: from config)",
    )
    verify_parser.add_argument(
        "--anchors",
        type=str,
        default=None,
        help="Trust anchor file (default: from config)",
    )
    verify_parser.add_argument(
        "--no-update",
        action="store_true",
        default=False,
        help="Do not write the new anchor back",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Output machine-readable JSON summary",
    )
    verify_parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Print tracebacks on errors",
    )
    verify_parser.set_defaults(func=verify.verify_cmd)

    # --- anchors command ---
    anchors_parser = subparsers.add_parser(
        "anchors",
        help="Inspect or bootstrap trusted anchors",
        description="Show persisted anchors or set one from a trusted channel.",
    )
    anchors_subparsers = anchors_parser.add_subparsers(dest="anchors_command", help="Anchor operation")

    anchors_show = anchors_subparsers.add_parser("show", help="List trusted anchors")
    anchors_show.add_argument("--anchors", type=str, help="Trust anchor file (default: from config)")
    anchors_show.add_argument("--json", action="store_true", help="JSON output")
    anchors_show.set_defaults(func=anchors.show_cmd)

    anchors_set = anchors_subparsers.add_parser("set", help="Set the anchor for a namespace")
    anchors_set.add_argument("namespace", type=str, help="Namespace name")
    anchors_set.add_argument("--anchors", type=str, help="Trust anchor file (default: from config)")
    anchors_set.add_argument("--root", type=str, required=True, help="Root digest (0x hex)")
    anchors_set.add_argument("--size", type=int, required=True, help="Tree position of the root")
    anchors_set.add_argument("--force", action="store_true", help="Allow moving the anchor backwards")
    anchors_set.set_defaults(func=anchors.set_cmd)

    anchors_parser.set_defaults(func=lambda args: anchors_parser.print_help() or EXIT_SUCCESS)

    # --- config command ---
    config_parser = subparsers.add_parser(
        "config",
        help="Manage CLI configuration",
        description="Initialize or display configuration.",
    )
    config_parser.add_argument(
        "--init",
        action="store_true",
        default=False,
        help="Create a template configuration file",
    )
    config_parser.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Show current configuration",
    )
    config_parser.add_argument(
        "--path",
        type=str,
        default=DEFAULT_CONFIG_FILE,
        help=f"Path for config file (default: {DEFAULT_CONFIG_FILE})",
    )
    config_parser.set_defaults(func=config_cmd)

    return parser


def config_cmd(args: argparse.Namespace) -> int:
    """Handle config command."""
    if args.init:
        config_path = Path(args.path)
        if config_path.exists():
            print(f"Error: Config file already exists: {config_path}", file=sys.stderr)
            return EXIT_RUNTIME_ERROR

        config_path.write_text(get_default_config_template())
        print(f"Created configuration file: {config_path}")
        print("You can also use environment variables (HISTREE_* prefix).")
        return EXIT_SUCCESS

    if args.show:
        print(json.dumps(args.cli_config.to_dict(), indent=2))
        return EXIT_SUCCESS

    print("Usage: histree config [--init|--show]")
    print("  --init  Create a template configuration file")
    print("  --show  Show current configuration")
    return EXIT_SUCCESS


def main(argv: Sequence[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0=success, 1=error, 2=verification failed)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_RUNTIME_ERROR

    try:
        config = load_config(args.config)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR

    log_level = args.log_level or config.logging.level
    setup_logging(level=log_level, log_file=config.logging.file)

    # Attach config to args for commands to use
    args.cli_config = config
    set_default_config(config)

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return EXIT_RUNTIME_ERROR
    except Exception as e:
        if getattr(args, "debug", False):
            traceback.print_exc()
        else:
            print(f"Error: {e}", file=sys.stderr)
        return EXIT_RUNTIME_ERROR


if __name__ == "__main__":
    sys.exit(main())
