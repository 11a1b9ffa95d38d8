#!/usr/bin/env python3
"""
Command-line interface definitions for procwatch.
"""
import argparse
from pathlib import Path
from typing import List, Optional


def build_env_parser(description: Optional[str] = None) -> argparse.ArgumentParser:
    """
    Create an ArgumentParser with the common --env and --config-dir options.

    Args:
        description: Optional parser description shown in CLI help.

    Returns:
        argparse.ArgumentParser: parser preconfigured with the shared options.
    """
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument(
        "--env",
        type=str,
        default=None,
        help=(
            "Environment name for configuration override (e.g., 'dev', 'prod'). "
            "Loads config_<env>.yaml in addition to the base config.yaml."
        ),
    )
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Directory holding config.yaml (default: the bundled config_yaml/).",
    )
    return parser


def build_monitor_parser() -> argparse.ArgumentParser:
    parser = build_env_parser("Watch process starts/stops and record per-process CPU and memory usage")
    commands = parser.add_subparsers(dest="command", required=True)

    watch = commands.add_parser("watch", help="Log every process start and stop")
    watch.add_argument("--duration", type=float, default=None,
                       help="Stop after this many seconds (default: run until Ctrl-C)")

    record = commands.add_parser("record", help="Record frames for one process and export them")
    record.add_argument("--pid", type=int, required=True, help="Process ID to record")
    record.add_argument("--frames", type=int, default=None,
                        help="Number of frames to record (default: record_frames from config)")
    record.add_argument("--interval", type=float, default=None,
                        help="Seconds between frames (default: record_interval from config)")
    record.add_argument("--out", type=Path, default=None,
                        help="Output directory for exported files (default: output_dir from config)")
    return parser


def validate_monitor_args(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    if args.command == "watch" and args.duration is not None and args.duration <= 0:
        parser.error("--duration must be positive")
    if args.command == "record":
        if args.frames is not None and args.frames <= 0:
            parser.error("--frames must be positive")
        if args.interval is not None and args.interval <= 0:
            parser.error("--interval must be positive")


def parse_monitor_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = build_monitor_parser()
    args = parser.parse_args(argv)
    validate_monitor_args(parser, args)
    return args
