"""Node monitor CLI entry points.
This module exposes the run and backfill commands.
It maps argparse commands onto the monitor runner.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import signal
import sys
from typing import Any, Sequence

from core.config import MonitorConfig
from core.errors import MonitorError
from core.logging_config import configure_logging, get_logger
from ingest.monitor_runner import MonitorRunner
from store.point_sink import InfluxPointSink, LineProtocolSink, PointSink

_LOGGER = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="monitor",
        description="Ingest node trade and order-status logs into InfluxDB",
    )
    parser.add_argument("--env-file", help="Optional .env file loaded before reading settings")
    parser.add_argument("--trades-path", help="Override TRADES_BASE_PATH for this command")
    parser.add_argument("--orders-path", help="Override ORDERS_BASE_PATH for this command")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print line protocol to stdout instead of writing to InfluxDB",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_run_command(subparsers)
    _add_backfill_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the monitor CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
        configure_logging(config.log_level)
        sink = _build_sink(config, args.dry_run)
    except MonitorError as error:
        _LOGGER.error("monitor_fatal", error=str(error))
        return 1
    runner = MonitorRunner(config, sink)
    try:
        if args.command == "run":
            return _run_monitor_command(runner)
        if args.command == "backfill":
            return _run_backfill_command(runner)
        parser.error(f"Unsupported command: {args.command}")
        return 2
    except MonitorError as error:
        _LOGGER.error("monitor_fatal", error=str(error))
        return 1
    finally:
        sink.close()


def _build_config(args: argparse.Namespace) -> MonitorConfig:
    """Build config with optional path overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Runtime configuration.
    """
    env_file = Path(args.env_file).expanduser() if args.env_file else None
    config = MonitorConfig.from_env(env_file)
    if args.trades_path:
        config = replace(config, trades_base_path=Path(args.trades_path).expanduser().resolve())
    if args.orders_path:
        config = replace(config, orders_base_path=Path(args.orders_path).expanduser().resolve())
    return config


def _build_sink(config: MonitorConfig, dry_run: bool) -> PointSink:
    if dry_run:
        return LineProtocolSink(sys.stdout)
    return InfluxPointSink(config)


def _run_monitor_command(runner: MonitorRunner) -> int:
    """Handle run command: backfill, then watch until interrupted.

    Args:
        runner: Monitor runner.

    Returns:
        Exit code.
    """
    signal.signal(signal.SIGTERM, lambda signum, frame: runner.stop())
    try:
        runner.run()
    except KeyboardInterrupt:
        runner.stop()
        _LOGGER.info("monitor_interrupted")
    return 0


def _run_backfill_command(runner: MonitorRunner) -> int:
    """Handle backfill command.

    Args:
        runner: Monitor runner.

    Returns:
        Exit code.
    """
    summaries = runner.backfill()
    for kind, summary in summaries.items():
        print(
            f"{kind.value}\t"
            f"files={summary.files}\t"
            f"lines={summary.lines}\t"
            f"points={summary.points}\t"
            f"failed_lines={summary.failed_lines}",
            file=sys.stderr,
        )
    return 0


def _add_run_command(subparsers: Any) -> None:
    """Register run subcommand."""
    subparsers.add_parser("run", help="Backfill existing files, then watch for new ones")


def _add_backfill_command(subparsers: Any) -> None:
    """Register backfill subcommand."""
    subparsers.add_parser("backfill", help="Process existing files once and exit")
