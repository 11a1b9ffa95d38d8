#!/usr/bin/env python3
"""
procwatch command-line entry point.

`watch` logs process starts and stops; `record` samples one process a fixed
number of times and exports the frames through every configured exporter.
"""
import threading
import time
from pathlib import Path
from typing import Dict, List, Optional

import psutil
from tabulate import tabulate

from procwatch.cli.cli import parse_monitor_args
from procwatch.config.config_loader import ConfigLoader
from procwatch.config.monitor_config import MonitorConfig
from procwatch.service.dataset import ProcessDataSet, attribute_registry
from procwatch.service.exporter import exporter_registry
from procwatch.service.monitor import ProcessSource, ProcessWatcher
from procwatch.util.cal_utils import summarize_table
from procwatch.util.log_config import apply_level, setup_logger

logger = setup_logger(__name__)


def build_data_set(pid: int, attributes: List[str], source: Optional[ProcessSource] = None) -> ProcessDataSet:
    """Bind a data set to pid with one instance of each named attribute data set."""
    source = source or ProcessSource()
    data_set = ProcessDataSet.from_pid(pid, source=source)
    for name in attributes:
        data_set.add_attribute_data_set(attribute_registry.instantiate(name, source=source))
    return data_set


def record_frames(data_set: ProcessDataSet, frames: int, interval: float) -> int:
    """
    Record up to `frames` frames, `interval` seconds apart.

    Stops early when the process exits. Returns the number of frames recorded.
    """
    recorded = 0
    for i in range(frames):
        if i > 0:
            time.sleep(interval)
        if not data_set.record():
            logger.warning(f"Process {data_set.pid} is gone after {recorded} frame(s)")
            break
        recorded += 1
        logger.info(f"  Frame {recorded}/{frames} recorded")
    return recorded


def export_all(data_set: ProcessDataSet, exporters: List[str], output_dir: Optional[Path]) -> Dict[str, Optional[Path]]:
    paths = {}
    for name in exporters:
        exporter = exporter_registry.instantiate(name, output_dir=output_dir)
        paths[name] = data_set.export(exporter)
        if paths[name] is None:
            logger.error(f"✗ {name}: {data_set.last_export_error}")
        else:
            logger.info(f"✓ {name}: {paths[name]}")
    return paths


def format_summary(data_set: ProcessDataSet) -> str:
    summaries = summarize_table(data_set.compile())
    rows = [[name] + list(summary.to_summary_dict().values()) for name, summary in summaries.items()]
    return tabulate(rows, headers=["attribute", "min", "max", "p50", "p95", "p99", "avg"],
                    tablefmt="github", floatfmt=".2f")


def run_watch(config: MonitorConfig, duration: Optional[float]) -> int:
    watcher = ProcessWatcher(sleep_interval=config.sleep_interval)
    watcher.on_new_process.subscribe(lambda proc: logger.info(f"+ started  pid={proc.pid} {_describe(proc)}"))
    watcher.on_process_stopped.subscribe(lambda pid: logger.info(f"- stopped  pid={pid}"))

    with watcher.session():
        try:
            # duration None waits until Ctrl+C
            threading.Event().wait(timeout=duration)
        except KeyboardInterrupt:
            logger.info("Interrupted")
    return 0


def run_record(config: MonitorConfig, pid: int, frames: Optional[int], interval: Optional[float],
               output_dir: Optional[Path]) -> int:
    frames = frames or config.record_frames
    interval = interval or config.record_interval
    output_dir = output_dir or config.output_dir

    try:
        data_set = build_data_set(pid, config.attributes)
    except psutil.NoSuchProcess:
        logger.error(f"Process {pid} not found")
        return 1

    logger.info(f"Recording {frames} frame(s) of {', '.join(data_set.columns)} for pid {pid} every {interval}s")
    if record_frames(data_set, frames, interval) == 0:
        logger.error("No frames recorded; nothing to export")
        return 1

    logger.info("=" * 60)
    logger.info("Exporting Results")
    logger.info("=" * 60)
    paths = export_all(data_set, config.exporters, output_dir)

    print(format_summary(data_set))
    return 0 if all(paths.values()) else 1


def _describe(proc: psutil.Process) -> str:
    try:
        return proc.name()
    except psutil.Error:
        return ""


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_monitor_args(argv)

    loader = ConfigLoader(args.config_dir, env=args.env)
    config = loader.config_data
    apply_level(config.log_level, config.log_file)
    if args.env:
        logger.info(f"Loaded configuration with environment override: {args.env}")

    if args.command == "watch":
        return run_watch(config, args.duration)
    return run_record(config, args.pid, args.frames, args.interval, args.out)


if __name__ == "__main__":
    raise SystemExit(main())
