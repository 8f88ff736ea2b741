"""CLI interface for tickload."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
import time

from . import __version__
from .config import ConfigError, load_config
from .processor import CentralProcessor


def _load_table(processor: CentralProcessor, title: str):
    from rich.table import Table

    table = Table(title=title)
    table.add_column("CPU", justify="left")
    table.add_column("Load", justify="right")

    system = processor.get_system_cpu_load()
    table.add_row("total", f"{system:6.1%}")
    if processor.has_native_load:
        ticks = processor.get_system_cpu_load_between_ticks()
        table.add_row("total (ticks)", f"{ticks:6.1%}")
    for idx, ratio in enumerate(processor.get_processor_cpu_load_between_ticks()):
        table.add_row(f"cpu{idx}", f"{ratio:6.1%}")
    return table


def _cmd_sample(args: argparse.Namespace) -> None:
    """Print CPU load readings as a table."""
    from rich.console import Console

    cfg = load_config(args.config)
    if args.source:
        cfg.sampler.source = args.source
    processor = CentralProcessor.from_config(cfg.sampler)
    console = Console()

    console.print(f"{processor.name} ({processor.identifier})", markup=False)
    console.print(
        f"{processor.source.name} source, {processor.logical_processor_count} logical / "
        f"{processor.physical_processor_count} physical processors"
    )
    for n in range(args.count):
        # the first tick-delta reading needs a second sample to be meaningful
        time.sleep(args.interval)
        console.print(_load_table(processor, f"Sample {n + 1}/{args.count}"))

    load_avg = processor.get_system_load_average(3)
    if load_avg[0] >= 0:
        console.print("Load average: " + " ".join(f"{v:.2f}" for v in load_avg))


def _cmd_collect(args: argparse.Namespace) -> None:
    """Run CPU load collection until interrupted."""
    cfg = load_config(args.config)

    from .collector.cpu import CpuLoadCollector
    from .collector.manager import CollectorManager
    from .exporter.local import LocalExporter

    processor = CentralProcessor.from_config(cfg.sampler)
    manager = CollectorManager(cfg.collector, [CpuLoadCollector(processor, cfg.collector.per_core)])

    exporters = []
    if cfg.local_exporter.enabled:
        exporters.append(LocalExporter(cfg.local_exporter))
    if cfg.mode == "online":
        from .exporter.otel import OtelExporter
        exporters.append(OtelExporter(cfg.otel))
    for exp in exporters:
        manager.add_sink(exp.export)

    stop = threading.Event()

    def _handle_signal(_sig: int, _frame: object) -> None:
        stop.set()

    previous_handlers = {
        sig: signal.signal(sig, _handle_signal) for sig in (signal.SIGINT, signal.SIGTERM)
    }

    print(f"tickload collector running (mode={cfg.mode}, interval={cfg.collector.interval_seconds}s)")
    print("Press Ctrl+C to stop.\n")
    try:
        manager.run(stop, iterations=args.iterations)
    finally:
        for exp in exporters:
            exp.shutdown()
        for sig, handler in previous_handlers.items():
            signal.signal(sig, handler)
    print("\nCollection stopped.")


def _cmd_version(_args: argparse.Namespace) -> None:
    print(f"tickload {__version__}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tickload",
        description="Processor utilization from CPU tick counters",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to tickload.yaml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    # sample
    sample_p = sub.add_parser("sample", help="Print system and per-core CPU load")
    sample_p.add_argument("--count", "-n", type=int, default=1, help="Number of readings")
    sample_p.add_argument("--interval", "-i", type=float, default=1.0, help="Seconds between readings")
    sample_p.add_argument("--source", default=None, help="Tick source: psutil or procfs")
    sample_p.set_defaults(func=_cmd_sample)

    # collect
    collect_p = sub.add_parser("collect", help="Collect CPU load and export it")
    collect_p.add_argument("--iterations", type=int, default=None, help="Stop after N rounds")
    collect_p.set_defaults(func=_cmd_collect)

    # version
    ver_p = sub.add_parser("version", help="Print version")
    ver_p.set_defaults(func=_cmd_version)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the tickload CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    try:
        args.func(args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
