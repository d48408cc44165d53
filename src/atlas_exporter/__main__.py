"""CLI entry point for the exporter.

Loads the configured result and probe files and either prints the metrics
once (``--once``) or serves them on the Prometheus endpoint until
SIGINT/SIGTERM.

Examples:
    ```bash
    python -m atlas_exporter --config config/exporter.yaml
    python -m atlas_exporter --config config/exporter.yaml --once
    atlas-exporter --log-level DEBUG
    ```
"""

import argparse
import asyncio
import signal
import sys
from pathlib import Path

from atlas_exporter.core.exceptions import AtlasExporterError
from atlas_exporter.core.logger import Logger, setup_logging
from atlas_exporter.services.exporter import Exporter


DEFAULT_CONFIG = Path("config") / "exporter.yaml"

logger = Logger("cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="atlas-exporter",
        description="Export RIPE Atlas DNS and SSL certificate results as Prometheus metrics",
    )
    parser.add_argument(
        "--config", type=Path, default=DEFAULT_CONFIG, help=f"YAML config (default: {DEFAULT_CONFIG})"
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="INFO"
    )
    parser.add_argument(
        "--once", action="store_true", help="write one exposition to stdout and exit"
    )
    return parser.parse_args(argv)


async def serve(exporter: Exporter) -> int:
    """Serve metrics until a shutdown signal is received."""
    shutdown = asyncio.Event()

    def handle_signal(sig: signal.Signals) -> None:
        logger.info("shutdown_signal", signal=sig.name)
        shutdown.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, handle_signal, sig)

    try:
        await exporter.serve(shutdown)
    except OSError as e:
        logger.error("metrics_server_failed", error=str(e))
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Parse args, load data, and print or serve the metrics."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        exporter = Exporter.from_yaml(args.config)
        exporter.load()
    except AtlasExporterError as e:
        logger.error("startup_failed", error=str(e))
        return 1

    if args.once:
        sys.stdout.write(exporter.render().decode("utf-8"))
        return 0

    try:
        return asyncio.run(serve(exporter))
    except KeyboardInterrupt:
        logger.info("interrupted")
        return 130


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
