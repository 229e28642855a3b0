"""Command line entry point for the wobble publisher."""

import argparse
import logging
import sys
from typing import List, Optional

from .common.exceptions import WobbleError
from .core.config import WobbleConfig
from .core.scheduler import FixedRateScheduler
from .core.task import WobbleScheduledTask
from .mqtt.client import create_client
from .mqtt.publisher import Publisher
from .patterns.wobble import sample_cycle
from .topology.service import ConfigurationService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sentient Light Hub wobble publisher")
    parser.add_argument(
        "command",
        nargs="?",
        choices=["run", "once", "preview"],
        default="run",
        help="run the scheduler, publish a single tick, or print one wave cycle",
    )
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--topology", help="Actor topology file (overrides config)")
    parser.add_argument("--host", help="MQTT broker host (overrides config)")
    parser.add_argument("--port", type=int, help="MQTT broker port (overrides config)")
    parser.add_argument(
        "--dry-run", action="store_true", help="Log events instead of publishing"
    )
    parser.add_argument(
        "--max-ticks", type=int, help="Stop the scheduler after this many ticks"
    )
    parser.add_argument(
        "--samples", type=int, help="Number of samples for the preview command"
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser


def load_config(args: argparse.Namespace) -> WobbleConfig:
    """Load configuration and apply command line overrides"""
    config = (
        WobbleConfig.from_yaml(args.config) if args.config else WobbleConfig.create_default()
    )
    if args.topology:
        config.topology.path = args.topology
    if args.host is not None or args.port is not None:
        if args.host is not None:
            config.mqtt.host = args.host
        if args.port is not None:
            config.mqtt.port = args.port
        config.mqtt.validate()
    return config


def preview(config: WobbleConfig, samples: Optional[int] = None) -> None:
    for phase, value in sample_cycle(config.waveform, samples):
        print(f"{phase}\t{value}")


def run(config: WobbleConfig, command: str, dry_run: bool, max_ticks: Optional[int]) -> None:
    service = ConfigurationService(config.topology.path)
    service.reload()

    client = create_client(config.mqtt, dry_run=dry_run)
    client.connect()
    try:
        publisher = Publisher(client, config.scheduler.unsuccessful_task_delay_ms)
        task = WobbleScheduledTask(config, service, publisher)

        def tick():
            service.refresh()
            return task()

        if command == "once":
            result = tick()
            logger.info(
                f"Published value {result.value} to {result.event_count} LEDs "
                f"({result.outcome.value})"
            )
            return

        scheduler = FixedRateScheduler(tick, config.scheduler.send_rate_ms)
        try:
            scheduler.run(max_ticks=max_ticks)
        except KeyboardInterrupt:
            logger.info("Shutting down...")
            scheduler.stop()
        logger.info(f"Scheduler metrics: {scheduler.metrics.get_metrics()}")
    finally:
        client.disconnect()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with argument parsing"""
    args = build_parser().parse_args(argv)

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = load_config(args)
        if args.command == "preview":
            preview(config, args.samples)
            return 0

        logger.info("Sentient Light Hub Wobble")
        logger.info(
            f"Wave length {config.waveform.wave_length}ms, "
            f"values {config.waveform.min_value}..{config.waveform.max_value}"
        )
        run(config, args.command, args.dry_run, args.max_ticks)
    except WobbleError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
