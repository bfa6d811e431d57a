#!/usr/bin/env python3
"""Main entry point for the meter exporters"""
import asyncio
import signal
import sys
from config import Config
from app.scheduler import PushScheduler
from meters.exporters.base import ExporterFactory
from meters.registry import InMemoryMeterRegistry
from logging_config import setup_structured_logging, get_logger, log_exporter_startup, log_error


async def run(config: Config, registry) -> None:
    """Publish the registry until SIGINT/SIGTERM, then flush once more"""
    exporter = ExporterFactory.create_exporter(config)
    scheduler = PushScheduler(config, registry, exporter)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop_event.set)

    await scheduler.start()
    try:
        await stop_event.wait()
    finally:
        await scheduler.stop()


def main():
    """Main application entry point"""
    try:
        config = Config()

        setup_structured_logging(config)
        logger = get_logger(__name__)
        log_exporter_startup(logger, config)

        registry = InMemoryMeterRegistry(config.common_tags)
        asyncio.run(run(config, registry))

    except Exception as e:
        logger = get_logger(__name__)
        log_error(logger, e, {"component": "main", "phase": "startup"})
        sys.exit(1)


if __name__ == '__main__':
    main()
