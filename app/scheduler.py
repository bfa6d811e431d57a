"""Periodic push of registry meters to the configured exporter"""
import asyncio
import time
from typing import Optional
from config import Config
from meters.exporters.base import BaseExporter, PublishResult
from meters.registry import MeterRegistry
from logging_config import get_logger, log_publish_cycle, log_error


logger = get_logger(__name__)


class PushScheduler:
    """Runs a publish cycle every ``step`` seconds on an asyncio task"""

    def __init__(self, config: Config, registry: MeterRegistry, exporter: BaseExporter):
        self.config = config
        self.registry = registry
        self.exporter = exporter

        # Publish state
        self.last_publish_time = 0.0
        self.publish_count = 0
        self.publish_errors = 0
        self.publish_task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self.publish_task is not None and not self.publish_task.done()

    async def start(self) -> None:
        """Start the exporter and the publish loop"""
        if not self.config.enabled:
            logger.info("Publishing disabled, scheduler not started", event_type="scheduler_disabled")
            return
        if self.running:
            return

        await self.exporter.start()
        self.publish_task = asyncio.create_task(self._publish_loop())
        logger.info("Push scheduler started", step_seconds=self.config.step, event_type="scheduler_start")

    async def stop(self) -> None:
        """Stop the loop and flush the last interval"""
        if self.publish_task:
            self.publish_task.cancel()
            try:
                await self.publish_task
            except asyncio.CancelledError:
                pass
            self.publish_task = None

            # Final publish so meters recorded since the last step are not lost
            try:
                self.publish()
            except Exception as e:
                log_error(logger, e, {"component": "push_scheduler", "phase": "final_publish"})

            await self.exporter.shutdown()
            logger.info("Push scheduler stopped", total_publishes=self.publish_count, event_type="scheduler_stop")

    def publish(self) -> PublishResult:
        """Run one publish cycle synchronously"""
        result = self.exporter.publish(self.registry)

        self.publish_count += 1
        self.last_publish_time = time.time()
        log_publish_cycle(logger, result.meters, result.sent, result.publish_time, result.failed)
        return result

    async def _publish_loop(self) -> None:
        """Background publish loop"""
        while True:
            try:
                await asyncio.sleep(self.config.step)
                self.publish()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.publish_errors += 1
                log_error(logger, e, {"component": "publish_loop", "publish_errors": self.publish_errors})
                await asyncio.sleep(min(self.config.step, 30))
