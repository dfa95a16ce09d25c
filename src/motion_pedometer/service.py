"""Asynchronous pedometer service: sensor stream and snapshot timer in one actor."""

import asyncio
import time
from typing import AsyncIterable, Callable, List, Optional

import structlog

from .config import PedometerConfig, StreamConfig
from .engine import PedometerEngine
from .motion import RawSample
from .snapshot import Snapshot, SnapshotListener, SnapshotPublisher

logger = structlog.get_logger(__name__)

SAMPLE = "sample"
PUBLISH = "publish"


def wall_clock_ms() -> float:
    return time.time() * 1000.0


class PedometerService:
    """
    Runs a PedometerEngine against a live sample source.

    Sensor samples and snapshot timer ticks are funnelled through a single
    inbox and handled by one consumer task, which is the only code that
    touches the engine. Snapshots are therefore always taken between two
    samples, never during one.
    """

    def __init__(
        self,
        source: AsyncIterable[RawSample],
        config: Optional[PedometerConfig] = None,
        stream_config: Optional[StreamConfig] = None,
        clock: Callable[[], float] = wall_clock_ms,
    ):
        """
        Initialize the service.

        Args:
            source: Async iterable of raw samples (the sensor subscription)
            config: Pedometer configuration
            stream_config: Stream configuration (snapshot cadence, inbox size)
            clock: Wall clock in milliseconds, used to stamp snapshots
        """
        self.source = source
        self.config = config or PedometerConfig()
        self.stream_config = stream_config or StreamConfig()
        self.clock = clock

        self.engine = PedometerEngine(self.config)
        self.publisher = SnapshotPublisher(self.engine.snapshot(self.clock()))

        self.source_error: Optional[BaseException] = None

        self._inbox: Optional[asyncio.Queue] = None
        self._consumer: Optional[asyncio.Task] = None
        self._pump: Optional[asyncio.Task] = None
        self._timer: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._consumer is not None

    @property
    def snapshot(self) -> Snapshot:
        """Latest published snapshot."""
        return self.publisher.latest

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        return self.publisher.subscribe(listener)

    async def start(self):
        """Reset the engine, subscribe to the source and start the snapshot timer."""
        if self.running:
            raise RuntimeError("PedometerService is already running")

        self.engine.reset()
        self.publisher.latest = self.engine.snapshot(self.clock())
        self.source_error = None
        self._inbox = asyncio.Queue(maxsize=self.stream_config.INBOX_SIZE)

        self._consumer = asyncio.create_task(self._consume(), name="pedometer-consumer")
        self._pump = asyncio.create_task(self._pump_samples(), name="pedometer-sensor")
        self._pump.add_done_callback(self._on_pump_done)
        self._timer = asyncio.create_task(self._run_snapshot_timer(), name="pedometer-snapshots")
        logger.info(
            "service_started",
            snapshot_interval_ms=self.stream_config.SNAPSHOT_INTERVAL_MS,
        )

    async def stop(self):
        """Unsubscribe from the source and cancel both timers. Safe to call twice."""
        if not self.running:
            return

        tasks: List[asyncio.Task] = [self._pump, self._timer, self._consumer]
        for task in tasks:
            task.cancel()
        results = await asyncio.gather(*tasks, return_exceptions=True)

        for task, result in zip(tasks, results):
            # Source failures were already logged when the pump ended
            if isinstance(result, Exception) and result is not self.source_error:
                logger.error("service_task_failed", task=task.get_name(), error=repr(result))

        self._consumer = self._pump = self._timer = None
        self._inbox = None
        logger.info(
            "service_stopped",
            samples=self.engine.samples_processed,
            dropped=self.engine.dropped_samples,
            steps=self.engine.accumulator.totals.steps,
        )

    async def publish_now(self) -> Optional[Snapshot]:
        """
        Queue an immediate snapshot and wait until that snapshot is published.

        Samples queued after the request are not waited for.

        Returns:
            The published snapshot, or None if the service stopped first
        """
        if not self.running:
            return None

        consumer = self._consumer
        published = asyncio.get_running_loop().create_future()
        await self._inbox.put((PUBLISH, published))
        await asyncio.wait([published, consumer], return_when=asyncio.FIRST_COMPLETED)

        if published.done() and not published.cancelled():
            return published.result()
        return None

    async def wait_source_exhausted(self):
        """
        Wait until the source has ended and every queued sample was processed.

        Samples delivered before a source failure are still processed, then
        the failure is raised.
        """
        if not self.running:
            return
        try:
            await self._pump
        finally:
            await self._inbox.join()

    async def __aenter__(self) -> "PedometerService":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.stop()

    async def _pump_samples(self):
        async for sample in self.source:
            await self._inbox.put((SAMPLE, sample))
        logger.info("sensor_stream_ended")

    def _on_pump_done(self, task: asyncio.Task):
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.source_error = error
            logger.error(
                "sensor_stream_failed",
                error=repr(error),
                samples=self.engine.samples_processed,
            )

    async def _run_snapshot_timer(self):
        interval = self.stream_config.SNAPSHOT_INTERVAL_MS / 1000.0
        while True:
            await asyncio.sleep(interval)
            await self._inbox.put((PUBLISH, None))

    async def _consume(self):
        while True:
            kind, payload = await self._inbox.get()
            try:
                if kind == SAMPLE:
                    self.engine.ingest(payload)
                elif kind == PUBLISH:
                    snapshot = self.engine.snapshot(self.clock())
                    self.publisher.publish(snapshot)
                    if payload is not None and not payload.done():
                        payload.set_result(snapshot)
            finally:
                self._inbox.task_done()
