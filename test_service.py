"""Tests for the asynchronous pedometer service."""

import asyncio

import pytest
from structlog.testing import capture_logs

from motion_pedometer import PedometerService, RawSample, StreamConfig
from motion_pedometer.synthetic import stride_samples, walking_samples


async def stalled_source():
    """A sensor stream that never delivers a sample."""
    await asyncio.Event().wait()
    yield RawSample(0.0, 0.0, 0.0, 1.0)


async def failing_source():
    """A sensor stream that delivers two samples and then breaks."""
    yield RawSample(0.0, 0.0, 0.0, 1.0)
    yield RawSample(20.0, 0.0, 0.0, 1.0)
    raise OSError("sensor gone")


async def endless_source():
    """A live sensor stream that never pauses."""
    i = 0
    while True:
        yield RawSample(i * 20.0, 0.0, 0.0, 1.0)
        i += 1
        await asyncio.sleep(0)


@pytest.mark.asyncio
async def test_idle_service_publishes_zero_snapshot():
    service = PedometerService(stalled_source(), stream_config=StreamConfig(SNAPSHOT_INTERVAL_MS=20))
    published = []
    service.subscribe(published.append)

    async with service:
        await asyncio.sleep(0.15)

    assert len(published) >= 1
    assert service.snapshot.steps == 0
    assert service.snapshot.interval_history == ()
    assert not service.running


@pytest.mark.asyncio
async def test_service_counts_steps_from_stream(async_source):
    samples = stride_samples(duration_s=30.0)
    service = PedometerService(async_source(samples), stream_config=StreamConfig(SNAPSHOT_INTERVAL_MS=60000))

    async with service:
        await service.wait_source_exhausted()
        await service.publish_now()
        snapshot = service.snapshot

    assert service.engine.samples_processed == len(samples)
    assert snapshot.steps == 12
    assert snapshot.steps == service.engine.accumulator.totals.steps
    assert snapshot.distance_meters == round(snapshot.steps * 0.5, 2)


@pytest.mark.asyncio
async def test_snapshot_only_changes_on_publication(async_source):
    samples = walking_samples(duration_s=30.0)
    service = PedometerService(async_source(samples), stream_config=StreamConfig(SNAPSHOT_INTERVAL_MS=60000))

    async with service:
        await service.wait_source_exhausted()
        assert service.snapshot.steps == 0
        await service.publish_now()
        assert service.snapshot.steps > 0


@pytest.mark.asyncio
async def test_start_twice_raises():
    service = PedometerService(stalled_source())
    await service.start()
    try:
        with pytest.raises(RuntimeError):
            await service.start()
    finally:
        await service.stop()


@pytest.mark.asyncio
async def test_stop_cancels_all_tasks_and_is_idempotent():
    service = PedometerService(stalled_source(), stream_config=StreamConfig(SNAPSHOT_INTERVAL_MS=20))
    await service.start()
    tasks = [service._consumer, service._pump, service._timer]

    await service.stop()
    await service.stop()

    assert all(task.done() for task in tasks)
    assert not service.running


@pytest.mark.asyncio
async def test_restart_begins_new_session(async_source):
    service = PedometerService(async_source(walking_samples(duration_s=10.0)))
    async with service:
        await service.wait_source_exhausted()
    assert service.engine.samples_processed > 0

    service.source = async_source([])
    async with service:
        await service.wait_source_exhausted()
        assert service.engine.samples_processed == 0
        assert service.snapshot.steps == 0


@pytest.mark.asyncio
async def test_source_failure_is_logged_when_it_happens():
    service = PedometerService(failing_source(), stream_config=StreamConfig(SNAPSHOT_INTERVAL_MS=60000))

    with capture_logs() as logs:
        await service.start()
        with pytest.raises(OSError):
            await service.wait_source_exhausted()
        await asyncio.sleep(0)

        failures = [e for e in logs if e['event'] == 'sensor_stream_failed']
        assert len(failures) == 1
        assert failures[0]['log_level'] == 'error'
        assert isinstance(service.source_error, OSError)

        await service.stop()

    assert not any(e['event'] == 'service_task_failed' for e in logs)
    assert service.engine.samples_processed == 2


@pytest.mark.asyncio
async def test_publish_now_does_not_wait_for_a_live_source():
    service = PedometerService(endless_source(), stream_config=StreamConfig(SNAPSHOT_INTERVAL_MS=60000))

    async with service:
        await asyncio.sleep(0.01)
        snapshot = await asyncio.wait_for(service.publish_now(), timeout=1.0)

        assert snapshot is service.snapshot
        assert service.publisher.published_count == 1


@pytest.mark.asyncio
async def test_publish_now_on_stopped_service_returns_none():
    service = PedometerService(stalled_source())
    assert await service.publish_now() is None
