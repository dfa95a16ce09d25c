"""Shared fixtures for the pedometer tests."""

import asyncio

import pytest

from motion_pedometer import PedometerConfig, PedometerEngine


@pytest.fixture()
def config():
    return PedometerConfig()


@pytest.fixture()
def engine(config):
    """Fresh engine whose first interval opens at t=0 ms."""
    return PedometerEngine(config, start_time=0.0)


@pytest.fixture()
def feed():
    """Ingest samples into an engine and return the step events produced."""

    def _feed(engine, samples):
        events = []
        for sample in samples:
            event = engine.ingest(sample)
            if event is not None:
                events.append(event)
        return events

    return _feed


@pytest.fixture()
def async_source():
    """Wrap a list of samples as an async sensor stream."""

    def _make(samples):
        async def _stream():
            for sample in samples:
                yield sample
                await asyncio.sleep(0)

        return _stream()

    return _make
