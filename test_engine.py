"""End-to-end tests for the step counting engine on raw accelerometer samples."""

import numpy as np
import pytest

from motion_pedometer import PedometerEngine, RawSample
from motion_pedometer.snapshot import round_half_up
from motion_pedometer.synthetic import (
    samples_from_arrays,
    shake_samples,
    stride_samples,
    vertical_bounce_samples,
    walking_samples,
)

STRIDE_PERIOD_MS = 1000.0 / 64


def test_strides_step_on_first_sample_after_each_debounce(engine, feed):
    events = feed(engine, stride_samples(duration_s=30.0))

    # First step on the second sample, then one every 161 samples (2515.625 ms)
    expected = [STRIDE_PERIOD_MS * (1 + 161 * k) for k in range(12)]
    assert [e.timestamp for e in events] == expected
    assert engine.accumulator.totals.steps == 12


def test_strides_fill_interval_history(engine, feed):
    feed(engine, stride_samples(duration_s=30.0))
    history = engine.snapshot(30000.0).interval_history

    assert [r.steps for r in history] == [3, 2, 2, 2, 2]
    assert [r.timestamp for r in history] == [5046.875, 10078.125, 15109.375, 20140.625, 25171.875]


def test_walking_produces_debounced_steps(engine, feed):
    events = feed(engine, walking_samples(duration_s=30.0))

    assert len(events) > 0
    assert np.all(np.diff([e.timestamp for e in events]) > 2500.0)
    assert engine.accumulator.totals.steps == len(events)


def test_irregular_sample_spacing(engine, feed):
    rng = np.random.default_rng(7)
    times_ms = np.cumsum(rng.uniform(5.0, 80.0, size=1400))
    ax = 2.5 * np.sin(2 * np.pi * 2.0 * times_ms / 1000.0)
    samples = samples_from_arrays(times_ms, ax, np.zeros_like(ax), np.ones_like(ax))

    events = feed(engine, samples)
    history = engine.snapshot(float(times_ms[-1])).interval_history

    assert engine.samples_processed == len(samples)
    assert len(events) >= 10
    assert np.all(np.diff([e.timestamp for e in events]) > 2500.0)
    assert len(history) > 0
    assert np.all(np.diff([r.timestamp for r in history]) >= 5000.0)
    assert history[0].timestamp >= 5000.0
    assert sum(r.steps for r in history) <= len(events)


@pytest.mark.parametrize("amplitude", [0.2, 1.0, 2.0, 8.0])
def test_vertical_bouncing_produces_no_steps(engine, feed, amplitude):
    events = feed(engine, vertical_bounce_samples(duration_s=30.0, amplitude=amplitude))
    assert events == []
    assert engine.snapshot(0.0).steps == 0


def test_shaking_is_rejected_outright(engine, feed):
    samples = shake_samples(duration_s=10.0)
    events = feed(engine, samples)

    assert events == []
    assert engine.threshold == 0.95
    assert len(engine.detector.window.buffer) == 0
    assert engine.rejected_samples == len(samples)


def test_non_finite_samples_leave_state_untouched(engine, feed):
    feed(engine, walking_samples(duration_s=3.0))
    gravity = engine.gravity
    threshold = engine.threshold
    window = list(engine.detector.window.buffer)
    processed = engine.samples_processed

    assert engine.ingest(RawSample(3000.0, float('nan'), 0.0, 1.0)) is None
    assert engine.ingest(RawSample(3020.0, 0.0, float('inf'), 1.0)) is None

    assert np.array_equal(engine.gravity, gravity)
    assert engine.threshold == threshold
    assert list(engine.detector.window.buffer) == window
    assert engine.samples_processed == processed
    assert engine.dropped_samples == 2


def test_absurd_finite_reading_poisons_gravity(engine, feed):
    feed(engine, walking_samples(duration_s=3.0))
    steps = engine.accumulator.totals.steps
    threshold = engine.threshold
    rejected = engine.rejected_samples

    with np.errstate(all='ignore'):
        assert engine.ingest(RawSample(3000.0, 1e308, 0.0, 1.0)) is None
        events = feed(engine, walking_samples(duration_s=4.0, start_ms=3020.0))

    assert engine.gravity[0] > 1e290
    assert events == []
    assert engine.accumulator.totals.steps == steps
    assert engine.threshold == threshold
    assert engine.rejected_samples == rejected + 1 + 200


def test_threshold_bounded_for_random_input(engine):
    rng = np.random.default_rng(21)
    raw = rng.normal(0.0, 1.5, size=(5000, 3))
    for i, (x, y, z) in enumerate(raw):
        engine.ingest(RawSample(i * 20.0, x, y, z))
        assert 0.85 <= engine.threshold <= 1.15


def test_snapshot_metrics_follow_step_count(engine, feed):
    feed(engine, walking_samples(duration_s=60.0))
    snapshot = engine.snapshot(60000.0)

    assert snapshot.steps > 0
    assert snapshot.distance_meters == round(snapshot.steps * 0.5, 2)
    assert snapshot.calories == round(snapshot.steps * 0.04)
    assert snapshot.active_time_units == round_half_up(engine.accumulator.totals.active_time_units)


def test_interval_history_from_walking(engine, feed):
    feed(engine, walking_samples(duration_s=60.0))
    history = engine.snapshot(60000.0).interval_history

    assert len(history) > 0
    assert all(r.steps > 0 for r in history)
    assert sum(r.steps for r in history) <= engine.accumulator.totals.steps
    assert np.all(np.diff([r.timestamp for r in history]) >= 5000.0)


def test_fresh_engine_idle_for_five_seconds(engine, feed):
    still = [RawSample(i * 20.0, 0.0, 0.0, 1.0) for i in range(250)]
    feed(engine, still)
    snapshot = engine.snapshot(5000.0)

    assert snapshot.steps == 0
    assert snapshot.interval_history == ()


def test_snapshot_does_not_track_later_steps(engine, feed):
    samples = walking_samples(duration_s=30.0)
    feed(engine, samples[:750])
    early = engine.snapshot(15000.0)
    feed(engine, samples[750:])

    assert engine.accumulator.totals.steps > early.steps


def test_reset_starts_a_new_session(engine, feed):
    feed(engine, walking_samples(duration_s=30.0))
    engine.reset(start_time=0.0)

    snapshot = engine.snapshot(0.0)
    assert snapshot.steps == 0
    assert snapshot.interval_history == ()
    assert engine.threshold == 0.95
    assert np.array_equal(engine.gravity, np.zeros(3))


def test_goal_must_be_positive():
    engine = PedometerEngine()
    with pytest.raises(ValueError):
        engine.set_goal(0)
    engine.set_goal(500)
    assert engine.snapshot(0.0).goal == 500
