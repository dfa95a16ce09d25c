"""
Streamlit app to replay accelerometer recordings through the step counting engine.
Metric tiles and the interval history chart refresh on every published snapshot.
"""
import asyncio
import streamlit as st

from motion_pedometer import (
    PedometerConfig,
    StreamConfig,
    UIConfig,
    AccelRecordingLoader,
    PedometerService,
    configure_logging,
    get_logger,
)
from motion_pedometer.chart_renderer import ChartRenderer
from motion_pedometer.metrics_display import display_snapshot_metrics, display_empty_metrics
from motion_pedometer.synthetic import walking_samples, to_dataframe
from motion_pedometer.ui_components import PedometerUI, SYNTHETIC_SOURCE


# Constants
TOOLTIPS = {
    'steps': "Confirmed steps this session. Progress is measured against the daily goal.",
    'distance': "Steps multiplied by a fixed 0.5 m step length.",
    'calories': "Estimated at 0.04 kcal per step.",
    'active_time': "Activity score accumulated per step (not wall-clock time).",
    'intervals': "5-second intervals that contained at least one step (last hour kept).",
}

SYNTHETIC_DURATION_S = 600.0


# Initialize configurations and components
pedometer_config = PedometerConfig()
stream_config = StreamConfig()
ui_config = UIConfig()

configure_logging(stream_config.LOG_LEVEL, stream_config.LOG_FORMAT)
logger = get_logger("motion_pedometer.app")

st.set_page_config(page_title="Motion pedometer")
ui = PedometerUI(ui_config)
data_loader = AccelRecordingLoader(stream_config.DATA_DIR)
renderer = ChartRenderer(ui_config)

# === UI Setup ===
ui.render_header()

recordings = data_loader.get_available_recordings() if stream_config.DATA_DIR.exists() else []
selected_source = ui.render_source_selector(recordings)
speed = st.select_slider("Replay speed", options=[1, 2, 5, 10], value=stream_config.DEFAULT_SPEED)
start_time, goal, start_stream, stop_stream = ui.render_stream_controls(
    default_goal=pedometer_config.DEFAULT_STEP_GOAL
)

# === UI Placeholders ===
status = ui.create_status_placeholder()
st.markdown("---")
st.subheader("Metrics")
metric_placeholders = ui.create_metric_placeholders()
chart = ui.create_chart_placeholder()

# === Session State Initialization ===
for key, default in [('streaming', False), ('last_snapshot', None)]:
    if key not in st.session_state:
        st.session_state[key] = default


def render_snapshot(snapshot, session_start_ms=None):
    """Refresh metric tiles and the history chart from a snapshot."""
    display_snapshot_metrics(metric_placeholders, snapshot, TOOLTIPS)
    fig = renderer.create_history_chart(snapshot.interval_history, session_start_ms)
    chart.plotly_chart(fig, use_container_width=True, config={'displayModeBar': False})


# === Main Streaming Function ===
async def stream_steps(source_name: str, start_from_time: float, step_goal: int, replay_speed: float) -> None:
    """
    Replay a recording through PedometerService and render each published snapshot.

    Args:
        source_name: Recording name, or the synthetic walk
        start_from_time: Time in seconds to start replaying from
        step_goal: Daily step goal for progress display
        replay_speed: Playback speed multiplier
    """
    if source_name == SYNTHETIC_SOURCE:
        df = to_dataframe(walking_samples(duration_s=SYNTHETIC_DURATION_S, fs=stream_config.SAMPLING_RATE))
    else:
        status.info(f"Loading {source_name}...")
        try:
            df = data_loader.load_recording(source_name)
        except (FileNotFoundError, ValueError) as exc:
            status.error(str(exc))
            return

    start_from = data_loader.time_to_sample_index(df, start_from_time)
    valid, error_msg = data_loader.validate_start_position(df, start_from)
    if not valid:
        status.error(error_msg)
        return

    service = PedometerService(
        data_loader.replay(df, start_from, replay_speed),
        pedometer_config,
        stream_config,
    )
    service.engine.set_goal(step_goal)

    def on_snapshot(snapshot):
        st.session_state.last_snapshot = snapshot
        render_snapshot(snapshot)
        status.info(
            f"Steps: {snapshot.steps} | Threshold: {service.engine.threshold:.3f} | "
            f"Samples: {service.engine.samples_processed} | Dropped: {service.engine.dropped_samples}"
        )

    service.subscribe(on_snapshot)
    status.success(f"Streaming {len(df) - start_from} samples at {replay_speed}x")

    async with service:
        await service.wait_source_exhausted()
        await service.publish_now()

    logger.info("replay_completed", source=source_name, steps=service.snapshot.steps)
    status.success(f"Stream completed! {service.snapshot.steps} steps detected")
    st.session_state.streaming = False


# Pre-populate UI with frozen/empty state before streaming starts
if not st.session_state.streaming:
    if st.session_state.last_snapshot is not None:
        render_snapshot(st.session_state.last_snapshot)
    else:
        display_empty_metrics(metric_placeholders, TOOLTIPS)
        status.info("Ready to stream. Click 'Start Stream' to begin.")


# === Stream Control Logic ===
if start_stream and selected_source:
    st.session_state.streaming = True
    asyncio.run(stream_steps(selected_source, start_time, goal, speed))

if stop_stream:
    st.session_state.streaming = False
    st.rerun()
