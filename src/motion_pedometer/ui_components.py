"""UI components for the Streamlit pedometer dashboard."""

import streamlit as st
from typing import Dict, Optional, Tuple

from .config import UIConfig

SYNTHETIC_SOURCE = "Synthetic walk"


class PedometerUI:
    """Handles rendering of UI components for the pedometer dashboard."""

    def __init__(self, ui_config: UIConfig):
        """
        Initialize the UI component manager.

        Args:
            ui_config: UI configuration object
        """
        self.config = ui_config

    def render_header(self):
        """Render app title."""
        st.title("Real-time step counting")

    def render_source_selector(self, recordings: list) -> Optional[str]:
        """
        Render recording selection dropdown.

        The synthetic walk is always offered, so the app runs without data files.

        Args:
            recordings: List of available recording names

        Returns:
            Selected source name
        """
        options = [SYNTHETIC_SOURCE, *recordings]
        return st.selectbox("Select Recording", options, index=0)

    def render_stream_controls(
        self,
        default_start_time: Optional[float] = None,
        default_goal: int = 10000
    ) -> Tuple[float, int, bool, bool]:
        """
        Render streaming control inputs.

        Args:
            default_start_time: Default start time in seconds
            default_goal: Default daily step goal

        Returns:
            Tuple of (start_time, goal, start_clicked, stop_clicked)
        """
        if default_start_time is None:
            default_start_time = self.config.DEFAULT_START_TIME

        start_time = st.number_input(
            "Start from time (seconds)",
            min_value=0.0,
            value=default_start_time,
            step=self.config.TIME_STEP,
            help="Choose which time (in seconds) to start replaying from"
        )
        goal = st.number_input("Daily step goal", min_value=1, value=default_goal, step=500)

        col1, col2 = st.columns([1, 1])
        with col1:
            start = st.button("▶ Start Stream")
        with col2:
            stop = st.button("⏹ Stop Stream")

        return start_time, int(goal), start, stop

    def create_metric_placeholders(self) -> Dict[str, st.delta_generator.DeltaGenerator]:
        """
        Create a placeholder per metric tile.

        Returns:
            Dictionary of metric name to Streamlit placeholder
        """
        col1, col2, col3 = st.columns(3)
        with col1:
            steps = st.empty()
            intervals = st.empty()
        with col2:
            distance = st.empty()
            calories = st.empty()
        with col3:
            active_time = st.empty()

        return {
            'steps': steps,
            'distance': distance,
            'calories': calories,
            'active_time': active_time,
            'intervals': intervals,
        }

    def create_chart_placeholder(self) -> st.delta_generator.DeltaGenerator:
        st.subheader("Interval History")
        return st.empty()

    def create_status_placeholder(self) -> st.delta_generator.DeltaGenerator:
        """
        Create a placeholder for status messages.

        Returns:
            Streamlit empty placeholder
        """
        return st.empty()
