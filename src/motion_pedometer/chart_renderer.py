"""Chart rendering utilities for step history visualization."""

import plotly.graph_objects as go
from plotly.subplots import make_subplots
from typing import List, Optional, Sequence

from .config import UIConfig
from .metrics import IntervalRecord


class ChartRenderer:
    """Handles creation and styling of Plotly charts for interval history."""

    def __init__(self, ui_config: UIConfig):
        """
        Initialize the chart renderer.

        Args:
            ui_config: UI configuration object
        """
        self.config = ui_config

    def create_history_chart(
        self,
        records: Sequence[IntervalRecord],
        session_start_ms: Optional[float] = None,
    ) -> go.Figure:
        """
        Create a stacked chart of steps and calories per interval.

        Args:
            records: Interval records, oldest first
            session_start_ms: Origin of the x-axis; defaults to the first record

        Returns:
            Plotly Figure with subplots
        """
        records = self.select_recent(records, self.config.HISTORY_WINDOW)
        origin = session_start_ms
        if origin is None:
            origin = records[0].timestamp if records else 0.0

        minutes = [(r.timestamp - origin) / 60000.0 for r in records]

        fig = make_subplots(
            rows=2, cols=1,
            shared_xaxes=True,
            subplot_titles=("Steps per interval", "Calories per interval"),
            vertical_spacing=0.15,
            row_heights=[0.6, 0.4]
        )

        fig.add_trace(
            go.Bar(
                x=minutes,
                y=[r.steps for r in records],
                marker_color=self.config.CHART_COLORS['steps'],
                name="Steps",
                showlegend=False
            ),
            row=1, col=1
        )
        fig.add_trace(
            go.Scatter(
                x=minutes,
                y=[r.calories for r in records],
                mode='lines+markers',
                line=dict(color=self.config.CHART_COLORS['calories'], width=1.5),
                marker=dict(size=4),
                name="Calories",
                showlegend=False
            ),
            row=2, col=1
        )

        fig.update_layout(
            height=self.config.CHART_HEIGHT,
            margin=self.config.CHART_MARGIN,
            transition={'duration': 0},
            uirevision='constant',
            hovermode=False,
            dragmode=False,
            plot_bgcolor='white',
            paper_bgcolor='white',
        )
        fig.update_xaxes(
            fixedrange=True,
            showgrid=True,
            gridcolor='rgba(220, 220, 220, 0.3)',
            zeroline=False,
            type='linear'
        )
        fig.update_xaxes(title_text="Session time (min)", row=2, col=1)
        fig.update_yaxes(
            fixedrange=True,
            showgrid=True,
            gridcolor='rgba(220, 220, 220, 0.3)',
            rangemode='tozero'
        )

        return fig

    @staticmethod
    def select_recent(records: Sequence[IntervalRecord], count: int) -> List[IntervalRecord]:
        """Keep the newest `count` records, still oldest first."""
        records = list(records)
        return records[-count:] if count > 0 else records
