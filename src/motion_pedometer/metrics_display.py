"""Metrics display helpers for the pedometer dashboard."""

from typing import Any, Dict, Optional, Tuple

from .snapshot import Snapshot


def get_goal_status(progress: Optional[float]) -> Tuple[str, str]:
    """
    Determine status based on step goal progress.

    Args:
        progress: Fraction of the goal reached (0.0 - 1.0)

    Returns:
        Tuple of (emoji, status_text)
    """
    if progress is None:
        return "", ""

    status_ranges = [
        (lambda v: v >= 1.0, "🟢", "Goal reached"),
        (lambda v: v >= 0.5, "🟡", "On the way"),
        (lambda v: True, "🔴", "Keep moving"),
    ]
    for condition, emoji, status in status_ranges:
        if condition(progress):
            return emoji, status

    return "", ""


def format_metric_value(value: Optional[float], unit: str, emoji: str = "") -> str:
    """
    Format metric value with an optional emoji.

    Args:
        value: The metric value to format
        unit: The unit string to append
        emoji: Optional emoji indicator

    Returns:
        Formatted metric string
    """
    if value is None:
        return "--"

    formatted = f"{value}{unit}"
    if emoji:
        return f"{emoji} {formatted}"
    return formatted


def display_snapshot_metrics(placeholders: Dict[str, Any], snapshot: Snapshot, tooltips: Dict[str, str]):
    """
    Display snapshot metrics.

    Args:
        placeholders: Dictionary of Streamlit placeholder objects
        snapshot: Latest published snapshot
        tooltips: Tooltip text dictionary
    """
    emoji, status = get_goal_status(snapshot.goal_progress)
    placeholders['steps'].metric(
        "Steps",
        value=f"{snapshot.steps:,}",
        delta=f"{emoji} {snapshot.goal_progress * 100:.0f}% of {snapshot.goal:,}",
        delta_color="off",
        help=tooltips['steps']
    )
    placeholders['distance'].metric(
        "Distance", value=format_metric_value(snapshot.distance_meters, " m"), help=tooltips['distance']
    )
    placeholders['calories'].metric(
        "Calories", value=format_metric_value(snapshot.calories, " kcal"), help=tooltips['calories']
    )
    placeholders['active_time'].metric(
        "Active time", value=format_metric_value(snapshot.active_time_units, ""), help=tooltips['active_time']
    )
    placeholders['intervals'].metric(
        "Active intervals", value=len(snapshot.interval_history), help=tooltips['intervals']
    )


def display_empty_metrics(placeholders: Dict[str, Any], tooltips: Dict[str, str]):
    """
    Display empty metric placeholders before first stream.

    Args:
        placeholders: Dictionary of metric placeholders
        tooltips: Tooltip text dictionary
    """
    placeholders['steps'].metric("Steps", value="--", help=tooltips['steps'])
    placeholders['distance'].metric("Distance", value="--", help=tooltips['distance'])
    placeholders['calories'].metric("Calories", value="--", help=tooltips['calories'])
    placeholders['active_time'].metric("Active time", value="--", help=tooltips['active_time'])
    placeholders['intervals'].metric("Active intervals", value="--", help=tooltips['intervals'])
