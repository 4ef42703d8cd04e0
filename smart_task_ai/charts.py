from __future__ import annotations

from typing import Mapping, Sequence

import plotly.graph_objects as go

from smart_task_ai.constants import EFFORT_LABELS
from smart_task_ai.metrics import CategoryStats, PriorityShare
from smart_task_ai.models import Category

PRIMARY_COLOR = "#3B82F6"
COMPLETED_COLOR = "#22C55E"
EFFORT_COLORS = [
    "#BFDBFE",
    "#93C5FD",
    "#60A5FA",
    "#3B82F6",
    "#1D4ED8",
]
FONT_COLOR = "#E5ECF6"
GRID_COLOR = "#2B3A55"


def _apply_dark_theme(figure: go.Figure) -> go.Figure:
    figure.update_layout(
        template="plotly_dark",
        font=dict(color=FONT_COLOR),
        plot_bgcolor="rgba(0,0,0,0)",
        paper_bgcolor="rgba(0,0,0,0)",
        xaxis=dict(gridcolor=GRID_COLOR, zerolinecolor=GRID_COLOR),
        yaxis=dict(gridcolor=GRID_COLOR, zerolinecolor=GRID_COLOR),
    )
    return figure


def build_category_breakdown_figure(stats: Mapping[Category, CategoryStats]) -> go.Figure:
    """Grouped bars of total vs. completed tasks per category."""

    labels = [category.label for category in stats]
    totals = [entry.total for entry in stats.values()]
    completed = [entry.completed for entry in stats.values()]

    figure = go.Figure(
        data=[
            go.Bar(x=labels, y=totals, name="Total", marker_color=PRIMARY_COLOR),
            go.Bar(x=labels, y=completed, name="Completed", marker_color=COMPLETED_COLOR),
        ]
    )
    figure.update_layout(
        barmode="group",
        bargap=0.3,
        title_text="Tasks by Category",
        xaxis_title="Category",
        yaxis_title="Tasks",
        margin=dict(t=60, r=10, b=40, l=10),
    )
    figure.update_yaxes(rangemode="tozero")
    _apply_dark_theme(figure)
    return figure


def build_priority_distribution_figure(shares: Sequence[PriorityShare]) -> go.Figure:
    pie = go.Pie(
        labels=[share.priority.value for share in shares],
        values=[share.count for share in shares],
        hole=0.55,
        marker=dict(colors=[share.priority.color_hex for share in shares]),
        textinfo="label+percent",
        sort=False,
    )
    figure = go.Figure(data=[pie])
    figure.update_layout(
        title_text="Priority Distribution",
        showlegend=False,
        margin=dict(t=60, r=10, b=10, l=10),
    )
    _apply_dark_theme(figure)
    return figure


def build_effort_histogram_figure(histogram: Mapping[int, int]) -> go.Figure:
    levels = sorted(histogram)
    bar = go.Bar(
        x=[f"{level} · {EFFORT_LABELS.get(level, '')}" for level in levels],
        y=[histogram[level] for level in levels],
        marker_color=[EFFORT_COLORS[(level - 1) % len(EFFORT_COLORS)] for level in levels],
        text=[histogram[level] for level in levels],
        textposition="outside",
    )

    figure = go.Figure(data=[bar])
    figure.update_layout(
        title_text="Effort Levels",
        xaxis_title="Effort",
        yaxis_title="Tasks",
        margin=dict(t=60, r=10, b=60, l=10),
    )
    figure.update_yaxes(rangemode="tozero")
    _apply_dark_theme(figure)
    return figure


__all__ = [
    "COMPLETED_COLOR",
    "EFFORT_COLORS",
    "PRIMARY_COLOR",
    "build_category_breakdown_figure",
    "build_effort_histogram_figure",
    "build_priority_distribution_figure",
]
