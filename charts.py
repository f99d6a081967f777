"""
Plotly chart for the graph view.
"""
from __future__ import annotations

from typing import Iterable, Optional, Tuple

import numpy as np
import pandas as pd
import plotly.graph_objects as go

WEIGHT_COLOR = "#3B82F6"
GOAL_COLOR = "#10B981"


def weight_axis_range(weights: Iterable[float]) -> Tuple[float, float]:
    """
    Y-axis bounds padded by 2 kg and snapped to whole kilograms.

    >>> weight_axis_range([78.4, 80.0])
    (76.0, 82.0)
    >>> weight_axis_range([])
    (0.0, 1.0)
    """
    vals = np.asarray([w for w in weights if w is not None], dtype=float)
    vals = vals[np.isfinite(vals)]
    if vals.size == 0:
        return 0.0, 1.0
    return float(np.floor(vals.min() - 2.0)), float(np.ceil(vals.max() + 2.0))


def make_weight_chart(df: pd.DataFrame, goal: Optional[float] = None) -> go.Figure:
    fig = go.Figure()
    if df.empty:
        fig.update_layout(title="Weight", template="plotly_white")
        return fig

    df = df.sort_values("Date")
    x = pd.to_datetime(df["Date"])
    y = df["Weight"].astype(float)
    fig.add_trace(go.Scatter(
        x=x,
        y=y,
        mode="lines+markers",
        name="Weight",
        line=dict(color=WEIGHT_COLOR, width=2, shape="spline"),
        marker=dict(color=WEIGHT_COLOR, size=8),
        hovertemplate="%{x|%Y-%m-%d}: %{y:.1f} kg<extra></extra>",
    ))

    weights = list(y)
    if goal is not None:
        fig.add_trace(go.Scatter(
            x=[x.iloc[0], x.iloc[-1]],
            y=[goal, goal],
            mode="lines",
            name="Goal weight",
            line=dict(color=GOAL_COLOR, width=2, dash="dash"),
            hovertemplate="Goal: %{y:.1f} kg<extra></extra>",
        ))
        weights.append(goal)

    y0, y1 = weight_axis_range(weights)
    fig.update_layout(
        title="Weight Trend",
        xaxis_title="Date",
        yaxis_title="Weight (kg)",
        xaxis=dict(tickformat="%m/%d"),
        yaxis=dict(range=[y0, y1]),
        hovermode="x unified",
        template="plotly_white",
        margin=dict(t=40, r=20, l=10, b=5),
    )
    return fig
