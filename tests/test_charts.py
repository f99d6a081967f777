import doctest

import charts
from charts import make_weight_chart, weight_axis_range
from tracker import WeightEntry, entries_frame


def _frame():
    return entries_frame([
        WeightEntry(2, "2024-01-08", 78.0),
        WeightEntry(1, "2024-01-01", 80.0),
        WeightEntry(3, "2024-01-15", 77.4),
    ])


def test_doctests():
    assert doctest.testmod(charts).failed == 0


def test_axis_range_pads_and_snaps():
    assert weight_axis_range([77.4, 80.0]) == (75.0, 82.0)
    assert weight_axis_range([float("nan"), 70.0]) == (68.0, 72.0)


def test_chart_without_goal():
    fig = make_weight_chart(_frame())
    assert len(fig.data) == 1
    trace = fig.data[0]
    assert list(trace.y) == [80.0, 78.0, 77.4]
    assert fig.layout.xaxis.tickformat == "%m/%d"
    assert fig.layout.yaxis.title.text == "Weight (kg)"
    assert list(fig.layout.yaxis.range) == [75.0, 82.0]


def test_chart_with_goal_line():
    fig = make_weight_chart(_frame(), goal=70.0)
    assert len(fig.data) == 2
    goal_trace = fig.data[1]
    assert goal_trace.name == "Goal weight"
    assert list(goal_trace.y) == [70.0, 70.0]
    assert goal_trace.line.dash == "dash"
    # axis widened to include the goal
    assert list(fig.layout.yaxis.range) == [68.0, 82.0]


def test_empty_chart():
    fig = make_weight_chart(entries_frame([]))
    assert len(fig.data) == 0
    assert fig.layout.title.text == "Weight"
