"""
Tests for the planner window's chart switching. The window itself is never
created, so no display is needed.
"""

import pytest
from datetime import datetime, timedelta
import sys
import os

from matplotlib.figure import Figure

pytest.importorskip("tkinter")

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import main
from chart import GanttChart
from rendering import GanttChartView

T0 = datetime(2022, 4, 20)
DAY = timedelta(days=1)


class FakeCanvas:
    def draw(self):
        pass


def make_app(ax):
    app = main.GanttChartApp.__new__(main.GanttChartApp)
    app.ax = ax
    app.canvas = FakeCanvas()
    app.chart = None
    app.view = None
    app.populate_treeview = lambda: None
    return app


class TestShowChart:
    """Tests for GanttChartApp.show_chart."""

    def test_replaces_view(self):
        ax = Figure().add_subplot(111)
        app = make_app(ax)
        first = GanttChart(["a"], [DAY], clock=lambda: T0)
        app.show_chart(first)
        old_view = app.view

        app.show_chart(GanttChart(["b"], [DAY], clock=lambda: T0))

        assert app.view is not old_view
        assert app.chart.names == ["b"]
        first.title = 'Changed'
        assert ax.get_title() == ''

    def test_failed_draw_then_next_chart(self, monkeypatch):
        ax = Figure().add_subplot(111)
        app = make_app(ax)
        app.show_chart(GanttChart(["a"], [DAY], clock=lambda: T0))

        errors = []
        monkeypatch.setattr(main.messagebox, "showerror", lambda *args: errors.append(args))

        def broken_view(chart, ax):
            raise ValueError("bad layout")

        monkeypatch.setattr(main, "GanttChartView", broken_view)
        app.show_chart(GanttChart(["b"], [DAY], clock=lambda: T0))

        assert app.view is None
        assert len(errors) == 1

        monkeypatch.setattr(main, "GanttChartView", GanttChartView)
        app.show_chart(GanttChart(["c"], [DAY], clock=lambda: T0))
        assert app.view.chart.names == ["c"]
