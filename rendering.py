import logging

import matplotlib.dates as mdates
from matplotlib.collections import PolyCollection
from matplotlib.figure import Figure

import config
from chart import GanttChart

logger = logging.getLogger(__name__)


class GanttChartView:
    """Draws a GanttChart on a matplotlib Axes and keeps it in sync with the model."""

    def __init__(self, chart, ax=None):
        if ax is None:
            ax = chart.parent
        if ax is None:
            figure = Figure(figsize=config.figure_size, dpi=100)
            ax = figure.add_subplot(111)
        self.chart = chart
        self.ax = ax
        self.figure = ax.figure
        self.bars = None
        self.now_line = None
        self.tooltip = None
        self._layout = None

        chart.add_listener(self.on_chart_change)
        self._hover_cid = self.figure.canvas.mpl_connect('motion_notify_event', self.on_motion)
        self.draw()

    def on_chart_change(self, chart):
        # Task lists may be reassigned one at a time; the previous drawing stays until they agree.
        try:
            self.draw()
        except ValueError as e:
            logger.warning("Chart not redrawn: %s", e)
            return
        self.figure.canvas.draw_idle()

    def disconnect(self):
        self.chart.remove_listener(self.on_chart_change)
        self.figure.canvas.mpl_disconnect(self._hover_cid)

    def draw(self):
        # Layout first: a task set with mismatched lengths must leave the axes untouched.
        layout = self.chart.layout()
        self._layout = layout

        ax = self.ax
        ax.clear()

        self.bars = PolyCollection(
            layout.polygons,
            closed=True,
            facecolors=layout.face_colors,
            edgecolors=[layout.edge_color],
            linewidths=layout.line_width,
        )
        ax.add_collection(self.bars)

        ax.set_yticks(layout.yticks)
        ax.set_yticklabels(layout.yticklabels)
        ax.set_ylim(layout.ylim)
        ax.invert_yaxis()
        ax.tick_params(axis='both', length=0)

        ax.xaxis_date()
        ax.xaxis.tick_top()
        ax.xaxis.set_label_position('top')
        if layout.xlim is not None:
            ax.set_xlim(layout.xlim)

        x_grid, y_grid = layout.grid
        ax.grid(x_grid, axis='x')
        ax.grid(y_grid, axis='y')
        ax.set_axisbelow(True)

        self.now_line = None
        if layout.now_line is not None:
            self.now_line = ax.axvline(layout.now_line.x, color=layout.now_line.color,
                                       linestyle=layout.now_line.style)

        ax.set_title(layout.title)
        ax.set_xlabel(layout.time_axis_label)
        ax.set_ylabel(layout.task_axis_label)
        for spine in ax.spines.values():
            spine.set_visible(True)

        self.tooltip = ax.annotate(
            "", xy=(0, 0), xytext=(12, 12), textcoords='offset points',
            bbox=dict(boxstyle='round', fc='white', alpha=0.9),
        )
        self.tooltip.set_visible(False)

    def tooltip_text(self, index, x=None):
        """Task, time and duration rows for bar `index`; time is `x` when given."""
        rows = list(self._layout.tooltips[index])
        if x is not None:
            rows[1] = ('Time', mdates.num2date(x).strftime(config.tooltip_time_format))
        return "\n".join(f"{label}: {value}" for label, value in rows)

    def on_motion(self, event):
        if self.bars is None or self.tooltip is None:
            return
        if event.inaxes != self.ax:
            if self.tooltip.get_visible():
                self.tooltip.set_visible(False)
                self.figure.canvas.draw_idle()
            return

        contains, info = self.bars.contains(event)
        if contains and len(info.get('ind', [])):
            index = info['ind'][-1]
            self.tooltip.xy = (event.xdata, event.ydata)
            self.tooltip.set_text(self.tooltip_text(index, event.xdata))
            self.tooltip.set_visible(True)
            self.figure.canvas.draw_idle()
        elif self.tooltip.get_visible():
            self.tooltip.set_visible(False)
            self.figure.canvas.draw_idle()


def gantt_chart(*args, **kwargs):
    """Creates a GanttChart, draws it and returns the view (view.chart is the model)."""
    chart = GanttChart(*args, **kwargs)
    return GanttChartView(chart)
