"""
The Gantt chart model: task data, style state and the bar layout computed
from them. Drawing is left to rendering.GanttChartView.
"""

from datetime import datetime, timedelta
import collections
import numbers

import matplotlib.colors as mcolors
import matplotlib.dates as mdates
from matplotlib.axes import Axes

import config
from core_logic import (ONE_DAY, as_list, check_sizes, end_dates, resolve_input,
                        sort_tasks, stagger_tasks)


ChartLayout = collections.namedtuple('ChartLayout', [
    'polygons', 'face_colors', 'edge_color', 'line_width',
    'yticks', 'yticklabels', 'ylim', 'xlim', 'grid',
    'now_line', 'tooltips', 'title', 'task_axis_label', 'time_axis_label',
])

NowLine = collections.namedtuple('NowLine', ['x', 'color', 'style'])

# --- Validators ---

def validate_grid(value):
    if isinstance(value, bool):
        value = 'on' if value else 'off'
    if not isinstance(value, str) or value.lower() not in config.grid_modes:
        raise ValueError(f"Grid must be one of {', '.join(config.grid_modes)}, got {value!r}.")
    return value.lower()


def validate_single_color(color):
    if not mcolors.is_color_like(color):
        raise ValueError(f"Invalid color: {color!r}.")
    return mcolors.to_rgb(color)


def validate_colors(colors):
    """One color or a sequence of colors, returned as a list of RGB tuples."""
    if mcolors.is_color_like(colors):
        return [mcolors.to_rgb(colors)]
    if isinstance(colors, str) or not hasattr(colors, '__iter__'):
        raise ValueError(f"Invalid color: {colors!r}.")
    colors = list(colors)
    if not colors:
        raise ValueError("FaceColor must have at least one color.")
    return [validate_single_color(c) for c in colors]


def validate_on_off(value):
    if isinstance(value, str):
        if value.lower() not in ('on', 'off'):
            raise ValueError(f"Expected 'on' or 'off', got {value!r}.")
        return value.lower() == 'on'
    if isinstance(value, numbers.Real) and value in (0, 1):
        return bool(value)
    raise ValueError(f"Expected a boolean or 'on'/'off', got {value!r}.")


def _validate_positive(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise TypeError(f"{name} must be numeric, got {value!r}.")
    if not value > 0:
        raise ValueError(f"{name} must be positive, got {value}.")
    return float(value)


def validate_bar_width(value):
    value = _validate_positive("BarWidth", value)
    if value > 1:
        raise ValueError(f"BarWidth must be less than or equal to 1, got {value}.")
    return value


def validate_line_width(value):
    return _validate_positive("LineWidth", value)


def validate_line_style(value):
    if value not in config.line_styles:
        raise ValueError(f"NowLineStyle must be one of {', '.join(config.line_styles)}, got {value!r}.")
    return value


def validate_text(value):
    if value is None:
        return ''
    if not isinstance(value, str):
        raise TypeError(f"Expected text, got {value!r}.")
    return value


def _validate_items(values, cls, what):
    values = as_list(values)
    for value in values:
        if not isinstance(value, cls):
            raise TypeError(f"{what} must contain only {cls.__name__} values, got {value!r}.")
    return values


def format_duration(duration, unit=None):
    if unit == 'days':
        days = duration / ONE_DAY
        return "1 day" if days == 1 else f"{days:g} days"
    seconds = int(duration.total_seconds())
    sign = "-" if seconds < 0 else ""
    hours, rest = divmod(abs(seconds), 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"


class GanttChart:
    """
    GanttChart(names, durations)              tasks run back to back from now
    GanttChart(names, start_dates, end_dates)
    GanttChart(names, start_dates, durations)
    GanttChart(names, durations, end_dates)   latest start for each deadline

    Any of these may be followed by Name, Value option pairs (e.g. 'Title',
    'Plan') and/or snake_case keyword options (title='Plan'). A matplotlib
    Axes given as the first argument becomes the chart's parent.
    """

    _validators = {
        'title': validate_text,
        'task_axis_label': validate_text,
        'time_axis_label': validate_text,
        'face_color': validate_colors,
        'edge_color': validate_single_color,
        'grid': validate_grid,
        'bar_width': validate_bar_width,
        'line_width': validate_line_width,
        'show_now_line': validate_on_off,
        'now_line_color': validate_single_color,
        'now_line_style': validate_line_style,
    }

    def __init__(self, *args, clock=None, **kwargs):
        self.clock = clock or datetime.now
        self._listeners = []
        self._style = {}

        args = list(args)
        self.parent = None
        if args and isinstance(args[0], Axes):
            self.parent = args.pop(0)

        self._names, self._start_dates, self._durations = [], [], []
        self.set(
            title='',
            task_axis_label='',
            time_axis_label='',
            face_color=config.default_face_color,
            edge_color=config.default_edge_color,
            grid=config.default_grid,
            bar_width=config.default_bar_width,
            line_width=config.default_line_width,
            show_now_line=False,
            now_line_color=config.default_now_line_color,
            now_line_style=config.default_now_line_style,
        )

        resolved = resolve_input(args, self.clock())
        self.shape = resolved.shape
        self.duration_unit = resolved.duration_unit
        self._names = resolved.names
        self._start_dates = resolved.start_dates
        self._durations = resolved.durations

        unknown = set(kwargs) - set(config.option_names.values())
        if unknown:
            raise TypeError(f"Unexpected option(s): {', '.join(sorted(unknown))}")
        options = collections.OrderedDict(resolved.options)
        options.update(kwargs)
        self.set(**options)

    # --- Change Notification ---

    def add_listener(self, callback):
        self._listeners.append(callback)

    def remove_listener(self, callback):
        self._listeners.remove(callback)

    def _notify(self):
        for callback in list(self._listeners):
            callback(self)

    _task_items = {
        'names': (str, "Task names"),
        'start_dates': (datetime, "Start dates"),
        'durations': (timedelta, "Durations"),
    }

    def set(self, **options):
        """
        Validates every option, then stores them all and notifies listeners
        once. Nothing is stored if any value is rejected.
        """
        validated = collections.OrderedDict()
        for name, value in options.items():
            if name in self._validators:
                validated[name] = self._validators[name](value)
            elif name in self._task_items:
                validated[name] = _validate_items(value, *self._task_items[name])
            else:
                raise TypeError(f"Unexpected option: {name}")

        for name, value in validated.items():
            if name in self._task_items:
                setattr(self, '_' + name, value)
            else:
                self._style[name] = value
        self._notify()

    # --- Task Data ---

    @property
    def names(self):
        return list(self._names)

    @names.setter
    def names(self, value):
        self._names = _validate_items(value, str, "Task names")
        self._notify()

    @property
    def start_dates(self):
        return list(self._start_dates)

    @start_dates.setter
    def start_dates(self, value):
        self._start_dates = _validate_items(value, datetime, "Start dates")
        self._notify()

    @property
    def durations(self):
        return list(self._durations)

    @durations.setter
    def durations(self, value):
        self._durations = _validate_items(value, timedelta, "Durations")
        self._notify()

    @property
    def end_dates(self):
        return end_dates(self._start_dates, self._durations)

    def set_tasks(self, names, start_dates, durations):
        """Replaces the whole task set at once."""
        names = _validate_items(names, str, "Task names")
        start_dates = _validate_items(start_dates, datetime, "Start dates")
        durations = _validate_items(durations, timedelta, "Durations")
        check_sizes(names, start_dates, durations)
        self._names, self._start_dates, self._durations = names, start_dates, durations
        self._notify()

    def __len__(self):
        return len(self._names)

    # --- Editing ---

    def sort(self, order='ascend'):
        self._names, self._start_dates, self._durations = sort_tasks(
            self._names, self._start_dates, self._durations, order)
        self._notify()

    def add_task(self, names, durations, start_dates):
        """Appends one or more tasks to the end of the chart."""
        names = _validate_items(names, str, "Task names")
        durations = _validate_items(durations, timedelta, "Durations")
        start_dates = _validate_items(start_dates, datetime, "Start dates")
        check_sizes(names, start_dates, durations)

        self._names = self._names + names
        self._durations = self._durations + durations
        self._start_dates = self._start_dates + start_dates
        self._notify()

    def stagger(self, task_one, task_two):
        """
        Moves whichever of the two tasks starts during the other so that it
        starts when the other ends. Returns False when they do not overlap.
        """
        start_dates, durations, moved = stagger_tasks(
            self._names, self._start_dates, self._durations, task_one, task_two)
        if moved is None:
            return False
        self._start_dates, self._durations = start_dates, durations
        self._notify()
        return True

    # --- Layout ---

    def layout(self):
        check_sizes(self._names, self._start_dates, self._durations)

        half = self.bar_width / 2
        polygons = []
        xs = []
        for row, (start, end) in enumerate(zip(self._start_dates, self.end_dates), start=1):
            x0 = float(mdates.date2num(start))
            x1 = float(mdates.date2num(end))
            polygons.append([(x0, row - half), (x0, row + half), (x1, row + half), (x1, row - half)])
            xs.extend((x0, x1))

        count = len(self._names)
        face_colors = [self.face_color[i % len(self.face_color)] for i in range(count)]

        now_line = None
        xlim = (min(xs), max(xs)) if xs else None
        if self.show_now_line:
            now_x = float(mdates.date2num(self.clock()))
            now_line = NowLine(now_x, self.now_line_color, self.now_line_style)
            if xlim and xlim[1] > xlim[0]:
                xmin, xmax = xlim
                margin = (xmax - xmin) * config.now_line_margin
                if abs(xmax - now_x) <= margin:
                    xlim = (xmin, xmax + margin)
                elif abs(xmin - now_x) <= margin:
                    xlim = (xmin - margin, xmax)

        if self.grid == 'columns':
            grid = (True, False)
        else:
            grid = (self.grid == 'on', self.grid == 'on')

        tooltips = [
            [('Task', name),
             ('Time', start.strftime(config.tooltip_time_format)),
             ('Duration', format_duration(duration, self.duration_unit))]
            for name, start, duration in zip(self._names, self._start_dates, self._durations)
        ]

        return ChartLayout(
            polygons=polygons,
            face_colors=face_colors,
            edge_color=self.edge_color,
            line_width=self.line_width,
            yticks=list(range(1, count + 1)),
            yticklabels=list(self._names),
            ylim=(0.25, count + 0.75),
            xlim=xlim,
            grid=grid,
            now_line=now_line,
            tooltips=tooltips,
            title=self.title,
            task_axis_label=self.task_axis_label,
            time_axis_label=self.time_axis_label,
        )


def _style_property(name):
    validator = GanttChart._validators[name]

    def getter(self):
        return self._style[name]

    def setter(self, value):
        self._style[name] = validator(value)
        self._notify()

    return property(getter, setter)


for _name in GanttChart._validators:
    setattr(GanttChart, _name, _style_property(_name))
del _name
