import collections
from datetime import timedelta

# --- Chart Defaults ---

default_face_color = (0, 0.4471, 0.7412)
default_edge_color = (0, 0, 0)
default_grid = 'columns'
default_bar_width = 0.5
default_line_width = 0.5
default_now_line_color = (0.8510, 0.3255, 0.0980)
default_now_line_style = '--'

grid_modes = ('on', 'off', 'columns')
line_styles = ('-', '--', ':', '-.')
sort_orders = {
    'ascend': False,
    'ascending': False,
    'descend': True,
    'descending': True,
}

# Fraction of the visible time span added next to the now line when it sits at an edge.
now_line_margin = 1 / 15

# Name/value options accepted after the positional task data, mapped to chart attributes.
option_names = collections.OrderedDict([
    ('taskdata', 'names'),
    ('startdate', 'start_dates'),
    ('durationdata', 'durations'),
    ('title', 'title'),
    ('taskaxislabel', 'task_axis_label'),
    ('timeaxislabel', 'time_axis_label'),
    ('facecolor', 'face_color'),
    ('edgecolor', 'edge_color'),
    ('grid', 'grid'),
    ('barwidth', 'bar_width'),
    ('linewidth', 'line_width'),
    ('shownowline', 'show_now_line'),
    ('nowlinecolor', 'now_line_color'),
    ('nowlinestyle', 'now_line_style'),
])

# --- Application Settings ---

date_format = "%d-%m-%Y"
tooltip_time_format = "%d-%b-%Y %H:%M:%S"
figure_size = (14, 5)
export_dpi = 300

# Task set shown when the planner window opens: (name, duration).
default_tasks_data = [
    ("Requirements", timedelta(days=7)),
    ("Design", timedelta(days=7)),
    ("Build", timedelta(days=14)),
    ("Test", timedelta(days=5)),
    ("Deliver", timedelta(days=2)),
]

palette = [
    '#4f81bd', '#c0504d', '#9bbb59', '#8064a2',
    '#4bacc6', '#f79646', '#db843d',
]
