from datetime import datetime, timedelta
import collections
import logging

from config import option_names, sort_orders

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)

ResolvedInput = collections.namedtuple(
    'ResolvedInput',
    ['shape', 'names', 'start_dates', 'durations', 'duration_unit', 'options'],
)

# --- Argument Kinds ---

def _is_sequence(value):
    if isinstance(value, (str, bytes, dict)):
        return False
    return hasattr(value, '__iter__')


def _is_kind(value, cls):
    if isinstance(value, cls):
        return True
    if not _is_sequence(value):
        return False
    items = list(value)
    return bool(items) and all(isinstance(item, cls) for item in items)


def is_duration(value):
    """True for a timedelta or a non-empty sequence of timedeltas."""
    return _is_kind(value, timedelta)


def is_timestamp(value):
    """True for a datetime or a non-empty sequence of datetimes."""
    return _is_kind(value, datetime)


def is_text(value):
    if isinstance(value, str):
        return True
    return _is_sequence(value) and all(isinstance(item, str) for item in value)


def as_list(value):
    if value is None:
        return []
    if isinstance(value, (str, datetime, timedelta)):
        return [value]
    return list(value)

# --- Schedule Calculation ---

def check_sizes(names, start_dates, durations):
    """Shared gate: the three task lists must have the same length."""
    if len(names) != len(start_dates):
        raise ValueError("The number of tasks should be the same size as the number of start dates.")
    if len(start_dates) != len(durations):
        raise ValueError("Start date and duration data must be the same size.")


def chain_durations(durations, now):
    """Each task starts when the previous one ends; the first starts at `now`."""
    start_dates = []
    current = now
    for duration in durations:
        start_dates.append(current)
        current = current + duration
    return start_dates


def end_dates(start_dates, durations):
    return [start + duration for start, duration in zip(start_dates, durations)]


def is_whole_days(durations):
    return bool(durations) and all(d % ONE_DAY == timedelta(0) for d in durations)


def to_whole_days(durations):
    return [timedelta(days=d // ONE_DAY) for d in durations]


def parse_options(pairs):
    """Turns trailing Name, Value pairs into an ordered {attribute: value} mapping."""
    if len(pairs) % 2:
        raise ValueError(f"Option '{pairs[-1]}' has no value.")

    options = collections.OrderedDict()
    for name, value in zip(pairs[::2], pairs[1::2]):
        if not isinstance(name, str):
            raise ValueError(f"Expected an option name, got {name!r}.")
        attribute = option_names.get(name.lower())
        if attribute is None:
            raise ValueError(f"Unrecognized option '{name}'.")
        options[attribute] = value
    return options


def resolve_input(args, now):
    """
    Works out which of the four task data shapes `args` holds and returns the
    complete task set as a ResolvedInput.

    Shapes, tried in this order:
      (names, durations)              chained from `now`
      (names, start_dates, end_dates)
      (names, start_dates, durations)
      (names, durations, end_dates)   start dates back-calculated
    Anything after the task data must be Name, Value option pairs.
    """
    # Generators are read once here so the kind checks below do not use them up.
    args = [list(arg) if _is_sequence(arg) else arg for arg in args]
    if not args:
        return ResolvedInput('empty', [], [], [], None, collections.OrderedDict())

    if len(args) < 2:
        raise TypeError("Insufficient input arguments, Gantt chart requires at least 2.")
    if not is_duration(args[1]) and not is_timestamp(args[1]):
        raise TypeError("Second argument must be of type duration or datetime.")
    if not is_text(args[0]):
        raise TypeError("First argument must be the task names.")

    names = as_list(args[0])
    duration_unit = None

    if len(args) % 2 == 0 and is_duration(args[1]):
        shape = 'durations'
        durations = as_list(args[1])
        start_dates = chain_durations(durations, now)
        rest = args[2:]

    elif len(args) >= 3 and len(args) % 2 == 1 and is_timestamp(args[1]):
        start_dates = as_list(args[1])
        if is_timestamp(args[2]):
            shape = 'start_end'
            finish_dates = as_list(args[2])
            if len(start_dates) != len(finish_dates):
                raise ValueError("Start and end dates must be the same size.")
            durations = [end - start for start, end in zip(start_dates, finish_dates)]
            if is_whole_days(durations):
                durations = to_whole_days(durations)
                duration_unit = 'days'
        elif is_duration(args[2]):
            shape = 'start_duration'
            durations = as_list(args[2])
        else:
            raise TypeError("Third argument must be either of type datetime or duration.")
        rest = args[3:]

    elif len(args) >= 3 and is_duration(args[1]) and is_timestamp(args[2]):
        shape = 'duration_end'
        durations = as_list(args[1])
        finish_dates = as_list(args[2])
        if len(finish_dates) != len(durations):
            raise ValueError("Duration data and end dates should be the same size.")
        start_dates = [end - duration for end, duration in zip(finish_dates, durations)]
        rest = args[3:]

    else:
        raise TypeError(
            f"Unrecognized combination of {len(args)} arguments; expected task names followed by "
            "durations, start and end dates, start dates and durations, or durations and end dates."
        )

    check_sizes(names, start_dates, durations)
    return ResolvedInput(shape, names, start_dates, durations, duration_unit, parse_options(rest))

# --- Editing ---

def sort_tasks(names, start_dates, durations, order='ascend'):
    """Stable sort of the three task lists by start date."""
    try:
        reverse = sort_orders[str(order).lower()]
    except KeyError:
        raise ValueError(f"Sort order must be 'ascend' or 'descend', got '{order}'.")

    idx = sorted(range(len(start_dates)), key=lambda i: start_dates[i], reverse=reverse)
    return ([names[i] for i in idx],
            [start_dates[i] for i in idx],
            [durations[i] for i in idx])


def find_task(names, name, label="Task"):
    matches = [i for i, task_name in enumerate(names) if task_name == name]
    if not matches:
        raise ValueError(f"{label} not found in task list: '{name}'.")
    if len(matches) > 1:
        logger.warning("Task name '%s' appears %d times; using the first one.", name, len(matches))
    return matches[0]


def stagger_tasks(names, start_dates, durations, task_one, task_two):
    """
    Resolves an overlap between two tasks by moving the one that starts inside
    the other to the other's end date. Durations are preserved.

    Returns (start_dates, durations, moved_index); moved_index is None and the
    lists are returned unchanged when the tasks do not overlap.
    """
    idx_one = find_task(names, task_one, "Task one")
    idx_two = find_task(names, task_two, "Task two")
    if idx_one == idx_two:
        raise ValueError(f"Cannot stagger task '{task_one}' with itself.")

    start_one, start_two = start_dates[idx_one], start_dates[idx_two]
    end_one = start_one + durations[idx_one]
    end_two = start_two + durations[idx_two]

    if start_two < start_one < end_two:
        moved, new_start = idx_one, end_two
    elif start_one < start_two < end_one:
        moved, new_start = idx_two, end_one
    elif start_one == start_two:
        # The task finishing first goes after the other one.
        if end_one <= end_two:
            moved, new_start = idx_one, end_two
        else:
            moved, new_start = idx_two, end_one
    else:
        logger.info("Tasks do not overlap.")
        return start_dates, durations, None

    start_dates = list(start_dates)
    durations = list(durations)
    start_dates[moved] = new_start
    logger.debug("Moved '%s' to start at %s", names[moved], new_start)
    return start_dates, durations, moved
