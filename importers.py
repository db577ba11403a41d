import pandas as pd

# Fields a file column can be mapped to; only the task name is required.
mapping_fields = ["Task Name", "Start Date", "End Date", "Duration (days)"]
required_fields = {"Task Name"}


def guess_mapping(columns):
    """Pairs each field with the first column whose header resembles it."""
    mapping = {}
    for field in mapping_fields:
        key = field.split(" (")[0].lower()
        for col in columns:
            header = col.lower().replace("_", " ").replace("-", " ")
            if header and (key in header or header in key):
                mapping[field] = col
                break
    return mapping


def read_task_table(filepath):
    """Reads a CSV or Excel file into a DataFrame."""
    lowered = filepath.lower()
    if lowered.endswith('.csv'):
        return pd.read_csv(filepath)
    if lowered.endswith('.xls') or lowered.endswith('.xlsx'):
        return pd.read_excel(filepath)
    raise ValueError("Please select a CSV or Excel file.")


def _dates(df, column):
    dates = pd.to_datetime(df[column], dayfirst=True)
    if dates.isna().any():
        raise ValueError(f"Column '{column}' has rows without a date.")
    return dates.tolist()


def _durations(df, column):
    days = pd.to_numeric(df[column])
    if days.isna().any():
        raise ValueError(f"Column '{column}' has rows without a duration.")
    return pd.to_timedelta(days, unit="D").tolist()


def tasks_from_frame(df, mapping):
    """
    Converts mapped columns into GanttChart positional arguments. Which shape
    is produced depends on the mapped columns, preferring start and end dates,
    then start dates and durations, then durations and end dates, then
    durations alone.
    """
    task_col = mapping.get("Task Name")
    if not task_col:
        raise ValueError("You must map a column to 'Task Name'.")

    df = df.dropna(subset=[task_col])  # Skip rows where task name is empty
    names = df[task_col].astype(str).tolist()

    start_col = mapping.get("Start Date")
    end_col = mapping.get("End Date")
    duration_col = mapping.get("Duration (days)")

    if start_col and end_col:
        return names, _dates(df, start_col), _dates(df, end_col)
    if start_col and duration_col:
        return names, _dates(df, start_col), _durations(df, duration_col)
    if duration_col and end_col:
        return names, _durations(df, duration_col), _dates(df, end_col)
    if duration_col:
        return names, _durations(df, duration_col)
    raise ValueError("Map a duration column, or a start date column together with an end date column.")


def import_from_file(filepath, parent):
    """
    Imports tasks from a CSV or Excel file. Returns the positional task data
    for GanttChart, or None if the import failed or was cancelled.
    """
    from tkinter import messagebox
    from dialogs import ColumnMappingDialog

    try:
        df = read_task_table(filepath)
    except ValueError as e:
        messagebox.showerror("Unsupported File Type", str(e))
        return None
    except Exception as e:
        messagebox.showerror("Error Reading File", f"An error occurred while reading the file: {e}")
        return None

    dialog = ColumnMappingDialog(parent, "Map Columns", [str(c) for c in df.columns])
    if not dialog.mapping:
        return None # User cancelled

    try:
        return tasks_from_frame(df, dialog.mapping)
    except KeyError as e:
        messagebox.showerror("Mapping Error", f"The column {e} selected in the mapping does not exist in the file.")
    except (ValueError, TypeError) as e:
        messagebox.showerror("Import Error", f"An error occurred while processing the file: {e}")
    return None
