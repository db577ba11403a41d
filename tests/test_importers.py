"""
Unit tests for turning spreadsheet tables into chart task data.
"""

import pytest
from datetime import datetime, timedelta
import sys
import os

import pandas as pd

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from chart import GanttChart
from importers import guess_mapping, read_task_table, tasks_from_frame

DAY = timedelta(days=1)


@pytest.fixture
def frame():
    return pd.DataFrame({
        "Task": ["Survey", "Drill", None, "Report"],
        "From": ["20-04-2022", "23-04-2022", "01-05-2022", "25-04-2022"],
        "To": ["22-04-2022", "25-04-2022", "02-05-2022", "30-04-2022"],
        "Days": [2, 2.5, 1, 5],
    })


class TestTasksFromFrame:
    """Tests for the tasks_from_frame function."""

    def test_start_and_end_columns(self, frame):
        mapping = {"Task Name": "Task", "Start Date": "From", "End Date": "To"}
        names, starts, ends = tasks_from_frame(frame, mapping)

        assert names == ["Survey", "Drill", "Report"]
        assert starts[0] == datetime(2022, 4, 20)
        assert ends[2] == datetime(2022, 4, 30)

    def test_start_and_end_build_a_chart(self, frame):
        mapping = {"Task Name": "Task", "Start Date": "From", "End Date": "To"}
        chart = GanttChart(*tasks_from_frame(frame, mapping))

        assert chart.durations == [2 * DAY, 2 * DAY, 5 * DAY]
        assert chart.duration_unit == 'days'

    def test_start_and_duration_columns(self, frame):
        mapping = {"Task Name": "Task", "Start Date": "From", "Duration (days)": "Days"}
        chart = GanttChart(*tasks_from_frame(frame, mapping))

        assert chart.shape == 'start_duration'
        assert chart.durations[1] == timedelta(days=2.5)

    def test_duration_and_end_columns(self, frame):
        mapping = {"Task Name": "Task", "End Date": "To", "Duration (days)": "Days"}
        chart = GanttChart(*tasks_from_frame(frame, mapping))

        assert chart.shape == 'duration_end'
        assert chart.start_dates[2] == datetime(2022, 4, 25)

    def test_durations_only(self, frame):
        now = datetime(2022, 1, 1)
        mapping = {"Task Name": "Task", "Duration (days)": "Days"}
        chart = GanttChart(*tasks_from_frame(frame, mapping), clock=lambda: now)

        assert chart.shape == 'durations'
        assert chart.start_dates == [now, now + 2 * DAY, now + timedelta(days=4.5)]

    def test_task_name_is_required(self, frame):
        with pytest.raises(ValueError) as exc_info:
            tasks_from_frame(frame, {"Start Date": "From", "End Date": "To"})
        assert "Task Name" in str(exc_info.value)

    def test_start_without_end_or_duration(self, frame):
        with pytest.raises(ValueError):
            tasks_from_frame(frame, {"Task Name": "Task", "Start Date": "From"})

    def test_missing_date(self, frame):
        frame.loc[1, "From"] = None
        with pytest.raises(ValueError) as exc_info:
            tasks_from_frame(frame, {"Task Name": "Task", "Start Date": "From", "End Date": "To"})
        assert "without a date" in str(exc_info.value)

    def test_unknown_column(self, frame):
        with pytest.raises(KeyError):
            tasks_from_frame(frame, {"Task Name": "Task", "Duration (days)": "Length"})


class TestReadTaskTable:
    """Tests for the read_task_table function."""

    def test_reads_csv(self, tmp_path, frame):
        path = tmp_path / "tasks.csv"
        frame.to_csv(path, index=False)

        df = read_task_table(str(path))
        assert list(df.columns) == ["Task", "From", "To", "Days"]
        assert len(df) == 4

    def test_unsupported_extension(self, tmp_path):
        with pytest.raises(ValueError):
            read_task_table(str(tmp_path / "tasks.json"))


class TestGuessMapping:
    """Tests for the guess_mapping function."""

    def test_matches_similar_headers(self):
        mapping = guess_mapping(["task_name", "Start-Date", "end date", "Duration"])

        assert mapping == {
            "Task Name": "task_name",
            "Start Date": "Start-Date",
            "End Date": "end date",
            "Duration (days)": "Duration",
        }

    def test_unrelated_headers_stay_unmapped(self):
        assert guess_mapping(["Owner", "Budget"]) == {}

    def test_first_matching_column_wins(self):
        mapping = guess_mapping(["Task", "Task Name"])
        assert mapping["Task Name"] == "Task"
