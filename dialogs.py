import tkinter as tk
from tkinter import ttk, simpledialog, messagebox
from datetime import datetime, timedelta

from config import date_format
from importers import guess_mapping, mapping_fields, required_fields


class AddTaskDialog(simpledialog.Dialog):
    """Asks for a new task's name, start date and duration in days."""

    def __init__(self, parent, title, default_start):
        self.default_start = default_start
        self.result = None
        super().__init__(parent, title)

    def body(self, master):
        main_frame = ttk.LabelFrame(master, text="Task Properties", padding=10)
        main_frame.pack(fill=tk.X, padx=10, pady=5)

        ttk.Label(main_frame, text="Task Name:").grid(row=0, column=0, sticky="w", padx=5, pady=2)
        self.name_var = tk.StringVar()
        name_entry = ttk.Entry(main_frame, textvariable=self.name_var, width=40)
        name_entry.grid(row=0, column=1, sticky="w", padx=5, pady=2)

        ttk.Label(main_frame, text="Start Date (DD-MM-YYYY):").grid(row=1, column=0, sticky="w", padx=5, pady=2)
        self.start_date_var = tk.StringVar(value=self.default_start.strftime(date_format))
        ttk.Entry(main_frame, textvariable=self.start_date_var, width=40).grid(row=1, column=1, sticky="w", padx=5, pady=2)

        ttk.Label(main_frame, text="Duration (days):").grid(row=2, column=0, sticky="w", padx=5, pady=2)
        self.duration_var = tk.DoubleVar(value=1)
        ttk.Entry(main_frame, textvariable=self.duration_var, width=10).grid(row=2, column=1, sticky="w", padx=5, pady=2)

        return name_entry

    def validate(self):
        if not self.name_var.get().strip():
            messagebox.showerror("Add Task", "Please enter a task name.", parent=self)
            return False
        try:
            datetime.strptime(self.start_date_var.get(), date_format)
        except ValueError:
            messagebox.showerror("Add Task", "Invalid date format. Please use DD-MM-YYYY.", parent=self)
            return False
        try:
            if self.duration_var.get() <= 0:
                raise ValueError
        except (tk.TclError, ValueError):
            messagebox.showerror("Add Task", "Duration must be a positive number of days.", parent=self)
            return False
        return True

    def apply(self):
        self.result = (
            self.name_var.get().strip(),
            timedelta(days=self.duration_var.get()),
            datetime.strptime(self.start_date_var.get(), date_format),
        )


class StaggerDialog(simpledialog.Dialog):
    """Picks the two tasks whose overlap should be resolved."""

    def __init__(self, parent, title, task_names):
        self.task_names = task_names
        self.result = None
        super().__init__(parent, title)

    def body(self, master):
        frame = ttk.Frame(master, padding=10)
        frame.pack(fill=tk.X)

        ttk.Label(frame, text="First Task:").grid(row=0, column=0, sticky="w", padx=5, pady=3)
        self.first_var = tk.StringVar()
        first_cb = ttk.Combobox(frame, textvariable=self.first_var, values=self.task_names, state="readonly", width=30)
        first_cb.grid(row=0, column=1, sticky="w", padx=5, pady=3)

        ttk.Label(frame, text="Second Task:").grid(row=1, column=0, sticky="w", padx=5, pady=3)
        self.second_var = tk.StringVar()
        ttk.Combobox(frame, textvariable=self.second_var, values=self.task_names, state="readonly", width=30).grid(
            row=1, column=1, sticky="w", padx=5, pady=3)

        if len(self.task_names) >= 2:
            self.first_var.set(self.task_names[0])
            self.second_var.set(self.task_names[1])

        ttk.Label(master,
                  text="The task that starts while the other is running is moved to start when the other ends.",
                  font=("Arial", 8, "italic"), justify=tk.LEFT).pack(anchor="w", padx=10, pady=(0, 10))
        return first_cb

    def validate(self):
        if not self.first_var.get() or not self.second_var.get():
            messagebox.showerror("Stagger Tasks", "Please select two tasks.", parent=self)
            return False
        if self.first_var.get() == self.second_var.get():
            messagebox.showerror("Stagger Tasks", "Please select two different tasks.", parent=self)
            return False
        return True

    def apply(self):
        self.result = (self.first_var.get(), self.second_var.get())


class ColumnMappingDialog(simpledialog.Dialog):
    """Lets the user pick which file column feeds each chart field."""

    NOT_MAPPED = "Not Mapped"

    def __init__(self, parent, title, columns):
        self.columns = columns
        self.mapping = {}
        super().__init__(parent, title)

    def body(self, master):
        ttk.Label(master, text="Map a duration, or a start date with an end date (* required):").grid(
            row=0, column=0, columnspan=2, sticky="w", pady=(0, 5))

        guessed = guess_mapping(self.columns)
        self.mapping_vars = {}
        for row, field in enumerate(mapping_fields, start=1):
            marker = "*" if field in required_fields else ""
            ttk.Label(master, text=f"{field}{marker}:").grid(row=row, column=0, sticky="w", padx=5, pady=3)
            var = tk.StringVar(value=guessed.get(field, self.NOT_MAPPED))
            ttk.Combobox(master, textvariable=var, values=[self.NOT_MAPPED] + self.columns,
                         state="readonly", width=30).grid(row=row, column=1, sticky="w", padx=5, pady=3)
            self.mapping_vars[field] = var
        return master

    def validate(self):
        missing = [f for f in required_fields if self.mapping_vars[f].get() == self.NOT_MAPPED]
        if missing:
            messagebox.showerror("Mapping Required", f"You must map a column to '{missing[0]}'.", parent=self)
            return False
        return True

    def apply(self):
        self.mapping = {field: var.get() for field, var in self.mapping_vars.items()
                        if var.get() != self.NOT_MAPPED}
