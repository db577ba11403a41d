import tkinter as tk
from tkinter import ttk, filedialog, messagebox
from datetime import datetime
import logging
import sys

from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
from matplotlib.figure import Figure

# Local imports
import config
from chart import GanttChart
from dialogs import AddTaskDialog, StaggerDialog
from importers import import_from_file
from rendering import GanttChartView

logger = logging.getLogger(__name__)


def setup_logging(level=logging.INFO):
    root = logging.getLogger()
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)
    logging.captureWarnings(True)


class GanttChartApp(tk.Tk):
    def __init__(self):
        super().__init__()
        self.title("Gantt Chart")
        self.geometry("1400x700")

        self.chart = None
        self.view = None
        self._is_updating = False

        # --- UI State ---
        self.title_var = tk.StringVar(value="New Project")
        self.grid_var = tk.StringVar(value=config.default_grid)
        self.bar_width_var = tk.DoubleVar(value=config.default_bar_width)
        self.show_now_line_var = tk.BooleanVar(value=True)

        self.create_menu()

        # --- Main Layout ---
        self.main_frame = ttk.Frame(self)
        self.main_frame.pack(side=tk.TOP, fill=tk.BOTH, expand=True)

        self.control_frame = ttk.Frame(self.main_frame, width=300, padding="10")
        self.control_frame.pack(side=tk.LEFT, fill=tk.Y, expand=False)

        self.chart_frame = ttk.Frame(self.main_frame)
        self.chart_frame.pack(side=tk.RIGHT, fill=tk.BOTH, expand=True)

        self.setup_chart_canvas()
        self.build_controls()
        self.new_demo_chart()

    def create_menu(self):
        menubar = tk.Menu(self)
        self.config(menu=menubar)

        file_menu = tk.Menu(menubar, tearoff=0)
        menubar.add_cascade(label="File", menu=file_menu)
        file_menu.add_command(label="New Demo Chart", command=self.new_demo_chart)
        file_menu.add_command(label="Import Tasks...", command=self.import_tasks)
        file_menu.add_separator()
        file_menu.add_command(label="Export Chart...", command=self.export_chart)
        file_menu.add_separator()
        file_menu.add_command(label="Exit", command=self.quit)

        tasks_menu = tk.Menu(menubar, tearoff=0)
        menubar.add_cascade(label="Tasks", menu=tasks_menu)
        tasks_menu.add_command(label="Add Task...", command=self.add_task)
        tasks_menu.add_command(label="Stagger Tasks...", command=self.stagger_tasks)
        tasks_menu.add_separator()
        tasks_menu.add_command(label="Sort by Start (Ascending)", command=lambda: self.sort_tasks('ascend'))
        tasks_menu.add_command(label="Sort by Start (Descending)", command=lambda: self.sort_tasks('descend'))

    def setup_chart_canvas(self):
        self.figure = Figure(figsize=config.figure_size, dpi=100)
        self.ax = self.figure.add_subplot(111)
        self.canvas = FigureCanvasTkAgg(self.figure, self.chart_frame)
        self.canvas.get_tk_widget().pack(side=tk.TOP, fill=tk.BOTH, expand=True)

    def build_controls(self):
        settings_frame = ttk.LabelFrame(self.control_frame, text="Chart Settings", padding="10")
        settings_frame.pack(fill=tk.X, pady=5)

        ttk.Label(settings_frame, text="Title:").grid(row=0, column=0, sticky="w")
        title_entry = ttk.Entry(settings_frame, textvariable=self.title_var, width=25)
        title_entry.grid(row=0, column=1, sticky="w", pady=2)
        title_entry.bind("<Return>", self.on_ui_change)
        title_entry.bind("<FocusOut>", self.on_ui_change)

        ttk.Label(settings_frame, text="Grid:").grid(row=1, column=0, sticky="w")
        grid_cb = ttk.Combobox(settings_frame, textvariable=self.grid_var, values=config.grid_modes,
                               state="readonly", width=10)
        grid_cb.grid(row=1, column=1, sticky="w", pady=2)
        grid_cb.bind("<<ComboboxSelected>>", self.on_ui_change)

        ttk.Label(settings_frame, text="Bar Width:").grid(row=2, column=0, sticky="w")
        ttk.Scale(settings_frame, from_=0.1, to=1.0, variable=self.bar_width_var,
                  command=self.on_ui_change).grid(row=2, column=1, sticky="we", pady=2)

        ttk.Label(settings_frame, text="Show Now Line:").grid(row=3, column=0, sticky="w", pady=5)
        ttk.Checkbutton(settings_frame, variable=self.show_now_line_var,
                        command=self.on_ui_change).grid(row=3, column=1, sticky="w")

        actions_frame = ttk.LabelFrame(self.control_frame, text="Tasks", padding="10")
        actions_frame.pack(fill=tk.X, pady=5)
        ttk.Button(actions_frame, text="Add Task", command=self.add_task).pack(fill=tk.X, pady=2)
        ttk.Button(actions_frame, text="Stagger Tasks", command=self.stagger_tasks).pack(fill=tk.X, pady=2)
        ttk.Button(actions_frame, text="Sort Ascending", command=lambda: self.sort_tasks('ascend')).pack(fill=tk.X, pady=2)
        ttk.Button(actions_frame, text="Sort Descending", command=lambda: self.sort_tasks('descend')).pack(fill=tk.X, pady=2)

        self.task_tree = ttk.Treeview(self.control_frame, columns=("start", "end"), height=15)
        self.task_tree.heading("#0", text="Task")
        self.task_tree.heading("start", text="Start")
        self.task_tree.heading("end", text="End")
        self.task_tree.column("#0", width=120)
        self.task_tree.column("start", width=80)
        self.task_tree.column("end", width=80)
        self.task_tree.pack(fill=tk.BOTH, expand=True, pady=5)

    def show_chart(self, chart):
        if self.view is not None:
            self.view.disconnect()
            self.view = None
        self.chart = chart
        chart.add_listener(self.on_chart_change)
        try:
            self.view = GanttChartView(chart, self.ax)
        except ValueError as e:
            messagebox.showerror("Error", f"Could not draw chart: {e}")
            return
        self.populate_treeview()
        self.canvas.draw()

    def new_demo_chart(self):
        names = [name for name, _ in config.default_tasks_data]
        durations = [duration for _, duration in config.default_tasks_data]
        self.show_chart(self._new_chart(names, durations))

    def _new_chart(self, *task_data):
        return GanttChart(
            *task_data,
            'Title', self.title_var.get(),
            'FaceColor', config.palette,
            'Grid', self.grid_var.get(),
            'BarWidth', self.bar_width_var.get(),
            'ShowNowLine', self.show_now_line_var.get(),
            'TimeAxisLabel', 'Date',
            'TaskAxisLabel', 'Tasks',
        )

    def on_ui_change(self, event=None):
        if self._is_updating or self.chart is None: return
        self._is_updating = True
        try:
            self.chart.set(
                title=self.title_var.get(),
                grid=self.grid_var.get(),
                bar_width=round(self.bar_width_var.get(), 2),
                show_now_line=self.show_now_line_var.get(),
            )
        except (TypeError, ValueError) as e:
            messagebox.showerror("Error", f"Could not update chart: {e}")
        finally:
            self._is_updating = False

    def on_chart_change(self, chart):
        self.populate_treeview()

    def populate_treeview(self):
        self.task_tree.delete(*self.task_tree.get_children())
        if self.chart is None: return
        for name, start, end in zip(self.chart.names, self.chart.start_dates, self.chart.end_dates):
            self.task_tree.insert("", tk.END, text=name,
                                  values=(start.strftime(config.date_format), end.strftime(config.date_format)))

    def add_task(self):
        if self.chart is None: return
        dialog = AddTaskDialog(self, "Add Task", datetime.now())
        if not dialog.result:
            return
        name, duration, start = dialog.result
        try:
            self.chart.add_task(name, duration, start)
        except (TypeError, ValueError) as e:
            messagebox.showerror("Add Task", str(e))

    def stagger_tasks(self):
        if self.chart is None: return
        names = self.chart.names
        if len(names) < 2:
            messagebox.showwarning("Stagger Tasks", "At least two tasks are needed.")
            return
        dialog = StaggerDialog(self, "Stagger Tasks", names)
        if not dialog.result:
            return
        try:
            moved = self.chart.stagger(*dialog.result)
        except ValueError as e:
            messagebox.showerror("Stagger Tasks", str(e))
            return
        if not moved:
            messagebox.showinfo("Stagger Tasks", "Tasks do not overlap.")

    def sort_tasks(self, order):
        if self.chart is None: return
        self.chart.sort(order)

    def import_tasks(self):
        filepath = filedialog.askopenfilename(
            filetypes=[("Spreadsheets", "*.csv *.xls *.xlsx"), ("All Files", "*.*")],
            title="Import Tasks"
        )
        if not filepath:
            return

        task_data = import_from_file(filepath, self)
        if task_data is None:
            return
        try:
            chart = self._new_chart(*task_data)
        except (TypeError, ValueError) as e:
            messagebox.showerror("Import Error", f"Could not build chart: {e}")
            return
        logger.info("Imported %d tasks from %s", len(chart), filepath)
        self.show_chart(chart)

    def export_chart(self):
        if self.chart is None or not len(self.chart):
            messagebox.showinfo("Export Chart", "There is nothing to export.")
            return

        filepath = filedialog.asksaveasfilename(
            title="Export Gantt Chart",
            defaultextension=".png",
            filetypes=[
                ("PNG Image", "*.png"),
                ("PDF Document", "*.pdf"),
                ("SVG Vector Image", "*.svg"),
                ("All Files", "*.*")
            ]
        )
        if not filepath:
            return

        try:
            self.figure.savefig(filepath, bbox_inches='tight', dpi=config.export_dpi)
            messagebox.showinfo("Export Successful", f"Chart successfully saved to\n{filepath}")
        except Exception as e:
            messagebox.showerror("Export Error", f"An error occurred while exporting the chart: {e}")


def main():
    setup_logging()
    app = GanttChartApp()
    app.mainloop()


if __name__ == "__main__":
    main()
