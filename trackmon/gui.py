"""Tk window for watching the tracker's status reports."""

from __future__ import annotations

import argparse
import tkinter as tk
from tkinter import filedialog, messagebox
from typing import Optional

from trackmon.controller import TrackerMonitor
from trackmon.trackdata import TrackData
from trackmon.trackermemory import TrackerError

POLL_INTERVAL_MS = 4

_FIELD_LABELS = (
    ("raw_error_x", "Raw Error X"),
    ("raw_error_y", "Raw Error Y"),
    ("filtered_error_x", "Filtered Error X"),
    ("filtered_error_y", "Filtered Error Y"),
    ("track_state", "Track State"),
    ("track_mode", "Track Mode"),
    ("target_polarity", "Target Polarity"),
    ("status", "Status"),
    ("target_size_x", "Target Size X"),
    ("target_size_y", "Target Size Y"),
    ("target_left", "Target Left"),
    ("target_top", "Target Top"),
    ("pixel_count", "Pixel Count"),
    ("azimuth", "Azimuth"),
    ("elevation", "Elevation"),
)


def format_fields(data: TrackData) -> dict[str, str]:
    """Display text for each field of a status report."""
    return {
        "raw_error_x": f"{data.raw_error_x:.3f}",
        "raw_error_y": f"{data.raw_error_y:.3f}",
        "filtered_error_x": f"{data.filtered_error_x:.3f}",
        "filtered_error_y": f"{data.filtered_error_y:.3f}",
        "track_state": data.state_string(),
        "track_mode": data.mode_string(),
        "target_polarity": data.polarity_string(),
        "status": data.status_string(),
        "target_size_x": str(data.target_size_x),
        "target_size_y": str(data.target_size_y),
        "target_left": str(data.target_left),
        "target_top": str(data.target_top),
        "pixel_count": str(data.target_pixel_count),
        "azimuth": f"{data.azimuth_degrees():.4f}",
        "elevation": f"{data.elevation_degrees():.4f}",
    }


class MainWindow:
    """Main window: controls, live status fields and a status line."""

    def __init__(self, root: tk.Misc, monitor: Optional[TrackerMonitor] = None) -> None:
        self.root = root
        self.monitor = monitor if monitor is not None else TrackerMonitor()
        self._poll_job: Optional[str] = None
        self._status = tk.StringVar(master=root, value="")
        self._auto_poll = tk.BooleanVar(master=root, value=False)
        self._fields = {key: tk.StringVar(master=root) for key, _ in _FIELD_LABELS}

        root.title("Tracker Monitor")
        self._build_menu()
        self._build_widgets()

        self._set_ui_enabled(False)
        self._stop_button.configure(state=tk.DISABLED)
        self._file_menu.entryconfigure("Stop Logging", state=tk.DISABLED)

        root.protocol("WM_DELETE_WINDOW", self._on_exit)

    def _build_menu(self) -> None:
        menubar = tk.Menu(self.root)
        self._file_menu = tk.Menu(menubar, tearoff=False)
        self._file_menu.add_command(label="Start Logging", command=self._on_start_logging)
        self._file_menu.add_command(label="Stop Logging", command=self._on_stop_logging)
        self._file_menu.add_separator()
        self._file_menu.add_command(label="Exit", command=self._on_exit)
        menubar.add_cascade(label="File", menu=self._file_menu)

        self._tracker_menu = tk.Menu(menubar, tearoff=False)
        self._tracker_menu.add_command(label="Initialize", command=self._on_initialize)
        self._tracker_menu.add_command(label="Ping", command=self._on_ping)
        self._tracker_menu.add_checkbutton(
            label="Automatic Poll",
            variable=self._auto_poll,
            command=self._on_auto_poll_toggled,
        )
        menubar.add_cascade(label="Tracker", menu=self._tracker_menu)
        self.root.configure(menu=menubar)

    def _build_widgets(self) -> None:
        controls = tk.Frame(self.root)
        controls.pack(side=tk.TOP, fill=tk.X, padx=6, pady=6)
        self._init_button = tk.Button(controls, text="Initialize", command=self._on_initialize)
        self._ping_button = tk.Button(controls, text="Ping", command=self._on_ping)
        self._start_button = tk.Button(
            controls, text="Start Logging", command=self._on_start_logging
        )
        self._stop_button = tk.Button(
            controls, text="Stop Logging", command=self._on_stop_logging
        )
        self._auto_poll_check = tk.Checkbutton(
            controls,
            text="Automatic Poll",
            variable=self._auto_poll,
            command=self._on_auto_poll_toggled,
        )
        for widget in (
            self._init_button,
            self._ping_button,
            self._start_button,
            self._stop_button,
            self._auto_poll_check,
        ):
            widget.pack(side=tk.LEFT, padx=2)

        grid = tk.Frame(self.root)
        grid.pack(side=tk.TOP, fill=tk.BOTH, expand=True, padx=6)
        for row, (key, label) in enumerate(_FIELD_LABELS):
            tk.Label(grid, text=label, anchor=tk.W).grid(row=row, column=0, sticky=tk.W)
            tk.Entry(
                grid, textvariable=self._fields[key], state="readonly", width=40
            ).grid(row=row, column=1, sticky=tk.EW, pady=1)
        grid.columnconfigure(1, weight=1)

        tk.Label(self.root, textvariable=self._status, anchor=tk.W).pack(
            side=tk.BOTTOM, fill=tk.X, padx=6, pady=4
        )

    def _set_ui_enabled(self, enabled: bool) -> None:
        state = tk.NORMAL if enabled else tk.DISABLED
        self._ping_button.configure(state=state)
        self._start_button.configure(state=state)
        self._auto_poll_check.configure(state=state)
        self._tracker_menu.entryconfigure("Ping", state=state)
        self._file_menu.entryconfigure("Start Logging", state=state)
        self._tracker_menu.entryconfigure("Automatic Poll", state=state)

    def _set_logging_controls(self, logging_active: bool) -> None:
        start = tk.DISABLED if logging_active else tk.NORMAL
        stop = tk.NORMAL if logging_active else tk.DISABLED
        self._start_button.configure(state=start)
        self._stop_button.configure(state=stop)
        self._file_menu.entryconfigure("Start Logging", state=start)
        self._file_menu.entryconfigure("Stop Logging", state=stop)

    def _show_error(self, title: str, exc: Exception) -> None:
        self._status.set(self.monitor.status)
        messagebox.showerror(title, str(exc), parent=self.root)

    def _on_initialize(self) -> None:
        try:
            self.monitor.initialize()
        except TrackerError as exc:
            self._show_error("Tracker Error", exc)
            return
        self._status.set(self.monitor.status)
        self._set_ui_enabled(True)

    def _on_ping(self) -> None:
        try:
            self.monitor.ping()
        except TrackerError as exc:
            self._show_error("Tracker Error", exc)
            return
        self._status.set(self.monitor.status)

    def _on_start_logging(self) -> None:
        filename = filedialog.asksaveasfilename(
            parent=self.root,
            title="Save Log File",
            filetypes=[("CSV Files", "*.csv"), ("All Files", "*")],
        )
        if not filename:
            return
        try:
            self.monitor.start_logging(filename)
        except OSError as exc:
            self._show_error("Logger Error", exc)
            return
        self._status.set(self.monitor.status)
        self._set_logging_controls(True)

    def _on_stop_logging(self) -> None:
        self.monitor.stop_logging()
        self._status.set(self.monitor.status)
        self._set_logging_controls(False)

    def _on_auto_poll_toggled(self) -> None:
        if self._auto_poll.get():
            self._schedule_poll()
            self._status.set("Automatic polling started")
        else:
            self._cancel_poll()
            self._status.set("Automatic polling stopped")

    def _schedule_poll(self) -> None:
        if self._poll_job is None:
            self._poll_job = self.root.after(POLL_INTERVAL_MS, self._poll)

    def _cancel_poll(self) -> None:
        if self._poll_job is not None:
            self.root.after_cancel(self._poll_job)
            self._poll_job = None

    def _poll(self) -> None:
        self._poll_job = None
        try:
            data = self.monitor.poll()
        except TrackerError as exc:
            self._show_error("Tracker Error", exc)
            data = None
        if data is not None:
            for key, text in format_fields(data).items():
                self._fields[key].set(text)
        if self._auto_poll.get():
            self._schedule_poll()

    def _on_exit(self) -> None:
        self._cancel_poll()
        self.monitor.close()
        self.root.destroy()


def main(argv: Optional[list[str]] = None) -> int:
    """Open the monitor window and run until it is closed."""
    parser = argparse.ArgumentParser(
        prog="trackmon", description="Monitor a video tracker's status reports."
    )
    parser.parse_args(argv)
    root = tk.Tk()
    MainWindow(root, TrackerMonitor())
    root.mainloop()
    return 0