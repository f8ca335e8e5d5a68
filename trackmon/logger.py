"""CSV logging of tracker status reports."""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, TextIO

from trackmon.trackdata import TrackData

HEADER = (
    "Timestamp,RawErrorX,RawErrorY,FilteredErrorX,FilteredErrorY,"
    "TrackState,TrackMode,TargetPolarity,Status,"
    "TargetSizeX,TargetSizeY,TargetLeft,TargetTop,TargetPixelCount,"
    "Azimuth,Elevation"
)


def _number(value: float) -> str:
    return f"{value:.6g}"


def format_row(data: TrackData, timestamp: Optional[datetime] = None) -> str:
    """One CSV line (without newline) for a status report."""
    stamp = (timestamp or datetime.now()).strftime("%Y-%m-%dT%H:%M:%S")
    fields = [
        stamp,
        _number(data.raw_error_x),
        _number(data.raw_error_y),
        _number(data.filtered_error_x),
        _number(data.filtered_error_y),
        data.state_string(),
        data.mode_string(),
        data.polarity_string(),
        data.status_string(),
        str(data.target_size_x),
        str(data.target_size_y),
        str(data.target_left),
        str(data.target_top),
        str(data.target_pixel_count),
        _number(data.azimuth_degrees()),
        _number(data.elevation_degrees()),
    ]
    return ",".join(fields)


class TrackLogger:
    """Writes status reports to a CSV file, header first."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock
        self._file: Optional[TextIO] = None
        self._header_written = False

    @property
    def is_logging(self) -> bool:
        return self._file is not None

    def start(self, filename: str) -> None:
        """Open a new log file, closing any that is open."""
        if self.is_logging:
            self.stop()
        try:
            self._file = open(filename, "w", encoding="utf-8", newline="\n")
        except OSError as exc:
            raise OSError(f"Failed to open log file: {filename}") from exc
        self._header_written = False

    def stop(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def log(self, data: TrackData) -> None:
        """Append a report; does nothing when no file is open."""
        if self._file is None:
            return
        if not self._header_written:
            self._file.write(HEADER + "\n")
            self._header_written = True
        self._file.write(format_row(data, self._clock()) + "\n")
        self._file.flush()

    def __enter__(self) -> "TrackLogger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()