from datetime import datetime

import pytest

from trackmon.logger import HEADER, TrackLogger, format_row
from trackmon.trackdata import TrackData

STAMP = datetime(2024, 1, 2, 3, 4, 5, 678000)


def _sample():
    return TrackData(
        raw_error_x=1.5,
        raw_error_y=-2.25,
        filtered_error_x=0.0,
        filtered_error_y=3.0,
        target_polarity=1,
        track_state=3,
        track_mode=4,
        status=0x0008,
        target_size_x=10,
        target_size_y=20,
        target_left=30,
        target_top=40,
        target_pixel_count=500,
        azimuth=123456,
        elevation=-50000,
    )


def test_header_columns():
    assert HEADER.startswith("Timestamp,RawErrorX,RawErrorY")
    assert len(HEADER.split(",")) == 16


def test_format_row_fields():
    data = _sample()
    fields = format_row(data, STAMP).split(",")
    assert len(fields) == 16
    assert fields[0] == "2024-01-02T03:04:05"
    assert float(fields[1]) == data.raw_error_x
    assert float(fields[2]) == data.raw_error_y
    assert float(fields[4]) == data.filtered_error_y
    assert fields[5:9] == [data.state_string(), data.mode_string(),
                           data.polarity_string(), data.status_string()]
    assert [int(f) for f in fields[9:14]] == [10, 20, 30, 40, 500]
    assert float(fields[14]) == pytest.approx(data.azimuth / 10000.0, rel=1e-5)
    assert float(fields[15]) == pytest.approx(data.elevation / 10000.0, rel=1e-5)


def test_log_writes_header_once(tmp_path):
    path = tmp_path / "log.csv"
    logger = TrackLogger(clock=lambda: STAMP)
    logger.start(str(path))
    assert logger.is_logging
    logger.log(_sample())
    logger.log(_sample())
    logger.stop()
    lines = path.read_text().splitlines()
    assert lines[0] == HEADER
    assert len(lines) == 3
    assert lines[1] == format_row(_sample(), STAMP)
    assert not logger.is_logging


def test_header_is_written_lazily(tmp_path):
    path = tmp_path / "empty.csv"
    logger = TrackLogger()
    logger.start(str(path))
    logger.stop()
    logger.log(_sample())
    assert path.read_text() == ""


def test_restart_switches_file(tmp_path):
    first, second = tmp_path / "a.csv", tmp_path / "b.csv"
    logger = TrackLogger(clock=lambda: STAMP)
    logger.start(str(first))
    logger.log(_sample())
    logger.start(str(second))
    logger.log(_sample())
    logger.stop()
    assert len(first.read_text().splitlines()) == 2
    assert second.read_text().splitlines()[0] == HEADER


def test_start_failure(tmp_path):
    logger = TrackLogger()
    with pytest.raises(OSError, match="Failed to open log file"):
        logger.start(str(tmp_path))
    assert not logger.is_logging


def test_context_manager_stops(tmp_path):
    with TrackLogger() as logger:
        logger.start(str(tmp_path / "c.csv"))
        assert logger.is_logging
    assert not logger.is_logging