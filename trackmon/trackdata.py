"""Decoded tracker status messages."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum, IntFlag
from typing import Sequence

STATUS_WORD_COUNT = 18
MOUNT_SCALE = 10000.0
ERROR_SCALE = 32.0


class TargetPolarity(IntEnum):
    GRAY = 0
    WHITE = 1
    BLACK = 2
    MIX = 3
    AUTO = 4


class TrackState(IntEnum):
    INITIALIZATION = 0
    ACQUIRE = 1
    PENDING_TRACK = 2
    ON_TRACK = 3
    COAST = 4
    OFF_TRACK = 5
    AUTO_ACQUIRE = 6


class TrackMode(IntEnum):
    TOP_EDGE = 0
    BOTTOM_EDGE = 1
    LEFT_EDGE = 2
    RIGHT_EDGE = 3
    CENTROID = 4
    INTENSITY = 5
    VECTOR = 6
    CORRELATION = 7


class StatusFlag(IntFlag):
    TOO_FEW_TARGET_PIXELS = 0x0002
    TOO_MANY_TARGET_PIXELS = 0x0004
    X_POSITION_FAIL = 0x0008
    Y_POSITION_FAIL = 0x0010
    NCOUNT_TOO_LARGE = 0x0020
    NCOUNT_TOO_SMALL = 0x0040
    X_SIZE_FAIL = 0x0080
    Y_SIZE_FAIL = 0x0100
    CORR_MATCH_FAIL = 0x1000


_POLARITY_LABELS = {
    TargetPolarity.GRAY: "Gray",
    TargetPolarity.WHITE: "White",
    TargetPolarity.BLACK: "Black",
    TargetPolarity.MIX: "Mix",
    TargetPolarity.AUTO: "Auto",
}

_STATE_LABELS = {
    TrackState.INITIALIZATION: "Initialization",
    TrackState.ACQUIRE: "Acquire",
    TrackState.PENDING_TRACK: "Pending Track",
    TrackState.ON_TRACK: "On Track",
    TrackState.COAST: "Coast",
    TrackState.OFF_TRACK: "Off Track",
    TrackState.AUTO_ACQUIRE: "Auto Acquire",
}

_MODE_LABELS = {
    TrackMode.TOP_EDGE: "Top edge",
    TrackMode.BOTTOM_EDGE: "Bottom edge",
    TrackMode.LEFT_EDGE: "Left edge",
    TrackMode.RIGHT_EDGE: "Right edge",
    TrackMode.CENTROID: "Centroid",
    TrackMode.INTENSITY: "Intensity",
    TrackMode.VECTOR: "Vector",
    TrackMode.CORRELATION: "Correlation",
}

_STATUS_MESSAGES = (
    (StatusFlag.TOO_FEW_TARGET_PIXELS, "TOO FEW TARGET PIXELS"),
    (StatusFlag.TOO_MANY_TARGET_PIXELS, "TOO MANY TARGET PIXELS"),
    (StatusFlag.X_POSITION_FAIL, "X POSITION FAIL"),
    (StatusFlag.Y_POSITION_FAIL, "Y POSITION FAIL"),
    (StatusFlag.NCOUNT_TOO_LARGE, "NCOUNT TOO LARGE"),
    (StatusFlag.NCOUNT_TOO_SMALL, "NCOUNT TOO SMALL"),
    (StatusFlag.X_SIZE_FAIL, "X SIZE FAIL"),
    (StatusFlag.Y_SIZE_FAIL, "Y SIZE FAIL"),
    (StatusFlag.CORR_MATCH_FAIL, "CORR MATCH FAIL"),
)


def _float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _int16(word: int) -> int:
    word &= 0xFFFF
    return word - 0x10000 if word & 0x8000 else word


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _label(enum_cls, labels, value: int) -> str:
    try:
        return labels[enum_cls(value)]
    except ValueError:
        return "Unknown"


@dataclass
class TrackData:
    """One status report from the tracker."""

    raw_error_x: float = 0.0
    raw_error_y: float = 0.0
    filtered_error_x: float = 0.0
    filtered_error_y: float = 0.0
    target_polarity: int = 0
    track_state: int = 0
    track_mode: int = 0
    status: int = 0
    target_size_x: int = 0
    target_size_y: int = 0
    target_left: int = 0
    target_top: int = 0
    target_pixel_count: int = 0
    azimuth: int = 0
    elevation: int = 0

    @classmethod
    def from_words(cls, words: Sequence[int]) -> "TrackData":
        """Decode the 18 sixteen-bit words of a status message."""
        if len(words) != STATUS_WORD_COUNT:
            raise ValueError(
                f"status message needs {STATUS_WORD_COUNT} words, got {len(words)}"
            )
        w = [word & 0xFFFF for word in words]
        packed = w[5]
        return cls(
            raw_error_x=_int16(w[2]) / ERROR_SCALE,
            raw_error_y=_int16(w[3]) / ERROR_SCALE,
            filtered_error_x=_int16(w[16]) / ERROR_SCALE,
            filtered_error_y=_int16(w[17]) / ERROR_SCALE,
            target_polarity=packed & 0x0007,
            track_state=(packed >> 3) & 0x0007,
            track_mode=(packed >> 8) & 0x0007,
            status=w[6],
            target_size_x=w[7],
            target_size_y=w[8],
            target_left=w[9],
            target_top=w[10],
            target_pixel_count=w[11],
            azimuth=_int32((w[13] << 16) | w[12]),
            elevation=_int32((w[15] << 16) | w[14]),
        )

    def polarity_string(self) -> str:
        return _label(TargetPolarity, _POLARITY_LABELS, self.target_polarity)

    def state_string(self) -> str:
        return _label(TrackState, _STATE_LABELS, self.track_state)

    def mode_string(self) -> str:
        return _label(TrackMode, _MODE_LABELS, self.track_mode)

    def status_string(self) -> str:
        """Comma-separated list of raised status flags, or "OK"."""
        messages = [text for flag, text in _STATUS_MESSAGES if self.status & flag]
        return ", ".join(messages) if messages else "OK"

    def azimuth_degrees(self) -> float:
        """Mount azimuth with the 1/10000 scaling removed, in single precision."""
        return _float32(_float32(self.azimuth) / MOUNT_SCALE)

    def elevation_degrees(self) -> float:
        """Mount elevation with the 1/10000 scaling removed, in single precision."""
        return _float32(_float32(self.elevation) / MOUNT_SCALE)