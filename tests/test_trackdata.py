import pytest

from trackmon.trackdata import (
    StatusFlag,
    TargetPolarity,
    TrackData,
    TrackMode,
    TrackState,
)


def _words(**overrides):
    words = [0] * 18
    words[0] = 0xA5A5
    words[1] = 0xFF00
    for index, value in overrides.items():
        words[int(index[1:])] = value
    return words


def test_from_words_rejects_wrong_length():
    with pytest.raises(ValueError):
        TrackData.from_words([0] * 17)


def test_from_words_copies_target_fields():
    words = _words(w7=10, w8=20, w9=30, w10=40, w11=500, w6=0x0008)
    data = TrackData.from_words(words)
    assert data.target_size_x == 10
    assert data.target_size_y == 20
    assert data.target_left == 30
    assert data.target_top == 40
    assert data.target_pixel_count == 500
    assert data.status == 0x0008


def test_from_words_decodes_packed_status_word():
    packed = TargetPolarity.BLACK | (TrackState.ON_TRACK << 3) | (TrackMode.CENTROID << 8)
    data = TrackData.from_words(_words(w5=packed))
    assert data.polarity_string() == "Black"
    assert data.state_string() == "On Track"
    assert data.mode_string() == "Centroid"


@pytest.mark.parametrize("raw", [0x0000, 0x0040, 0xFFE0, 0x8000, 0x7FFF])
def test_errors_are_signed_fixed_point(raw):
    data = TrackData.from_words(_words(w2=raw, w3=raw, w16=raw, w17=raw))
    for value in (data.raw_error_x, data.raw_error_y,
                  data.filtered_error_x, data.filtered_error_y):
        assert int(value * 32) & 0xFFFF == raw
        assert (value < 0) == bool(raw & 0x8000)


@pytest.mark.parametrize("low,high", [(0x2345, 0x0001), (0xFFFF, 0xFFFF), (0, 0x8000)])
def test_mount_words_combine_into_signed_32_bits(low, high):
    data = TrackData.from_words(_words(w12=low, w13=high, w14=low, w15=high))
    for value in (data.azimuth, data.elevation):
        assert value & 0xFFFF == low
        assert (value >> 16) & 0xFFFF == high
        assert (value < 0) == bool(high & 0x8000)


def test_negative_one_azimuth():
    data = TrackData.from_words(_words(w12=0xFFFF, w13=0xFFFF))
    assert data.azimuth == -1


def test_azimuth_degrees_scale():
    data = TrackData(azimuth=123456, elevation=-50000)
    assert data.azimuth_degrees() == pytest.approx(data.azimuth / 10000.0, rel=1e-6)
    assert data.elevation_degrees() == pytest.approx(data.elevation / 10000.0, rel=1e-6)


@pytest.mark.parametrize(
    "value,label",
    [(0, "Gray"), (1, "White"), (2, "Black"), (3, "Mix"), (4, "Auto"), (5, "Unknown")],
)
def test_polarity_strings(value, label):
    assert TrackData(target_polarity=value).polarity_string() == label


@pytest.mark.parametrize(
    "value,label",
    [(0, "Initialization"), (1, "Acquire"), (2, "Pending Track"), (3, "On Track"),
     (4, "Coast"), (5, "Off Track"), (6, "Auto Acquire"), (7, "Unknown")],
)
def test_state_strings(value, label):
    assert TrackData(track_state=value).state_string() == label


@pytest.mark.parametrize(
    "value,label",
    [(0, "Top edge"), (1, "Bottom edge"), (2, "Left edge"), (3, "Right edge"),
     (4, "Centroid"), (5, "Intensity"), (6, "Vector"), (7, "Correlation"), (9, "Unknown")],
)
def test_mode_strings(value, label):
    assert TrackData(track_mode=value).mode_string() == label


def test_status_ok_when_clear():
    assert TrackData(status=0).status_string() == "OK"


def test_status_ignores_unassigned_bits():
    assert TrackData(status=0x0001).status_string() == "OK"


def test_status_lists_flags_in_order():
    data = TrackData(status=StatusFlag.CORR_MATCH_FAIL | StatusFlag.TOO_FEW_TARGET_PIXELS)
    assert data.status_string() == "TOO FEW TARGET PIXELS, CORR MATCH FAIL"


def test_status_all_flags():
    all_flags = 0
    for flag in StatusFlag:
        all_flags |= flag
    text = TrackData(status=all_flags).status_string()
    parts = text.split(", ")
    assert len(parts) == len(list(StatusFlag))
    assert parts[0] == "TOO FEW TARGET PIXELS"
    assert parts[-1] == "CORR MATCH FAIL"
    assert not text.endswith(", ")