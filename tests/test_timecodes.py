import pytest

from subtitle_bridge.core.models import SubtitleFormat, TimeRange
from subtitle_bridge.formats.timecodes import (
    format_time_line,
    from_canonical,
    ms_to_timestamp,
    parse_time_line,
    split_time_line,
    timestamp_to_ms,
    to_canonical,
)


@pytest.mark.parametrize("fmt, native", [
    (SubtitleFormat.SRT, "00:00:12,500"),
    (SubtitleFormat.SRT, "01:59:59,999"),
    (SubtitleFormat.WEBVTT, "00:00:12.500"),
    (SubtitleFormat.WEBVTT, "12:34.567"),
    (SubtitleFormat.ASS, "0:00:12.50"),
    (SubtitleFormat.ASS, "10:05:00.07"),
])
def test_round_trip_is_identity(fmt, native):
    assert from_canonical(to_canonical(native, fmt), fmt) == native


def test_webvtt_only_swaps_the_separator():
    assert to_canonical("00:01:02.345", SubtitleFormat.WEBVTT) == "00:01:02,345"
    assert from_canonical("00:01:02,345", SubtitleFormat.WEBVTT) == "00:01:02.345"


def test_ass_pads_fields_and_expands_centiseconds():
    assert to_canonical("1:02:03.45", SubtitleFormat.ASS) == "01:02:03,450"


def test_ass_truncates_milliseconds_to_centiseconds():
    assert from_canonical("01:02:03,459", SubtitleFormat.ASS) == "1:02:03.45"
    assert from_canonical("00:00:00,009", SubtitleFormat.ASS) == "0:00:00.00"


def test_malformed_ass_timestamps_pass_through():
    assert to_canonical("garbage", SubtitleFormat.ASS) == "garbage"
    assert from_canonical("not-a-time", SubtitleFormat.ASS) == "not-a-time"


def test_timestamp_to_ms_accepts_both_separators_and_short_form():
    assert timestamp_to_ms("00:00:01,500") == 1500
    assert timestamp_to_ms("01:00:00.001") == 3_600_001
    assert timestamp_to_ms("02:03.4") == 123_400
    assert timestamp_to_ms("soon") is None


def test_ms_to_timestamp():
    assert ms_to_timestamp(3_723_004) == "01:02:03,004"
    assert ms_to_timestamp(-5) == "00:00:00,000"


def test_split_time_line_keeps_cue_settings():
    assert split_time_line("00:00:01.000 --> 00:00:02.000 align:start position:10%") == (
        "00:00:01.000", "00:00:02.000", "align:start position:10%",
    )
    assert split_time_line("no arrow here") is None


def test_parse_and_format_time_line():
    time_range = parse_time_line("00:00:01.000 --> 00:00:02.500 line:0", SubtitleFormat.WEBVTT)
    assert time_range == TimeRange("00:00:01,000", "00:00:02,500", "line:0")
    assert format_time_line(time_range, SubtitleFormat.WEBVTT) == "00:00:01.000 --> 00:00:02.500 line:0"
    assert format_time_line(time_range, SubtitleFormat.SRT) == "00:00:01,000 --> 00:00:02,500"


def test_hourless_webvtt_timestamps_gain_hours_for_srt_and_ass():
    time_range = parse_time_line("01:02.500 --> 01:04.000", SubtitleFormat.WEBVTT)

    assert format_time_line(time_range, SubtitleFormat.SRT) == "00:01:02,500 --> 00:01:04,000"
    assert format_time_line(time_range, SubtitleFormat.WEBVTT) == "01:02.500 --> 01:04.000"
    assert from_canonical(time_range.start, SubtitleFormat.ASS) == "0:01:02.50"


def test_srt_coordinates_survive_srt_output_only():
    time_range = parse_time_line("00:00:01,000 --> 00:00:02,000 X1:40 X2:600 Y1:20 Y2:50", SubtitleFormat.SRT)

    assert time_range.settings == "X1:40 X2:600 Y1:20 Y2:50"
    assert format_time_line(time_range, SubtitleFormat.SRT) == (
        "00:00:01,000 --> 00:00:02,000 X1:40 X2:600 Y1:20 Y2:50"
    )
    assert format_time_line(time_range, SubtitleFormat.WEBVTT) == "00:00:01.000 --> 00:00:02.000"
