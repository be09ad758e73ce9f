import pytest
from subtitlekit.models.caption import Dialect
from subtitlekit.utils.timestamps import seconds_to_timestamp, timestamp_to_seconds


def test_srt_and_vtt_separators():
    assert seconds_to_timestamp(3661.5, Dialect.SRT) == "01:01:01,500"
    assert seconds_to_timestamp(3661.5, Dialect.VTT) == "01:01:01.500"


def test_milliseconds_are_truncated():
    assert seconds_to_timestamp(1.9999) == "00:00:01,999"
    assert seconds_to_timestamp(2.999) == "00:00:02,999"


def test_long_media_hours_not_truncated():
    assert seconds_to_timestamp(360000.25) == "100:00:00,250"


def test_negative_clamps_to_zero():
    assert seconds_to_timestamp(-3) == "00:00:00,000"


def test_decode_tolerates_bom_and_either_separator():
    assert timestamp_to_seconds("\ufeff00:00:01,000") == 1.0
    assert timestamp_to_seconds("00:00:01.250", Dialect.SRT) == 1.25
    assert timestamp_to_seconds("00:00:01,250", Dialect.VTT) == 1.25


def test_decode_short_fields():
    assert timestamp_to_seconds("1:02:03.4") == pytest.approx(3723.4)
    assert timestamp_to_seconds("02:03.250", Dialect.VTT) == pytest.approx(123.25)


def test_decode_failure_yields_zero():
    assert timestamp_to_seconds("garbage") == 0.0
    assert timestamp_to_seconds("") == 0.0
    # SRT requires the hour field
    assert timestamp_to_seconds("02:03.250", Dialect.SRT) == 0.0


@pytest.mark.parametrize("dialect", [Dialect.SRT, Dialect.VTT])
@pytest.mark.parametrize("seconds", [0, 0.001, 1.5, 12.345, 59.999, 3599.999, 86399.5, 359999.999])
def test_codec_inverse(dialect, seconds):
    encoded = seconds_to_timestamp(seconds, dialect)
    assert timestamp_to_seconds(encoded, dialect) == pytest.approx(seconds, abs=1e-3)
