import time

from utils.helpers import TimeHelper


def test_human_readable_durations():
    assert TimeHelper.seconds_to_human_readable(0) == "0s"
    assert TimeHelper.seconds_to_human_readable(59) == "59s"
    assert TimeHelper.seconds_to_human_readable(9015) == "2h 30m 15s"
    assert TimeHelper.seconds_to_human_readable(86400 + 60) == "1d 1m"
    assert TimeHelper.seconds_to_human_readable(-5) == "0s"


def test_now_ms_tracks_wall_clock():
    before = int(time.time() * 1000)
    now = TimeHelper.now_ms()
    after = int(time.time() * 1000)

    assert before - 1 <= now <= after + 1


def test_utc_now_is_aware():
    assert TimeHelper.get_utc_now().tzinfo is not None
