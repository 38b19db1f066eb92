from sentinel.totp import ClockWindow, remaining_seconds

# 1634000010 is a multiple of 30
BOUNDARY = 1634000010


def test_full_window_remains_on_boundary() -> None:
    assert ClockWindow(clock=lambda: BOUNDARY).remaining_seconds() == 30


def test_remaining_counts_down_within_window() -> None:
    values = [ClockWindow(clock=lambda t=t: t).remaining_seconds() for t in range(BOUNDARY, BOUNDARY + 30)]
    assert values == list(range(30, 0, -1))
    assert ClockWindow(clock=lambda: BOUNDARY + 30).remaining_seconds() == 30


def test_fractional_seconds_are_floored() -> None:
    assert ClockWindow(clock=lambda: BOUNDARY + 29.9).remaining_seconds() == 1
    assert ClockWindow(clock=lambda: BOUNDARY + 29.9).current_step() == BOUNDARY // 30


def test_current_step_is_monotonic() -> None:
    steps = [ClockWindow(clock=lambda t=t: t).current_step() for t in range(BOUNDARY - 45, BOUNDARY + 90, 7)]
    assert steps == sorted(steps)


def test_system_clock_reading_is_in_range() -> None:
    assert 1 <= remaining_seconds() <= 30
