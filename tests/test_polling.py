from __future__ import annotations

from ws_dom_controller.polling import poll_until


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def test_poll_until_returns_first_truthy_value() -> None:
    clock = FakeClock()
    values = iter([None, 0, "ready"])
    out = poll_until(lambda: next(values), timeout=5.0, interval=0.1, clock=clock, sleep=clock.sleep)
    assert out == "ready"
    assert clock.sleeps == [0.1, 0.1]


def test_poll_until_times_out_after_final_check() -> None:
    clock = FakeClock()
    checks: list[float] = []

    def _check() -> bool:
        checks.append(clock.now)
        return False

    out = poll_until(_check, timeout=0.25, interval=0.1, clock=clock, sleep=clock.sleep)
    assert out is None
    # Sleeps never overshoot the deadline, and the predicate is checked at it.
    assert abs(sum(clock.sleeps) - 0.25) < 1e-9
    assert abs(checks[-1] - 0.25) < 1e-9


def test_poll_until_zero_timeout_checks_once() -> None:
    clock = FakeClock()
    calls: list[int] = []
    out = poll_until(lambda: calls.append(1), timeout=0, interval=0.1, clock=clock, sleep=clock.sleep)
    assert out is None
    assert calls == [1]
    assert clock.sleeps == []
