import errno

import pytest

from countdown.clocks import NSEC_PER_MSEC, NSEC_PER_SEC, Instant
from countdown.engine import CountdownTimer, TimerState


class FakeClock:
    name = "fake"
    clock_id = 9

    def __init__(self, ms=0):
        self.ns = ms * NSEC_PER_MSEC

    def advance(self, ms):
        self.ns += ms * NSEC_PER_MSEC

    def now(self):
        return Instant(*divmod(self.ns, NSEC_PER_SEC))


class FakeScheduler:
    def __init__(self):
        self.callback = None
        self.period = None
        self.starts = 0

    @property
    def active(self):
        return self.callback is not None

    def start(self, period_ms, callback):
        self.period = period_ms
        self.callback = callback
        self.starts += 1

    def stop(self):
        self.callback = None

    def fire(self):
        if self.callback is not None and not self.callback():
            self.callback = None


class FakeView:
    def __init__(self):
        self.display = []
        self.progress = []
        self.disabled = set()
        self.errors = []

    def set_display(self, remaining_ms):
        self.display.append(remaining_ms)

    def set_progress(self, current_ms, max_ms):
        self.progress.append((current_ms, max_ms))

    def disable(self, control):
        self.disabled.add(control)

    def show_error(self, title, message):
        self.errors.append((title, message))


class FakeFacility:
    def __init__(self, fail_create=False):
        self.fail_create = fail_create
        self.armed = []
        self.deleted = []
        self._next = 100

    def create(self, clock):
        if self.fail_create:
            raise OSError(errno.EPERM, "Operation not permitted")
        self._next += 1
        return self._next

    def arm(self, handle, delay):
        self.armed.append((handle, delay))

    def disarm(self, handle):
        self.deleted.append(handle)


class FakePlayer:
    def __init__(self):
        self.plays = 0

    def play(self):
        self.plays += 1


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def view():
    return FakeView()


@pytest.fixture
def player():
    return FakePlayer()


@pytest.fixture
def make_timer(clock, scheduler, view, player):
    def make(wake_alarm=None, duration=(0, 0, 2)):
        timer = CountdownTimer(TimerState(), view, scheduler, clock,
                               wake_alarm=wake_alarm, player=player)
        timer.set_duration(*duration)
        return timer
    return make


def advance(clock, scheduler, ms, step=100):
    """Move the clock forward in tick-sized steps, firing the tick after each"""
    for _ in range(ms // step):
        clock.advance(step)
        scheduler.fire()
