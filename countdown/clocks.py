"""
Clock sources for the countdown.

The elapsed clock measures running time; the wake clock (when the platform
has one) is what a wake alarm is armed against.
"""

import logging
import os
import time
from collections import namedtuple

logger = logging.getLogger(__name__)

NSEC_PER_SEC = 1_000_000_000
NSEC_PER_MSEC = 1_000_000

# linux/time.h, not exported by the time module
CLOCK_REALTIME_ALARM = 8
CLOCK_BOOTTIME_ALARM = 9

Instant = namedtuple("Instant", ["sec", "nsec"])


def diff_ms(end, start):
    """Milliseconds from start to end, rounded to nearest (ties round up)"""
    diff_ns = (end.sec - start.sec) * NSEC_PER_SEC + (end.nsec - start.nsec)
    return (diff_ns + NSEC_PER_MSEC // 2) // NSEC_PER_MSEC


class Clock:
    """A named clock returning Instants"""
    def __init__(self, name, clock_id=None):
        self.name = name
        self.clock_id = clock_id

    def now(self):
        if self.clock_id is None:
            ns = time.monotonic_ns()
        else:
            ns = time.clock_gettime_ns(self.clock_id)
        return Instant(*divmod(ns, NSEC_PER_SEC))

    def __repr__(self):
        return f"Clock({self.name!r})"


def elapsed_candidates():
    """Elapsed clocks, most precise first"""
    candidates = []
    for name in ("CLOCK_BOOTTIME", "CLOCK_MONOTONIC_RAW", "CLOCK_MONOTONIC"):
        clock_id = getattr(time, name, None)
        if clock_id is not None:
            candidates.append(Clock(name, clock_id))
    candidates.append(Clock("monotonic"))
    return candidates


def wake_candidates():
    if not hasattr(os, "timerfd_create"):
        return []
    return [
        Clock("CLOCK_BOOTTIME_ALARM", CLOCK_BOOTTIME_ALARM),
        Clock("CLOCK_REALTIME_ALARM", CLOCK_REALTIME_ALARM),
    ]


def select_clock(candidates):
    """Return the first candidate that can be read, or None"""
    for clock in candidates:
        try:
            clock.now()
        except OSError as e:
            logger.debug("%s: %s", clock.name, e.strerror or e)
            continue
        logger.debug("Selected %s", clock.name)
        return clock
    return None


class ClockSelection:
    """Clocks chosen at startup"""
    def __init__(self, elapsed, wake=None):
        self.elapsed = elapsed
        self.wake = wake

    @property
    def can_wake(self):
        return self.wake is not None


def probe_clocks():
    elapsed = select_clock(elapsed_candidates())
    wake = select_clock(wake_candidates())
    if wake is None:
        logger.debug("No wake-capable clock, wake alarm disabled")
    return ClockSelection(elapsed, wake)
