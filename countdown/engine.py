"""
Countdown engine.

Holds the configured duration and the time accumulated across run segments,
and drives the periodic tick and the optional wake alarm. Everything runs on
the UI event loop; the engine only talks to its collaborators:

- view: set_display(remaining_ms), set_progress(current_ms, max_ms),
  disable(control), show_error(title, message)
- scheduler: start(period_ms, callback), stop()
- clock: now() -> Instant
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from countdown.clocks import Instant, diff_ms
from countdown.wake import WakeAlarmError

logger = logging.getLogger(__name__)

HOURS_IN_MS = 60 * 60 * 1000
MINS_IN_MS = 60 * 1000
SECS_IN_MS = 1000

TICK_PERIOD_MS = 100


def duration_ms(hours, minutes, seconds):
    return hours * HOURS_IN_MS + minutes * MINS_IN_MS + seconds * SECS_IN_MS


def format_remaining(ms):
    """HH:MM:SS.d"""
    ms = max(0, ms)
    hours = ms // HOURS_IN_MS
    mins = (ms % HOURS_IN_MS) // MINS_IN_MS
    secs = (ms % MINS_IN_MS) // SECS_IN_MS
    tenths = (ms % SECS_IN_MS) // 100
    return f"{hours:02d}:{mins:02d}:{secs:02d}.{tenths:d}"


@dataclass
class TimerConfig:
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    @property
    def duration_ms(self):
        return duration_ms(self.hours, self.minutes, self.seconds)


class TimerPhase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass
class TimerState:
    duration_ms: int = 0
    elapsed_ms: int = 0
    start_time: Optional[Instant] = None
    running: bool = False
    wake_alarm_armed: bool = False
    phase: TimerPhase = TimerPhase.IDLE


class CountdownTimer:
    """Start/pause/stop state machine for a single countdown"""
    def __init__(self, state, view, scheduler, clock, wake_alarm=None,
                 player=None, on_finish=None):
        self.state = state
        self.view = view
        self.scheduler = scheduler
        self.clock = clock
        self.wake_alarm = wake_alarm
        self.player = player
        self.on_finish = on_finish
        self.wake_requested = False
        self._pending = None

        if self.wake_alarm is None:
            self.view.disable("wake")

    @property
    def phase(self):
        return self.state.phase

    # ---- Time ----

    def elapsed_now(self):
        """Elapsed time including the current run segment"""
        elapsed = self.state.elapsed_ms
        if self.state.running:
            elapsed += diff_ms(self.clock.now(), self.state.start_time)
        return elapsed

    def remaining_ms(self):
        return max(0, self.state.duration_ms - self.elapsed_now())

    def _redraw(self, elapsed):
        remaining = max(0, self.state.duration_ms - elapsed)
        self.view.set_display(remaining)
        self.view.set_progress(remaining, self.state.duration_ms)

    # ---- UI events ----

    def set_duration(self, hours, minutes, seconds):
        """Set the countdown length, returns duration in ms"""
        if self.state.running:
            logger.debug("Duration change while running, applied on stop")
            self._pending = (hours, minutes, seconds)
            return self.state.duration_ms

        self._pending = None
        self.state.duration_ms = duration_ms(hours, minutes, seconds)
        self.state.elapsed_ms = 0
        self.state.phase = TimerPhase.IDLE
        self._redraw(0)
        return self.state.duration_ms

    def on_duration_changed(self, hours, minutes, seconds):
        self.set_duration(hours, minutes, seconds)

    def on_start(self):
        if self.state.running:
            logger.debug("Start ignored, already running")
            return

        if self.state.phase == TimerPhase.FINISHED:
            self.state.elapsed_ms = 0

        self.state.start_time = self.clock.now()
        self.state.running = True
        self.state.phase = TimerPhase.RUNNING
        self.scheduler.start(TICK_PERIOD_MS, self.tick)
        logger.debug("Started with %d ms elapsed", self.state.elapsed_ms)

        if self.wake_alarm is not None and self.wake_requested:
            self._arm_wake_alarm(self.state.duration_ms - self.state.elapsed_ms)

    def on_pause(self):
        if not self.state.running:
            logger.debug("Pause ignored, not running")
            return

        self._disarm_wake_alarm()

        self.state.elapsed_ms += diff_ms(self.clock.now(), self.state.start_time)
        self.state.running = False
        self.state.phase = TimerPhase.PAUSED
        self.scheduler.stop()

        self._redraw(self.state.elapsed_ms)
        logger.debug("Paused at %d ms elapsed", self.state.elapsed_ms)

    def on_stop(self):
        self._disarm_wake_alarm()

        self.state.elapsed_ms = 0
        self.state.running = False
        self.state.phase = TimerPhase.IDLE
        self.scheduler.stop()

        if self._pending is not None:
            self.set_duration(*self._pending)
        else:
            self._redraw(0)

    # ---- Tick ----

    def tick(self):
        """Periodic update, returns False once the countdown is over"""
        if not self.state.running:
            return False

        elapsed = self.elapsed_now()

        if elapsed >= self.state.duration_ms:
            self._finish(elapsed)
            return False

        self._redraw(elapsed)
        return True

    def _finish(self, elapsed):
        self._redraw(self.state.duration_ms)

        self.state.elapsed_ms = elapsed
        self.state.running = False
        self.state.phase = TimerPhase.FINISHED
        self._disarm_wake_alarm()
        logger.debug("Finished after %d ms", elapsed)

        if self.player:
            self.player.play()
        if self.on_finish:
            self.on_finish()

    # ---- Wake alarm ----

    def _arm_wake_alarm(self, remaining):
        if remaining <= 0:
            return

        try:
            self.wake_alarm.arm(remaining)
        except WakeAlarmError as e:
            logger.warning("Failed to create wake alarm: %s", e)
            self.view.show_error("Failed to create wake alarm", str(e))
            return

        self.state.wake_alarm_armed = True

    def _disarm_wake_alarm(self):
        if self.wake_alarm is not None:
            self.wake_alarm.disarm()
        self.state.wake_alarm_armed = False
