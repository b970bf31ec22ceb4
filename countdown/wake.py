"""Wake alarm: a one-shot OS timer that can bring the machine out of suspend."""

import logging
import os

logger = logging.getLogger(__name__)

WAKEUP_MARGIN = 5


class WakeAlarmError(Exception):
    pass


def wake_delay(remaining_ms, margin=WAKEUP_MARGIN):
    """Seconds until the wake alarm should fire, margin taken off when it fits"""
    delay = remaining_ms / 1000
    if delay > margin:
        delay -= margin
    return delay


class TimerfdAlarmFacility:
    """Wake alarms backed by timerfd (Linux)"""
    def create(self, clock):
        return os.timerfd_create(clock.clock_id, flags=os.TFD_NONBLOCK | os.TFD_CLOEXEC)

    def arm(self, handle, delay):
        os.timerfd_settime(handle, initial=delay)

    def disarm(self, handle):
        os.close(handle)


class WakeAlarm:
    def __init__(self, clock, facility=None):
        self.clock = clock
        self.facility = facility or TimerfdAlarmFacility()
        self._handle = None

    @property
    def armed(self):
        return self._handle is not None

    def arm(self, remaining_ms):
        """Arm for remaining_ms from now, returns the delay in seconds"""
        self.disarm()

        try:
            self._handle = self.facility.create(self.clock)
        except OSError as e:
            raise WakeAlarmError(e.strerror or str(e)) from e

        delay = wake_delay(remaining_ms)
        try:
            self.facility.arm(self._handle, delay)
        except OSError as e:
            self.disarm()
            raise WakeAlarmError(e.strerror or str(e)) from e

        logger.debug("Wake alarm armed on %s in %.1fs", self.clock.name, delay)
        return delay

    def disarm(self):
        if self._handle is None:
            return

        handle, self._handle = self._handle, None
        try:
            self.facility.disarm(handle)
        except OSError as e:
            logger.warning("Failed to delete wake alarm: %s", e)
