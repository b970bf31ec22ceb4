"""Duration fields and shutdown persistence of the Tk app, without a display."""

import pytest

pytest.importorskip("tkinter")
pytest.importorskip("pygame")

from countdown.app import TimerApp
from countdown.config import ConfigManager
from countdown.engine import TimerConfig


class FakeVar:
    def __init__(self, value):
        self.value = value

    def get(self):
        return self.value

    def set(self, value):
        self.value = value


class FakeTimer:
    def __init__(self):
        self.durations = []
        self.stopped = False

    def on_duration_changed(self, hours, minutes, seconds):
        self.durations.append((hours, minutes, seconds))

    def on_stop(self):
        self.stopped = True


class FakeRoot:
    destroyed = False

    def destroy(self):
        self.destroyed = True


@pytest.fixture
def app(tmp_path):
    """A TimerApp with its widgets replaced by plain objects"""
    app = TimerApp.__new__(TimerApp)
    app.root = FakeRoot()
    app.config = ConfigManager(tmp_path / "countdown")
    app.timer = FakeTimer()
    app.duration = TimerConfig()
    app.hours_var = FakeVar("0")
    app.mins_var = FakeVar("0")
    app.secs_var = FakeVar("0")
    return app


def type_fields(app, hours, minutes, seconds):
    app.hours_var.set(hours)
    app.mins_var.set(minutes)
    app.secs_var.set(seconds)
    app._update_duration()


def reload_duration(tmp_path):
    return ConfigManager(tmp_path / "countdown").read_duration()


class TestDurationFields:
    def test_accepted_fields_reach_engine(self, app):
        type_fields(app, "1", "30", "0")
        assert app.timer.durations == [(1, 30, 0)]
        assert app.duration == TimerConfig(1, 30, 0)

    @pytest.mark.parametrize("fields", [("-1", "30", "0"), ("", "30", "0"), ("1", "x", "0")])
    def test_rejected_fields_keep_last_duration(self, app, fields):
        type_fields(app, "1", "30", "0")
        type_fields(app, *fields)
        assert app.timer.durations == [(1, 30, 0)]
        assert app.duration == TimerConfig(1, 30, 0)

    def test_loaded_duration_becomes_current(self, app):
        app.config.write_duration(2, 5, 9)
        app._load_duration()
        assert app.duration == TimerConfig(2, 5, 9)
        assert (app.hours_var.get(), app.mins_var.get(), app.secs_var.get()) == ("2", "5", "9")


class TestOnClose:
    def test_saves_accepted_duration(self, app, tmp_path):
        type_fields(app, "1", "30", "0")
        app._on_close()
        assert reload_duration(tmp_path) == (1, 30, 0)
        assert app.timer.stopped
        assert app.root.destroyed

    def test_negative_field_saves_last_accepted(self, app, tmp_path):
        type_fields(app, "1", "30", "0")
        type_fields(app, "-1", "30", "0")
        app._on_close()
        assert reload_duration(tmp_path) == (1, 30, 0)

    def test_empty_field_does_not_clobber_saved_value(self, app, tmp_path):
        app.config.write_duration(0, 45, 0)
        app._load_duration()
        type_fields(app, "", "45", "0")
        app._on_close()
        assert reload_duration(tmp_path) == (0, 45, 0)

    def test_settings_saved(self, app, tmp_path):
        app.config.set("wake_alarm", True)
        app._on_close()
        assert ConfigManager(tmp_path / "countdown").get("wake_alarm") is True
