"""
Countdown Timer - desktop countdown with alarm sound and wake from suspend
"""

import logging
import tkinter as tk
from tkinter import ttk, messagebox

from countdown.clocks import probe_clocks
from countdown.config import ConfigManager
from countdown.engine import CountdownTimer, TimerConfig, TimerPhase, TimerState, format_remaining
from countdown.notify import NotificationManager
from countdown.sound import AlarmPlayer, ToneGenerator
from countdown.wake import WakeAlarm

logger = logging.getLogger(__name__)

# ===================== SCHEDULER =====================

class TkScheduler:
    """Repeating callback on the Tk event loop, stops when the callback returns False"""
    def __init__(self, root):
        self.root = root
        self._job = None

    def start(self, period_ms, callback):
        self.stop()

        def fire():
            self._job = None
            if callback():
                self._job = self.root.after(period_ms, fire)

        self._job = self.root.after(period_ms, fire)

    def stop(self):
        if self._job is not None:
            self.root.after_cancel(self._job)
            self._job = None

# ===================== MAIN APP =====================

class TimerApp:
    def __init__(self, root, config=None):
        self.root = root
        self.root.title("Countdown")
        self.root.resizable(False, False)

        self.config = config or ConfigManager()
        self.topmost = False
        self.duration = TimerConfig()
        self.notif_mgr = NotificationManager()
        self.clocks = probe_clocks()

        wake_alarm = None
        if self.clocks.can_wake:
            wake_alarm = WakeAlarm(self.clocks.wake)

        self._setup_ui()
        self._setup_keybindings()
        self._load_duration()

        self.timer = CountdownTimer(
            TimerState(),
            view=self,
            scheduler=TkScheduler(self.root),
            clock=self.clocks.elapsed,
            wake_alarm=wake_alarm,
            player=AlarmPlayer(tone=ToneGenerator()),
            on_finish=self.on_timer_finish,
        )
        self.timer.wake_requested = self.wake_var.get()

        for var in (self.hours_var, self.mins_var, self.secs_var):
            var.trace_add('write', lambda *a: self._update_duration())

        self._update_duration()
        self._update_controls()

        if self.config.get("topmost"):
            self._toggle_top()

        self.root.protocol("WM_DELETE_WINDOW", self._on_close)

    def _setup_ui(self):
        main = tk.Frame(self.root)
        main.pack(fill=tk.BOTH, expand=True, padx=8, pady=8)

        # Top bar
        top = tk.Frame(main)
        top.pack(fill=tk.X)

        self.wake_var = tk.BooleanVar(value=self.config.get("wake_alarm", False))
        self.wake_cb = tk.Checkbutton(top, text="Wake from suspend", variable=self.wake_var,
                                      command=self._toggle_wake, font=('Arial', 9))
        self.wake_cb.pack(side=tk.LEFT)

        self.top_btn = tk.Button(top, text="📌", command=self._toggle_top,
                                 font=('Arial', 9), relief='flat', padx=4, pady=0)
        self.top_btn.pack(side=tk.RIGHT)

        # Duration input
        input_f = tk.Frame(main)
        input_f.pack(pady=6)

        self.hours_var = tk.StringVar(value="0")
        self.mins_var = tk.StringVar(value="0")
        self.secs_var = tk.StringVar(value="0")

        self.spinboxes = []
        for col, (text, var, top_val) in enumerate([("Hours", self.hours_var, 99),
                                                    ("Min", self.mins_var, 59),
                                                    ("Sec", self.secs_var, 59)]):
            tk.Label(input_f, text=text, font=('Arial', 8)).grid(row=0, column=col)
            sb = tk.Spinbox(input_f, from_=0, to=top_val, width=3, textvariable=var,
                            font=('Arial', 12), justify='center')
            sb.grid(row=1, column=col, padx=2)
            self.spinboxes.append(sb)

        # Display
        self.time_lbl = tk.Label(main, text=format_remaining(0), font=('Arial', 36, 'bold'))
        self.time_lbl.pack(pady=4)

        self.pbar = ttk.Progressbar(main, orient='horizontal', mode='determinate', length=280)
        self.pbar.pack(pady=4)

        # Controls
        btn_f = tk.Frame(main)
        btn_f.pack(pady=4)

        self.start_btn = tk.Button(btn_f, text="▶", command=self._start,
                                   font=('Arial', 10), relief='flat', padx=10, pady=2)
        self.start_btn.pack(side=tk.LEFT, padx=1)

        self.pause_btn = tk.Button(btn_f, text="⏸", command=self._pause,
                                   font=('Arial', 10), relief='flat', padx=10, pady=2)
        self.pause_btn.pack(side=tk.LEFT, padx=1)

        self.stop_btn = tk.Button(btn_f, text="⏹", command=self._stop,
                                  font=('Arial', 10), relief='flat', padx=10, pady=2)
        self.stop_btn.pack(side=tk.LEFT, padx=1)

        self.controls = {
            "wake": self.wake_cb,
            "start": self.start_btn,
            "pause": self.pause_btn,
            "stop": self.stop_btn,
        }

    def _setup_keybindings(self):
        """Space = start/pause, Escape = stop"""
        self.root.bind('<space>', lambda e: self._key_space())
        self.root.bind('<Escape>', lambda e: self._stop())

    def _key_space(self):
        if self.timer.phase == TimerPhase.RUNNING:
            self._pause()
        else:
            self._start()

    # ---- Duration fields ----

    def _load_duration(self):
        duration = self.config.read_duration()
        if duration is None:
            return

        self.duration = TimerConfig(*duration)
        for var, val in zip((self.hours_var, self.mins_var, self.secs_var), duration):
            var.set(str(val))

    def _fields(self):
        """Current field values, None if any of them isn't a number"""
        try:
            return tuple(int(var.get()) for var in (self.hours_var, self.mins_var, self.secs_var))
        except ValueError:
            return None

    def _update_duration(self):
        fields = self._fields()
        if fields is None or min(fields) < 0:
            return
        self.duration = TimerConfig(*fields)
        self.timer.on_duration_changed(*fields)

    # ---- Engine view ----

    def set_display(self, remaining_ms):
        self.time_lbl.config(text=format_remaining(remaining_ms))

    def set_progress(self, current_ms, max_ms):
        self.pbar.config(maximum=max(max_ms, 1), value=current_ms)

    def disable(self, control):
        widget = self.controls.get(control)
        if widget is not None:
            widget.config(state='disabled')

    def show_error(self, title, message):
        messagebox.showerror(title, message, parent=self.root)

    # ---- Actions ----

    def _start(self):
        self.timer.on_start()
        self._update_controls()

    def _pause(self):
        self.timer.on_pause()
        self._update_controls()

    def _stop(self):
        self.timer.on_stop()
        self._update_controls()

    def on_timer_finish(self):
        self.notif_mgr.show("⏰ Countdown", "Time's up!")
        self._update_controls()

    def _update_controls(self):
        phase = self.timer.phase
        running = phase == TimerPhase.RUNNING

        self.start_btn.config(state='disabled' if running else 'normal')
        self.pause_btn.config(state='normal' if running else 'disabled')
        self.stop_btn.config(state='disabled' if phase == TimerPhase.IDLE else 'normal')

        for sb in self.spinboxes:
            sb.config(state='disabled' if running else 'normal')

        if self.timer.wake_alarm is None or running:
            self.wake_cb.config(state='disabled')
        else:
            self.wake_cb.config(state='normal')

    def _toggle_wake(self):
        self.timer.wake_requested = self.wake_var.get()
        self.config.set("wake_alarm", self.wake_var.get())

    def _toggle_top(self):
        self.topmost = not self.topmost
        self.root.attributes('-topmost', self.topmost)
        self.top_btn.config(relief='sunken' if self.topmost else 'flat')
        self.config.set("topmost", self.topmost)

    def _on_close(self):
        self.config.write_duration(self.duration.hours, self.duration.minutes, self.duration.seconds)
        self.config.save()

        self.timer.on_stop()
        self.root.destroy()
