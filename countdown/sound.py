"""Alarm sound played when the countdown runs out."""

import logging
import os
import subprocess
import threading

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import numpy as np
import pygame

logger = logging.getLogger(__name__)

ALARM_PATH = "/usr/share/countdown/alarm.wav"
FALLBACK_ALARM = "alarm.wav"
PLAYER = "aplay"


class ToneGenerator:
    """Synthesized alarm tone, used when no player can be run"""
    def __init__(self, freq=600, duration=0.35, repeats=4):
        self.freq = freq
        self.duration = duration
        self.repeats = repeats
        self._sound = None

    def _create_tone(self):
        sr = 44100
        n = int(self.duration * sr)
        t = np.linspace(0, self.duration, n, False)
        wave = np.sin(self.freq * t * 2 * np.pi)

        fade = int(sr * 0.01)
        wave[:fade] *= np.linspace(0, 1, fade)
        wave[-fade:] *= np.linspace(1, 0, fade)

        audio = (wave * 32767).astype(np.int16)
        stereo = np.repeat(audio.reshape(n, 1), 2, axis=1)
        return pygame.sndarray.make_sound(stereo)

    def play(self):
        if not pygame.mixer.get_init():
            pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=512)
        if self._sound is None:
            self._sound = self._create_tone()
        self._sound.play(loops=self.repeats - 1)


class AlarmPlayer:
    """Plays the alarm in the background, never blocks the caller"""
    def __init__(self, player=PLAYER, paths=(ALARM_PATH, FALLBACK_ALARM), tone=None):
        self.player = player
        self.paths = paths
        self.tone = tone

    def sound_path(self):
        for path in self.paths[:-1]:
            if os.path.exists(path):
                return path
        return self.paths[-1]

    def command(self):
        return [self.player, self.sound_path()]

    def play(self):
        thread = threading.Thread(target=self._run, name="alarm-player", daemon=True)
        thread.start()
        return thread

    def _run(self):
        cmd = self.command()
        cmdline = " ".join(cmd)

        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            logger.warning("Failed to execute '%s': %s", cmdline, e)
            self._play_tone()
            return

        if proc.wait():
            logger.warning("Failed to execute '%s' (exit status %d)", cmdline, proc.returncode)
            self._play_tone()

    def _play_tone(self):
        if self.tone is None:
            return

        try:
            self.tone.play()
        except pygame.error as e:
            logger.warning("Tone playback failed: %s", e)
