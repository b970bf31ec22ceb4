"""Desktop notifications."""

import logging
import subprocess
import sys

logger = logging.getLogger(__name__)


class NotificationManager:
    """Native OS notifications"""
    @staticmethod
    def command(title, message):
        if sys.platform == 'darwin':
            script = f'display notification "{message}" with title "{title}" sound name "Ping"'
            return ["osascript", "-e", script]
        if sys.platform.startswith('linux'):
            return ["notify-send", title, message]
        return None

    @classmethod
    def show(cls, title, message):
        if sys.platform == 'win32':
            from plyer import notification
            try:
                notification.notify(title=title, message=message, timeout=10)
            except NotImplementedError as e:
                logger.warning("Notification error: %s", e)
            return

        cmd = cls.command(title, message)
        if cmd is None:
            logger.debug("No notification support on %s", sys.platform)
            return

        try:
            subprocess.Popen(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        except OSError as e:
            logger.warning("Notification error: %s", e)
