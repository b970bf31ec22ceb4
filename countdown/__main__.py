import logging
import os
import tkinter as tk

from countdown.app import TimerApp

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def main():
    """Entry point for the countdown timer."""
    level = os.environ.get("COUNTDOWN_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=getattr(logging, level, logging.WARNING), format=LOG_FORMAT)

    root = tk.Tk()
    TimerApp(root)
    root.mainloop()


if __name__ == "__main__":
    main()
