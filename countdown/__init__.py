"""Desktop countdown timer with alarm sound and wake from suspend."""

__version__ = "1.0"
