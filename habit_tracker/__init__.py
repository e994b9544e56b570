"""Habit tracker web application: habits, daily entries and 30-day progress."""

__version__ = "0.1.0"
