"""
Per-row failures raised while compiling a class schedule.
"""


class MalformedScheduleRow(ValueError):
    """A row has meeting times but its date or time text cannot be read."""


class EmptyWeekdaySet(MalformedScheduleRow):
    """A row has meeting times but no weekday code could be decoded."""
