"""
Exceptions raised by the reminder layer.
"""

from rappel.reminder.models import ReminderContent


class SchedulingError(Exception):
    """A reminder could not be turned into a deferred task."""


class AlreadyDueError(SchedulingError):
    """The reminder's fire time is now or in the past."""

    def __init__(self, content: ReminderContent):
        super().__init__(f"Reminder '{content.title}' is already due ({content.fire_at})")
        self.content = content


class StoreError(Exception):
    """The reminder store could not be opened, read or written."""
