"""
Data models for reminders.
"""

from dataclasses import dataclass
from datetime import datetime

from rappel.config.settings import LIST_DATE_FORMAT


@dataclass(frozen=True)
class ReminderContent:
    """Reminder value: what to show and when. Compared by value."""

    title: str
    body: str
    fire_at: datetime

    def __str__(self) -> str:
        """String representation."""
        return f"{self.title} {self.body} @ {self.fire_at.strftime(LIST_DATE_FORMAT)}"

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            'title': self.title,
            'body': self.body,
            'fire_at': self.fire_at.isoformat(sep=' ')
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ReminderContent':
        """Create from dictionary."""
        return cls(
            title=data['title'],
            body=data['body'],
            fire_at=datetime.fromisoformat(data['fire_at'])
        )
