"""Shared fixtures: isolated data directory, recording notifier, live scheduler."""

import os
import tempfile

# Must be set before rappel.config.settings is imported
os.environ.setdefault("RAPPEL_HOME", tempfile.mkdtemp(prefix="rappel-tests-"))
os.environ.setdefault("NOTIFICATIONS_ENABLED", "false")

from datetime import datetime, timedelta

import pytest

from rappel.reminder.models import ReminderContent
from rappel.reminder.repository import ReminderRepository
from rappel.reminder.scheduler import ReminderScheduler
from rappel.reminder.task_set import TaskSet


class RecordingNotifier:
    def __init__(self):
        self.calls = []

    async def notify(self, title: str, body: str) -> None:
        self.calls.append((title, body))


def reminder_in(seconds: float, title: str = "Courses", body: str = "Buy milk") -> ReminderContent:
    return ReminderContent(title=title, body=body, fire_at=datetime.now() + timedelta(seconds=seconds))


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
async def scheduler(notifier):
    scheduler = ReminderScheduler(callback=notifier.notify)
    scheduler.start()
    yield scheduler
    scheduler.shutdown(wait=False)


@pytest.fixture
async def task_set(scheduler):
    return TaskSet(scheduler)


@pytest.fixture
def repository(tmp_path):
    return ReminderRepository(str(tmp_path / "reminders.db"))
