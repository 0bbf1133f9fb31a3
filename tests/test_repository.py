from datetime import datetime

import pytest

from rappel.reminder.errors import StoreError
from rappel.reminder.models import ReminderContent
from rappel.reminder.repository import ReminderRepository


def at(hour):
    return datetime(2030, 7, 16, hour, 0, 0)


def test_empty_store(repository):
    assert repository.load_all() == []
    assert repository.count() == 0


def test_load_all_orders_by_fire_time(repository):
    repository.replace_all([
        ReminderContent("third", "", at(15)),
        ReminderContent("first", "", at(9)),
        ReminderContent("second", "", at(12)),
    ])

    assert [r.title for r in repository.load_all()] == ["first", "second", "third"]


def test_replace_all_overwrites(repository):
    repository.replace_all([ReminderContent("old", "", at(9))])
    repository.replace_all([ReminderContent("new", "body", at(10))])

    assert repository.load_all() == [ReminderContent("new", "body", at(10))]


def test_replace_with_nothing_empties_store(repository):
    repository.replace_all([ReminderContent("old", "", at(9))])
    repository.replace_all([])

    assert repository.count() == 0


def test_round_trip_keeps_values(repository):
    snapshot = [
        ReminderContent("Courses", "Penser à acheter du lait", at(13)),
        ReminderContent("Courses", "Penser à acheter du lait", at(13)),
        ReminderContent("Call", "", at(8)),
    ]

    repository.replace_all(snapshot)

    assert sorted(repository.load_all(), key=repr) == sorted(snapshot, key=repr)


def test_stored_timestamps_are_sortable_text(repository):
    repository.replace_all([ReminderContent("t", "b", at(13))])

    with repository._get_connection() as conn:
        row = conn.execute("SELECT fire_at FROM reminders").fetchone()

    assert row["fire_at"] == "2030-07-16 13:00:00"


def test_unopenable_database_raises_store_error(tmp_path):
    with pytest.raises(StoreError):
        ReminderRepository(str(tmp_path / "missing" / "reminders.db"))


def test_data_survives_reopen(tmp_path):
    path = str(tmp_path / "reminders.db")
    ReminderRepository(path).replace_all([ReminderContent("t", "b", at(9))])

    assert ReminderRepository(path).count() == 1
