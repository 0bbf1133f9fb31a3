from datetime import datetime, timedelta

import pytest

from rappel.config.settings import InputField, InputMode, Key, KeyEventKind
from rappel.core.controller import Controller, KeyEvent

from conftest import reminder_in


def press(controller, *keys):
    for key in keys:
        controller.on_key(KeyEvent(key))


def type_text(controller, text):
    press(controller, *text)


def future_date_text(days=1):
    return (datetime.now() + timedelta(days=days)).strftime("%H:%M %d/%m/%Y")


@pytest.fixture
async def controller(task_set):
    return Controller(task_set)


@pytest.fixture
async def three_items(controller):
    for title in ("one", "two", "three"):
        controller.task_set.add(reminder_in(3600, title=title))
    return controller


def titles(controller):
    return [c.title for c in controller.task_set.snapshot()]


async def test_initial_state(controller):
    assert controller.input_mode is InputMode.NAVIGATION
    assert controller.input_field is InputField.TITLE
    assert controller.selection is None
    assert controller.draft_values == {f: "" for f in InputField}


async def test_navigation_on_empty_set_is_noop(controller):
    press(controller, Key.UP, Key.DOWN, "x")

    assert controller.selection is None


async def test_down_wraps_to_first(three_items):
    press(three_items, Key.DOWN)
    assert three_items.selection == 0

    press(three_items, Key.DOWN, Key.DOWN)
    assert three_items.selection == 2

    press(three_items, Key.DOWN)
    assert three_items.selection == 0


async def test_up_wraps_to_last(three_items):
    press(three_items, Key.UP)
    assert three_items.selection == 0

    press(three_items, Key.UP)
    assert three_items.selection == 2


async def test_selection_stays_in_range(three_items):
    sequence = [Key.UP, Key.UP, Key.DOWN, Key.UP, Key.DOWN, Key.DOWN, Key.DOWN, Key.UP] * 5
    for key in sequence:
        press(three_items, key)
        assert 0 <= three_items.selection <= 2


async def test_delete_middle_keeps_index(three_items):
    three_items.selection = 1

    press(three_items, "x")

    assert titles(three_items) == ["one", "three"]
    assert three_items.selection == 1


async def test_delete_last_selects_previous(three_items):
    three_items.selection = 2

    press(three_items, "x")

    assert titles(three_items) == ["one", "two"]
    assert three_items.selection == 1


async def test_delete_sole_item_clears_selection(controller):
    controller.task_set.add(reminder_in(3600))
    press(controller, Key.DOWN, "x")

    assert len(controller.task_set) == 0
    assert controller.selection is None


async def test_delete_without_selection_is_noop(three_items):
    press(three_items, "x")

    assert len(three_items.task_set) == 3


async def test_delete_cancels_timer(three_items):
    task = three_items.task_set[0]
    three_items.selection = 0

    press(three_items, "x")

    assert not task.cancel()


async def test_quit_sets_flag(controller):
    press(controller, "q")

    assert controller.should_quit


async def test_release_events_are_ignored(controller):
    controller.on_key(KeyEvent("a", KeyEventKind.RELEASE))

    assert controller.input_mode is InputMode.NAVIGATION


async def test_add_mode_field_navigation_wraps(controller):
    press(controller, "a")
    assert controller.input_mode is InputMode.ADD

    press(controller, Key.UP)
    assert controller.input_field is InputField.DATE

    press(controller, Key.DOWN)
    assert controller.input_field is InputField.TITLE


async def test_typing_and_backspace(controller):
    press(controller, "a")
    type_text(controller, "Coursez")
    press(controller, Key.BACKSPACE)
    type_text(controller, "s")

    assert controller.draft_values[InputField.TITLE] == "Courses"


async def test_navigation_keys_are_text_in_add_mode(controller):
    press(controller, "a")
    type_text(controller, "xaq")

    assert controller.draft_values[InputField.TITLE] == "xaq"
    assert not controller.should_quit


async def test_commit_adds_reminder_and_clears_draft(controller):
    press(controller, "a")
    type_text(controller, "Courses")
    press(controller, Key.DOWN)
    type_text(controller, "Buy milk")
    press(controller, Key.DOWN)
    type_text(controller, future_date_text())
    press(controller, Key.ENTER)

    assert controller.input_mode is InputMode.NAVIGATION
    assert titles(controller) == ["Courses"]
    assert controller.task_set.snapshot()[0].body == "Buy milk"
    assert controller.draft_values == {f: "" for f in InputField}


async def test_commit_with_invalid_date_keeps_draft(controller):
    press(controller, "a")
    type_text(controller, "Courses")
    press(controller, Key.UP)
    type_text(controller, "25:99 31/02/2023")
    press(controller, Key.ENTER)

    assert len(controller.task_set) == 0
    assert controller.input_mode is InputMode.NAVIGATION
    assert controller.draft_values[InputField.TITLE] == "Courses"
    assert controller.draft_values[InputField.DATE] == "25:99 31/02/2023"
    assert controller.status


async def test_commit_with_past_date_keeps_draft(controller):
    press(controller, "a", Key.UP)
    type_text(controller, "10:00 01/01/2000")

    assert controller.commit_draft() is False
    assert len(controller.task_set) == 0
    assert controller.draft_values[InputField.DATE] == "10:00 01/01/2000"


async def test_escape_keeps_draft(controller):
    press(controller, "a")
    type_text(controller, "half typed")
    press(controller, Key.ESCAPE)

    assert controller.input_mode is InputMode.NAVIGATION
    assert controller.draft_values[InputField.TITLE] == "half typed"


async def test_entering_add_mode_clears_status(controller):
    press(controller, "a", Key.ENTER)
    assert controller.status

    press(controller, "a")
    assert controller.status == ""


async def test_tick_reaps_and_clamps_selection(three_items):
    three_items.selection = 2
    await three_items.task_set[2].fire()

    three_items.tick()

    assert titles(three_items) == ["one", "two"]
    assert three_items.selection == 1


async def test_view_is_a_copy(three_items):
    press(three_items, Key.DOWN)
    view = three_items.view()

    press(three_items, "a")
    type_text(three_items, "new")

    assert view.selection == 0
    assert view.input_mode is InputMode.NAVIGATION
    assert view.draft_values[InputField.TITLE] == ""
    assert [c.title for c in view.reminders] == ["one", "two", "three"]
