"""
Application controller.
Mode state machine translating key presses into task set operations.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple, Union

from rappel.config.logging_config import get_logger
from rappel.config import settings
from rappel.config.settings import InputField, InputMode, Key, KeyEventKind
from rappel.reminder.errors import AlreadyDueError
from rappel.reminder.models import ReminderContent
from rappel.reminder.task_set import TaskSet

logger = get_logger(__name__)


@dataclass(frozen=True)
class KeyEvent:
    """One decoded key: a Key member or a single printable character."""
    key: Union[Key, str]
    kind: KeyEventKind = KeyEventKind.PRESS


@dataclass(frozen=True)
class ControllerView:
    """Read-only state handed to the presentation on every tick."""
    reminders: List[ReminderContent]
    selection: Optional[int]
    input_mode: InputMode
    input_field: InputField
    draft_values: Dict[InputField, str] = field(default_factory=dict)
    last_sync_time: Optional[datetime] = None
    status: str = ""


class Controller:
    """
    Owns the task set, the list selection and the add-form draft.

    Navigation mode browses and deletes reminders; add mode edits the
    three draft fields and commits them as a new reminder.
    """

    def __init__(self, task_set: TaskSet):
        """
        Initialize controller.

        Args:
            task_set: Live tasks, owned by this controller from now on
        """
        self.task_set = task_set
        self.selection: Optional[int] = None
        self.should_quit = False
        self.input_mode = InputMode.NAVIGATION
        self.input_field = InputField.TITLE
        self.draft_values: Dict[InputField, str] = {f: "" for f in InputField}
        self.status = ""

        # Special keys per mode; characters are handled in on_key
        self._handlers: Dict[Tuple[InputMode, Key], Callable[[], None]] = {
            (InputMode.NAVIGATION, Key.UP): self.on_up,
            (InputMode.NAVIGATION, Key.DOWN): self.on_down,
            (InputMode.ADD, Key.UP): self._previous_field,
            (InputMode.ADD, Key.DOWN): self._next_field,
            (InputMode.ADD, Key.ENTER): self._confirm,
            (InputMode.ADD, Key.ESCAPE): self._cancel,
            (InputMode.ADD, Key.BACKSPACE): self._backspace,
        }

        logger.info("Controller initialized")

    def on_key(self, event: KeyEvent) -> None:
        """
        Apply one key event. Releases and unbound keys are ignored.

        Args:
            event: Decoded key event
        """
        if event.kind is not KeyEventKind.PRESS:
            return

        if isinstance(event.key, Key):
            handler = self._handlers.get((self.input_mode, event.key))
            if handler:
                handler()
            return

        if self.input_mode is InputMode.ADD:
            self.draft_values[self.input_field] += event.key
        elif event.key == settings.KEY_DELETE:
            self.delete_selected()
        elif event.key == settings.KEY_ADD:
            self.input_mode = InputMode.ADD
            self.status = ""
        elif event.key == settings.KEY_QUIT:
            logger.info("Quit requested")
            self.should_quit = True

    def on_up(self) -> None:
        """Select the previous reminder, wrapping to the last."""
        if not len(self.task_set):
            return
        if self.selection is None:
            self.selection = 0
        elif self.selection > 0:
            self.selection -= 1
        else:
            self.selection = len(self.task_set) - 1

    def on_down(self) -> None:
        """Select the next reminder, wrapping to the first."""
        if not len(self.task_set):
            return
        if self.selection is None or self.selection >= len(self.task_set) - 1:
            self.selection = 0
        else:
            self.selection += 1

    def delete_selected(self) -> None:
        """Cancel and remove the selected reminder; no-op without selection."""
        if self.selection is None:
            return

        index = self.selection
        task = self.task_set.remove_at(index)
        if task is None:
            return
        logger.info(f"Deleted reminder: {task.content}")

        if not len(self.task_set):
            self.selection = None
        elif index == len(self.task_set):
            self.selection = index - 1
        else:
            self.selection = index

    def commit_draft(self) -> bool:
        """
        Turn the draft into a scheduled reminder.

        An unparsable date or a time already past leaves the draft as typed.

        Returns:
            True if a reminder was added and the draft cleared
        """
        date_text = self.draft_values[InputField.DATE]
        try:
            fire_at = datetime.strptime(date_text, settings.DATE_INPUT_FORMAT)
        except ValueError:
            logger.debug(f"Rejected date input: {date_text!r}")
            self.status = f"Invalid date, expected {settings.DATE_INPUT_EXAMPLE}"
            return False

        content = ReminderContent(
            title=self.draft_values[InputField.TITLE],
            body=self.draft_values[InputField.BODY],
            fire_at=fire_at
        )

        try:
            self.task_set.add(content)
        except AlreadyDueError:
            self.status = "That time has already passed"
            return False

        for input_field in self.draft_values:
            self.draft_values[input_field] = ""
        self.status = ""
        logger.info(f"Added reminder: {content}")
        return True

    def tick(self) -> None:
        """Drop fired reminders and keep the selection in range."""
        self.task_set.reap_finished()

        if self.selection is None:
            return
        if not len(self.task_set):
            self.selection = None
        elif self.selection >= len(self.task_set):
            self.selection = len(self.task_set) - 1

    def view(self, last_sync: Optional[datetime] = None) -> ControllerView:
        """
        Snapshot of everything the presentation draws.

        Args:
            last_sync: Time of the last successful reconciliation
        """
        return ControllerView(
            reminders=self.task_set.snapshot(),
            selection=self.selection,
            input_mode=self.input_mode,
            input_field=self.input_field,
            draft_values=dict(self.draft_values),
            last_sync_time=last_sync,
            status=self.status
        )

    def _previous_field(self) -> None:
        self.input_field = self.input_field.previous()

    def _next_field(self) -> None:
        self.input_field = self.input_field.next()

    def _confirm(self) -> None:
        self.commit_draft()
        self.input_mode = InputMode.NAVIGATION

    def _cancel(self) -> None:
        # Draft is kept so the user can come back to it
        self.input_mode = InputMode.NAVIGATION

    def _backspace(self) -> None:
        self.draft_values[self.input_field] = self.draft_values[self.input_field][:-1]
