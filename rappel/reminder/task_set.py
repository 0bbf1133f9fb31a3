"""
Live collection of deferred tasks.
"""

from typing import Iterable, Iterator, List, Optional

from rappel.config.logging_config import get_logger
from rappel.reminder.errors import AlreadyDueError
from rappel.reminder.models import ReminderContent
from rappel.reminder.scheduler import DeferredTask, ReminderScheduler

logger = get_logger(__name__)


class TaskSet:
    """
    Ordered set of deferred tasks, in insertion order.

    Fired tasks stay in the set until reap_finished() is called.
    """

    def __init__(self, scheduler: ReminderScheduler):
        """
        Initialize task set.

        Args:
            scheduler: Scheduler that creates the deferred tasks
        """
        self.scheduler = scheduler
        self._tasks: List[DeferredTask] = []

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[DeferredTask]:
        return iter(self._tasks)

    def __getitem__(self, index: int) -> DeferredTask:
        return self._tasks[index]

    def load(self, reminders: Iterable[ReminderContent]) -> int:
        """
        Schedule stored reminders, skipping those already due.

        Args:
            reminders: Reminders in the order they should be listed

        Returns:
            Number of tasks created
        """
        loaded = 0
        for reminder in reminders:
            try:
                self.add(reminder)
                loaded += 1
            except AlreadyDueError:
                logger.debug(f"Skipping past reminder: {reminder}")

        logger.info(f"Restored {loaded} scheduled reminders")
        return loaded

    def add(self, content: ReminderContent) -> DeferredTask:
        """
        Schedule a reminder and append its task.

        Args:
            content: Reminder to schedule

        Returns:
            The new task

        Raises:
            AlreadyDueError: If the fire time is not in the future; nothing
                             is added
        """
        task = self.scheduler.schedule(content)
        self._tasks.append(task)
        return task

    def remove_at(self, index: int) -> Optional[DeferredTask]:
        """
        Cancel and remove the task at an index.

        Args:
            index: Position in the set

        Returns:
            Removed task, or None if the index is out of range
        """
        if not 0 <= index < len(self._tasks):
            return None

        task = self._tasks.pop(index)
        task.cancel()
        return task

    def reap_finished(self) -> int:
        """
        Drop every task whose notification has been sent.

        Returns:
            Number of tasks removed
        """
        remaining = [task for task in self._tasks if not task.is_finished()]
        reaped = len(self._tasks) - len(remaining)
        self._tasks = remaining

        if reaped:
            logger.debug(f"Reaped {reaped} fired reminders")
        return reaped

    def snapshot(self) -> List[ReminderContent]:
        """Contents of the live tasks, in set order."""
        return [task.content for task in self._tasks]
