"""
Periodic reconciliation of the live task set with the reminder store.
The store is overwritten with a full snapshot on every cycle.
"""

import asyncio
from datetime import datetime
from typing import Optional

from rappel.config.logging_config import get_logger
from rappel.config import settings
from rappel.reminder.errors import StoreError
from rappel.reminder.repository import ReminderRepository
from rappel.reminder.scheduler import ReminderScheduler
from rappel.reminder.task_set import TaskSet

logger = get_logger(__name__)


class Reconciler:
    """
    Writes the task set's snapshot to the store.
    At most one reconciliation runs at a time.
    """

    def __init__(self, task_set: TaskSet, repository: ReminderRepository,
                 interval: float = None):
        """
        Initialize reconciler.

        Args:
            task_set: Live tasks (source of truth while running)
            repository: Store to overwrite
            interval: Seconds between cycles (default from settings)
        """
        self.task_set = task_set
        self.repository = repository
        self.interval = interval or settings.SYNC_INTERVAL_SECONDS

        self.last_sync: datetime = datetime.now()
        self.last_error: Optional[str] = None
        self.sync_count = 0
        self.failure_count = 0
        self._lock = asyncio.Lock()

        logger.info(f"Reconciler initialized (every {self.interval}s)")

    @property
    def in_flight(self) -> bool:
        """Whether a reconciliation is currently running."""
        return self._lock.locked()

    def start(self, scheduler: ReminderScheduler) -> None:
        """
        Register the periodic reconciliation job.

        Args:
            scheduler: Scheduler running the interval job
        """
        scheduler.add_interval_job(self.reconcile, self.interval, settings.SYNC_JOB_ID)

    async def reconcile(self, wait: bool = False) -> bool:
        """
        Reap fired tasks, then replace the store with the remaining ones.

        Args:
            wait: Queue behind a run in flight instead of skipping. The
                  final reconciliation on shutdown must not be dropped.

        Returns:
            True if the store was written, False if skipped or failed
        """
        if self._lock.locked() and not wait:
            logger.debug("Reconciliation already in flight, skipping")
            return False

        async with self._lock:
            self.task_set.reap_finished()
            snapshot = self.task_set.snapshot()

            loop = asyncio.get_running_loop()
            try:
                await loop.run_in_executor(None, self.repository.replace_all, snapshot)

            except StoreError as e:
                self.failure_count += 1
                self.last_error = str(e)
                logger.error(f"Reconciliation failed, retrying next cycle: {e}", exc_info=True)
                return False

            self.last_sync = datetime.now()
            self.last_error = None
            self.sync_count += 1
            logger.debug(f"Reconciled {len(snapshot)} reminders")
            return True
