"""
Main application coordinator.
Builds the components, runs the control loop and shuts everything down.
"""

from typing import Optional

from rappel.config.logging_config import get_logger
from rappel.config import settings
from rappel.core.controller import Controller
from rappel.notification.notifier import Notifier
from rappel.reminder.errors import StoreError
from rappel.reminder.reconciler import Reconciler
from rappel.reminder.repository import ReminderRepository
from rappel.reminder.scheduler import ReminderScheduler
from rappel.reminder.task_set import TaskSet
from rappel.ui.terminal import TerminalUI

logger = get_logger(__name__)


class Coordinator:
    """
    Main application coordinator.
    Initializes components in dependency order and owns the control loop.
    """

    def __init__(self, db_path: str = None, sync_interval: float = None,
                 notifier: Optional[Notifier] = None):
        """
        Initialize coordinator.

        Args:
            db_path: SQLite database path (default from settings)
            sync_interval: Seconds between store reconciliations
            notifier: Notification output (default: plyer desktop notifier)
        """
        logger.info("Initializing Coordinator")

        self.db_path = db_path
        self.sync_interval = sync_interval or settings.SYNC_INTERVAL_SECONDS

        self.notifier = notifier
        self.repository: Optional[ReminderRepository] = None
        self.scheduler: Optional[ReminderScheduler] = None
        self.task_set: Optional[TaskSet] = None
        self.controller: Optional[Controller] = None
        self.reconciler: Optional[Reconciler] = None

        self.running = False

    async def initialize(self) -> bool:
        """
        Initialize all components in dependency order.

        Must run inside the event loop. Store failures are fatal here.

        Returns:
            True if all components initialized successfully
        """
        try:
            logger.info("Initializing components...")

            # 1. Store
            self.repository = ReminderRepository(self.db_path)
            stored = self.repository.load_all()

            # 2. Notification output
            if self.notifier is None:
                self.notifier = Notifier()

            # 3. Scheduler
            self.scheduler = ReminderScheduler(callback=self.notifier.notify)
            self.scheduler.start()

            # 4. Live tasks, restored from the store
            self.task_set = TaskSet(self.scheduler)
            self.task_set.load(stored)

            # 5. Controller
            self.controller = Controller(self.task_set)

            # 6. Reconciler
            self.reconciler = Reconciler(self.task_set, self.repository, self.sync_interval)
            self.reconciler.start(self.scheduler)

            logger.info("All components initialized successfully")
            return True

        except StoreError as e:
            logger.error(f"Reminder store unavailable: {e}", exc_info=True)
            if self.scheduler:
                self.scheduler.shutdown(wait=False)
            return False

    async def run(self, ui: TerminalUI) -> None:
        """
        Control loop: reap, draw, wait for one key, apply it.

        Args:
            ui: Started terminal UI
        """
        self.running = True
        logger.info("Main loop started")

        while self.running and not self.controller.should_quit:
            self.controller.tick()
            ui.draw(self.controller.view(self.reconciler.last_sync))

            event = await ui.next_key(settings.UI_TICK_SECONDS)
            if event is not None:
                self.controller.on_key(event)

        self.running = False
        logger.info("Main loop stopped")

    def request_shutdown(self) -> None:
        """Ask the control loop to exit after the current tick."""
        self.running = False
        if self.controller:
            self.controller.should_quit = True

    async def stop(self) -> None:
        """Persist the final state and stop the scheduler."""
        logger.info("Stopping coordinator...")

        self.running = False

        if self.reconciler:
            await self.reconciler.reconcile(wait=True)

        if self.scheduler:
            self.scheduler.shutdown(wait=False)

        logger.info("Coordinator stopped")
