"""
APScheduler wrapper for reminder scheduling.
Turns each reminder into a cancellable one-shot job and runs periodic jobs.
"""

import threading
import uuid
from enum import Enum
from typing import Awaitable, Callable, Optional
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.triggers.interval import IntervalTrigger
from apscheduler.events import EVENT_JOB_EXECUTED, EVENT_JOB_ERROR, EVENT_JOB_MISSED
from apscheduler.jobstores.base import JobLookupError
from apscheduler.job import Job

from rappel.config.logging_config import get_logger
from rappel.config import settings
from rappel.reminder.errors import AlreadyDueError
from rappel.reminder.models import ReminderContent

logger = get_logger(__name__)

NotifyCallback = Callable[[str, str], Awaitable[None]]


class TaskState(Enum):
    """Lifecycle of a deferred task."""
    PENDING = "pending"
    FIRING = "firing"
    FIRED = "fired"
    CANCELLED = "cancelled"


class DeferredTask:
    """
    Handle on one scheduled reminder.

    The task leaves PENDING exactly once, either by firing or by being
    cancelled, so a cancel racing the timer yields one outcome.
    """

    def __init__(self, content: ReminderContent, callback: Optional[NotifyCallback] = None):
        """
        Initialize task.

        Args:
            content: Reminder this task will announce
            callback: Async function called with (title, body) when due
        """
        self.content = content
        self.job_id = f"reminder_{uuid.uuid4().hex}"
        self.job: Optional[Job] = None
        self._callback = callback
        self._state = TaskState.PENDING
        self._lock = threading.Lock()

    @property
    def state(self) -> TaskState:
        """Current lifecycle state."""
        return self._state

    def is_finished(self) -> bool:
        """True once the timer fired and the notification call returned."""
        return self._state is TaskState.FIRED

    def cancel(self) -> bool:
        """
        Cancel the task if it has not started firing.

        Returns:
            True if the notification was suppressed, False if the task had
            already fired, was firing, or was cancelled before
        """
        with self._lock:
            if self._state is not TaskState.PENDING:
                return False
            self._state = TaskState.CANCELLED

        if self.job is not None:
            try:
                self.job.remove()
            except JobLookupError:
                # Already handed to the executor; fire() will see CANCELLED
                pass

        logger.info(f"Cancelled reminder: {self.content}")
        return True

    async def fire(self) -> None:
        """Job body: announce the reminder unless cancelled."""
        with self._lock:
            if self._state is not TaskState.PENDING:
                logger.debug(f"Skipping {self._state.value} reminder: {self.content}")
                return
            self._state = TaskState.FIRING

        logger.info(f"Firing reminder: {self.content}")

        try:
            if self._callback:
                await self._callback(self.content.title, self.content.body)
        except Exception as e:
            logger.error(
                f"Error in reminder callback for '{self.content.title}': {e}",
                exc_info=True
            )
        finally:
            with self._lock:
                self._state = TaskState.FIRED


class ReminderScheduler:
    """
    APScheduler wrapper for managing reminder jobs.
    Jobs live in memory only; the reminder store is reconciled separately.
    """

    def __init__(self, callback: Optional[NotifyCallback] = None):
        """
        Initialize scheduler.

        Args:
            callback: Async function to call when a reminder fires
                     Signature: async def callback(title: str, body: str) -> None
        """
        self.callback = callback

        self.scheduler = AsyncIOScheduler(
            job_defaults={
                'coalesce': settings.SCHEDULER_COALESCE,
                'max_instances': settings.SCHEDULER_MAX_INSTANCES,
                'misfire_grace_time': settings.SCHEDULER_MISFIRE_GRACE_TIME
            }
        )

        # Add event listeners
        self.scheduler.add_listener(
            self._job_executed,
            EVENT_JOB_EXECUTED
        )
        self.scheduler.add_listener(
            self._job_error,
            EVENT_JOB_ERROR
        )
        self.scheduler.add_listener(
            self._job_missed,
            EVENT_JOB_MISSED
        )

        logger.info("ReminderScheduler initialized")

    def start(self) -> None:
        """Start the scheduler. Must be called from inside the event loop."""
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("Scheduler started")

    def shutdown(self, wait: bool = True) -> None:
        """
        Shutdown the scheduler.

        Args:
            wait: Wait for running jobs to complete
        """
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)
            logger.info("Scheduler shutdown")

    def schedule(self, content: ReminderContent, now: Optional[datetime] = None) -> DeferredTask:
        """
        Schedule a reminder for a single notification.

        Args:
            content: Reminder to schedule
            now: Reference time (default: current local time)

        Returns:
            Handle on the new task

        Raises:
            AlreadyDueError: If the fire time is not in the future
        """
        delay = content.fire_at - (now or datetime.now())
        if delay.total_seconds() <= 0:
            logger.debug(f"Cannot schedule reminder in the past: {content}")
            raise AlreadyDueError(content)

        task = DeferredTask(content, self.callback)
        task.job = self.scheduler.add_job(
            func=task.fire,
            trigger=DateTrigger(run_date=content.fire_at),
            id=task.job_id,
            # A reminder woken up late (suspend, stalled loop) still fires once
            misfire_grace_time=None,
            coalesce=True
        )

        logger.info(
            f"Scheduled reminder '{content.title}' for "
            f"{content.fire_at.strftime('%Y-%m-%d %H:%M:%S')} (in {delay})"
        )
        return task

    def add_interval_job(self, func: Callable, seconds: float, job_id: str) -> Job:
        """
        Run a function periodically, never overlapping with itself.

        Args:
            func: Function or coroutine function to run
            seconds: Interval between runs
            job_id: Job identifier (an existing job with this id is replaced)

        Returns:
            The APScheduler job
        """
        job = self.scheduler.add_job(
            func=func,
            trigger=IntervalTrigger(seconds=seconds),
            id=job_id,
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )
        logger.info(f"Interval job {job_id} every {seconds}s")
        return job

    def get_scheduled_count(self) -> int:
        """
        Get number of currently scheduled jobs.

        Returns:
            Number of scheduled jobs
        """
        return len(self.scheduler.get_jobs())

    def _job_executed(self, event) -> None:
        """
        Event listener for successful job execution.

        Args:
            event: Job execution event
        """
        logger.debug(f"Job executed: {event.job_id}")

    def _job_error(self, event) -> None:
        """
        Event listener for job errors.

        Args:
            event: Job error event
        """
        logger.error(
            f"Job error: {event.job_id}, "
            f"exception: {event.exception}",
            exc_info=event.exception
        )

    def _job_missed(self, event) -> None:
        """
        Event listener for jobs that were not run at all.

        Args:
            event: Job missed event
        """
        logger.warning(f"Job missed: {event.job_id}, scheduled for {event.scheduled_run_time}")
