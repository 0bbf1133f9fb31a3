"""
Desktop notification output.
Sends reminder popups through plyer without blocking the event loop.
"""

import asyncio

from plyer import notification

from rappel.config.logging_config import get_logger
from rappel.config import settings

logger = get_logger(__name__)


class Notifier:
    """
    Desktop notifier using plyer.
    Falls back to log-only mode when notifications are disabled.
    """

    def __init__(self, app_name: str = None, timeout: int = None, enabled: bool = None):
        """
        Initialize notifier.

        Args:
            app_name: Application name shown in the popup (default from settings)
            timeout: Seconds the popup stays visible (default from settings)
            enabled: Emit real popups (default from settings)
        """
        self.app_name = app_name or settings.NOTIFICATION_APP_NAME
        self.timeout = timeout if timeout is not None else settings.NOTIFICATION_TIMEOUT
        self.enabled = settings.NOTIFICATIONS_ENABLED if enabled is None else enabled
        self.sent_count = 0

        if not self.enabled:
            logger.info("Notifier in LOG-ONLY mode")

    async def notify(self, title: str, body: str) -> None:
        """
        Show a desktop notification.

        Failures are logged, never raised: one broken popup must not stop
        the other reminders.

        Args:
            title: Notification summary
            body: Notification text
        """
        if not self.enabled:
            logger.info(f"Notification (log only): {title} - {body}")
            self.sent_count += 1
            return

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._show, title, body)
            self.sent_count += 1
            logger.info(f"Notification sent: {title}")

        except Exception as e:
            logger.error(f"Failed to send notification '{title}': {e}", exc_info=True)

    def _show(self, title: str, body: str) -> None:
        """Blocking plyer call (runs in the default executor)."""
        notification.notify(
            title=title,
            message=body,
            app_name=self.app_name,
            timeout=self.timeout
        )
