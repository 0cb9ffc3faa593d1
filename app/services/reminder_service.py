import logging
from typing import Any, Dict, Optional

from db.store import ReminderStore
from models.records import ReminderRecord, ReminderUpdate, UserRecord
from scheduler.schedule import is_due
from services.clock import Clock, SystemClock
from services.email_service import EmailService

logger = logging.getLogger(__name__)

class ReminderProcessor:
    """Runs processing cycles: find due reminders, email their owners, record the outcome."""

    def __init__(self, store: ReminderStore, email_service: EmailService, clock: Optional[Clock] = None):
        """
        Initialize the processor.

        Args:
            store: Reminder/user store, shared across cycles
            email_service: Sender used for every delivery
            clock: Source of the current local time
        """
        self.store = store
        self.email_service = email_service
        self.clock = clock or SystemClock()

    async def process_reminders(self) -> Dict[str, Any]:
        """
        Run one processing cycle.

        Only a failure fetching the enabled reminders aborts the cycle; user
        lookups, sends and status writes fail per reminder.

        Returns:
            {"success": True, "processed": n, "sent": m} or
            {"success": False, "error": message}
        """
        logger.info("Starting reminder processing...")
        now = self.clock.now()

        try:
            reminders = await self.store.list_enabled_reminders()
        except Exception as e:
            logger.error(f"Error processing reminders: {str(e)}")
            return {"success": False, "error": str(e)}

        logger.info(f"Found {len(reminders)} enabled reminders")

        processed_count = 0
        sent_count = 0

        for reminder in reminders:
            if not is_due(reminder, now):
                continue

            user = await self._resolve_user(reminder)
            if user is None:
                continue

            processed_count += 1

            email_sent = await self.email_service.send_reminder_email(
                user.email, user.display_name, reminder.time
            )

            if email_sent:
                sent_count += 1
                await self._save_outcome(reminder, ReminderUpdate.success(now))
            else:
                await self._save_outcome(reminder, ReminderUpdate.failure(now))

        logger.info(f"Processing complete. Processed: {processed_count}, Sent: {sent_count}")
        return {"success": True, "processed": processed_count, "sent": sent_count}

    async def _resolve_user(self, reminder: ReminderRecord) -> Optional[UserRecord]:
        if not reminder.user_id:
            logger.warning(f"Reminder {reminder.id} has no user, skipping")
            return None

        try:
            user = await self.store.get_user(reminder.user_id)
        except Exception as e:
            logger.error(f"Error loading user {reminder.user_id} for reminder {reminder.id}: {str(e)}")
            return None

        if user is None:
            logger.warning(f"User {reminder.user_id} not found")
            return None

        if not user.email:
            logger.warning(f"User {reminder.user_id} has no email address, skipping reminder {reminder.id}")
            return None

        return user

    async def _save_outcome(self, reminder: ReminderRecord, outcome: ReminderUpdate) -> None:
        try:
            await self.store.update_reminder(reminder.id, outcome)
        except Exception as e:
            logger.error(
                f"Error saving {outcome.last_sent_status.value} status for reminder {reminder.id}: {str(e)}"
            )
