from datetime import datetime
from typing import Dict, List, Optional

from db.store import ReminderStore
from models.records import ReminderRecord, ReminderUpdate, UserRecord


class FixedClock:
    def __init__(self, now: datetime):
        self._now = now

    def now(self) -> datetime:
        return self._now


class FakeStore(ReminderStore):
    """In-memory store recording every call."""

    def __init__(
        self,
        reminders: Optional[List[ReminderRecord]] = None,
        users: Optional[Dict[str, UserRecord]] = None,
        fail_fetch: Optional[Exception] = None,
        fail_user_ids: Optional[Dict[str, Exception]] = None,
        fail_update_ids: Optional[Dict[str, Exception]] = None,
    ):
        self.reminders = reminders or []
        self.users = users or {}
        self.fail_fetch = fail_fetch
        self.fail_user_ids = fail_user_ids or {}
        self.fail_update_ids = fail_update_ids or {}
        self.updates: List[tuple] = []
        self.user_lookups: List[str] = []

    async def list_enabled_reminders(self) -> List[ReminderRecord]:
        if self.fail_fetch is not None:
            raise self.fail_fetch
        return [reminder for reminder in self.reminders if reminder.enabled]

    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        self.user_lookups.append(user_id)
        if user_id in self.fail_user_ids:
            raise self.fail_user_ids[user_id]
        return self.users.get(user_id)

    async def update_reminder(self, reminder_id: str, outcome: ReminderUpdate) -> None:
        if reminder_id in self.fail_update_ids:
            raise self.fail_update_ids[reminder_id]
        self.updates.append((reminder_id, outcome))
        for reminder in self.reminders:
            if reminder.id != reminder_id:
                continue
            reminder.last_sent_status = outcome.last_sent_status
            if outcome.last_sent is not None:
                reminder.last_sent = outcome.last_sent
            if outcome.last_sent_error is not None:
                reminder.last_sent_error = outcome.last_sent_error


class FakeEmailService:
    """Records send calls; fails for addresses listed in fail_for."""

    def __init__(self, fail_for: Optional[set] = None):
        self.fail_for = fail_for or set()
        self.calls: List[tuple] = []

    async def send_reminder_email(self, user_email, user_name, reminder_time) -> bool:
        self.calls.append((user_email, user_name, reminder_time))
        return user_email not in self.fail_for
