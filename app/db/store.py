from abc import ABC, abstractmethod
from typing import List, Optional

from models.records import ReminderRecord, ReminderUpdate, UserRecord


class ReminderStore(ABC):
    """Access to the reminders and users collections.

    Implementations raise whatever their client raises on connectivity or
    query errors; the processor decides which failures are fatal.
    """

    @abstractmethod
    async def list_enabled_reminders(self) -> List[ReminderRecord]:
        """Return every reminder whose enabled flag is true."""

    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        """Return the user with this id, or None if it does not exist."""

    @abstractmethod
    async def update_reminder(self, reminder_id: str, outcome: ReminderUpdate) -> None:
        """Write delivery outcome fields, leaving other fields untouched."""

    async def close(self) -> None:
        """Release client resources. Default is a no-op."""
