import logging
from typing import List, Optional
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from db.store import ReminderStore
from models.records import DeliveryStatus, ReminderRecord, ReminderUpdate, UserRecord
from models.reminder import Reminder
from models.user import User

logger = logging.getLogger(__name__)

class SQLReminderStore(ReminderStore):
    """Reminder store backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker, engine: Optional[AsyncEngine] = None):
        """
        Initialize the store.

        Args:
            session_factory: Async session maker used for every operation
            engine: Engine to dispose on close, if this store owns it
        """
        self.session_factory = session_factory
        self.engine = engine

    async def list_enabled_reminders(self) -> List[ReminderRecord]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(Reminder).where(Reminder.enabled == True)
            )
            reminders = result.scalars().all()

        return [self._to_record(reminder) for reminder in reminders]

    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(User).where(User.id == user_id)
            )
            user = result.scalars().first()

        if not user:
            return None

        return UserRecord(
            id=user.id,
            email=user.email,
            name=user.name,
            full_name=user.full_name,
        )

    async def update_reminder(self, reminder_id: str, outcome: ReminderUpdate) -> None:
        values = {"last_sent_status": outcome.last_sent_status.value}
        if outcome.last_sent is not None:
            values["last_sent"] = outcome.last_sent
        if outcome.last_sent_error is not None:
            values["last_sent_error"] = outcome.last_sent_error

        async with self.session_factory() as session:
            result = await session.execute(
                update(Reminder).where(Reminder.id == reminder_id).values(**values)
            )
            await session.commit()

        if result.rowcount == 0:
            logger.warning(f"Reminder {reminder_id} disappeared before its status could be saved")

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()

    @staticmethod
    def _to_record(reminder: Reminder) -> ReminderRecord:
        days = reminder.days if isinstance(reminder.days, list) else []
        return ReminderRecord(
            id=reminder.id,
            user_id=reminder.user_id,
            enabled=bool(reminder.enabled),
            days=list(days),
            time=reminder.time or "",
            last_sent=reminder.last_sent,
            last_sent_status=DeliveryStatus.parse(reminder.last_sent_status),
            last_sent_error=reminder.last_sent_error,
        )
