import logging
from datetime import datetime
from typing import Iterable, Optional, Tuple, Union

from models.records import ReminderRecord, Weekday

logger = logging.getLogger(__name__)

# Minutes past the target hour during which a reminder may still go out
SEND_WINDOW_MINUTES = 15


def should_send_today(days: Optional[Iterable[str]], now: datetime) -> bool:
    """
    Check whether a reminder is active on the current weekday.

    Args:
        days: Weekday names, any case. Unknown names never match.
        now: Current local time

    Returns:
        True if today's weekday is one of the days
    """
    if not days:
        return False

    today = Weekday.from_datetime(now)
    return any(Weekday.parse(day) == today for day in days)


def parse_reminder_time(reminder_time: str) -> Optional[Tuple[int, int]]:
    """Parse "HH:MM" (seconds tolerated) into (hour, minute), or None if malformed."""
    if not isinstance(reminder_time, str):
        return None

    parts = reminder_time.strip().split(":")
    if len(parts) not in (2, 3):
        return None

    try:
        hour, minute = int(parts[0]), int(parts[1])
    except ValueError:
        return None

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        return None
    return hour, minute


def is_time_to_send(reminder_time: str, now: datetime) -> bool:
    """
    Check whether now falls inside the reminder's send window.

    The window opens at the top of the target hour and closes
    SEND_WINDOW_MINUTES later; the target minute itself is not used.
    """
    parsed = parse_reminder_time(reminder_time)
    if parsed is None:
        logger.debug(f"Ignoring malformed reminder time {reminder_time!r}")
        return False

    reminder_hour, _ = parsed
    return now.hour == reminder_hour and now.minute <= SEND_WINDOW_MINUTES


def _coerce_timestamp(value: Union[datetime, str]) -> Optional[datetime]:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        try:
            # fromisoformat only accepts a trailing "Z" from Python 3.11 on
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return None


def was_sent_today(last_sent: Optional[Union[datetime, str]], now: datetime) -> bool:
    """
    Check whether last_sent falls on today's calendar date.

    Aware timestamps are converted into now's frame first; naive ones are
    taken as local time. Missing or unparseable values count as never sent.
    """
    if not last_sent:
        return False

    sent_at = _coerce_timestamp(last_sent)
    if sent_at is None:
        logger.warning(f"Unparseable lastSent value {last_sent!r}, treating as never sent")
        return False

    if sent_at.tzinfo is not None:
        if now.tzinfo is not None:
            sent_at = sent_at.astimezone(now.tzinfo)
        else:
            sent_at = sent_at.astimezone().replace(tzinfo=None)

    return sent_at.date() == now.date()


def is_due(reminder: ReminderRecord, now: datetime) -> bool:
    """A reminder is due when its day and time match and it has not gone out today."""
    if not should_send_today(reminder.days, now):
        return False

    if not is_time_to_send(reminder.time, now):
        return False

    if was_sent_today(reminder.last_sent, now):
        logger.info(f"Already sent reminder {reminder.id} today")
        return False

    return True
