import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_NAME = "Student"


class Weekday(enum.IntEnum):
    """Day of week numbered from Sunday, as reminders store them."""
    UNKNOWN = -1
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def parse(cls, name: Any) -> "Weekday":
        """Map a weekday name (any case) to a Weekday, UNKNOWN if unrecognised."""
        if not isinstance(name, str):
            return cls.UNKNOWN
        try:
            member = cls[name.strip().upper()]
        except KeyError:
            return cls.UNKNOWN
        return member

    @classmethod
    def from_datetime(cls, moment: datetime) -> "Weekday":
        # isoweekday: Monday=1 .. Sunday=7
        return cls(moment.isoweekday() % 7)


class DeliveryStatus(str, enum.Enum):
    SUCCESS = "success"
    FAILED = "failed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> Optional["DeliveryStatus"]:
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            logger.warning(f"Unrecognised delivery status: {value!r}")
            return cls.UNKNOWN


@dataclass
class ReminderRecord:
    """A reminder as read from the store, independent of the backend."""
    id: str
    user_id: Optional[str]
    enabled: bool = True
    days: List[str] = field(default_factory=list)
    time: str = ""
    last_sent: Optional[Union[datetime, str]] = None
    last_sent_status: Optional[DeliveryStatus] = None
    last_sent_error: Optional[Union[datetime, str]] = None

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "ReminderRecord":
        """Build a record from a camelCase document (Firestore layout)."""
        days = data.get("days") or []
        if not isinstance(days, (list, tuple)):
            days = []
        return cls(
            id=doc_id,
            user_id=data.get("userId"),
            enabled=bool(data.get("enabled", False)),
            days=list(days),
            time=data.get("time") or "",
            last_sent=data.get("lastSent"),
            last_sent_status=DeliveryStatus.parse(data.get("lastSentStatus")),
            last_sent_error=data.get("lastSentError"),
        )


@dataclass
class UserRecord:
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    full_name: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.full_name or DEFAULT_DISPLAY_NAME

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "UserRecord":
        return cls(
            id=doc_id,
            email=data.get("email"),
            name=data.get("name"),
            full_name=data.get("fullName"),
        )


@dataclass
class ReminderUpdate:
    """Delivery outcome fields written back onto a reminder."""
    last_sent_status: DeliveryStatus
    last_sent: Optional[datetime] = None
    last_sent_error: Optional[datetime] = None

    @classmethod
    def success(cls, now: datetime) -> "ReminderUpdate":
        return cls(last_sent_status=DeliveryStatus.SUCCESS, last_sent=now)

    @classmethod
    def failure(cls, now: datetime) -> "ReminderUpdate":
        return cls(last_sent_status=DeliveryStatus.FAILED, last_sent_error=now)

    def to_document(self) -> Dict[str, Any]:
        """camelCase fields, timestamps as ISO-8601 strings. Unset fields are omitted."""
        fields: Dict[str, Any] = {"lastSentStatus": self.last_sent_status.value}
        if self.last_sent is not None:
            fields["lastSent"] = self.last_sent.isoformat()
        if self.last_sent_error is not None:
            fields["lastSentError"] = self.last_sent_error.isoformat()
        return fields
