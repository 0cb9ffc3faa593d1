from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """Anything that can tell the processor what time it is."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Host wall clock, in local time with the local UTC offset attached."""

    def now(self) -> datetime:
        return datetime.now().astimezone()
