import asyncio

import pytest
from apscheduler.triggers.interval import IntervalTrigger

from scheduler.reminder import JOB_ID, ReminderScheduler, setup_scheduler


class StubProcessor:
    def __init__(self, result=None, error=None):
        self.calls = 0
        self.result = result or {"success": True, "processed": 0, "sent": 0}
        self.error = error

    async def process_reminders(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.result


def test_run_cycle_invokes_processor():
    processor = StubProcessor()

    asyncio.run(setup_scheduler(processor).run_cycle())

    assert processor.calls == 1


def test_run_cycle_swallows_processor_errors():
    processor = StubProcessor(error=RuntimeError("boom"))

    asyncio.run(ReminderScheduler(processor).run_cycle())

    assert processor.calls == 1


def test_start_registers_interval_job():
    async def scenario():
        reminder_scheduler = ReminderScheduler(StubProcessor(), interval_minutes=3)
        reminder_scheduler.start()
        try:
            job = reminder_scheduler.scheduler.get_job(JOB_ID)
            return job, reminder_scheduler.scheduler.running
        finally:
            reminder_scheduler.shutdown()

    job, running = asyncio.run(scenario())

    assert running is True
    assert isinstance(job.trigger, IntervalTrigger)
    assert job.trigger.interval.total_seconds() == 180
    assert job.max_instances == 1


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        ReminderScheduler(StubProcessor(), interval_minutes=0)
