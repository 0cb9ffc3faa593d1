import logging
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from services.reminder_service import ReminderProcessor

logger = logging.getLogger(__name__)

JOB_ID = "process_reminders"

class ReminderScheduler:
    """Class to run reminder processing cycles on a fixed interval."""

    def __init__(self, processor: ReminderProcessor, interval_minutes: int = 5):
        """
        Initialize the scheduler.

        Args:
            processor: Processor whose cycle is run on every tick
            interval_minutes: Minutes between cycles
        """
        if interval_minutes < 1:
            raise ValueError("interval_minutes must be >= 1")

        self.processor = processor
        self.interval_minutes = interval_minutes
        self.scheduler = AsyncIOScheduler()

    async def run_cycle(self):
        """Run one processing cycle and log its summary."""
        try:
            result = await self.processor.process_reminders()
        except Exception as e:
            logger.error(f"Error in scheduled reminder processing: {str(e)}")
            return

        if not result.get("success"):
            logger.error(f"Scheduled reminder processing failed: {result.get('error')}")

    def start(self):
        """Start the scheduler."""
        # max_instances=1: a slow cycle makes the next tick skip rather than overlap
        self.scheduler.add_job(
            self.run_cycle,
            IntervalTrigger(minutes=self.interval_minutes),
            id=JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

        if not self.scheduler.running:
            self.scheduler.start()
            logger.info(f"Reminder scheduler started (every {self.interval_minutes} minutes)")

    def shutdown(self):
        """Shutdown the scheduler."""
        if self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Reminder scheduler shutdown")

def setup_scheduler(processor: ReminderProcessor, interval_minutes: int = 5) -> ReminderScheduler:
    """
    Set up the reminder scheduler.

    Args:
        processor: Reminder processor
        interval_minutes: Minutes between cycles

    Returns:
        Configured ReminderScheduler
    """
    return ReminderScheduler(processor, interval_minutes)
