from sqlalchemy import Column, String, Boolean, DateTime, JSON, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from db.database import Base

class Reminder(Base):
    """Reminder model for storing weekly study reminders."""
    __tablename__ = "reminders"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    enabled = Column(Boolean, default=True, index=True)
    days = Column(JSON, nullable=False, default=list)  # Weekday names, e.g. ["Monday", "friday"]
    time = Column(String, nullable=False)  # "HH:MM", 24-hour local time
    last_sent = Column(DateTime(timezone=True), nullable=True)  # Only advanced on successful delivery
    last_sent_status = Column(String, nullable=True)  # "success" or "failed"
    last_sent_error = Column(DateTime(timezone=True), nullable=True)  # Last failed attempt
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationship with User
    user = relationship("User", backref="reminders")

    def __repr__(self):
        return f"<Reminder {self.id}: {self.time} {self.days}>"
