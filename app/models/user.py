from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from db.database import Base

class User(Base):
    """User model holding the delivery address for reminders."""
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    email = Column(String, nullable=False)
    name = Column(String, nullable=True)
    full_name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<User {self.id}: {self.email}>"
