"""
User model - people who take or author assessments.

Users are owned by the external user directory (registration and
authentication live elsewhere); the grading core only reads them.
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, Text, DateTime, String
from sqlalchemy.orm import relationship
from app.database import Base


class User(Base):
    """SQLAlchemy model for the users table."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
                doc="Unique user identifier")
    name = Column(Text, nullable=False,
                  doc="Display name shown on instructor reports")
    email = Column(Text, nullable=True)
    role = Column(String(32), nullable=False, default="Student",
                  doc="Student | Instructor")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    results = relationship("Result", back_populates="user")

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', role='{self.role}')>"
