"""
Timesheet model: one JSON document per user and month.
"""
from sqlalchemy import Column, String, Text, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import BaseModel
import enum


class TimesheetStatus(str, enum.Enum):
    """Timesheet status enumeration."""
    DRAFT = "draft"
    SUBMITTED = "submitted"


class Timesheet(BaseModel):
    """Monthly timesheet; ``month`` is zero-based (0 = January)."""
    __tablename__ = "timesheets"
    __table_args__ = (
        UniqueConstraint("user_id", "year", "month", name="uq_timesheets_user_year_month"),
    )

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    data = Column(Text, nullable=False, default="{}")  # JSON-serialized object
    status = Column(
        String(20),
        default=TimesheetStatus.DRAFT.value,
        server_default=TimesheetStatus.DRAFT.value,
        nullable=False,
    )

    # Relationships
    user = relationship("User", back_populates="timesheets")
