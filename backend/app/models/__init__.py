"""Models package - Import all models for SQLAlchemy registration."""
from app.models.user import User
from app.models.timesheet import Timesheet, TimesheetStatus

__all__ = [
    "User",
    "Timesheet",
    "TimesheetStatus",
]
