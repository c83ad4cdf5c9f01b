"""
Pydantic schemas for Timesheet entity.
"""
from pydantic import BaseModel
from typing import Any


class TimesheetSave(BaseModel):
    """Schema for saving a month; checked by validate_timesheet_payload."""
    year: Any = None
    month: Any = None
    data: Any = None


class TimesheetResponse(BaseModel):
    """Stored document, or ``{"data": {}, "status": "new"}``."""
    data: Any
    status: str
