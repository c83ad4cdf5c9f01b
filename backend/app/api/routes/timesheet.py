"""
Timesheet routes: read and save one month for the logged-in user.
"""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.api.dependencies import api_rate_limit, get_current_session
from app.core.errors import InternalError
from app.core.sessions import SessionData
from app.core.validation import parse_period, validate_timesheet_payload
from app.db.session import get_db
from app.schemas.timesheet import TimesheetResponse, TimesheetSave
from app.schemas.user import MessageResponse
from app.services import timesheet_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/timesheet",
    tags=["timesheet"],
    dependencies=[Depends(api_rate_limit)]
)


@router.get("/{year}/{month}", response_model=TimesheetResponse)
async def get_timesheet(
    year: str,
    month: str,
    session: SessionData = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Get the timesheet for a month (``month`` is 0-11)."""
    year_value, month_value = parse_period(year, month)

    try:
        return timesheet_service.get_timesheet(db, session.user_id, year_value, month_value)
    except SQLAlchemyError:
        logger.exception("Database error while reading timesheet")
        raise InternalError("Database error")


@router.post("", response_model=MessageResponse)
async def save_timesheet(
    payload: TimesheetSave,
    session: SessionData = Depends(get_current_session),
    db: Session = Depends(get_db)
):
    """Create or replace the timesheet for a month."""
    year, month, data = validate_timesheet_payload(payload.year, payload.month, payload.data)

    try:
        timesheet_service.upsert_timesheet(db, session.user_id, year, month, data)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Database error while saving timesheet")
        raise InternalError("Failed to save timesheet")

    return MessageResponse(message="Timesheet saved")
