"""
Timesheet store: point lookup and atomic create-or-replace per
(user, year, month).
"""
import json
import logging
from typing import Any, Dict
from sqlalchemy import func, insert, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.timesheet import Timesheet, TimesheetStatus

logger = logging.getLogger(__name__)

NEW_STATUS = "new"  # reported when no document exists yet

_KEY_COLUMNS = ["user_id", "year", "month"]


def get_timesheet(db: Session, user_id: int, year: int, month: int) -> Dict[str, Any]:
    """
    Get the stored document for a month.

    Returns:
        ``{"data": ..., "status": ...}``; ``{"data": {}, "status": "new"}``
        when nothing has been saved for that month yet.
    """
    timesheet = db.query(Timesheet).filter(
        Timesheet.user_id == user_id,
        Timesheet.year == year,
        Timesheet.month == month
    ).first()

    if not timesheet:
        return {"data": {}, "status": NEW_STATUS}

    return {"data": json.loads(timesheet.data), "status": timesheet.status}


def _native_upsert(dialect_name: str, values: Dict[str, Any]):
    """Build a single-statement upsert for dialects that have one."""
    if dialect_name in ("sqlite", "postgresql"):
        if dialect_name == "sqlite":
            from sqlalchemy.dialects.sqlite import insert as dialect_insert
        else:
            from sqlalchemy.dialects.postgresql import insert as dialect_insert
        stmt = dialect_insert(Timesheet).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=_KEY_COLUMNS,
            set_={
                "data": stmt.excluded.data,
                "status": stmt.excluded.status,
                "updated_at": func.now(),
            },
        )

    if dialect_name in ("mysql", "mariadb"):
        from sqlalchemy.dialects.mysql import insert as dialect_insert
        stmt = dialect_insert(Timesheet).values(**values)
        return stmt.on_duplicate_key_update(
            data=stmt.inserted.data,
            status=stmt.inserted.status,
            updated_at=func.now(),
        )

    return None


def upsert_timesheet(
    db: Session,
    user_id: int,
    year: int,
    month: int,
    data: Dict[str, Any]
) -> None:
    """
    Create or replace the document for (user, year, month) atomically.

    Every write stores status ``draft``, including over a submitted
    document.
    """
    values = {
        "user_id": user_id,
        "year": year,
        "month": month,
        "data": json.dumps(data, allow_nan=False),
        "status": TimesheetStatus.DRAFT.value,
    }

    stmt = _native_upsert(db.get_bind().dialect.name, values)
    if stmt is not None:
        db.execute(stmt)
        db.commit()
        return

    # No native upsert: insert, and on a key conflict update in the same transaction
    logger.debug(f"No native upsert for dialect {db.get_bind().dialect.name}")
    try:
        with db.begin_nested():
            db.execute(insert(Timesheet).values(**values))
    except IntegrityError:
        db.execute(
            update(Timesheet)
            .where(
                Timesheet.user_id == user_id,
                Timesheet.year == year,
                Timesheet.month == month
            )
            .values(data=values["data"], status=values["status"], updated_at=func.now())
        )
    db.commit()
