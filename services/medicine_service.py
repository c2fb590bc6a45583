"""
Medicine Service
Business logic for a user's medicines and their next-dose schedule
"""

import logging
from typing import Dict, List, Optional, Any, Tuple
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import or_

from database import get_db_context
import models
from engine import (
    ScheduleType,
    MedicineInput,
    IntakeRecord,
    NextDoseInfo,
    validate_medicine,
    next_dose,
)
from services.errors import ValidationFailed, NotFound


logger = logging.getLogger(__name__)


# Columns a client may sort by
MEDICINE_SORT_FIELDS = {
    "name": models.Medicine.name,
    "created_at": models.Medicine.created_at,
    "dose": models.Medicine.dose,
    "schedule_type": models.Medicine.schedule_type,
}

MEDICINE_FIELDS = (
    "name",
    "dose",
    "schedule_type",
    "interval_minutes",
    "interval_days",
    "meal_timing",
    "instructions",
    "notes",
)


def _normalize(data: Dict[str, Any]) -> Dict[str, Any]:
    """Trim text and keep only the active schedule variant's fields"""
    values = {key: data.get(key) for key in MEDICINE_FIELDS}

    for key in ("name", "dose", "instructions", "notes"):
        if isinstance(values[key], str):
            values[key] = values[key].strip() or None

    if isinstance(values["schedule_type"], ScheduleType):
        values["schedule_type"] = values["schedule_type"].value

    if values["schedule_type"] == ScheduleType.INTERVAL.value:
        values["meal_timing"] = None
    else:
        values["interval_minutes"] = None
        values["interval_days"] = None
        if values["meal_timing"] is not None:
            values["meal_timing"] = [getattr(t, "value", t) for t in values["meal_timing"]]

    return values


class MedicineService:
    """
    Service for medicine-related operations
    """

    async def list_medicines(
        self,
        user_id: str,
        search: Optional[str] = None,
        schedule_type: Optional[str] = None,
        active: Optional[bool] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        offset: int = 0,
        limit: int = 20,
        db: Optional[Session] = None
    ) -> Tuple[List[models.Medicine], int]:
        """
        List a user's medicines

        Returns:
            (page of medicines, total matching count)
        """
        def _list(session: Session) -> Tuple[List[models.Medicine], int]:
            query = session.query(models.Medicine).filter(
                models.Medicine.user_id == user_id
            )

            if search:
                pattern = f"%{search.strip()}%"
                query = query.filter(or_(
                    models.Medicine.name.ilike(pattern),
                    models.Medicine.dose.ilike(pattern)
                ))

            if schedule_type:
                query = query.filter(models.Medicine.schedule_type == schedule_type)

            if active is not None:
                query = query.filter(models.Medicine.active == active)

            total = query.count()

            column = MEDICINE_SORT_FIELDS.get(sort_by, models.Medicine.created_at)
            ordering = column.asc() if sort_order == "asc" else column.desc()

            medicines = query.order_by(ordering).offset(offset).limit(limit).all()
            return medicines, total

        if db:
            return _list(db)

        with get_db_context() as session:
            return _list(session)

    async def get_medicine(
        self,
        user_id: str,
        medicine_id: str,
        db: Optional[Session] = None
    ) -> models.Medicine:
        """Get one of the user's medicines or raise NotFound"""
        def _get(session: Session) -> models.Medicine:
            medicine = session.query(models.Medicine).filter(
                models.Medicine.id == medicine_id,
                models.Medicine.user_id == user_id
            ).first()

            if not medicine:
                raise NotFound("Medicine not found")
            return medicine

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def create_medicine(
        self,
        user_id: str,
        data: Dict[str, Any],
        db: Optional[Session] = None
    ) -> models.Medicine:
        """
        Create a medicine after validating its schedule

        Args:
            user_id: Owner
            data: name, dose, schedule_type, interval_minutes, interval_days,
                meal_timing, instructions, notes
            db: Database session

        Raises:
            ValidationFailed: with every violated rule
        """
        errors = validate_medicine(data)
        if errors:
            raise ValidationFailed(errors, message="Invalid medicine data provided")

        def _create(session: Session) -> models.Medicine:
            medicine = models.Medicine(user_id=user_id, active=True, **_normalize(data))

            session.add(medicine)
            session.commit()
            session.refresh(medicine)

            logger.info(f"Created medicine {medicine.id} ({medicine.name}) for user {user_id}")
            return medicine

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def update_medicine(
        self,
        user_id: str,
        medicine_id: str,
        changes: Dict[str, Any],
        db: Optional[Session] = None
    ) -> models.Medicine:
        """
        Apply a partial update

        The changes are merged over the stored medicine and the result is
        validated as a whole, so switching schedule type must supply the new
        variant's fields. The previous variant's fields are cleared.
        """
        def _update(session: Session) -> models.Medicine:
            medicine = session.query(models.Medicine).filter(
                models.Medicine.id == medicine_id,
                models.Medicine.user_id == user_id
            ).first()

            if not medicine:
                raise NotFound("Medicine not found")

            if not changes:
                raise ValidationFailed(["At least one field must be provided for update"])

            merged = {key: getattr(medicine, key) for key in MEDICINE_FIELDS}
            merged.update({k: v for k, v in changes.items() if k in MEDICINE_FIELDS})

            errors = validate_medicine(merged)
            if errors:
                raise ValidationFailed(errors, message="Invalid medicine data provided")

            for key, value in _normalize(merged).items():
                setattr(medicine, key, value)

            if "active" in changes and changes["active"] is not None:
                medicine.active = bool(changes["active"])

            session.commit()
            session.refresh(medicine)

            logger.info(f"Updated medicine {medicine_id} for user {user_id}")
            return medicine

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def delete_medicine(
        self,
        user_id: str,
        medicine_id: str,
        db: Optional[Session] = None
    ) -> bool:
        """Delete a medicine together with its logs"""
        def _delete(session: Session) -> bool:
            medicine = session.query(models.Medicine).filter(
                models.Medicine.id == medicine_id,
                models.Medicine.user_id == user_id
            ).first()

            if not medicine:
                raise NotFound("Medicine not found")

            session.delete(medicine)
            session.commit()

            logger.info(f"Deleted medicine {medicine_id} for user {user_id}")
            return True

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)

    async def get_next_dose(
        self,
        user_id: str,
        medicine_id: str,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> NextDoseInfo:
        """Next expected dose from the most recent intake"""
        def _next(session: Session) -> NextDoseInfo:
            medicine = session.query(models.Medicine).filter(
                models.Medicine.id == medicine_id,
                models.Medicine.user_id == user_id
            ).first()

            if not medicine:
                raise NotFound("Medicine not found")

            last_log = session.query(models.MedicineLog).filter(
                models.MedicineLog.medicine_id == medicine_id,
                models.MedicineLog.user_id == user_id
            ).order_by(models.MedicineLog.taken_at.desc()).first()

            return next_dose(
                MedicineInput.from_row(medicine),
                IntakeRecord.from_row(last_log) if last_log else None,
                now=now
            )

        if db:
            return _next(db)

        with get_db_context() as session:
            return _next(session)


# Singleton instance
medicine_service = MedicineService()
