"""
Weight Service
Weight measurements stored in kilograms, and their trends
"""

import logging
from typing import Dict, List, Optional, Any, Tuple
from datetime import datetime, date
from sqlalchemy.orm import Session

from config import engine_config
from database import get_db_context
import models
from engine import (
    WeightRecord,
    TrendReport,
    validate_weight_log,
    parse_timestamp,
    convert_weight,
    trends,
    utcnow,
)
from services.errors import ValidationFailed, NotFound
from services.periods import resolve_window, day_start, day_after


logger = logging.getLogger(__name__)


WEIGHT_SORT_FIELDS = {
    "logged_at": models.WeightLog.logged_at,
    "weight_kg": models.WeightLog.weight_kg,
    "created_at": models.WeightLog.created_at,
}

WEIGHT_FIELDS = ("weight", "unit", "logged_at", "body_fat_percentage", "muscle_mass", "notes")


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


class WeightService:
    """
    Service for weight logs and analytics
    """

    def _owned_weight(self, session: Session, user_id: str, weight_id: str) -> models.WeightLog:
        weight = session.query(models.WeightLog).filter(
            models.WeightLog.id == weight_id,
            models.WeightLog.user_id == user_id
        ).first()

        if not weight:
            raise NotFound("Weight log not found")
        return weight

    async def list_weights(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        sort_by: str = "logged_at",
        sort_order: str = "desc",
        offset: int = 0,
        limit: int = 20,
        db: Optional[Session] = None
    ) -> Tuple[List[models.WeightLog], int]:
        """List a user's measurements"""
        def _list(session: Session) -> Tuple[List[models.WeightLog], int]:
            query = session.query(models.WeightLog).filter(
                models.WeightLog.user_id == user_id
            )

            if start_date:
                query = query.filter(models.WeightLog.logged_at >= day_start(start_date))
            if end_date:
                query = query.filter(models.WeightLog.logged_at < day_after(end_date))

            total = query.count()

            column = WEIGHT_SORT_FIELDS.get(sort_by, models.WeightLog.logged_at)
            ordering = column.asc() if sort_order == "asc" else column.desc()

            return query.order_by(ordering).offset(offset).limit(limit).all(), total

        if db:
            return _list(db)

        with get_db_context() as session:
            return _list(session)

    async def get_weight(
        self,
        user_id: str,
        weight_id: str,
        db: Optional[Session] = None
    ) -> models.WeightLog:
        def _get(session: Session) -> models.WeightLog:
            return self._owned_weight(session, user_id, weight_id)

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def create_weight(
        self,
        user_id: str,
        data: Dict[str, Any],
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> models.WeightLog:
        """
        Record a measurement

        The entered weight is converted to kilograms; the entered unit is kept
        so clients can display it back. A second measurement on the same day
        is allowed but logged.

        Raises:
            ValidationFailed: with every violated rule
        """
        now = now or utcnow()

        errors = validate_weight_log(data, now=now)
        if errors:
            raise ValidationFailed(errors, message="Invalid weight log data provided")

        unit = data["unit"].lower()
        logged_at = parse_timestamp(data["logged_at"]) if data.get("logged_at") is not None else now

        def _create(session: Session) -> models.WeightLog:
            day = logged_at.date()
            same_day = session.query(models.WeightLog).filter(
                models.WeightLog.user_id == user_id,
                models.WeightLog.logged_at >= day_start(day),
                models.WeightLog.logged_at < day_after(day)
            ).count()

            if same_day:
                logger.warning(f"User {user_id} already has {same_day} weight log(s) for {day.isoformat()}")

            weight = models.WeightLog(
                user_id=user_id,
                weight_kg=convert_weight(float(data["weight"]), unit, "kg"),
                unit=unit,
                logged_at=logged_at,
                body_fat_percentage=_optional_float(data.get("body_fat_percentage")),
                muscle_mass=_optional_float(data.get("muscle_mass")),
                notes=(data.get("notes") or "").strip() or None
            )

            session.add(weight)
            session.commit()
            session.refresh(weight)

            logger.info(f"Created weight log {weight.id} for user {user_id}")
            return weight

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def update_weight(
        self,
        user_id: str,
        weight_id: str,
        changes: Dict[str, Any],
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> models.WeightLog:
        """
        Partially update a measurement

        The stored entry is expressed in its entered unit, merged with the
        changes and validated as a whole before being written back in kg.
        """
        changes = {k: v for k, v in changes.items() if k in WEIGHT_FIELDS}

        def _update(session: Session) -> models.WeightLog:
            weight = self._owned_weight(session, user_id, weight_id)

            if not changes:
                raise ValidationFailed(["At least one field must be provided for update"])

            unit = weight.unit or "kg"
            merged = {
                "weight": convert_weight(weight.weight_kg, "kg", unit),
                "unit": unit,
                "logged_at": weight.logged_at,
                "body_fat_percentage": weight.body_fat_percentage,
                "muscle_mass": weight.muscle_mass,
                "notes": weight.notes,
            }
            merged.update(changes)

            errors = validate_weight_log(merged, now=now)
            if errors:
                raise ValidationFailed(errors, message="Invalid weight log data provided")

            new_unit = merged["unit"].lower()
            if "weight" in changes or "unit" in changes:
                weight.weight_kg = convert_weight(float(merged["weight"]), new_unit, "kg")
            weight.unit = new_unit
            if changes.get("logged_at") is not None:
                weight.logged_at = parse_timestamp(changes["logged_at"])
            if "body_fat_percentage" in changes:
                weight.body_fat_percentage = _optional_float(changes["body_fat_percentage"])
            if "muscle_mass" in changes:
                weight.muscle_mass = _optional_float(changes["muscle_mass"])
            if "notes" in changes:
                weight.notes = (changes["notes"] or "").strip() or None

            session.commit()
            session.refresh(weight)

            logger.info(f"Updated weight log {weight_id} for user {user_id}")
            return weight

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def delete_weight(
        self,
        user_id: str,
        weight_id: str,
        db: Optional[Session] = None
    ) -> bool:
        def _delete(session: Session) -> bool:
            weight = self._owned_weight(session, user_id, weight_id)
            session.delete(weight)
            session.commit()

            logger.info(f"Deleted weight log {weight_id} for user {user_id}")
            return True

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)

    async def get_trends(
        self,
        user_id: str,
        unit: str = "kg",
        period: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> TrendReport:
        """Weight analytics over a window, reported in `unit`"""
        window_start, window_end = resolve_window(
            period,
            start_date,
            end_date,
            now=now,
            default=engine_config.TRENDS_DEFAULT_PERIOD
        )

        def _analyze(session: Session) -> TrendReport:
            rows = session.query(models.WeightLog).filter(
                models.WeightLog.user_id == user_id,
                models.WeightLog.logged_at >= window_start,
                models.WeightLog.logged_at < window_end
            ).order_by(models.WeightLog.logged_at.asc()).all()

            return trends(
                [WeightRecord.from_row(row) for row in rows],
                window_start,
                window_end,
                display_unit=unit
            )

        if db:
            return _analyze(db)

        with get_db_context() as session:
            return _analyze(session)


# Singleton instance
weight_service = WeightService()
