"""
Medicine Log Service
Recording intakes and analyzing adherence
"""

import logging
from typing import Dict, List, Optional, Any, Tuple
from datetime import datetime, date
from sqlalchemy.orm import Session

from config import settings, engine_config
from database import get_db_context
import models
from engine import (
    MedicineInput,
    IntakeRecord,
    AdherenceReport,
    validate_medicine_log,
    parse_timestamp,
    duplicate_window,
    find_duplicates,
    adherence,
    utcnow,
)
from services.errors import ValidationFailed, NotFound, DuplicateEntry
from services.periods import resolve_window, day_start, day_after


logger = logging.getLogger(__name__)


LOG_SORT_FIELDS = {
    "taken_at": models.MedicineLog.taken_at,
    "created_at": models.MedicineLog.created_at,
}

LOG_FIELDS = ("medicine_id", "taken_at", "dosage_taken", "notes")


def _clean_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value.strip() or None
    return value


class MedicineLogService:
    """
    Service for medicine intake logs
    """

    def __init__(self, duplicate_window_minutes: int = settings.DUPLICATE_LOG_WINDOW_MINUTES):
        self.duplicate_window_minutes = duplicate_window_minutes

    def _owned_medicine(self, session: Session, user_id: str, medicine_id: str) -> models.Medicine:
        medicine = session.query(models.Medicine).filter(
            models.Medicine.id == medicine_id,
            models.Medicine.user_id == user_id
        ).first()

        if not medicine:
            raise NotFound("Medicine not found")
        return medicine

    def _owned_log(self, session: Session, user_id: str, log_id: str) -> models.MedicineLog:
        log = session.query(models.MedicineLog).filter(
            models.MedicineLog.id == log_id,
            models.MedicineLog.user_id == user_id
        ).first()

        if not log:
            raise NotFound("Medicine log not found")
        return log

    async def list_logs(
        self,
        user_id: str,
        medicine_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        sort_by: str = "taken_at",
        sort_order: str = "desc",
        offset: int = 0,
        limit: int = 20,
        db: Optional[Session] = None
    ) -> Tuple[List[models.MedicineLog], int]:
        """List a user's intakes, newest first by default"""
        def _list(session: Session) -> Tuple[List[models.MedicineLog], int]:
            query = session.query(models.MedicineLog).filter(
                models.MedicineLog.user_id == user_id
            )

            if medicine_id:
                query = query.filter(models.MedicineLog.medicine_id == medicine_id)

            if start_date:
                query = query.filter(models.MedicineLog.taken_at >= day_start(start_date))
            if end_date:
                query = query.filter(models.MedicineLog.taken_at < day_after(end_date))

            total = query.count()

            column = LOG_SORT_FIELDS.get(sort_by, models.MedicineLog.taken_at)
            ordering = column.asc() if sort_order == "asc" else column.desc()

            return query.order_by(ordering).offset(offset).limit(limit).all(), total

        if db:
            return _list(db)

        with get_db_context() as session:
            return _list(session)

    async def get_log(
        self,
        user_id: str,
        log_id: str,
        db: Optional[Session] = None
    ) -> models.MedicineLog:
        """Get one intake or raise NotFound"""
        def _get(session: Session) -> models.MedicineLog:
            return self._owned_log(session, user_id, log_id)

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def create_log(
        self,
        user_id: str,
        data: Dict[str, Any],
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> models.MedicineLog:
        """
        Record an intake

        Args:
            user_id: Owner
            data: medicine_id, taken_at (defaults to now), dosage_taken, notes
            now: Reference time for validation
            db: Database session

        Raises:
            ValidationFailed: invalid fields
            NotFound: the medicine does not belong to the user
            DuplicateEntry: an intake of the same medicine lies within the
                duplicate window
        """
        now = now or utcnow()

        errors = validate_medicine_log(data, now=now)
        if errors:
            raise ValidationFailed(errors, message="Invalid medicine log data provided")

        taken_at = parse_timestamp(data["taken_at"]) if data.get("taken_at") is not None else now

        def _create(session: Session) -> models.MedicineLog:
            medicine = self._owned_medicine(session, user_id, data["medicine_id"])

            start, end = duplicate_window(taken_at, self.duplicate_window_minutes)
            nearby = session.query(models.MedicineLog).filter(
                models.MedicineLog.user_id == user_id,
                models.MedicineLog.medicine_id == medicine.id,
                models.MedicineLog.taken_at >= start,
                models.MedicineLog.taken_at <= end
            ).all()

            if find_duplicates(nearby, taken_at, self.duplicate_window_minutes):
                logger.warning(
                    f"Duplicate intake of medicine {medicine.id} for user {user_id} at {taken_at.isoformat()}"
                )
                raise DuplicateEntry(
                    f"This medicine was already logged within {self.duplicate_window_minutes} minutes of that time"
                )

            log = models.MedicineLog(
                user_id=user_id,
                medicine_id=medicine.id,
                taken_at=taken_at,
                dosage_taken=_clean_text(data.get("dosage_taken")),
                notes=_clean_text(data.get("notes"))
            )

            session.add(log)
            session.commit()
            session.refresh(log)

            logger.info(f"Logged intake {log.id} of medicine {medicine.id} for user {user_id}")
            return log

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def update_log(
        self,
        user_id: str,
        log_id: str,
        changes: Dict[str, Any],
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> models.MedicineLog:
        """Partially update an intake; at least one field is required"""
        changes = {k: v for k, v in changes.items() if k in LOG_FIELDS}

        def _update(session: Session) -> models.MedicineLog:
            log = self._owned_log(session, user_id, log_id)

            if not changes:
                raise ValidationFailed(["At least one field must be provided for update"])

            errors = validate_medicine_log(changes, now=now, require_medicine=False)
            if errors:
                raise ValidationFailed(errors, message="Invalid medicine log data provided")

            if changes.get("medicine_id"):
                log.medicine_id = self._owned_medicine(session, user_id, changes["medicine_id"]).id
            if changes.get("taken_at") is not None:
                log.taken_at = parse_timestamp(changes["taken_at"])
            if "dosage_taken" in changes:
                log.dosage_taken = _clean_text(changes["dosage_taken"])
            if "notes" in changes:
                log.notes = _clean_text(changes["notes"])

            session.commit()
            session.refresh(log)

            logger.info(f"Updated intake {log_id} for user {user_id}")
            return log

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)

    async def delete_log(
        self,
        user_id: str,
        log_id: str,
        db: Optional[Session] = None
    ) -> bool:
        def _delete(session: Session) -> bool:
            log = self._owned_log(session, user_id, log_id)
            session.delete(log)
            session.commit()

            logger.info(f"Deleted intake {log_id} for user {user_id}")
            return True

        if db:
            return _delete(db)

        with get_db_context() as session:
            return _delete(session)

    async def get_adherence(
        self,
        user_id: str,
        medicine_id: Optional[str] = None,
        period: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        include_idle: bool = False,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> AdherenceReport:
        """
        Adherence over a window

        Args:
            user_id: Owner
            medicine_id: Restrict to one medicine
            period: week, month or year (ignored when both dates are given)
            start_date: Window start day
            end_date: Window end day
            include_idle: Also report medicines without intakes
            now: Window end for period-based windows
            db: Database session
        """
        window_start, window_end = resolve_window(
            period,
            start_date,
            end_date,
            now=now,
            default=engine_config.ADHERENCE_DEFAULT_PERIOD
        )

        def _analyze(session: Session) -> AdherenceReport:
            medicines_query = session.query(models.Medicine).filter(
                models.Medicine.user_id == user_id
            )
            logs_query = session.query(models.MedicineLog).filter(
                models.MedicineLog.user_id == user_id,
                models.MedicineLog.taken_at >= window_start,
                models.MedicineLog.taken_at < window_end
            )

            if medicine_id:
                medicines_query = medicines_query.filter(models.Medicine.id == medicine_id)
                logs_query = logs_query.filter(models.MedicineLog.medicine_id == medicine_id)

            medicines = [MedicineInput.from_row(m) for m in medicines_query.all()]
            logs = [
                IntakeRecord.from_row(log)
                for log in logs_query.order_by(models.MedicineLog.taken_at.asc()).all()
            ]

            logger.debug(f"Adherence for user {user_id}: {len(medicines)} medicines, {len(logs)} intakes")
            return adherence(medicines, logs, window_start, window_end, include_idle=include_idle)

        if db:
            return _analyze(db)

        with get_db_context() as session:
            return _analyze(session)


# Singleton instance
medicine_log_service = MedicineLogService()
