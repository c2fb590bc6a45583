"""
Database Models
SQLAlchemy ORM models for MedTracker
"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, Integer, DateTime, ForeignKey, Text, JSON, Index, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime, timezone

from database import Base
from config import TableNames


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ==================== MODELS ====================

class Medicine(Base):
    """Medicine with an interval or meal-based schedule"""
    __tablename__ = TableNames.MEDICINES

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    dose = Column(String(50), nullable=False)  # e.g., "10mg", "2 tablets"

    # Schedule: interval fields iff "interval", meal_timing iff "meal_based"
    schedule_type = Column(String(20), nullable=False)
    interval_minutes = Column(Integer)
    interval_days = Column(Integer)
    meal_timing = Column(JSON)  # ["before_meal", "with_meal", ...]

    instructions = Column(Text)
    notes = Column(Text)

    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    logs = relationship(
        "MedicineLog",
        back_populates="medicine",
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint("schedule_type IN ('interval', 'meal_based')", name="medicines_schedule_type_check"),
        Index("ix_medicines_user_active", "user_id", "active"),
    )


class MedicineLog(Base):
    """A recorded medicine intake"""
    __tablename__ = TableNames.MEDICINE_LOGS

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), nullable=False, index=True)
    medicine_id = Column(
        String(36),
        ForeignKey(f"{TableNames.MEDICINES}.id", ondelete="CASCADE"),
        nullable=False
    )

    taken_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    dosage_taken = Column(String(100))  # Actual dose if different from prescribed
    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    medicine = relationship("Medicine", back_populates="logs")

    __table_args__ = (
        Index("ix_medicine_logs_user_taken", "user_id", "taken_at"),
        Index("ix_medicine_logs_medicine_taken", "medicine_id", "taken_at"),
    )


class WeightLog(Base):
    """A weight measurement, stored in kilograms"""
    __tablename__ = TableNames.WEIGHT_LOGS

    id = Column(String(36), primary_key=True, default=_uuid)
    user_id = Column(String(36), nullable=False, index=True)

    weight_kg = Column(Float, nullable=False)
    unit = Column(String(10), nullable=False, default="kg")  # Unit the user entered
    logged_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    body_fat_percentage = Column(Float)
    muscle_mass = Column(Float)
    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), default=_utcnow)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("weight_kg > 0 AND weight_kg <= 1000", name="weight_logs_weight_check"),
        CheckConstraint("unit IN ('kg', 'lbs', 'pounds')", name="weight_logs_unit_check"),
        Index("ix_weight_logs_user_logged", "user_id", "logged_at"),
    )
