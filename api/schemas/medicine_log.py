"""
Medicine Log Schemas
Pydantic models for intake logging and adherence analytics
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from api.schemas.common import PaginationInfo


# ==================== REQUEST SCHEMAS ====================

class MedicineLogCreate(BaseModel):
    """Schema for recording an intake; taken_at defaults to now"""
    medicine_id: Optional[str] = None
    taken_at: Optional[datetime] = None
    dosage_taken: Optional[str] = None
    notes: Optional[str] = None


class MedicineLogUpdate(MedicineLogCreate):
    pass


# ==================== RESPONSE SCHEMAS ====================

class MedicineLogResponse(BaseModel):
    id: str
    user_id: str
    medicine_id: str
    taken_at: datetime
    dosage_taken: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MedicineLogEnvelope(BaseModel):
    message: Optional[str] = None
    log: MedicineLogResponse


class MedicineLogList(BaseModel):
    logs: List[MedicineLogResponse]
    pagination: PaginationInfo


class AdherencePeriod(BaseModel):
    start: str
    end: str
    total_days: int


class MedicineAdherenceItem(BaseModel):
    medicine_id: str
    medicine_name: str
    schedule_type: str
    interval_minutes: Optional[int] = None
    total_taken: int
    expected_doses: int
    days_active: int
    total_days: int
    adherence_rate: float


class DailyStatItem(BaseModel):
    date: str
    total_taken: int


class AdherenceResponse(BaseModel):
    """Adherence per medicine plus daily intake totals"""
    period: AdherencePeriod
    medicines: List[MedicineAdherenceItem]
    daily_stats: List[DailyStatItem]
