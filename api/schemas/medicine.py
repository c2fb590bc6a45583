"""
Medicine Schemas
Pydantic models for medicine requests and responses

Request bodies are type-only; field rules are enforced by the engine
validators so every violation is reported together.
"""

from typing import Optional, List, Dict, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from api.schemas.common import PaginationInfo


# ==================== REQUEST SCHEMAS ====================

class MedicineCreate(BaseModel):
    """Schema for creating a medicine"""
    name: Optional[str] = None
    dose: Optional[str] = None
    schedule_type: Optional[str] = None
    interval_minutes: Optional[int] = None
    interval_days: Optional[int] = None
    meal_timing: Optional[List[str]] = None
    instructions: Optional[str] = None
    notes: Optional[str] = None


class MedicineUpdate(MedicineCreate):
    """Partial update; unset fields keep their stored value"""
    active: Optional[bool] = None


# ==================== RESPONSE SCHEMAS ====================

class MedicineResponse(BaseModel):
    id: str
    user_id: str
    name: str
    dose: str
    schedule_type: str
    interval_minutes: Optional[int] = None
    interval_days: Optional[int] = None
    meal_timing: Optional[List[str]] = None
    instructions: Optional[str] = None
    notes: Optional[str] = None
    active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MedicineEnvelope(BaseModel):
    message: Optional[str] = None
    medicine: MedicineResponse


class MedicineList(BaseModel):
    medicines: List[MedicineResponse]
    pagination: PaginationInfo


class NextDoseResponse(BaseModel):
    """Next expected dose; `next_dose` shape depends on the schedule type"""
    medicine_id: str
    medicine_name: str
    next_dose: Dict[str, Any]
