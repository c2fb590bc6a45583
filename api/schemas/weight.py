"""
Weight Schemas
Pydantic models for weight logs and trend analytics
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from api.schemas.common import PaginationInfo


# ==================== REQUEST SCHEMAS ====================

class WeightLogCreate(BaseModel):
    """Weight in `unit`; stored converted to kilograms"""
    weight: Optional[float] = None
    unit: Optional[str] = "kg"
    logged_at: Optional[datetime] = None
    body_fat_percentage: Optional[float] = None
    muscle_mass: Optional[float] = None
    notes: Optional[str] = None


class WeightLogUpdate(WeightLogCreate):
    unit: Optional[str] = None


# ==================== RESPONSE SCHEMAS ====================

class WeightLogResponse(BaseModel):
    id: str
    user_id: str
    weight_kg: float
    unit: str
    logged_at: datetime
    body_fat_percentage: Optional[float] = None
    muscle_mass: Optional[float] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # Present when a display unit was requested
    weight: Optional[float] = None
    display_unit: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class WeightLogEnvelope(BaseModel):
    message: Optional[str] = None
    weight: WeightLogResponse


class WeightLogList(BaseModel):
    weights: List[WeightLogResponse]
    pagination: PaginationInfo


class TrendPeriod(BaseModel):
    start: str
    end: str


class TrendAnalytics(BaseModel):
    total_entries: int
    first_weight: Optional[float] = None
    last_weight: Optional[float] = None
    weight_change: float
    average_weight: float
    min_weight: Optional[float] = None
    max_weight: Optional[float] = None
    trend: str
    unit: str


class TimelineItem(BaseModel):
    id: Optional[str] = None
    weight: float
    logged_at: str
    notes: Optional[str] = None
    body_fat_percentage: Optional[float] = None
    muscle_mass: Optional[float] = None


class WeeklyAverageItem(BaseModel):
    week_start: str
    average_weight: float
    entry_count: int


class TrendsResponse(BaseModel):
    """Weight summary, trend and chart series"""
    period: TrendPeriod
    analytics: TrendAnalytics
    timeline: List[TimelineItem]
    weekly_averages: List[WeeklyAverageItem]
