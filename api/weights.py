"""
Weights API Router
Endpoints for weight logs and trend analytics
"""

from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user, pagination_params, services
from api.schemas.common import PaginationInfo, MessageResponse
from api.schemas.weight import (
    WeightLogCreate,
    WeightLogUpdate,
    WeightLogResponse,
    WeightLogEnvelope,
    WeightLogList,
    TrendsResponse,
)
from engine import convert_weight
from services.auth_service import AuthenticatedUser


router = APIRouter(prefix="/weights", tags=["weights"])

UNIT_PATTERN = "^(kg|lbs|pounds)$"


def _to_response(weight, unit: Optional[str] = None) -> WeightLogResponse:
    response = WeightLogResponse.model_validate(weight)
    if unit:
        response.weight = round(convert_weight(weight.weight_kg, "kg", unit), 2)
        response.display_unit = unit
    return response


@router.get("/", response_model=WeightLogList)
async def list_weights(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    unit: Optional[str] = Query(None, pattern=UNIT_PATTERN, description="Also report weight in this unit"),
    sort_by: str = Query("logged_at", pattern="^(logged_at|weight_kg|created_at)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    pagination: dict = Depends(pagination_params),
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List the signed-in user's weight logs
    """
    weight_service = services.get_weight_service()

    weights, total = await weight_service.list_weights(
        user.id,
        start_date=start_date,
        end_date=end_date,
        sort_by=sort_by,
        sort_order=sort_order,
        offset=pagination["offset"],
        limit=pagination["limit"],
        db=db
    )

    return WeightLogList(
        weights=[_to_response(w, unit) for w in weights],
        pagination=PaginationInfo.build(pagination["page"], pagination["limit"], total)
    )


@router.get("/analytics/trends", response_model=TrendsResponse)
async def get_trends(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    unit: str = Query("kg", pattern=UNIT_PATTERN),
    period: str = Query("month", pattern="^(week|month|3months|6months|year)$"),
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Weight summary, trend direction, timeline and weekly averages
    """
    weight_service = services.get_weight_service()

    report = await weight_service.get_trends(
        user.id,
        unit=unit,
        period=period,
        start_date=start_date,
        end_date=end_date,
        db=db
    )
    return report.to_dict()


@router.post("/", response_model=WeightLogEnvelope, status_code=status.HTTP_201_CREATED)
async def create_weight(
    weight_data: WeightLogCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Record a weight measurement

    - **weight**: Value in `unit` (kg, lbs or pounds)
    - **logged_at**: Defaults to now
    """
    weight_service = services.get_weight_service()

    weight = await weight_service.create_weight(
        user.id,
        weight_data.model_dump(exclude_none=True),
        db=db
    )
    return WeightLogEnvelope(
        message="Weight log created successfully",
        weight=_to_response(weight, weight.unit)
    )


@router.get("/{weight_id}", response_model=WeightLogEnvelope)
async def get_weight(
    weight_id: str,
    unit: Optional[str] = Query(None, pattern=UNIT_PATTERN),
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    weight_service = services.get_weight_service()

    weight = await weight_service.get_weight(user.id, weight_id, db=db)
    return WeightLogEnvelope(weight=_to_response(weight, unit))


@router.put("/{weight_id}", response_model=WeightLogEnvelope)
async def update_weight(
    weight_id: str,
    update_data: WeightLogUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    weight_service = services.get_weight_service()

    weight = await weight_service.update_weight(
        user.id,
        weight_id,
        update_data.model_dump(exclude_unset=True),
        db=db
    )
    return WeightLogEnvelope(
        message="Weight log updated successfully",
        weight=_to_response(weight, weight.unit)
    )


@router.delete("/{weight_id}", response_model=MessageResponse)
async def delete_weight(
    weight_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    weight_service = services.get_weight_service()

    await weight_service.delete_weight(user.id, weight_id, db=db)
    return MessageResponse(message="Weight log deleted successfully")
