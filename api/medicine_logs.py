"""
Medicine Logs API Router
Endpoints for intake logging and adherence analytics
"""

from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user, pagination_params, services
from api.schemas.common import PaginationInfo, MessageResponse
from api.schemas.medicine_log import (
    MedicineLogCreate,
    MedicineLogUpdate,
    MedicineLogResponse,
    MedicineLogEnvelope,
    MedicineLogList,
    AdherenceResponse,
)
from services.auth_service import AuthenticatedUser


router = APIRouter(prefix="/medicine-logs", tags=["medicine-logs"])


@router.get("/", response_model=MedicineLogList)
async def list_logs(
    medicine_id: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    sort_by: str = Query("taken_at", pattern="^(taken_at|created_at)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    pagination: dict = Depends(pagination_params),
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List the signed-in user's intakes
    """
    log_service = services.get_medicine_log_service()

    logs, total = await log_service.list_logs(
        user.id,
        medicine_id=medicine_id,
        start_date=start_date,
        end_date=end_date,
        sort_by=sort_by,
        sort_order=sort_order,
        offset=pagination["offset"],
        limit=pagination["limit"],
        db=db
    )

    return MedicineLogList(
        logs=[MedicineLogResponse.model_validate(log) for log in logs],
        pagination=PaginationInfo.build(pagination["page"], pagination["limit"], total)
    )


@router.get("/analytics/adherence", response_model=AdherenceResponse)
async def get_adherence(
    medicine_id: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    period: str = Query("week", pattern="^(week|month|year)$"),
    include_idle: bool = Query(False, description="Report medicines with no intakes"),
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Adherence per medicine over a period or explicit date range
    """
    log_service = services.get_medicine_log_service()

    report = await log_service.get_adherence(
        user.id,
        medicine_id=medicine_id,
        period=period,
        start_date=start_date,
        end_date=end_date,
        include_idle=include_idle,
        db=db
    )
    return report.to_dict()


@router.post("/", response_model=MedicineLogEnvelope, status_code=status.HTTP_201_CREATED)
async def create_log(
    log_data: MedicineLogCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Record an intake

    - **medicine_id**: One of the user's medicines
    - **taken_at**: Defaults to now; not in the future, not older than a year
    """
    log_service = services.get_medicine_log_service()

    log = await log_service.create_log(
        user.id,
        log_data.model_dump(exclude_none=True),
        db=db
    )
    return MedicineLogEnvelope(
        message="Medicine intake logged successfully",
        log=MedicineLogResponse.model_validate(log)
    )


@router.get("/{log_id}", response_model=MedicineLogEnvelope)
async def get_log(
    log_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    log_service = services.get_medicine_log_service()

    log = await log_service.get_log(user.id, log_id, db=db)
    return MedicineLogEnvelope(log=MedicineLogResponse.model_validate(log))


@router.put("/{log_id}", response_model=MedicineLogEnvelope)
async def update_log(
    log_id: str,
    update_data: MedicineLogUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    log_service = services.get_medicine_log_service()

    log = await log_service.update_log(
        user.id,
        log_id,
        update_data.model_dump(exclude_unset=True),
        db=db
    )
    return MedicineLogEnvelope(
        message="Medicine log updated successfully",
        log=MedicineLogResponse.model_validate(log)
    )


@router.delete("/{log_id}", response_model=MessageResponse)
async def delete_log(
    log_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    log_service = services.get_medicine_log_service()

    await log_service.delete_log(user.id, log_id, db=db)
    return MessageResponse(message="Medicine log deleted successfully")
