"""
Medicines API Router
Endpoints for medicine management and next-dose lookup
"""

from typing import Optional
from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, get_current_user, pagination_params, services
from api.schemas.common import PaginationInfo, MessageResponse
from api.schemas.medicine import (
    MedicineCreate,
    MedicineUpdate,
    MedicineResponse,
    MedicineEnvelope,
    MedicineList,
    NextDoseResponse,
)
from services.auth_service import AuthenticatedUser


router = APIRouter(prefix="/medicines", tags=["medicines"])


@router.get("/", response_model=MedicineList)
async def list_medicines(
    search: Optional[str] = Query(None, description="Match on name or dose"),
    schedule_type: Optional[str] = Query(None, pattern="^(interval|meal_based)$"),
    active: Optional[bool] = Query(None),
    sort_by: str = Query("created_at", pattern="^(name|created_at|dose|schedule_type)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    pagination: dict = Depends(pagination_params),
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    List the signed-in user's medicines
    """
    medicine_service = services.get_medicine_service()

    medicines, total = await medicine_service.list_medicines(
        user.id,
        search=search,
        schedule_type=schedule_type,
        active=active,
        sort_by=sort_by,
        sort_order=sort_order,
        offset=pagination["offset"],
        limit=pagination["limit"],
        db=db
    )

    return MedicineList(
        medicines=[MedicineResponse.model_validate(m) for m in medicines],
        pagination=PaginationInfo.build(pagination["page"], pagination["limit"], total)
    )


@router.post("/", response_model=MedicineEnvelope, status_code=status.HTTP_201_CREATED)
async def create_medicine(
    medicine_data: MedicineCreate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Add a medicine

    - **schedule_type**: `interval` (needs interval_minutes) or `meal_based`
      (needs meal_timing)
    """
    medicine_service = services.get_medicine_service()

    medicine = await medicine_service.create_medicine(
        user.id,
        medicine_data.model_dump(),
        db=db
    )
    return MedicineEnvelope(
        message="Medicine created successfully",
        medicine=MedicineResponse.model_validate(medicine)
    )


@router.get("/{medicine_id}", response_model=MedicineEnvelope)
async def get_medicine(
    medicine_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    medicine_service = services.get_medicine_service()

    medicine = await medicine_service.get_medicine(user.id, medicine_id, db=db)
    return MedicineEnvelope(medicine=MedicineResponse.model_validate(medicine))


@router.put("/{medicine_id}", response_model=MedicineEnvelope)
async def update_medicine(
    medicine_id: str,
    update_data: MedicineUpdate,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Update a medicine; only fields present in the body change
    """
    medicine_service = services.get_medicine_service()

    medicine = await medicine_service.update_medicine(
        user.id,
        medicine_id,
        update_data.model_dump(exclude_unset=True),
        db=db
    )
    return MedicineEnvelope(
        message="Medicine updated successfully",
        medicine=MedicineResponse.model_validate(medicine)
    )


@router.delete("/{medicine_id}", response_model=MessageResponse)
async def delete_medicine(
    medicine_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Delete a medicine and all of its logs
    """
    medicine_service = services.get_medicine_service()

    await medicine_service.delete_medicine(user.id, medicine_id, db=db)
    return MessageResponse(message="Medicine deleted successfully")


@router.get("/{medicine_id}/next-dose", response_model=NextDoseResponse)
async def get_next_dose(
    medicine_id: str,
    user: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    When the medicine is next due
    """
    medicine_service = services.get_medicine_service()

    medicine = await medicine_service.get_medicine(user.id, medicine_id, db=db)
    info = await medicine_service.get_next_dose(user.id, medicine_id, db=db)

    return NextDoseResponse(
        medicine_id=medicine.id,
        medicine_name=medicine.name,
        next_dose=info.to_dict()
    )
