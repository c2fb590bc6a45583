"""
Tests for Medicine Service
Tests medicine CRUD, ownership scoping and next-dose lookup
"""

import pytest
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from services.medicine_service import MedicineService
from services.errors import ValidationFailed, NotFound
from models import Medicine, MedicineLog
from engine import IntervalNextDose, MealBasedNextDose
from tests import TEST_USER_ID, OTHER_USER_ID


@pytest.fixture
def medicine_service():
    """Create medicine service instance"""
    return MedicineService()


class TestCreateMedicine:
    """Tests for medicine creation"""

    @pytest.mark.asyncio
    async def test_create_interval_medicine(self, medicine_service, db_session: Session, interval_medicine_data):
        medicine = await medicine_service.create_medicine(TEST_USER_ID, interval_medicine_data, db=db_session)

        assert medicine.id is not None
        assert medicine.user_id == TEST_USER_ID
        assert medicine.interval_minutes == 480
        assert medicine.meal_timing is None
        assert medicine.active is True

    @pytest.mark.asyncio
    async def test_create_strips_text_and_drops_other_variant(self, medicine_service, db_session: Session, meal_medicine_data):
        meal_medicine_data["name"] = "  Metformin  "
        meal_medicine_data["interval_minutes"] = 60

        medicine = await medicine_service.create_medicine(TEST_USER_ID, meal_medicine_data, db=db_session)

        assert medicine.name == "Metformin"
        assert medicine.interval_minutes is None
        assert medicine.meal_timing == ["with_meal", "after_meal"]

    @pytest.mark.asyncio
    async def test_invalid_medicine_reports_every_error(self, medicine_service, db_session: Session):
        with pytest.raises(ValidationFailed) as exc_info:
            await medicine_service.create_medicine(
                TEST_USER_ID,
                {"name": "", "dose": "", "schedule_type": "interval"},
                db=db_session
            )

        assert exc_info.value.status_code == 400
        assert len(exc_info.value.errors) == 3
        assert db_session.query(Medicine).count() == 0


class TestListMedicines:
    """Tests for listing and filtering"""

    @pytest.mark.asyncio
    async def test_list_is_scoped_to_user(self, medicine_service, db_session, interval_medicine, other_user_medicine):
        medicines, total = await medicine_service.list_medicines(TEST_USER_ID, db=db_session)

        assert total == 1
        assert [m.id for m in medicines] == [interval_medicine.id]

    @pytest.mark.asyncio
    async def test_filters_and_sorting(self, medicine_service, db_session, interval_medicine, meal_medicine):
        medicines, total = await medicine_service.list_medicines(
            TEST_USER_ID, schedule_type="meal_based", db=db_session
        )
        assert total == 1
        assert medicines[0].id == meal_medicine.id

        medicines, _ = await medicine_service.list_medicines(
            TEST_USER_ID, sort_by="name", sort_order="asc", db=db_session
        )
        assert [m.name for m in medicines] == ["Amoxicillin", "Metformin"]

    @pytest.mark.asyncio
    async def test_search_matches_name(self, medicine_service, db_session, interval_medicine, meal_medicine):
        medicines, total = await medicine_service.list_medicines(TEST_USER_ID, search="amox", db=db_session)

        assert total == 1
        assert medicines[0].name == "Amoxicillin"

    @pytest.mark.asyncio
    async def test_pagination(self, medicine_service, db_session, interval_medicine, meal_medicine):
        medicines, total = await medicine_service.list_medicines(
            TEST_USER_ID, sort_by="name", sort_order="asc", offset=1, limit=1, db=db_session
        )

        assert total == 2
        assert [m.name for m in medicines] == ["Metformin"]


class TestUpdateMedicine:
    """Tests for partial updates"""

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, medicine_service, db_session, interval_medicine):
        medicine = await medicine_service.update_medicine(
            TEST_USER_ID, interval_medicine.id, {"dose": "250mg"}, db=db_session
        )

        assert medicine.dose == "250mg"
        assert medicine.name == "Amoxicillin"
        assert medicine.interval_minutes == 480

    @pytest.mark.asyncio
    async def test_switching_schedule_type_clears_interval_fields(self, medicine_service, db_session, interval_medicine):
        medicine = await medicine_service.update_medicine(
            TEST_USER_ID,
            interval_medicine.id,
            {"schedule_type": "meal_based", "meal_timing": ["before_meal"]},
            db=db_session
        )

        assert medicine.schedule_type == "meal_based"
        assert medicine.meal_timing == ["before_meal"]
        assert medicine.interval_minutes is None

    @pytest.mark.asyncio
    async def test_switching_without_new_fields_fails(self, medicine_service, db_session, interval_medicine):
        with pytest.raises(ValidationFailed) as exc_info:
            await medicine_service.update_medicine(
                TEST_USER_ID, interval_medicine.id, {"schedule_type": "meal_based"}, db=db_session
            )

        assert exc_info.value.errors == ["Meal timing is required for meal-based schedules"]

    @pytest.mark.asyncio
    async def test_deactivate(self, medicine_service, db_session, interval_medicine):
        medicine = await medicine_service.update_medicine(
            TEST_USER_ID, interval_medicine.id, {"active": False}, db=db_session
        )
        assert medicine.active is False

    @pytest.mark.asyncio
    async def test_other_users_medicine_is_not_found(self, medicine_service, db_session, other_user_medicine):
        with pytest.raises(NotFound):
            await medicine_service.update_medicine(
                TEST_USER_ID, other_user_medicine.id, {"dose": "1mg"}, db=db_session
            )


class TestDeleteMedicine:

    @pytest.mark.asyncio
    async def test_delete_cascades_to_logs(self, medicine_service, db_session, interval_medicine, recent_logs):
        await medicine_service.delete_medicine(TEST_USER_ID, interval_medicine.id, db=db_session)

        assert db_session.query(Medicine).count() == 0
        assert db_session.query(MedicineLog).count() == 0

    @pytest.mark.asyncio
    async def test_delete_missing(self, medicine_service, db_session):
        with pytest.raises(NotFound):
            await medicine_service.delete_medicine(TEST_USER_ID, "missing", db=db_session)


class TestNextDose:

    @pytest.mark.asyncio
    async def test_interval_next_dose_uses_latest_log(self, medicine_service, db_session, interval_medicine, now):
        for hours in (10, 3):
            db_session.add(MedicineLog(
                user_id=TEST_USER_ID,
                medicine_id=interval_medicine.id,
                taken_at=now - timedelta(hours=hours)
            ))
        db_session.commit()

        info = await medicine_service.get_next_dose(TEST_USER_ID, interval_medicine.id, now=now, db=db_session)

        assert isinstance(info, IntervalNextDose)
        assert info.next_dose_at == now + timedelta(hours=5)
        assert info.is_overdue is False

    @pytest.mark.asyncio
    async def test_interval_without_logs_is_due_now(self, medicine_service, db_session, interval_medicine, now):
        info = await medicine_service.get_next_dose(TEST_USER_ID, interval_medicine.id, now=now, db=db_session)

        assert info.next_dose_at == now
        assert info.is_overdue is False

    @pytest.mark.asyncio
    async def test_meal_based_next_dose(self, medicine_service, db_session, meal_medicine, now):
        info = await medicine_service.get_next_dose(TEST_USER_ID, meal_medicine.id, now=now, db=db_session)

        assert isinstance(info, MealBasedNextDose)
        assert [t.value for t in info.meal_timing] == ["with_meal", "after_meal"]
