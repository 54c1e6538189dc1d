import pytest

from app.core.exceptions import EntitlementRequiredError
from app.services.subscription_service import subscription_service
from app.services.usage_service import usage_service

from conftest import INTERNAL_ID


async def test_usage_row_created_on_first_read(db):
    usage = await usage_service.get_usage(INTERNAL_ID)

    assert usage.free_interview_used is False
    assert usage.usage_count == 0
    assert await db.user_interview_usage.count_documents({"user_id": INTERNAL_ID}) == 1


async def test_free_user_gets_exactly_one_interview(db):
    status = await usage_service.get_status(INTERNAL_ID)
    assert status.can_start_interview is True
    assert status.has_pro_plan is False

    usage = await usage_service.start_interview(INTERNAL_ID)
    assert usage.free_interview_used is True
    assert usage.usage_count == 1
    assert usage.last_interview_date is not None

    status = await usage_service.get_status(INTERNAL_ID)
    assert status.can_start_interview is False

    with pytest.raises(EntitlementRequiredError):
        await usage_service.start_interview(INTERNAL_ID)


async def test_pro_user_is_only_counted(db):
    await subscription_service.activate_subscription(INTERNAL_ID, "pro")

    for _ in range(3):
        usage = await usage_service.start_interview(INTERNAL_ID)

    assert usage.usage_count == 3
    assert usage.free_interview_used is False
    status = await usage_service.get_status(INTERNAL_ID)
    assert status.can_start_interview is True
