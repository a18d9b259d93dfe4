"""Calculator Service - CRUD, server-side estimates and lead submissions.

Invariants:
    - Submissions store the recomputed estimate, never client totals
    - A submission with contact details lands in the contact inbox too
    - Inactive calculators do not accept submissions
"""

import pytest

from storefront.core.domain_types import SubmissionStatus
from storefront.core.errors import BusinessRuleError, ResourceNotFoundError
from storefront.services.calculator_service import CalculatorService
from storefront.services.contact_message_service import ContactMessageService


def _calculator_data(**overrides) -> dict:
    data = {
        "name": "Logo Design",
        "default_hourly_rate": 100,
        "min_hourly_rate": 50,
        "max_hourly_rate": 200,
        "steps": [{
            "id": "s1", "title": "Scope",
            "fields": [
                {"kind": "feature", "id": "concepts", "label": "Concepts",
                 "hours": 4, "mandatory": True},
                {"kind": "feature", "id": "revisions", "label": "Revisions",
                 "hours": 1, "has_quantity": True, "default_quantity": 2, "max_quantity": 5},
            ],
        }],
    }
    data.update(overrides)
    return data


async def test_create_derives_slug(test_db):
    calculator = await CalculatorService(test_db).create_calculator(_calculator_data(), "admin")
    assert calculator.slug == "logo-design"
    assert calculator.is_active is True
    assert calculator.created_by == "admin"


async def test_duplicate_slug_is_refused(test_db):
    service = CalculatorService(test_db)
    await service.create_calculator(_calculator_data(), None)
    with pytest.raises(BusinessRuleError) as exc:
        await service.create_calculator(_calculator_data(), None)
    assert exc.value.code == "CALCULATOR_SLUG_TAKEN"


async def test_inverted_rate_bounds_are_refused(test_db):
    with pytest.raises(BusinessRuleError) as exc:
        await CalculatorService(test_db).create_calculator(
            _calculator_data(min_hourly_rate=300, max_hourly_rate=200), None,
        )
    assert exc.value.code == "INVALID_RATE_BOUNDS"


async def test_estimate_uses_stored_definition(test_db):
    service = CalculatorService(test_db)
    calculator = await service.create_calculator(_calculator_data(), None)
    estimate = service.estimate(calculator, {
        "selections": {"revisions": True}, "quantities": {"revisions": 9},
        "hourly_rate": 1000,
    })
    assert estimate.hourly_rate == 200
    assert estimate.total_hours == 9
    assert estimate.total_price == 1800


async def test_submission_with_contact_creates_inbox_message(test_db):
    service = CalculatorService(test_db)
    calculator = await service.create_calculator(_calculator_data(), None)

    submission = await service.submit_calculation(calculator.id, {
        "selections": {"revisions": True},
        "quantities": {},
        "config": {},
        "contact_info": {"name": "Dana", "email": "dana@example.com", "phone": "555"},
    })

    assert submission.total_hours == 6
    assert submission.total_price == 600
    assert submission.selections == {"concepts": True, "revisions": True, "revisions_qty": 2}
    assert submission.status == "pending"

    messages = await ContactMessageService(test_db).list_messages()
    assert len(messages) == 1
    message = messages[0]
    assert message.source == "calculator"
    assert message.subject == "Quote Request: Logo Design"
    assert message.meta["submission_id"] == submission.id
    assert "Estimated Cost: $600.00" in message.message


async def test_submission_without_contact_creates_no_message(test_db):
    service = CalculatorService(test_db)
    calculator = await service.create_calculator(_calculator_data(), None)
    await service.submit_calculation(calculator.id, {"selections": {}})
    assert await ContactMessageService(test_db).list_messages() == []


async def test_inactive_calculator_rejects_submissions(test_db):
    service = CalculatorService(test_db)
    calculator = await service.create_calculator(_calculator_data(), None)
    await service.toggle_calculator_active(calculator.id)
    with pytest.raises(ResourceNotFoundError):
        await service.submit_calculation(calculator.id, {"selections": {}})
    with pytest.raises(ResourceNotFoundError):
        await service.get_active_calculator_by_slug("logo-design")


async def test_seed_default_is_idempotent(test_db):
    service = CalculatorService(test_db)
    first = await service.seed_default_calculator()
    assert first.slug == "website-calculator"
    assert await service.seed_default_calculator() is None


async def test_update_submission_status(test_db):
    service = CalculatorService(test_db)
    calculator = await service.create_calculator(_calculator_data(), None)
    submission = await service.submit_calculation(calculator.id, {"selections": {}})
    updated = await service.update_submission_status(submission.id, SubmissionStatus.CONTACTED)
    assert updated.status == "contacted"
    listed = await service.list_submissions(calculator.id, SubmissionStatus.CONTACTED)
    assert [s.id for s in listed] == [submission.id]
