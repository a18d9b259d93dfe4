"""Calculator Routes - builder CRUD, public estimates and lead submissions.

Invariants:
    - Estimates are computed server-side from the stored calculator
    - Public reads (by-slug, submit) only reach active calculators
    - /submissions and /by-slug are declared before /{calculator_id}
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from storefront.api.dependencies import get_acting_user, get_calculator_service
from storefront.core.domain_types import SubmissionStatus
from storefront.schemas.calculator import (
    CalculatorCreate, CalculatorResponse, CalculatorUpdate, EstimateLineSchema,
    EstimateRequest, EstimateResponse, SubmissionCreate, SubmissionResponse,
    SubmissionStatusUpdate,
)
from storefront.services.calculator_service import CalculatorService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/calculators", tags=["calculators"])


@router.get("", response_model=list[CalculatorResponse])
async def list_calculators(
    active_only: bool = Query(False),
    service: CalculatorService = Depends(get_calculator_service),
):
    return await service.list_calculators(active_only)


@router.post("", response_model=CalculatorResponse, status_code=status.HTTP_201_CREATED)
async def create_calculator(
    body: CalculatorCreate,
    user_id: str | None = Depends(get_acting_user),
    service: CalculatorService = Depends(get_calculator_service),
):
    return await service.create_calculator(body.model_dump(mode="json"), user_id)


@router.post("/seed-default")
async def seed_default_calculator(
    user_id: str | None = Depends(get_acting_user),
    service: CalculatorService = Depends(get_calculator_service),
):
    """Create the stock website calculator if it is missing."""
    calculator = await service.seed_default_calculator(user_id)
    return {
        "created": calculator is not None,
        "id": calculator.id if calculator else None,
    }


@router.get("/submissions", response_model=list[SubmissionResponse])
async def list_all_submissions(
    status_filter: SubmissionStatus | None = Query(None, alias="status"),
    service: CalculatorService = Depends(get_calculator_service),
):
    return await service.list_submissions(status=status_filter)


@router.patch("/submissions/{submission_id}", response_model=SubmissionResponse)
async def update_submission_status(
    submission_id: str,
    body: SubmissionStatusUpdate,
    service: CalculatorService = Depends(get_calculator_service),
):
    return await service.update_submission_status(submission_id, body.status)


@router.get("/by-slug/{slug}", response_model=CalculatorResponse)
async def get_calculator_by_slug(
    slug: str, service: CalculatorService = Depends(get_calculator_service),
):
    return await service.get_active_calculator_by_slug(slug)


@router.get("/{calculator_id}", response_model=CalculatorResponse)
async def get_calculator(
    calculator_id: str, service: CalculatorService = Depends(get_calculator_service),
):
    return await service.get_calculator(calculator_id)


@router.patch("/{calculator_id}", response_model=CalculatorResponse)
async def update_calculator(
    calculator_id: str,
    body: CalculatorUpdate,
    service: CalculatorService = Depends(get_calculator_service),
):
    return await service.update_calculator(
        calculator_id, body.model_dump(mode="json", exclude_unset=True),
    )


@router.delete("/{calculator_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_calculator(
    calculator_id: str, service: CalculatorService = Depends(get_calculator_service),
):
    await service.delete_calculator(calculator_id)


@router.post("/{calculator_id}/toggle-active", response_model=CalculatorResponse)
async def toggle_calculator_active(
    calculator_id: str, service: CalculatorService = Depends(get_calculator_service),
):
    return await service.toggle_calculator_active(calculator_id)


@router.post("/{calculator_id}/estimate", response_model=EstimateResponse)
async def estimate(
    calculator_id: str,
    body: EstimateRequest,
    service: CalculatorService = Depends(get_calculator_service),
):
    calculator = await service.get_calculator(calculator_id)
    result = service.estimate(calculator, body.model_dump())
    return EstimateResponse(
        total_hours=result.total_hours,
        total_price=result.total_price,
        hourly_rate=result.hourly_rate,
        lines=[
            EstimateLineSchema(
                field_id=line.field_id, label=line.label, hours=line.hours, cost=line.cost,
            )
            for line in result.lines
        ],
    )


@router.post(
    "/{calculator_id}/submissions",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_calculation(
    calculator_id: str,
    body: SubmissionCreate,
    service: CalculatorService = Depends(get_calculator_service),
):
    return await service.submit_calculation(calculator_id, body.model_dump())


@router.get("/{calculator_id}/submissions", response_model=list[SubmissionResponse])
async def list_submissions(
    calculator_id: str,
    status_filter: SubmissionStatus | None = Query(None, alias="status"),
    service: CalculatorService = Depends(get_calculator_service),
):
    return await service.list_submissions(calculator_id, status_filter)
