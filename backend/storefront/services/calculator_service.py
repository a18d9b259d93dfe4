"""Calculator Service - calculator CRUD, estimates and lead submissions.

Invariants:
    - Estimates are always recomputed here from the stored definition; client
      supplied hours or prices are never trusted
    - A submission and its contact message (when contact info was given) are
      written in one commit
    - Submissions are immutable apart from their follow-up status
    - Public reads (get by slug, submit) only see active calculators
"""

import logging
from dataclasses import asdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.core.category_tree import slugify
from storefront.core.domain_types import MessageSource, SubmissionStatus
from storefront.core.errors import BusinessRuleError, ResourceNotFoundError
from storefront.core.estimate import (
    DEFAULT_CALCULATOR, Estimate, build_selection_snapshot, compute_estimate,
    format_submission_message, parse_calculator,
)
from storefront.db.base import new_id
from storefront.models.calculator import Calculator, CalculatorSubmission
from storefront.services.contact_message_service import build_contact_message

logger = logging.getLogger(__name__)

_CALCULATOR_FIELDS = (
    "name", "slug", "description", "header_copy", "footer_copy",
    "default_hourly_rate", "min_hourly_rate", "max_hourly_rate", "steps", "is_active",
)
_CLEARABLE_FIELDS = (
    "description", "header_copy", "footer_copy", "min_hourly_rate", "max_hourly_rate",
)


def _check_rate_bounds(calculator: Calculator) -> None:
    low, high = calculator.min_hourly_rate, calculator.max_hourly_rate
    if low is not None and high is not None and low > high:
        raise BusinessRuleError(
            "min_hourly_rate cannot exceed max_hourly_rate", "INVALID_RATE_BOUNDS",
        )


class CalculatorService:

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Calculators ─────────────────────────────────────────────

    async def list_calculators(self, active_only: bool = False) -> list[Calculator]:
        query = select(Calculator).order_by(Calculator.name)
        if active_only:
            query = query.where(Calculator.is_active.is_(True))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_calculator(self, calculator_id: str) -> Calculator:
        calculator = await self.db.get(Calculator, calculator_id)
        if calculator is None:
            raise ResourceNotFoundError("Calculator", calculator_id)
        return calculator

    async def get_active_calculator_by_slug(self, slug: str) -> Calculator:
        calculator = (await self.db.execute(
            select(Calculator)
            .where(Calculator.slug == slug)
            .where(Calculator.is_active.is_(True))
        )).scalar_one_or_none()
        if calculator is None:
            raise ResourceNotFoundError("Calculator", slug)
        return calculator

    async def _ensure_slug_free(self, slug: str, own_id: str | None = None) -> None:
        existing = (await self.db.execute(
            select(Calculator.id).where(Calculator.slug == slug)
        )).scalar_one_or_none()
        if existing is not None and existing != own_id:
            raise BusinessRuleError(
                f"A calculator with slug '{slug}' already exists", "CALCULATOR_SLUG_TAKEN",
            )

    async def create_calculator(self, data: dict, created_by: str | None) -> Calculator:
        slug = data.get("slug") or slugify(data["name"])
        await self._ensure_slug_free(slug)
        calculator = Calculator(
            **{k: data[k] for k in _CALCULATOR_FIELDS if data.get(k) is not None},
        )
        calculator.slug = slug
        calculator.created_by = created_by
        _check_rate_bounds(calculator)
        self.db.add(calculator)
        await self.db.commit()
        logger.info(f"Created calculator {slug}", extra={"calculator_id": calculator.id})
        return calculator

    async def update_calculator(self, calculator_id: str, data: dict) -> Calculator:
        calculator = await self.get_calculator(calculator_id)
        if data.get("slug") and data["slug"] != calculator.slug:
            await self._ensure_slug_free(data["slug"], calculator.id)
        for key in _CALCULATOR_FIELDS:
            if key in data and (data[key] is not None or key in _CLEARABLE_FIELDS):
                setattr(calculator, key, data[key])
        _check_rate_bounds(calculator)
        await self.db.commit()
        return calculator

    async def delete_calculator(self, calculator_id: str) -> None:
        calculator = await self.get_calculator(calculator_id)
        await self.db.delete(calculator)
        await self.db.commit()
        logger.info(f"Deleted calculator {calculator.slug}", extra={"calculator_id": calculator_id})

    async def toggle_calculator_active(self, calculator_id: str) -> Calculator:
        calculator = await self.get_calculator(calculator_id)
        calculator.is_active = not calculator.is_active
        await self.db.commit()
        return calculator

    async def seed_default_calculator(self, created_by: str | None = None) -> Calculator | None:
        """Create the stock website calculator unless its slug is taken."""
        existing = (await self.db.execute(
            select(Calculator.id).where(Calculator.slug == DEFAULT_CALCULATOR["slug"])
        )).scalar_one_or_none()
        if existing is not None:
            return None
        return await self.create_calculator(dict(DEFAULT_CALCULATOR), created_by)

    # ─── Estimates & submissions ─────────────────────────────────

    def estimate(self, calculator: Calculator, request: dict) -> Estimate:
        return compute_estimate(
            parse_calculator(calculator.to_definition()),
            request.get("selections") or {},
            request.get("quantities") or {},
            request.get("config") or {},
            request.get("hourly_rate"),
        )

    async def submit_calculation(self, calculator_id: str, request: dict) -> CalculatorSubmission:
        calculator = await self.get_calculator(calculator_id)
        if not calculator.is_active:
            raise ResourceNotFoundError("Calculator", calculator_id)

        definition = parse_calculator(calculator.to_definition())
        selections = request.get("selections") or {}
        quantities = request.get("quantities") or {}
        config = request.get("config") or {}
        result = compute_estimate(
            definition, selections, quantities, config, request.get("hourly_rate"),
        )
        snapshot = build_selection_snapshot(definition, selections, quantities)
        contact = request.get("contact_info")

        submission = CalculatorSubmission(
            id=new_id(),
            calculator_id=calculator.id,
            calculator_name=calculator.name,
            selections=snapshot,
            config=config,
            breakdown=[asdict(line) for line in result.lines],
            total_hours=result.total_hours,
            total_price=result.total_price,
            hourly_rate=result.hourly_rate,
            contact_info=contact,
            status=SubmissionStatus.PENDING.value,
        )
        self.db.add(submission)

        if contact and contact.get("email"):
            self.db.add(build_contact_message(
                {
                    "name": contact.get("name") or contact["email"],
                    "email": contact["email"],
                    "subject": f"Quote Request: {calculator.name}",
                    "message": format_submission_message(
                        calculator.name, snapshot, result.total_price,
                        result.total_hours, result.hourly_rate,
                    ),
                },
                source=MessageSource.CALCULATOR,
                meta={
                    "calculator_id": calculator.id,
                    "submission_id": submission.id,
                    "total_price": result.total_price,
                    "total_hours": result.total_hours,
                    "phone": contact.get("phone"),
                    "company": contact.get("company"),
                },
            ))

        await self.db.commit()
        logger.info(
            f"Calculator submission {submission.id}: {result.total_hours:g}h "
            f"at {result.hourly_rate:g}/h",
            extra={"calculator_id": calculator.id},
        )
        return submission

    async def list_submissions(
        self, calculator_id: str | None = None, status: SubmissionStatus | None = None,
    ) -> list[CalculatorSubmission]:
        query = select(CalculatorSubmission).order_by(CalculatorSubmission.submitted_at.desc())
        if calculator_id:
            query = query.where(CalculatorSubmission.calculator_id == calculator_id)
        if status:
            query = query.where(CalculatorSubmission.status == status.value)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def update_submission_status(
        self, submission_id: str, status: SubmissionStatus,
    ) -> CalculatorSubmission:
        submission = await self.db.get(CalculatorSubmission, submission_id)
        if submission is None:
            raise ResourceNotFoundError("CalculatorSubmission", submission_id)
        submission.status = status.value
        await self.db.commit()
        return submission
