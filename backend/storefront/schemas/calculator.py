"""Calculator Schemas - builder documents, estimate requests and submissions.

Invariants:
    - Step fields are a discriminated union on "kind"; a field without a
      valid kind is rejected at the boundary (400)
    - Estimate inputs never carry prices or hours; the server computes them

Design Decisions:
    - Annotated[Union, Field(discriminator=...)]: pydantic picks the variant
      from the tag instead of trying each shape in turn
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from storefront.core.domain_types import ConfigFieldType, SubmissionStatus


class SelectOption(BaseModel):
    label: str
    value: str


class FeatureCondition(BaseModel):
    show_when: str
    value: str | bool | float


class FeatureFieldSchema(BaseModel):
    kind: Literal["feature"] = "feature"
    id: str = Field(min_length=1)
    label: str = Field(min_length=1)
    hours: float = Field(ge=0)
    mandatory: bool = False
    has_quantity: bool = False
    quantity_label: str | None = None
    min_quantity: float | None = Field(None, ge=0)
    max_quantity: float | None = Field(None, ge=0)
    default_quantity: float | None = Field(None, ge=0)
    conditional: FeatureCondition | None = None


class ConfigFieldSchema(BaseModel):
    kind: Literal["config_field"] = "config_field"
    id: str = Field(min_length=1)
    label: str = Field(min_length=1)
    type: ConfigFieldType
    default_value: str | float | None = None
    options: list[SelectOption] = []
    min: float | None = None
    max: float | None = None
    step: float | None = None
    required: bool = False
    hours_per_unit: float | None = Field(None, ge=0)


StepFieldSchema = Annotated[
    Union[FeatureFieldSchema, ConfigFieldSchema], Field(discriminator="kind"),
]


class StepSchema(BaseModel):
    id: str = Field(min_length=1)
    title: str
    description: str | None = None
    fields: list[StepFieldSchema] = []


class CalculatorCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    slug: str | None = Field(None, max_length=200)
    description: str | None = None
    header_copy: str | None = None
    footer_copy: str | None = None
    default_hourly_rate: float = Field(gt=0)
    min_hourly_rate: float | None = Field(None, ge=0)
    max_hourly_rate: float | None = Field(None, gt=0)
    steps: list[StepSchema] = []
    is_active: bool = True


class CalculatorUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    slug: str | None = Field(None, max_length=200)
    description: str | None = None
    header_copy: str | None = None
    footer_copy: str | None = None
    default_hourly_rate: float | None = Field(None, gt=0)
    min_hourly_rate: float | None = Field(None, ge=0)
    max_hourly_rate: float | None = Field(None, gt=0)
    steps: list[StepSchema] | None = None
    is_active: bool | None = None


class CalculatorResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: str | None = None
    header_copy: str | None = None
    footer_copy: str | None = None
    default_hourly_rate: float
    min_hourly_rate: float | None = None
    max_hourly_rate: float | None = None
    steps: list[StepSchema]
    is_active: bool
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime


class EstimateRequest(BaseModel):
    selections: dict[str, bool] = {}
    quantities: dict[str, Annotated[float, Field(ge=0)]] = {}
    config: dict[str, str | float | None] = {}
    hourly_rate: float | None = Field(None, gt=0)


class EstimateLineSchema(BaseModel):
    field_id: str
    label: str
    hours: float
    cost: float


class EstimateResponse(BaseModel):
    total_hours: float
    total_price: float
    hourly_rate: float
    lines: list[EstimateLineSchema]


class ContactInfo(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    phone: str | None = None
    company: str | None = None
    message: str | None = None


class SubmissionCreate(EstimateRequest):
    contact_info: ContactInfo | None = None


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    calculator_id: str
    calculator_name: str
    selections: dict
    config: dict
    breakdown: list[EstimateLineSchema]
    total_hours: float
    total_price: float
    hourly_rate: float
    contact_info: dict | None = None
    status: SubmissionStatus
    submitted_at: datetime


class SubmissionStatusUpdate(BaseModel):
    status: SubmissionStatus
