"""Calculator Estimate - hours and price from a multi-step feature form.

Invariants:
    - Mandatory features are always counted, whether or not the user toggled them
    - A feature hidden by its conditional is never counted, mandatory or not
    - Quantity features contribute hours * quantity; quantity defaults to
      default_quantity (or 1) and is clamped to [min_quantity, max_quantity]
    - Numeric config fields contribute value * hours_per_unit when defined
    - Hourly rate falls back to default_hourly_rate and is clamped to
      [min_hourly_rate, max_hourly_rate]
    - compute_estimate is PURE; the shell persists the snapshot it returns

Design Decisions:
    - Step fields are a tagged union on "kind" (feature | config_field);
      parse_field rejects anything else
    - Summary message text is built once at submission time and stored with
      the contact message, so later calculator edits do not rewrite history
"""

from dataclasses import dataclass, field
from collections.abc import Mapping

from storefront.core.domain_types import ConfigFieldType, FieldKind
from storefront.core.totals import round_currency


# ─── Types ───────────────────────────────────────────────────────

@dataclass
class Feature:
    id: str
    label: str
    hours: float
    mandatory: bool = False
    has_quantity: bool = False
    quantity_label: str | None = None
    min_quantity: float | None = None
    max_quantity: float | None = None
    default_quantity: float | None = None
    conditional: dict | None = None
    kind: FieldKind = FieldKind.FEATURE


@dataclass
class ConfigField:
    id: str
    label: str
    type: ConfigFieldType
    default_value: str | float | None = None
    options: list[dict] = field(default_factory=list)
    min: float | None = None
    max: float | None = None
    step: float | None = None
    required: bool = False
    hours_per_unit: float | None = None
    kind: FieldKind = FieldKind.CONFIG_FIELD


StepField = Feature | ConfigField


@dataclass
class Step:
    id: str
    title: str
    fields: list[StepField]
    description: str | None = None


@dataclass
class CalculatorDefinition:
    name: str
    default_hourly_rate: float
    steps: list[Step]
    min_hourly_rate: float | None = None
    max_hourly_rate: float | None = None


@dataclass
class EstimateLine:
    field_id: str
    label: str
    hours: float
    cost: float


@dataclass
class Estimate:
    total_hours: float
    total_price: float
    hourly_rate: float
    lines: list[EstimateLine]


# ─── Parsing ─────────────────────────────────────────────────────

def parse_field(data: Mapping) -> StepField:
    kind = FieldKind(data["kind"])
    if kind is FieldKind.FEATURE:
        return Feature(
            id=data["id"],
            label=data.get("label", data["id"]),
            hours=float(data["hours"]),
            mandatory=bool(data.get("mandatory", False)),
            has_quantity=bool(data.get("has_quantity", False)),
            quantity_label=data.get("quantity_label"),
            min_quantity=data.get("min_quantity"),
            max_quantity=data.get("max_quantity"),
            default_quantity=data.get("default_quantity"),
            conditional=data.get("conditional"),
        )
    return ConfigField(
        id=data["id"],
        label=data.get("label", data["id"]),
        type=ConfigFieldType(data["type"]),
        default_value=data.get("default_value"),
        options=list(data.get("options") or []),
        min=data.get("min"),
        max=data.get("max"),
        step=data.get("step"),
        required=bool(data.get("required", False)),
        hours_per_unit=data.get("hours_per_unit"),
    )


def parse_calculator(data: Mapping) -> CalculatorDefinition:
    return CalculatorDefinition(
        name=data["name"],
        default_hourly_rate=float(data["default_hourly_rate"]),
        min_hourly_rate=data.get("min_hourly_rate"),
        max_hourly_rate=data.get("max_hourly_rate"),
        steps=[
            Step(
                id=step["id"],
                title=step.get("title", ""),
                description=step.get("description"),
                fields=[parse_field(f) for f in step.get("fields", [])],
            )
            for step in data.get("steps", [])
        ],
    )


def iter_fields(calculator: CalculatorDefinition):
    for step in calculator.steps:
        yield from step.fields


# ─── Rules ───────────────────────────────────────────────────────

def _clamp(value: float, low: float | None, high: float | None) -> float:
    if low is not None and value < low:
        value = low
    if high is not None and value > high:
        value = high
    return value


def _as_number(value) -> float | None:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def resolve_hourly_rate(
    calculator: CalculatorDefinition,
    requested: float | None = None,
    config: Mapping | None = None,
) -> float:
    rate = requested
    if not rate and config:
        rate = _as_number(config.get("hourly_rate"))
    if not rate:
        rate = calculator.default_hourly_rate
    return float(_clamp(rate, calculator.min_hourly_rate, calculator.max_hourly_rate))


def resolve_quantity(feature: Feature, requested: float | None) -> float:
    quantity = requested
    if quantity is None:
        quantity = feature.default_quantity if feature.default_quantity is not None else 1
    return _clamp(quantity, feature.min_quantity, feature.max_quantity)


def is_feature_visible(
    feature: Feature, selections: Mapping, config: Mapping,
) -> bool:
    if not feature.conditional:
        return True
    controller = feature.conditional["show_when"]
    current = config.get(controller) or selections.get(controller)
    return current == feature.conditional["value"]


def is_feature_selected(feature: Feature, selections: Mapping) -> bool:
    return feature.mandatory or bool(selections.get(feature.id))


# ─── Estimate ────────────────────────────────────────────────────

def compute_estimate(
    calculator: CalculatorDefinition,
    selections: Mapping[str, bool],
    quantities: Mapping[str, float] | None = None,
    config: Mapping[str, object] | None = None,
    hourly_rate: float | None = None,
) -> Estimate:
    quantities = quantities or {}
    config = config or {}
    rate = resolve_hourly_rate(calculator, hourly_rate, config)
    lines: list[EstimateLine] = []

    for item in iter_fields(calculator):
        if isinstance(item, Feature):
            if not is_feature_selected(item, selections):
                continue
            if not is_feature_visible(item, selections, config):
                continue
            hours = item.hours
            if item.has_quantity:
                hours *= resolve_quantity(item, quantities.get(item.id))
        else:
            if item.type is not ConfigFieldType.NUMBER or not item.hours_per_unit:
                continue
            value = _as_number(config.get(item.id, item.default_value))
            if value is None:
                continue
            value = _clamp(value, item.min, item.max)
            if value <= 0:
                continue
            hours = value * item.hours_per_unit
        lines.append(EstimateLine(item.id, item.label, hours, round_currency(hours * rate)))

    total_hours = sum(line.hours for line in lines)
    return Estimate(
        total_hours=total_hours,
        total_price=round_currency(total_hours * rate),
        hourly_rate=rate,
        lines=lines,
    )


def build_selection_snapshot(
    calculator: CalculatorDefinition,
    selections: Mapping[str, bool],
    quantities: Mapping[str, float] | None = None,
) -> dict:
    """Flat {feature_id: bool, feature_id_qty: n} record of what was chosen."""
    quantities = quantities or {}
    snapshot: dict = {}
    for item in iter_fields(calculator):
        if not isinstance(item, Feature):
            continue
        chosen = is_feature_selected(item, selections)
        snapshot[item.id] = chosen
        if chosen and item.has_quantity:
            snapshot[f"{item.id}_qty"] = resolve_quantity(item, quantities.get(item.id))
    return snapshot


def _humanize(key: str) -> str:
    return key.replace("_", " ")


def format_submission_message(
    calculator_name: str,
    snapshot: Mapping[str, object],
    total_price: float,
    total_hours: float,
    hourly_rate: float,
) -> str:
    lines = []
    for key, value in snapshot.items():
        if value is False or value == 0:
            continue
        if isinstance(value, bool):
            lines.append(f"• {_humanize(key)}")
        else:
            lines.append(f"• {_humanize(key)}: {value:g}" if isinstance(value, float)
                         else f"• {_humanize(key)}: {value}")
    selected = "\n".join(lines)
    return (
        f"Calculator: {calculator_name}\n\n"
        f"Selected Features:\n{selected}\n\n"
        f"Estimated Cost: ${total_price:,.2f}\n"
        f"Total Hours: {total_hours:g}\n"
        f"Hourly Rate: ${hourly_rate:g}\n\n"
        "The customer has requested a consultation for their project."
    )


# ─── Default template ────────────────────────────────────────────

DEFAULT_CALCULATOR: dict = {
    "name": "Website Cost Calculator",
    "slug": "website-calculator",
    "description": "Calculate the cost of your custom website project",
    "header_copy": (
        "Fill in the features below and calculate custom web design price "
        "with our free website cost calculator."
    ),
    "footer_copy": "",
    "default_hourly_rate": 150,
    "min_hourly_rate": 10,
    "max_hourly_rate": 1000,
    "is_active": True,
    "steps": [
        {
            "id": "step-1",
            "title": "Project Basics",
            "description": "Tell us about your project",
            "fields": [
                {
                    "kind": "config_field", "id": "website_type", "type": "select",
                    "label": "Website Type", "default_value": "informational",
                    "options": [
                        {"label": "Informational", "value": "informational"},
                        {"label": "E-Commerce", "value": "ecommerce"},
                    ],
                    "required": True,
                },
                {
                    "kind": "config_field", "id": "num_pages", "type": "number",
                    "label": "No. of Unique Landing Pages", "default_value": 5,
                    "min": 1, "required": True,
                },
                {
                    "kind": "config_field", "id": "hourly_rate", "type": "number",
                    "label": "Hourly Rate", "default_value": 150,
                    "min": 10, "max": 1000, "step": 10, "required": True,
                },
            ],
        },
        {
            "id": "step-2",
            "title": "Features & Services",
            "description": "Select the features you need",
            "fields": [
                {"kind": "feature", "id": "site_planning", "label": "Site Planning",
                 "hours": 25, "mandatory": True},
                {"kind": "feature", "id": "landing_page_design",
                 "label": "Each Unique Landing Page Design & Development",
                 "hours": 40, "mandatory": True},
                {"kind": "feature", "id": "onsite_optimization",
                 "label": "Onsite Optimization", "hours": 30, "mandatory": True},
                {"kind": "feature", "id": "copywriting", "label": "Copywriting",
                 "hours": 25, "has_quantity": True, "quantity_label": "Number of Pages",
                 "default_quantity": 10, "min_quantity": 1},
                {"kind": "feature", "id": "multi_language",
                 "label": "Multi-Language Feature", "hours": 25, "has_quantity": True,
                 "quantity_label": "Number of Languages", "default_quantity": 1,
                 "min_quantity": 1},
                {"kind": "feature", "id": "content_migration",
                 "label": "Content Migration", "hours": 20},
                {"kind": "feature", "id": "motion_graphics", "label": "Motion Graphics",
                 "hours": 30, "has_quantity": True,
                 "quantity_label": "Number of Animations", "default_quantity": 1,
                 "min_quantity": 1},
                {"kind": "feature", "id": "basic_search", "label": "Basic Search",
                 "hours": 15},
                {"kind": "feature", "id": "interactive_map", "label": "Interactive Map",
                 "hours": 20},
                {"kind": "feature", "id": "events_calendar", "label": "Events Calendar",
                 "hours": 25},
                {"kind": "feature", "id": "chat_feature", "label": "Chat Feature",
                 "hours": 30},
                {"kind": "feature", "id": "project_management",
                 "label": "Project Management & Client Communication",
                 "hours": 35, "mandatory": True},
            ],
        },
    ],
}
