"""SEO Schemas - settings documents, resolution requests and advisory findings.

Design Decisions:
    - The "global" section travels under its JSON name; the Python attribute is
      global_config because global is a keyword
"""

from pydantic import BaseModel, ConfigDict, Field

from storefront.core.domain_types import SEOTemplateType, TwitterCard, ValidationSeverity


class SEOPageConfigSchema(BaseModel):
    title: str | None = None
    description: str | None = None
    keywords: list[str] | None = None
    og_image: str | None = None
    noindex: bool | None = None


class SEOTemplateConfigSchema(BaseModel):
    title_template: str = Field(min_length=1)
    description_template: str | None = None
    keywords: list[str] = []


class SEOGlobalConfigSchema(BaseModel):
    keywords: list[str] = []
    description: str = ""
    og_image: str | None = None
    twitter_card: TwitterCard = TwitterCard.SUMMARY_LARGE_IMAGE


class SEOSettingsSchema(BaseModel):
    """Full settings document (response) or partial update (request)."""
    model_config = ConfigDict(populate_by_name=True)

    global_config: SEOGlobalConfigSchema | None = Field(None, alias="global")
    pages: dict[str, SEOPageConfigSchema] | None = None
    patterns: dict[str, SEOPageConfigSchema] | None = None
    templates: dict[SEOTemplateType, SEOTemplateConfigSchema] | None = None


class TemplateResolveRequest(BaseModel):
    template_type: SEOTemplateType
    variables: dict[str, str | int | float | None] = {}


class SEOFindingSchema(BaseModel):
    field: str
    message: str
    severity: ValidationSeverity


class SEOValidationResponse(BaseModel):
    valid: bool
    findings: list[SEOFindingSchema]
