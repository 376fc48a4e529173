from __future__ import annotations

import uuid
from enum import Enum
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class PageType(str, Enum):
    landing = "landing"
    login = "login"
    questionnaire = "questionnaire"
    content = "content"
    checkout = "checkout"
    thankyou = "thankyou"


GOAL_CHOICES: Sequence[str] = ("Awareness", "Lead Generation", "Sales")


def new_id() -> str:
    return str(uuid.uuid4())


class CamelModel(BaseModel):
    """Base model emitting camelCase keys on the wire while keeping snake_case attributes."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Question(CamelModel):
    question: str
    options: list[str] = Field(default_factory=list)


class PageContent(CamelModel):
    # Unrecognized keys are kept as extras so hand-made fields round-trip.
    model_config = ConfigDict(extra="allow")

    title: str | None = None
    description: str | None = None
    image_url: str | None = None
    cta: str | None = None
    questions: list[Question] | None = None

    @classmethod
    def wire_key(cls, name: str) -> str:
        """Map a declared field name (``image_url``) to its wire key (``imageUrl``)."""
        field = cls.model_fields.get(name)
        return field.alias if field is not None and field.alias else name

    def as_mapping(self) -> dict[str, object]:
        # Blank declared fields are dropped; extras are kept even when null.
        blank = {name for name in type(self).model_fields if getattr(self, name) is None}
        return self.model_dump(by_alias=True, exclude=blank)

    def with_field(self, name: str, value: object) -> "PageContent":
        return PageContent.model_validate({**self.as_mapping(), self.wire_key(name): value})


class FunnelPage(CamelModel):
    id: str = Field(default_factory=new_id)
    type: PageType
    content: PageContent = Field(default_factory=PageContent)


class MarketingDetails(CamelModel):
    target_audience: str = ""
    product_description: str = ""
    goals: list[str] = Field(default_factory=list)


class FunnelDraft(CamelModel):
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "1",
                "name": "Sample Funnel",
                "description": "This is a sample funnel",
                "pages": [],
                "flow": [],
                "marketingDetails": {
                    "targetAudience": "Sample audience",
                    "productDescription": "Sample product",
                    "goals": ["Awareness"],
                },
            }
        },
    )

    id: str = Field(default_factory=new_id)
    name: str = ""
    description: str = ""
    pages: list[FunnelPage] = Field(default_factory=list)
    flow: list[str] = Field(default_factory=list)
    marketing_details: MarketingDetails = Field(default_factory=MarketingDetails)

    @model_validator(mode="after")
    def _check_page_references(self) -> "FunnelDraft":
        page_ids = [page.id for page in self.pages]
        known = set(page_ids)
        if len(page_ids) != len(known):
            raise ValueError("page ids must be unique")
        unknown = [page_id for page_id in self.flow if page_id not in known]
        if unknown:
            raise ValueError(f"flow references unknown pages: {', '.join(unknown)}")
        return self


class GeneratedContent(CamelModel):
    title: str | None = None
    description: str | None = None
    cta: str | None = None


class Template(CamelModel):
    id: str
    name: str
    description: str
    thumbnail_url: str


class SaveResult(BaseModel):
    success: bool
    message: str


__all__ = [
    "CamelModel",
    "FunnelDraft",
    "FunnelPage",
    "GeneratedContent",
    "GOAL_CHOICES",
    "MarketingDetails",
    "PageContent",
    "PageType",
    "Question",
    "SaveResult",
    "Template",
    "new_id",
]
