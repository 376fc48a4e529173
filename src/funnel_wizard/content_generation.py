from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

from .models.funnel import FunnelPage, GeneratedContent, MarketingDetails, PageContent, PageType

logger = logging.getLogger(__name__)


class JsonGenerator(Protocol):
    def generate_json(self, prompt: str, *, temperature: float = ..., max_output_tokens: int = ...) -> Any:
        ...


class ContentGenerationError(Exception):
    """Raised for any failure to obtain page copy; the cause is chained, not surfaced."""

    def __init__(self, message: str = "Failed to generate content") -> None:
        super().__init__(message)


def build_prompt(page_type: PageType | str, marketing_details: MarketingDetails) -> str:
    page_type = PageType(page_type).value
    goals = ", ".join(marketing_details.goals)
    return f"""Generate content for a {page_type} page in a marketing funnel.
Target audience: {marketing_details.target_audience}
Product description: {marketing_details.product_description}
Goals: {goals}

Provide a JSON object with the following structure:
{{
  "title": "Page title",
  "description": "Main content or description",
  "cta": "Call to action text"
}}
"""


class ContentGenerator:
    def __init__(self, adapter: JsonGenerator, *, temperature: float = 0.7) -> None:
        self._adapter = adapter
        self._temperature = temperature

    def generate(self, page_type: PageType | str, marketing_details: MarketingDetails) -> GeneratedContent:
        page_type = PageType(page_type).value
        prompt = build_prompt(page_type, marketing_details)
        try:
            result = self._adapter.generate_json(prompt, temperature=self._temperature)
            if not isinstance(result, dict):
                raise ValueError(f"Expected a JSON object, got {type(result).__name__}")
            content = GeneratedContent.model_validate(result)
        except ValueError as exc:
            logger.error(
                "Generated content could not be parsed",
                exc_info=True,
                extra={"page_type": page_type},
            )
            raise ContentGenerationError() from exc
        except Exception as exc:
            logger.error(
                "Content generation request failed",
                exc_info=True,
                extra={"page_type": page_type},
            )
            raise ContentGenerationError() from exc

        logger.info(
            "Generated page content",
            extra={"page_type": page_type, "fields": sorted(content.model_dump(exclude_none=True))},
        )
        return content


def merge_page_content(page: FunnelPage, generated: GeneratedContent | Mapping[str, Any]) -> FunnelPage:
    """Shallow-merge generated fields into the page content.

    Keys present in ``generated`` overwrite, every other existing key is kept.
    """
    if isinstance(generated, GeneratedContent):
        updates = generated.model_dump(by_alias=True, exclude_none=True)
    else:
        updates = {key: value for key, value in generated.items() if value is not None}

    merged = {**page.content.as_mapping(), **updates}
    return page.model_copy(update={"content": PageContent.model_validate(merged)})


__all__ = ["ContentGenerationError", "ContentGenerator", "build_prompt", "merge_page_content"]
