import pytest

from funnel_wizard.content_generation import (
    ContentGenerationError,
    ContentGenerator,
    build_prompt,
    merge_page_content,
)
from funnel_wizard.models.funnel import FunnelPage, GeneratedContent, MarketingDetails, PageContent, PageType
from funnel_wizard.vertex_ai_adapter import parse_json_reply

DETAILS = MarketingDetails(
    target_audience="Busy parents",
    product_description="Meal kit subscription",
    goals=["Awareness", "Sales"],
)


class FakeAdapter:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def generate_json(self, prompt, *, temperature=0.7, max_output_tokens=2048):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


def test_build_prompt_embeds_page_type_and_profile():
    prompt = build_prompt(PageType.checkout, DETAILS)

    assert "checkout page" in prompt
    assert "Target audience: Busy parents" in prompt
    assert "Product description: Meal kit subscription" in prompt
    assert "Goals: Awareness, Sales" in prompt
    assert '"cta"' in prompt


def test_generate_returns_parsed_fields():
    adapter = FakeAdapter(reply={"title": "Eat well", "description": "Fresh food", "cta": "Start now"})

    content = ContentGenerator(adapter).generate("landing", DETAILS)

    assert content == GeneratedContent(title="Eat well", description="Fresh food", cta="Start now")
    assert len(adapter.prompts) == 1
    assert "landing page" in adapter.prompts[0]


@pytest.mark.parametrize(
    "adapter",
    [
        FakeAdapter(error=ValueError("Invalid JSON response")),
        FakeAdapter(error=RuntimeError("503 Service Unavailable")),
        FakeAdapter(reply=["not", "an", "object"]),
        FakeAdapter(reply={"title": 42}),
    ],
)
def test_generate_reports_a_single_failure_kind(adapter):
    with pytest.raises(ContentGenerationError) as excinfo:
        ContentGenerator(adapter).generate(PageType.landing, DETAILS)

    assert str(excinfo.value) == "Failed to generate content"


def test_merge_law_keeps_untouched_keys_and_overwrites_returned_ones():
    page = FunnelPage(id="p", type=PageType.landing, content=PageContent(title="A", cta="B"))

    merged = merge_page_content(page, {"title": "X", "description": "Y"})

    assert merged.content.as_mapping() == {"title": "X", "cta": "B", "description": "Y"}
    assert page.content.as_mapping() == {"title": "A", "cta": "B"}


def test_merge_ignores_missing_generated_fields():
    page = FunnelPage(
        id="p",
        type=PageType.content,
        content=PageContent.model_validate({"title": "Hand written", "imageUrl": "/a.png", "note": "keep"}),
    )

    merged = merge_page_content(page, GeneratedContent(description="Generated"))

    assert merged.content.as_mapping() == {
        "title": "Hand written",
        "imageUrl": "/a.png",
        "note": "keep",
        "description": "Generated",
    }


def test_merge_keeps_null_extras():
    page = FunnelPage(id="p", type=PageType.content, content=PageContent.model_validate({"title": "A", "note": None}))

    merged = merge_page_content(page, GeneratedContent(title="B"))

    assert merged.content.as_mapping() == {"title": "B", "note": None}


@pytest.mark.parametrize(
    "raw",
    [
        '{"title": "T"}',
        '```json\n{"title": "T"}\n```',
        '```\n{"title": "T"}\n```',
        '  {"title": "T"}  ',
    ],
)
def test_parse_json_reply_tolerates_code_fences(raw):
    assert parse_json_reply(raw) == {"title": "T"}


def test_parse_json_reply_rejects_prose():
    with pytest.raises(ValueError):
        parse_json_reply("Sure! Here is your content.")
