import os

import pytest

os.environ["ENVIRONMENT"] = "dev"
os.environ.pop("PROJECT_ID", None)

from funnel_wizard.models.funnel import FunnelDraft, FunnelPage, MarketingDetails, PageType  # noqa: E402


@pytest.fixture()
def landing_page() -> FunnelPage:
    return FunnelPage(id="page-landing", type=PageType.landing)


@pytest.fixture()
def complete_draft(landing_page: FunnelPage) -> FunnelDraft:
    return FunnelDraft(
        id="draft-1",
        name="Promo",
        description="d",
        pages=[landing_page],
        flow=[landing_page.id],
        marketing_details=MarketingDetails(
            target_audience="t",
            product_description="p",
            goals=["Awareness"],
        ),
    )
