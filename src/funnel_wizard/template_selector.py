from __future__ import annotations

import logging
from typing import Sequence

from .models.funnel import FunnelDraft, Template

logger = logging.getLogger(__name__)


DEFAULT_TEMPLATES: Sequence[Template] = (
    Template(
        id="1",
        name="E-commerce Product Launch",
        description="Perfect for introducing new products to the market",
        thumbnail_url="/templates/ecommerce-product-launch.jpg",
    ),
    Template(
        id="2",
        name="Lead Generation Webinar",
        description="Ideal for capturing leads through educational content",
        thumbnail_url="/templates/lead-generation-webinar.jpg",
    ),
    Template(
        id="3",
        name="SaaS Free Trial",
        description="Designed to convert visitors into free trial users",
        thumbnail_url="/templates/saas-free-trial.jpg",
    ),
)


def select_best_templates(
    draft: FunnelDraft,
    *,
    templates: Sequence[Template] = DEFAULT_TEMPLATES,
) -> list[Template]:
    # No ranking yet: every known template is suggested for every draft.
    logger.debug(
        "Selecting templates",
        extra={"funnel_id": draft.id, "goals": list(draft.marketing_details.goals)},
    )
    return [template.model_copy() for template in templates]


__all__ = ["DEFAULT_TEMPLATES", "select_best_templates"]
