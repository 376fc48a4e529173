from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from .models.funnel import FunnelDraft, GeneratedContent, MarketingDetails, PageType, SaveResult, Template

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class ApiClientError(Exception):
    pass


class FunnelApiClient:
    """Async client for the funnel API; implements the session's gateway calls."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "FunnelApiClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def generate_content(self, page_type: PageType | str, marketing_details: MarketingDetails) -> GeneratedContent:
        body = {
            "pageType": PageType(page_type).value,
            "marketingDetails": marketing_details.model_dump(mode="json", by_alias=True),
        }
        data = await self._post("/api/generate-content", body)
        return self._parse(GeneratedContent, data)

    async def select_templates(self, draft: FunnelDraft) -> list[Template]:
        data = await self._post("/api/select-template", _draft_body(draft))
        if not isinstance(data, dict) or not isinstance(data.get("templates"), list):
            raise ApiClientError("Template response is missing 'templates'")
        return [self._parse(Template, item) for item in data["templates"]]

    async def save_funnel(self, draft: FunnelDraft) -> SaveResult:
        # A failed save still carries {success: false, message}; report it as a result, not an error.
        try:
            response = await self._client.post("/api/save-funnel", json=_draft_body(draft))
        except httpx.HTTPError as exc:
            raise ApiClientError(f"Save request failed: {exc}") from exc
        try:
            return SaveResult.model_validate(response.json())
        except ValueError as exc:
            raise ApiClientError(f"Unexpected save response ({response.status_code})") from exc

    async def get_funnel(self, funnel_id: str) -> FunnelDraft | None:
        try:
            response = await self._client.get(f"/api/funnels/{funnel_id}")
        except httpx.HTTPError as exc:
            raise ApiClientError(f"Funnel lookup failed: {exc}") from exc
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        self._raise_for_status(response)
        return self._parse(FunnelDraft, response.json())

    async def list_funnels(self) -> list[FunnelDraft]:
        try:
            response = await self._client.get("/api/funnels")
        except httpx.HTTPError as exc:
            raise ApiClientError(f"Funnel listing failed: {exc}") from exc
        self._raise_for_status(response)
        return [self._parse(FunnelDraft, item) for item in response.json()]

    async def _post(self, path: str, body: dict[str, Any]) -> Any:
        try:
            response = await self._client.post(path, json=body)
        except httpx.HTTPError as exc:
            raise ApiClientError(f"POST {path} failed: {exc}") from exc
        self._raise_for_status(response)
        try:
            return response.json()
        except ValueError as exc:
            raise ApiClientError(f"POST {path} returned invalid JSON") from exc

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        logger.warning(
            "Funnel API returned an error status",
            extra={"url": str(response.request.url), "status_code": response.status_code},
        )
        raise ApiClientError(f"{response.request.method} {response.request.url.path} returned {response.status_code}")

    def _parse(self, model: type, data: Any) -> Any:
        try:
            return model.model_validate(data)
        except ValidationError as exc:
            raise ApiClientError(f"Unexpected {model.__name__} payload") from exc


def _draft_body(draft: FunnelDraft) -> dict[str, Any]:
    return draft.model_dump(mode="json", by_alias=True)


__all__ = ["ApiClientError", "DEFAULT_TIMEOUT_SECONDS", "FunnelApiClient"]
