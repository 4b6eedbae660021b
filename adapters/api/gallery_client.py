from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

import httpx
import orjson

from adapters.api.http_client import create_http_client
from domain.ports.gallery import CaseSource, SidebarSource

SIDEBAR_PATH = "/api/plugin/combine/sidebar"
CASE_DETAIL_PATH = "/api/plugin/combine/cases/{case_id}"
CAROUSEL_PATH = "/api/plugin/carousel"
FAVORITES_LIST_PATH = "/api/plugin/combine/favorites/list"


class GalleryApiError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class HttpGalleryClient(SidebarSource, CaseSource):
    def __init__(
        self,
        client: httpx.Client,
        website_property_ids: Sequence[int] = (),
        member_id: int | None = None,
    ) -> None:
        self._client = client
        self._website_property_ids = [int(value) for value in website_property_ids]
        self._member_id = member_id

    @classmethod
    def from_settings(
        cls,
        settings: Any,
        transport: httpx.BaseTransport | None = None,
    ) -> HttpGalleryClient:
        client = create_http_client(
            base_url=settings.base_url,
            timeout_seconds=settings.timeout_seconds,
            transport=transport,
        )
        return cls(client, settings.website_property_ids, settings.member_id)

    def close(self) -> None:
        self._client.close()

    def fetch_sidebar(self, token: str) -> Mapping[str, Any]:
        payload = self._request("POST", SIDEBAR_PATH, json={"apiTokens": [token]})
        return payload if isinstance(payload, dict) else {}

    def fetch_case(
        self,
        token: str,
        case_id: str,
        *,
        seo_suffix: str = "",
        procedure_ids: Sequence[int] = (),
    ) -> Mapping[str, Any] | None:
        params = {"seoSuffixUrl": seo_suffix} if seo_suffix else None
        body = {
            "apiTokens": [token],
            "procedureIds": [int(value) for value in procedure_ids],
            "websitePropertyIds": list(self._website_property_ids),
        }
        try:
            payload = self._request(
                "POST", CASE_DETAIL_PATH.format(case_id=case_id), json=body, params=params
            )
        except GalleryApiError as exc:
            if exc.status_code == 404:
                return None
            raise
        if isinstance(payload, dict) and isinstance(payload.get("data"), list):
            records = [item for item in payload["data"] if isinstance(item, dict)]
            return records[0] if records else None
        return payload if isinstance(payload, dict) and payload else None

    def fetch_carousel(
        self,
        token: str,
        *,
        procedure_id: int | None = None,
        start: int = 1,
        limit: int = 10,
    ) -> list[Mapping[str, Any]]:
        params: dict[str, str | int] = {
            "start": max(1, start),
            "limit": max(1, limit),
            "apiToken": token,
        }
        if self._website_property_ids:
            params["websitePropertyId"] = self._website_property_ids[0]
        if procedure_id is not None:
            params["procedureId"] = procedure_id
        if self._member_id is not None:
            params["memberId"] = self._member_id
        return _records(self._request("GET", CAROUSEL_PATH, params=params))

    def fetch_favorites(self, token: str, email: str) -> list[Mapping[str, Any]]:
        body = {
            "apiTokens": [token],
            "websitePropertyIds": list(self._website_property_ids),
            "email": email,
        }
        return _records(self._request("POST", FAVORITES_LIST_PATH, json=body))

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: Mapping[str, Any] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        try:
            response = self._client.request(method, path, json=json, params=params)
        except httpx.HTTPError as exc:
            msg = f"Gallery API request failed: {method} {path}"
            raise GalleryApiError(msg) from exc
        if response.status_code >= 400:
            msg = f"Gallery API returned {response.status_code} for {method} {path}"
            raise GalleryApiError(msg, status_code=response.status_code)
        try:
            return orjson.loads(response.content)
        except orjson.JSONDecodeError as exc:
            msg = f"Gallery API returned invalid JSON for {method} {path}"
            raise GalleryApiError(msg, status_code=response.status_code) from exc


def _records(payload: Any) -> list[Mapping[str, Any]]:
    if isinstance(payload, dict):
        payload = payload.get("data")
    if not isinstance(payload, list):
        return []
    return [item for item in payload if isinstance(item, dict)]
