from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from domain.catalog import ImageDisplayMode
from domain.models import Case
from domain.views import CardContext, CaseCardView


class SidebarSource(Protocol):
    def fetch_sidebar(self, token: str) -> Mapping[str, Any]: ...


class CaseSource(Protocol):
    def fetch_case(
        self,
        token: str,
        case_id: str,
        *,
        seo_suffix: str = "",
        procedure_ids: Sequence[int] = (),
    ) -> Mapping[str, Any] | None: ...

    def fetch_carousel(
        self,
        token: str,
        *,
        procedure_id: int | None = None,
        start: int = 1,
        limit: int = 10,
    ) -> Sequence[Mapping[str, Any]]: ...

    def fetch_favorites(self, token: str, email: str) -> Sequence[Mapping[str, Any]]: ...


class CaseCardRenderer(Protocol):
    def render_card(
        self,
        case: Case,
        display_mode: ImageDisplayMode,
        has_nudity: bool,
        procedure_context: CardContext,
    ) -> CaseCardView: ...

