from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from domain.catalog import Category, load_categories
from domain.ports.gallery import SidebarSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcedureInfo:
    name: str
    slug: str
    nudity: bool


class SidebarIndex:
    """Read-only procedure id lookup built from one sidebar category list."""

    def __init__(self, entries: Mapping[int, ProcedureInfo] | None = None) -> None:
        self._entries: dict[int, ProcedureInfo] = dict(entries or {})

    @classmethod
    def empty(cls) -> SidebarIndex:
        return cls()

    @classmethod
    def build(cls, categories: Iterable[Category] | None) -> SidebarIndex:
        entries: dict[int, ProcedureInfo] = {}
        for category in categories or ():
            for procedure in category.procedures:
                info = ProcedureInfo(
                    name=procedure.display_name,
                    slug=procedure.slug,
                    nudity=procedure.has_nudity,
                )
                for procedure_id in procedure.ids:
                    entries.setdefault(procedure_id, info)
        return cls(entries)

    @classmethod
    def from_sidebar_data(
        cls,
        sidebar_data: object,
        *,
        canonical_terminology: bool = False,
    ) -> SidebarIndex:
        return cls.build(
            load_categories(sidebar_data, canonical_terminology=canonical_terminology)
        )

    def lookup(self, procedure_id: object) -> ProcedureInfo | None:
        try:
            key = int(str(procedure_id).strip())
        except (TypeError, ValueError):
            return None
        return self._entries.get(key)

    def first_match(self, procedure_ids: Sequence[int]) -> ProcedureInfo | None:
        for procedure_id in procedure_ids:
            info = self._entries.get(procedure_id)
            if info is not None:
                return info
        return None

    def __len__(self) -> int:
        return len(self._entries)


class SidebarIndexProvider:
    """Request-scoped holder that fetches and builds each token's index at most once."""

    def __init__(
        self,
        source: SidebarSource,
        *,
        canonical_terminology: bool = False,
    ) -> None:
        self._source = source
        self._canonical_terminology = canonical_terminology
        self._indexes: dict[str, SidebarIndex] = {}
        self._payloads: dict[str, Mapping[str, Any]] = {}

    def get(self, token: str) -> SidebarIndex:
        cached = self._indexes.get(token)
        if cached is not None:
            return cached
        payload = self.sidebar_data(token)
        index = SidebarIndex.from_sidebar_data(
            payload, canonical_terminology=self._canonical_terminology
        )
        self._indexes[token] = index
        return index

    def sidebar_data(self, token: str) -> Mapping[str, Any]:
        cached = self._payloads.get(token)
        if cached is not None:
            return cached
        try:
            payload = self._source.fetch_sidebar(token)
        except Exception:  # noqa: BLE001
            logger.exception("Sidebar fetch failed; continuing with an empty index.")
            payload = {}
        self._payloads[token] = payload
        return payload
