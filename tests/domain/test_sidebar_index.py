from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import pytest

from domain.catalog import Category, load_categories
from domain.services.sidebar_index import ProcedureInfo, SidebarIndex, SidebarIndexProvider
from tests.helpers.gallery_fixtures import sidebar_payload


class RecordingSidebarSource:
    def __init__(self, payload: Mapping[str, Any] | Exception) -> None:
        self.payload = payload
        self.calls: list[str] = []

    def fetch_sidebar(self, token: str) -> Mapping[str, Any]:
        self.calls.append(token)
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


def test_lookup_returns_normalized_name_slug_and_nudity(sidebar_index: SidebarIndex) -> None:
    assert sidebar_index.lookup(101) == ProcedureInfo(
        name="Rhinoplasty", slug="rhinoplasty", nudity=False
    )
    assert sidebar_index.lookup("102") == sidebar_index.lookup(101)
    assert sidebar_index.lookup(201) == ProcedureInfo(
        name="Tummy Tuck", slug="tummy-tuck", nudity=True
    )
    assert len(sidebar_index) == 4


@pytest.mark.parametrize("procedure_id", [999, "abc", None, ""])
def test_lookup_miss_is_none(sidebar_index: SidebarIndex, procedure_id: object) -> None:
    assert sidebar_index.lookup(procedure_id) is None


def test_building_twice_yields_identical_lookups(categories: list[Category]) -> None:
    first = SidebarIndex.build(categories)
    second = SidebarIndex.build(categories)

    for procedure_id in (101, 102, 103, 201):
        assert first.lookup(procedure_id) == second.lookup(procedure_id)


def test_first_procedure_wins_on_duplicate_ids() -> None:
    payload = {
        "data": [
            {"name": "Face", "procedures": [{"name": "botox", "ids": [5]}]},
            {"name": "Skin", "procedures": [{"name": "filler", "ids": [5], "nudity": True}]},
        ]
    }

    index = SidebarIndex.build(load_categories(payload))

    assert index.lookup(5) == ProcedureInfo(name="Botox", slug="botox", nudity=False)


@pytest.mark.parametrize("payload", [{}, {"data": []}, {"data": "bad"}])
def test_malformed_sidebar_builds_empty_index(payload: object) -> None:
    index = SidebarIndex.from_sidebar_data(payload)

    assert len(index) == 0
    assert index.lookup(101) is None


def test_first_match_walks_ids_in_order(sidebar_index: SidebarIndex) -> None:
    info = sidebar_index.first_match([999, 201, 101])

    assert info is not None
    assert info.slug == "tummy-tuck"
    assert sidebar_index.first_match([]) is None


def test_provider_fetches_once_per_token() -> None:
    source = RecordingSidebarSource(sidebar_payload())
    provider = SidebarIndexProvider(source)

    first = provider.get("token-1")
    second = provider.get("token-1")
    provider.sidebar_data("token-1")

    assert first is second
    assert source.calls == ["token-1"]


def test_provider_degrades_to_empty_index_on_fetch_failure(
    caplog: pytest.LogCaptureFixture,
) -> None:
    source = RecordingSidebarSource(RuntimeError("upstream down"))
    provider = SidebarIndexProvider(source)

    index = provider.get("token-1")

    assert len(index) == 0
    assert provider.sidebar_data("token-1") == {}
    assert source.calls == ["token-1"]
    assert "Sidebar fetch failed" in caplog.text
