from __future__ import annotations

import os
from collections.abc import Callable, Generator
from dataclasses import replace
from pathlib import Path
from typing import Any

import pytest

from app.config import ApiSettings, AppSettings, GallerySettings
from domain.catalog import Category, RenderOptions, load_categories
from domain.services.sidebar_index import SidebarIndex
from tests.helpers.gallery_fixtures import sidebar_payload, write_gallery_data


def _clear_gallery_env() -> None:
    for key in list(os.environ):
        if key.startswith("GALLERY_"):
            os.environ.pop(key, None)


_clear_gallery_env()


@pytest.fixture(autouse=True)
def clear_gallery_env() -> Generator[None, None, None]:
    _clear_gallery_env()
    yield
    _clear_gallery_env()


@pytest.fixture
def render_options() -> RenderOptions:
    return RenderOptions(page_path="/before-after")


@pytest.fixture
def render_options_factory(render_options: RenderOptions) -> Callable[..., RenderOptions]:
    def _factory(**overrides: Any) -> RenderOptions:
        return replace(render_options, **overrides)

    return _factory


@pytest.fixture
def categories() -> list[Category]:
    loaded = load_categories(sidebar_payload())
    assert loaded is not None
    return loaded


@pytest.fixture
def sidebar_index(categories: list[Category]) -> SidebarIndex:
    return SidebarIndex.build(categories)


@pytest.fixture
def gallery_data_dir(tmp_path: Path) -> Path:
    return write_gallery_data(tmp_path / "gallery")


@pytest.fixture
def api_settings() -> ApiSettings:
    return ApiSettings(
        base_url="https://gallery-api.test",
        tokens=["token-1"],
        website_property_ids=[42],
        member_id=None,
        timeout_seconds=5.0,
    )


@pytest.fixture
def gallery_settings(tmp_path: Path, api_settings: ApiSettings) -> GallerySettings:
    return GallerySettings(
        title="Test Gallery",
        api=api_settings,
        source="filesystem",
        data_dir=tmp_path / "gallery",
        sidebar_snapshot_path=tmp_path / "snapshots" / "sidebar.json",
        gallery_slug="before-after",
        show_filter_counts=True,
        expand_nav_by_default=False,
        enable_sharing=False,
        favorites_enabled=True,
        image_display_mode="single",
        default_columns=3,
        canonical_terminology=False,
        carousel_limit=10,
    )


@pytest.fixture
def gallery_settings_factory(
    gallery_settings: GallerySettings,
) -> Callable[..., GallerySettings]:
    def _factory(**overrides: object) -> GallerySettings:
        return gallery_settings.model_copy(update=overrides)

    return _factory


@pytest.fixture
def app_settings(gallery_settings: GallerySettings) -> AppSettings:
    return AppSettings(gallery=gallery_settings)


@pytest.fixture
def app_settings_factory(
    gallery_settings_factory: Callable[..., GallerySettings],
) -> Callable[..., AppSettings]:
    def _factory(**overrides: object) -> AppSettings:
        return AppSettings(gallery=gallery_settings_factory(**overrides))

    return _factory
