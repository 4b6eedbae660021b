from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict
from pydantic_settings.sources import PydanticBaseSettingsSource, YamlConfigSettingsSource

from adapters.api.http_client import DEFAULT_BASE_URL
from domain.catalog import DEFAULT_GALLERY_SLUG, ImageDisplayMode, RenderOptions

DEFAULT_CONFIG_PATH = Path("config/gallery/app.yaml")
CONFIG_PATH_ENV = "GALLERY_CONFIG_PATH"

_URL_CHECK = TypeAdapter(HttpUrl)


def _csv_items(value: object) -> list[str]:
    """Flatten YAML lists and comma strings (``"a, b"``, ``"[a,b]"``) into items."""
    if value is None:
        return []
    chunks = value if isinstance(value, list | tuple) else [value]
    items: list[str] = []
    for chunk in chunks:
        text = str(chunk).strip().removeprefix("[").removesuffix("]")
        items.extend(piece.strip().strip("'\"") for piece in text.split(","))
    return [item for item in items if item]


class ApiSettings(BaseModel):
    base_url: str = DEFAULT_BASE_URL
    tokens: Annotated[list[str], NoDecode] = Field(default_factory=list)
    website_property_ids: Annotated[list[int], NoDecode] = Field(default_factory=list)
    member_id: int | None = None
    timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator("base_url")
    @classmethod
    def check_base_url(cls, value: str) -> str:
        trimmed = value.strip().rstrip("/")
        _URL_CHECK.validate_python(trimmed)
        return trimmed

    @field_validator("tokens", mode="before")
    @classmethod
    def split_tokens(cls, value: object) -> list[str]:
        return _csv_items(value)

    @field_validator("website_property_ids", mode="before")
    @classmethod
    def split_property_ids(cls, value: object) -> list[int]:
        items = _csv_items(value)
        bad = [item for item in items if not item.lstrip("-").isdigit()]
        if bad:
            msg = f"gallery.api.website_property_ids must be integers, got {bad[0]!r}"
            raise ValueError(msg)
        return [int(item) for item in items]

    @property
    def primary_token(self) -> str:
        return self.tokens[0] if self.tokens else ""


class GallerySettings(BaseModel):
    title: str = "Before & After Gallery"
    api: ApiSettings = ApiSettings()
    source: Literal["api", "filesystem"] = "api"
    data_dir: Path = Path("data/gallery")
    sidebar_snapshot_path: Path = Path("data/gallery/sidebar.json")
    gallery_slug: str = DEFAULT_GALLERY_SLUG
    show_filter_counts: bool = True
    expand_nav_by_default: bool = False
    enable_sharing: bool = False
    favorites_enabled: bool = True
    image_display_mode: ImageDisplayMode = "single"
    default_columns: int = Field(default=3, ge=1, le=6)
    canonical_terminology: bool = False
    carousel_limit: int = Field(default=10, ge=1, le=100)

    @field_validator("gallery_slug", mode="before")
    @classmethod
    def first_gallery_slug(cls, value: object) -> str:
        # The plugin stored slugs as a list; only the first one is routed.
        slugs = _csv_items(value)
        slug = slugs[0].strip("/") if slugs else ""
        return slug or DEFAULT_GALLERY_SLUG

    @field_validator("image_display_mode", mode="before")
    @classmethod
    def canonical_display_mode(cls, value: object) -> str:
        mode = str(value or "single").strip().lower().replace("-", "_")
        return "before_after" if mode == "beforeafter" else mode

    def to_render_options(self, page_path: str = "") -> RenderOptions:
        return RenderOptions(
            show_counts=self.show_filter_counts,
            expand_by_default=self.expand_nav_by_default,
            sharing_enabled=self.enable_sharing,
            favorites_enabled=self.favorites_enabled,
            image_display_mode=self.image_display_mode,
            gallery_slug=self.gallery_slug,
            columns=self.default_columns,
            page_path=page_path or f"/{self.gallery_slug}",
            canonical_terminology=self.canonical_terminology,
        )


class AppSettings(BaseSettings):
    """Process settings: init kwargs, then ``GALLERY_*`` env vars, then the YAML file."""

    model_config = SettingsConfigDict(
        env_prefix="GALLERY_",
        env_nested_delimiter="__",
        yaml_file_encoding="utf-8",
    )

    gallery: GallerySettings = GallerySettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, env_settings, YamlConfigSettingsSource(settings_cls)


def resolve_config_path(config_path: Path | None = None) -> Path | None:
    explicit = config_path or _path_from_env()
    if explicit is None:
        return DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None
    if not explicit.exists():
        msg = f"Config file not found: {explicit}"
        raise FileNotFoundError(msg)
    return explicit


def load_settings(config_path: Path | None = None) -> AppSettings:
    path = resolve_config_path(config_path)
    if path is None:
        return AppSettings()

    class FileBackedSettings(AppSettings):
        model_config = SettingsConfigDict(yaml_file=path)

    return FileBackedSettings()


def _path_from_env() -> Path | None:
    raw = os.getenv(CONFIG_PATH_ENV, "").strip()
    return Path(raw) if raw else None
