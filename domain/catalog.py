from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from domain.services.procedure_names import normalize_procedure_name, slugify

logger = logging.getLogger(__name__)

ImageDisplayMode = Literal["single", "before_after"]

DEFAULT_GALLERY_SLUG = "before-after"


@dataclass(frozen=True)
class RenderOptions:
    show_counts: bool = True
    expand_by_default: bool = False
    sharing_enabled: bool = False
    favorites_enabled: bool = True
    image_display_mode: ImageDisplayMode = "single"
    gallery_slug: str = DEFAULT_GALLERY_SLUG
    columns: int = 3
    page_path: str = ""
    canonical_terminology: bool = False

    @property
    def gallery_path(self) -> str:
        return "/" + (self.gallery_slug.strip("/") or DEFAULT_GALLERY_SLUG)


@dataclass(frozen=True)
class Procedure:
    raw_name: str
    display_name: str
    slug: str
    ids: tuple[int, ...] = ()
    case_count: int = 0
    has_nudity: bool = False

    @classmethod
    def from_dict(
        cls,
        payload: Mapping[str, Any],
        *,
        canonical_terminology: bool = False,
    ) -> Procedure:
        raw_name = _load_text(payload.get("name"))
        explicit_slug = _load_text(payload.get("slugName"))
        ids = load_id_list(payload.get("ids"))
        single_id = load_positive_int(payload.get("id"))
        if single_id is not None and single_id not in ids:
            ids = (*ids, single_id)
        return cls(
            raw_name=raw_name,
            display_name=normalize_procedure_name(
                raw_name, canonical_terminology=canonical_terminology
            ),
            slug=explicit_slug or slugify(raw_name),
            ids=ids,
            case_count=load_non_negative_int(payload.get("totalCase")),
            has_nudity=load_flag(payload.get("nudity")),
        )


@dataclass(frozen=True)
class Category:
    name: str
    slug: str
    total_cases: int
    procedures: tuple[Procedure, ...] = field(default_factory=tuple)


def category_rejection_reason(payload: object) -> str | None:
    if not isinstance(payload, Mapping):
        return "invalid_category_type"
    if not _load_text(payload.get("name")):
        return "missing_name"
    if "procedures" not in payload:
        return "missing_procedures"
    procedures = payload.get("procedures")
    if not isinstance(procedures, list):
        return "invalid_procedures_type"
    if not procedures:
        return "empty_procedures"
    return None


def load_categories(
    sidebar_data: object,
    *,
    canonical_terminology: bool = False,
) -> list[Category] | None:
    """Parse ``{"data": [...]}`` sidebar payload into categories.

    Returns None when ``data`` is missing or not a list; invalid categories are
    skipped and logged with the reason they were rejected.
    """
    if not isinstance(sidebar_data, Mapping):
        return None
    raw_categories = sidebar_data.get("data")
    if not isinstance(raw_categories, list):
        return None

    categories: list[Category] = []
    for position, raw in enumerate(raw_categories):
        reason = category_rejection_reason(raw)
        if reason is not None:
            logger.debug("Skipping sidebar category #%d: %s", position, reason)
            continue
        procedures = tuple(
            Procedure.from_dict(item, canonical_terminology=canonical_terminology)
            for item in raw["procedures"]
            if isinstance(item, Mapping)
        )
        name = _load_text(raw.get("name"))
        categories.append(
            Category(
                name=name,
                slug=slugify(name),
                total_cases=load_non_negative_int(raw.get("totalCase")),
                procedures=procedures,
            )
        )
    return categories


def load_id_list(raw: Any) -> tuple[int, ...]:
    if isinstance(raw, str):
        raw = raw.split(",")
    if not isinstance(raw, list | tuple | set):
        return ()
    result: list[int] = []
    seen: set[int] = set()
    for value in raw:
        parsed = load_positive_int(value)
        if parsed is None or parsed in seen:
            continue
        seen.add(parsed)
        result.append(parsed)
    return tuple(result)


def load_positive_int(raw: Any) -> int | None:
    if isinstance(raw, bool) or raw is None:
        return None
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if value > 0 else None


def load_non_negative_int(raw: Any) -> int:
    if isinstance(raw, bool):
        return 0
    try:
        value = int(raw)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, value)


def load_flag(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() in {"1", "true", "yes", "on"}
    return bool(raw)


def _load_text(raw: Any) -> str:
    if raw is None or isinstance(raw, Mapping | list):
        return ""
    return str(raw).strip()
