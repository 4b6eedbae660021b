from __future__ import annotations

from domain.catalog import DEFAULT_GALLERY_SLUG
from domain.models import Case
from domain.services.procedure_names import slugify

FALLBACK_PROCEDURE_SLUG = "case"


def resolve_case_procedure_slug(case: Case, override: str | None = None) -> str:
    if override:
        return override
    if case.procedures:
        first = case.procedures[0]
        slug = first.slug or slugify(first.name)
        if slug:
            return slug
    return FALLBACK_PROCEDURE_SLUG


def build_case_url(gallery_slug: str, procedure_slug: str, identifier: str) -> str:
    gallery = gallery_slug.strip("/") or DEFAULT_GALLERY_SLUG
    return f"/{gallery}/{procedure_slug.strip('/')}/{identifier.strip('/')}/"


def build_filter_url(page_path: str, procedure_slug: str) -> str:
    return f"{page_path.rstrip('/')}/{procedure_slug}/"


def request_path_segment(request_path: str, position: int) -> str:
    # "/gallery/procedure/case/" splits to ["", "gallery", "procedure", "case", ""].
    path = request_path.split("?", 1)[0]
    segments = path.split("/")
    if position < len(segments):
        return segments[position]
    return ""
