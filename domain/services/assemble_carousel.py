from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from domain import messages
from domain.catalog import RenderOptions
from domain.messages import Message
from domain.models import Case
from domain.services.case_links import build_case_url, resolve_case_procedure_slug
from domain.services.nudity import photo_has_nudity
from domain.services.procedure_names import normalize_procedure_name
from domain.services.sidebar_index import SidebarIndex
from domain.views import PlaceholderSlide, SlideView


@dataclass(frozen=True)
class CarouselOptions:
    procedure_slug_override: str | None = None
    standalone: bool = False
    force_nudity: bool = False


def assemble_carousel(
    cases: Sequence[Case],
    options: RenderOptions,
    *,
    carousel: CarouselOptions | None = None,
    index: SidebarIndex | None = None,
) -> list[SlideView]:
    """Flatten cases into slides, one per photo, in input order.

    ``index`` is the pre-built sidebar index for the batch; it is only consulted
    for nudity and link labels when a case carries bare procedure ids.
    """
    carousel = carousel or CarouselOptions()
    slides: list[SlideView] = []
    slide_index = 0
    for case in cases:
        if not case.photo_sets:
            continue
        procedure_slug = resolve_case_procedure_slug(case, carousel.procedure_slug_override)
        identifier = case.identifier
        case_url = (
            build_case_url(options.gallery_slug, procedure_slug, identifier) if identifier else ""
        )
        procedure_ids = ",".join(str(value) for value in case.referenced_procedure_ids())
        link_label = Message.of(
            messages.VIEW_CASE_LABEL,
            name=_procedure_label(case, index, options) or procedure_slug,
        )
        total = len(case.photo_sets)
        for position, photo in enumerate(case.photo_sets):
            if case.id and photo.id:
                slide_id = f"{case.id}-{photo.id}"
            else:
                slide_id = f"bd-{slide_index}"
            slides.append(
                SlideView(
                    id=slide_id,
                    index=slide_index,
                    aria_label=Message.of(messages.SLIDE_LABEL, current=position + 1, total=total),
                    photo=photo,
                    alt_text=photo.alt_text or Message.of(messages.DEFAULT_ALT_TEXT),
                    case_id=case.id,
                    procedure_slug=procedure_slug,
                    procedure_ids=procedure_ids,
                    case_url=case_url,
                    link_label=link_label,
                    show_actions=not carousel.standalone,
                    has_nudity=photo_has_nudity(
                        photo, case, index, force=carousel.force_nudity
                    ),
                )
            )
            slide_index += 1
    return slides


def placeholder_slides(start: int, count: int, procedure_slug: str = "") -> list[PlaceholderSlide]:
    if count <= 0:
        return []
    return [
        PlaceholderSlide(index=value, procedure_slug=procedure_slug)
        for value in range(start, start + count)
    ]


def _procedure_label(case: Case, index: SidebarIndex | None, options: RenderOptions) -> str:
    for procedure in case.procedures:
        name = normalize_procedure_name(
            procedure.name, canonical_terminology=options.canonical_terminology
        )
        if name:
            return name
    if index is not None:
        info = index.first_match(case.referenced_procedure_ids())
        if info is not None:
            return info.name
    return ""
