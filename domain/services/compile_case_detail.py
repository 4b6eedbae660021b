from __future__ import annotations

from dataclasses import dataclass

from domain import messages
from domain.catalog import RenderOptions
from domain.messages import Message
from domain.models import Case, CaseRef, PatientAttrs, ProcedureRef
from domain.services.case_links import (
    FALLBACK_PROCEDURE_SLUG,
    build_case_url,
    request_path_segment,
)
from domain.services.nudity import case_has_nudity
from domain.services.procedure_names import normalize_procedure_name, slugify
from domain.services.rich_text import sanitize_paragraphs
from domain.services.sidebar_index import SidebarIndex
from domain.views import (
    AttributeRow,
    Card,
    CaseDetailView,
    CaseHeader,
    ImageSection,
    MainImage,
    NavButton,
    SeoView,
    Thumbnail,
)

# Index of the procedure segment in "/<gallery>/<procedure>/<case>/".split("/").
PROCEDURE_PATH_SEGMENT = 2


@dataclass(frozen=True)
class CaseDetailContext:
    procedure_slug: str | None = None
    procedure_name: str | None = None
    request_path: str = ""


@dataclass(frozen=True)
class ResolvedProcedure:
    name: str
    slug: str
    id: int | None = None


def compile_case_detail(
    case: Case,
    options: RenderOptions,
    *,
    context: CaseDetailContext | None = None,
    index: SidebarIndex | None = None,
) -> CaseDetailView:
    context = context or CaseDetailContext()
    resolved = resolve_header_procedure(case, context, options, index)
    display_name = context.procedure_name or resolved.name
    current_slug = context.procedure_slug or resolved.slug or FALLBACK_PROCEDURE_SLUG
    case_id = case.primary_id

    return CaseDetailView(
        case_id=case_id,
        procedure_name=display_name,
        procedure_slug=current_slug,
        has_nudity=case_has_nudity(case, index)
        or any(photo.has_nudity for photo in case.photo_sets),
        header=_build_header(case, options, display_name, current_slug),
        images=_build_images(case, display_name),
        cards=_build_cards(case, options, index),
        seo=_build_seo(case, display_name),
        show_favorite=options.favorites_enabled,
        show_share=options.sharing_enabled,
    )


def resolve_header_procedure(
    case: Case,
    context: CaseDetailContext,
    options: RenderOptions,
    index: SidebarIndex | None = None,
) -> ResolvedProcedure:
    fallback_id: int | None = None
    if case.procedures:
        chosen = _select_procedure(case.procedures, context.request_path)
        name = normalize_procedure_name(
            chosen.name, canonical_terminology=options.canonical_terminology
        )
        if name:
            return ResolvedProcedure(
                name=name, slug=chosen.slug or slugify(chosen.name), id=chosen.id
            )
        if chosen.id is not None:
            info = index.lookup(chosen.id) if index is not None else None
            if info is not None:
                return ResolvedProcedure(name=info.name, slug=info.slug, id=chosen.id)
            fallback_id = chosen.id

    if case.procedure_ids:
        first_id = case.procedure_ids[0]
        info = index.lookup(first_id) if index is not None else None
        if info is not None:
            return ResolvedProcedure(name=info.name, slug=info.slug, id=first_id)
        fallback_id = fallback_id or first_id

    if fallback_id is not None:
        return ResolvedProcedure(
            name=f"Procedure #{fallback_id}",
            slug=f"procedure-{fallback_id}",
            id=fallback_id,
        )
    return ResolvedProcedure(name="", slug="")


def _select_procedure(procedures: tuple[ProcedureRef, ...], request_path: str) -> ProcedureRef:
    url_slug = request_path_segment(request_path, PROCEDURE_PATH_SEGMENT)
    if url_slug:
        for procedure in procedures:
            if procedure.name and slugify(procedure.name) == url_slug:
                return procedure
            if procedure.slug and procedure.slug == url_slug:
                return procedure
    return procedures[0]


def _build_header(
    case: Case,
    options: RenderOptions,
    display_name: str,
    current_slug: str,
) -> CaseHeader:
    case_id = case.primary_id
    navigation = case.navigation
    return CaseHeader(
        headline=case.seo.headline if case.seo is not None else "",
        procedure_name=display_name,
        case_label=f"#{case_id}" if case_id else "",
        back_link=NavButton(
            url=options.gallery_path + "/", label=Message.of(messages.BACK_TO_GALLERY)
        ),
        previous=_nav_button(
            navigation.previous if navigation else None,
            options,
            current_slug,
            messages.PREVIOUS_CASE,
        ),
        next=_nav_button(
            navigation.next if navigation else None,
            options,
            current_slug,
            messages.NEXT_CASE,
        ),
    )


def _nav_button(
    ref: CaseRef | None,
    options: RenderOptions,
    current_slug: str,
    label: str,
) -> NavButton | None:
    if ref is None or not ref.slug:
        return None
    url = build_case_url(options.gallery_slug, ref.procedure_slug or current_slug, ref.slug)
    return NavButton(url=url, label=Message.of(label))


def _build_images(case: Case, display_name: str) -> ImageSection:
    if not case.photo_sets:
        return ImageSection(placeholder=Message.of(messages.NO_IMAGES))

    default_alt = Message.of(
        messages.MAIN_IMAGE_ALT, name=display_name, case_id=case.primary_id
    ).text
    first = case.photo_sets[0]
    main = (
        MainImage(url=first.processed_url, alt_text=first.alt_text or default_alt)
        if first.processed_url
        else None
    )

    thumbnails: list[Thumbnail] = []
    if len(case.photo_sets) > 1:
        for position, photo in enumerate(case.photo_sets):
            if not photo.processed_url:
                continue
            thumbnails.append(
                Thumbnail(
                    index=position,
                    url=photo.processed_url,
                    alt_text=photo.alt_text or default_alt,
                    active=not thumbnails,
                )
            )
    return ImageSection(main=main, thumbnails=tuple(thumbnails))


def _build_cards(
    case: Case,
    options: RenderOptions,
    index: SidebarIndex | None,
) -> tuple[Card, ...]:
    cards: list[Card] = []

    badges = _procedure_badges(case, options, index)
    if badges:
        cards.append(
            Card(
                kind="procedures",
                title=Message.of(messages.PROCEDURES_PERFORMED),
                badges=badges,
            )
        )

    patient_rows = _patient_rows(case.primary_id, case.patient)
    if patient_rows:
        cards.append(
            Card(
                kind="patient",
                title=Message.of(messages.PATIENT_INFORMATION),
                rows=patient_rows,
            )
        )

    cards.extend(_procedure_detail_cards(case))

    paragraphs = sanitize_paragraphs(case.notes)
    if paragraphs:
        cards.append(
            Card(kind="notes", title=Message.of(messages.CASE_NOTES), paragraphs=paragraphs)
        )
    return tuple(cards)


def _procedure_badges(
    case: Case,
    options: RenderOptions,
    index: SidebarIndex | None,
) -> tuple[str, ...]:
    badges: list[str] = []
    for procedure in case.procedures:
        name = normalize_procedure_name(
            procedure.name, canonical_terminology=options.canonical_terminology
        )
        if name:
            badges.append(name)
    if badges or index is None:
        return tuple(badges)
    for procedure_id in case.referenced_procedure_ids():
        info = index.lookup(procedure_id)
        if info is not None and info.name:
            badges.append(info.name)
    return tuple(badges)


def _patient_rows(case_id: str, patient: PatientAttrs | None) -> tuple[AttributeRow, ...]:
    rows: list[AttributeRow] = []
    if case_id:
        rows.append(AttributeRow(label=Message.of(messages.CASE_ID), value=case_id))
    if patient is None:
        return tuple(rows)
    if patient.ethnicity:
        rows.append(AttributeRow(label=Message.of(messages.ETHNICITY), value=patient.ethnicity))
    if patient.gender:
        gender = patient.gender[:1].upper() + patient.gender[1:]
        rows.append(AttributeRow(label=Message.of(messages.GENDER), value=gender))
    if patient.age:
        rows.append(
            AttributeRow(
                label=Message.of(messages.AGE),
                value=Message.of(messages.AGE_VALUE, age=patient.age),
            )
        )
    if patient.height:
        height = patient.height + (f" {patient.height_unit}" if patient.height_unit else "")
        rows.append(AttributeRow(label=Message.of(messages.HEIGHT), value=height))
    if patient.weight:
        rows.append(
            AttributeRow(
                label=Message.of(messages.WEIGHT),
                value=Message.of(messages.WEIGHT_VALUE, weight=patient.weight),
            )
        )
    return tuple(rows)


def _procedure_detail_cards(case: Case) -> list[Card]:
    scalar_entries: dict[str, str] = {}
    list_entries: dict[str, tuple[str, ...]] = {}
    # A label shows on one card only; the last procedure mentioning it wins.
    for details in case.procedure_details.values():
        for label, value in details.items():
            if isinstance(value, tuple):
                scalar_entries.pop(label, None)
                list_entries[label] = value
            else:
                list_entries.pop(label, None)
                scalar_entries[label] = value

    cards: list[Card] = []
    if scalar_entries:
        cards.append(
            Card(
                kind="details",
                title=Message.of(messages.PROCEDURE_DETAILS),
                rows=tuple(
                    AttributeRow(label=label, value=value)
                    for label, value in scalar_entries.items()
                ),
            )
        )
    for label, items in list_entries.items():
        cards.append(Card(kind="list", title=label, items=items))
    return cards


def _build_seo(case: Case, display_name: str) -> SeoView:
    case_id = case.primary_id
    seo = case.seo
    title = seo.page_title if seo is not None and seo.page_title else ""
    description = seo.page_description if seo is not None and seo.page_description else ""
    return SeoView(
        title=title
        or Message.of(messages.SEO_TITLE, name=display_name, case_id=case_id).text,
        description=description
        or Message.of(messages.SEO_DESCRIPTION, name=display_name, case_id=case_id).text,
    )
