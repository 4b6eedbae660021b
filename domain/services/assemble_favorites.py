from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from domain import messages
from domain.catalog import RenderOptions
from domain.messages import Message
from domain.models import Case, ProcedureRef
from domain.ports.gallery import CaseCardRenderer
from domain.services.nudity import case_has_nudity
from domain.services.procedure_names import normalize_procedure_name
from domain.services.sidebar_index import SidebarIndex
from domain.views import CardContext, CaseCardView, FavoritesView, Text

logger = logging.getLogger(__name__)


def assemble_favorites(
    cases: Sequence[Case],
    options: RenderOptions,
    *,
    index: SidebarIndex,
    card_renderer: CaseCardRenderer,
) -> FavoritesView:
    cards: list[CaseCardView] = []
    for case in cases:
        case_id = case.primary_id
        if not case_id:
            logger.debug("Skipping favorite case without an identifier.")
            continue
        case = with_index_procedures(case, index)
        main_image_url = favorite_main_image(case)
        title = favorite_procedure_title(case, index, options)
        context = CardContext(title=title, main_image_url=main_image_url)
        try:
            card = card_renderer.render_card(
                case,
                options.image_display_mode,
                case_has_nudity(case, index),
                context,
            )
        except Exception:  # noqa: BLE001
            logger.exception("Case card rendering failed for case %s; using fallback card.", case_id)
            card = CaseCardView.fallback(case_id, main_image_url, title)
        cards.append(card)

    count = len(cards)
    return FavoritesView(
        count=count,
        columns=options.columns,
        cards=tuple(cards),
        count_label=Message.of(
            messages.FAVORITE_COUNT_ONE if count == 1 else messages.FAVORITE_COUNT_MANY,
            count=count,
        ),
        placeholder=None if cards else Message.of(messages.NO_FAVORITES),
    )


def favorite_main_image(case: Case) -> str:
    photo = case.first_photo
    if photo is None:
        return ""
    return photo.processed_url or photo.before_url or photo.after_url


def favorite_procedure_title(
    case: Case,
    index: SidebarIndex,
    options: RenderOptions,
) -> Text:
    for procedure in case.procedures:
        name = normalize_procedure_name(
            procedure.name, canonical_terminology=options.canonical_terminology
        )
        if name:
            return name
    info = index.first_match(case.referenced_procedure_ids()[:1])
    if info is not None and info.name:
        return info.name
    return Message.of(messages.UNKNOWN_PROCEDURE)


def with_index_procedures(case: Case, index: SidebarIndex) -> Case:
    """Give a case that only lists procedure ids named procedure refs from the index."""
    if case.procedures or not case.procedure_ids:
        return case
    refs: list[ProcedureRef] = []
    for procedure_id in case.procedure_ids:
        info = index.lookup(procedure_id)
        if info is not None:
            refs.append(ProcedureRef(id=procedure_id, name=info.name, slug=info.slug))
    if not refs:
        return case
    return replace(case, procedures=tuple(refs))
