from __future__ import annotations

from collections.abc import Callable

import pytest

from domain.catalog import ImageDisplayMode, RenderOptions
from domain.messages import Message
from domain.models import Case
from domain.services.assemble_favorites import assemble_favorites, favorite_main_image
from domain.services.build_case_card import CaseCardBuilder
from domain.services.sidebar_index import SidebarIndex
from domain.views import CardContext, CaseCardView
from tests.helpers.gallery_fixtures import case_payload


class RecordingCardRenderer:
    def __init__(self, fail_for: set[str] | None = None) -> None:
        self.fail_for = fail_for or set()
        self.calls: list[tuple[str, ImageDisplayMode, bool, CardContext]] = []

    def render_card(
        self,
        case: Case,
        display_mode: ImageDisplayMode,
        has_nudity: bool,
        procedure_context: CardContext,
    ) -> CaseCardView:
        self.calls.append((case.primary_id, display_mode, has_nudity, procedure_context))
        if case.primary_id in self.fail_for:
            msg = f"card template broke for {case.primary_id}"
            raise RuntimeError(msg)
        return CaseCardView(
            case_id=case.primary_id,
            image_url=procedure_context.main_image_url,
            procedure_title=procedure_context.title,
        )


def test_empty_favorites_yield_zero_count_and_placeholder(
    render_options: RenderOptions, sidebar_index: SidebarIndex
) -> None:
    view = assemble_favorites(
        [], render_options, index=sidebar_index, card_renderer=RecordingCardRenderer()
    )

    assert view.count == 0
    assert view.cards == ()
    assert view.is_empty is True
    assert view.placeholder == Message.of(
        "No favorites found. Start adding your favorite cases to see them here!"
    )
    assert view.count_label.text == "0 favorites"


def test_favorites_resolve_title_nudity_and_image(
    render_options_factory: Callable[..., RenderOptions], sidebar_index: SidebarIndex
) -> None:
    options = render_options_factory(image_display_mode="before_after", columns=2)
    renderer = RecordingCardRenderer()
    cases = [
        Case.from_dict(case_payload()),
        Case.from_dict(case_payload(id="456", procedures=[], procedureIds=[201])),
        Case.from_dict(case_payload(id="789", procedures=[], procedureIds=[999])),
    ]

    view = assemble_favorites(cases, options, index=sidebar_index, card_renderer=renderer)

    assert view.count == 3
    assert view.columns == 2
    assert view.placeholder is None
    assert [(call[0], call[1], call[2]) for call in renderer.calls] == [
        ("123", "before_after", False),
        ("456", "before_after", True),
        ("789", "before_after", False),
    ]
    titles = [call[3].title for call in renderer.calls]
    assert titles == ["Rhinoplasty", "Tummy Tuck", Message.of("Unknown Procedure")]
    assert renderer.calls[0][3].main_image_url == "https://cdn.test/123/p1.jpg"


def test_cases_without_identifier_are_skipped(
    render_options: RenderOptions, sidebar_index: SidebarIndex
) -> None:
    cases = [
        Case.from_dict(case_payload(id="", caseDetails=[])),
        Case.from_dict(case_payload(id="", caseDetails=[{"caseId": "55"}])),
    ]

    view = assemble_favorites(
        cases, render_options, index=sidebar_index, card_renderer=RecordingCardRenderer()
    )

    assert [card.case_id for card in view.cards] == ["55"]
    assert view.count_label == Message.of("{count} favorite", count=1)


def test_renderer_failure_uses_minimal_fallback_card(
    render_options: RenderOptions,
    sidebar_index: SidebarIndex,
    caplog: pytest.LogCaptureFixture,
) -> None:
    cases = [Case.from_dict(case_payload()), Case.from_dict(case_payload(id="124"))]
    renderer = RecordingCardRenderer(fail_for={"123"})

    view = assemble_favorites(cases, render_options, index=sidebar_index, card_renderer=renderer)

    assert view.count == 2
    fallback, regular = view.cards
    assert fallback == CaseCardView.fallback("123", "https://cdn.test/123/p1.jpg", "Rhinoplasty")
    assert fallback.minimal is True
    assert regular.minimal is False
    assert "using fallback card" in caplog.text


def test_favorite_main_image_falls_back_to_before_then_after() -> None:
    before_only = Case.from_dict(
        case_payload(photoSets=[{"id": "p", "beforeLocationUrl": "https://cdn.test/b.jpg"}])
    )
    after_only = Case.from_dict(
        case_payload(photoSets=[{"id": "p", "afterLocationUrl1": "https://cdn.test/a.jpg"}])
    )

    assert favorite_main_image(before_only) == "https://cdn.test/b.jpg"
    assert favorite_main_image(after_only) == "https://cdn.test/a.jpg"
    assert favorite_main_image(Case.from_dict(case_payload(photoSets=[]))) == ""


def test_case_card_builder_renders_card_with_index_procedures(
    render_options_factory: Callable[..., RenderOptions], sidebar_index: SidebarIndex
) -> None:
    options = render_options_factory(sharing_enabled=True)
    case = Case.from_dict(
        case_payload(
            id="456",
            procedures=[],
            procedureIds=[201],
            caseDetails=[{"caseId": "456", "seoSuffixUrl": "tummy-tuck-456"}],
        )
    )

    view = assemble_favorites(
        [case], options, index=sidebar_index, card_renderer=CaseCardBuilder(options)
    )

    [card] = view.cards
    assert card.case_id == "456"
    assert card.procedure_title == "Tummy Tuck"
    assert card.procedure_slug == "tummy-tuck"
    assert card.procedure_id == "201"
    assert card.case_url == "/before-after/tummy-tuck/tummy-tuck-456/"
    assert card.has_nudity is True
    assert card.show_share is True
    assert card.data_attributes["gender"] == "female"
    assert card.data_attributes["height-full"] == "66in"
