from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from domain.catalog import RenderOptions
from domain.messages import Message
from domain.views import (
    CaseCardView,
    CaseDetailView,
    FavoritesView,
    NavTree,
    PlaceholderSlide,
    SeoView,
    SlideView,
)

TEMPLATES_DIR = Path(__file__).parent / "templates"

Translator = Callable[..., str]


@dataclass(frozen=True)
class RenderedCaseDetail:
    html: str
    seo: SeoView


def default_translate(key: str, **kwargs: object) -> str:
    return Message.of(key, **kwargs).text


def build_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html"]),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["data_attrs"] = _data_attrs
    return env


class HtmlGalleryRenderer:
    """Serializes gallery view-models to HTML fragments.

    All values pass through Jinja2 autoescaping; ``translate`` localizes the
    ``Message`` keys carried by the view-models.
    """

    def __init__(
        self,
        options: RenderOptions,
        env: Environment | None = None,
        translate: Translator = default_translate,
    ) -> None:
        self._options = options
        self._env = env or build_environment()
        self._translate = translate

    @property
    def env(self) -> Environment:
        return self._env

    def with_translator(self, translate: Translator) -> HtmlGalleryRenderer:
        return HtmlGalleryRenderer(self._options, self._env, translate)

    def render_navigation(self, tree: NavTree) -> str:
        return self._render("navigation.html", tree=tree)

    def render_slides(self, slides: Sequence[SlideView]) -> str:
        return self._render("slides.html", slides=list(slides))

    def render_placeholders(self, placeholders: Sequence[PlaceholderSlide]) -> str:
        return self._render("placeholders.html", placeholders=list(placeholders))

    def render_case_detail(self, view: CaseDetailView) -> RenderedCaseDetail:
        return RenderedCaseDetail(html=self._render("case_detail.html", view=view), seo=view.seo)

    def render_card(self, card: CaseCardView) -> str:
        return self._render("case_card.html", card=card)

    def render_favorites(self, view: FavoritesView) -> str:
        return self._render("favorites.html", view=view)

    def _render(self, template_name: str, **context: Any) -> str:
        template = self._env.get_template(template_name)
        return template.render(
            options=self._options, text=self._text, t=self._translate, **context
        )

    def _text(self, value: str | Message | None) -> str:
        if value is None:
            return ""
        if isinstance(value, Message):
            return self._translate(value.key, **value.params)
        return value


def _data_attrs(attributes: dict[str, str]) -> dict[str, str]:
    return {f"data-{name}": value for name, value in attributes.items()}
