from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, ORJSONResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from markupsafe import Markup
from pydantic import BaseModel, Field

from adapters.api.gallery_client import GalleryApiError, HttpGalleryClient
from adapters.filesystem.gallery_source import FileSystemGallerySource
from adapters.html.renderer import HtmlGalleryRenderer
from app.config import AppSettings, load_settings
from app.gallery_wiring import build_gallery_source, build_sidebar_provider
from app.web_i18n import (
    UILocalizer,
    apply_ui_language_cookie,
    build_language_switch_url,
    build_localizer,
)
from domain.catalog import Category, Procedure, RenderOptions, load_categories
from domain.models import Case, load_cases
from domain.services.assemble_carousel import (
    CarouselOptions,
    assemble_carousel,
    placeholder_slides,
)
from domain.services.assemble_favorites import assemble_favorites
from domain.services.build_case_card import CaseCardBuilder
from domain.services.build_navigation_tree import build_navigation_tree
from domain.services.compile_case_detail import CaseDetailContext, compile_case_detail
from domain.services.sidebar_index import SidebarIndexProvider

TEMPLATES_DIR = Path(__file__).parent / "web" / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
logger = logging.getLogger(__name__)

GallerySource = HttpGalleryClient | FileSystemGallerySource


@dataclass(frozen=True)
class GalleryContext:
    settings: AppSettings
    source: GallerySource
    options: RenderOptions
    renderer: HtmlGalleryRenderer
    card_builder: CaseCardBuilder

    @property
    def token(self) -> str:
        return self.settings.gallery.api.primary_token


class FavoritesRequest(BaseModel):
    case_ids: list[str] = Field(default_factory=list)
    email: str | None = None


def create_app(settings: AppSettings, source: GallerySource | None = None) -> FastAPI:
    options = settings.gallery.to_render_options()
    context = GalleryContext(
        settings=settings,
        source=source or build_gallery_source(settings),
        options=options,
        renderer=HtmlGalleryRenderer(options),
        card_builder=CaseCardBuilder(options),
    )
    app = FastAPI(title=settings.gallery.title)
    app.state.context = context
    gallery_path = options.gallery_path

    def renderer_for_request(request: Request) -> HtmlGalleryRenderer:
        return context.renderer.with_translator(request_localizer(request).t)

    def render_gallery_template(request: Request, template_name: str, **page: Any) -> HTMLResponse:
        return render_page(request, context, template_name, page)

    @app.get("/")
    def index(request: Request) -> RedirectResponse:
        language = request_localizer(request).language
        redirect = RedirectResponse(url=f"{gallery_path}/?lang={language}")
        apply_ui_language_cookie(redirect, language)
        return redirect

    @app.get("/api/navigation")
    def api_navigation(
        provider: SidebarIndexProvider = Depends(get_sidebar_provider),
    ) -> ORJSONResponse:
        categories = load_request_categories(context, provider)
        return ORJSONResponse(build_navigation_tree(categories, context.options))

    @app.get("/api/carousel", response_class=HTMLResponse)
    def api_carousel(
        request: Request,
        procedure_id: int | None = Query(default=None),
        procedure_slug: str | None = Query(default=None),
        standalone: bool = Query(default=False),
        nudity: bool = Query(default=False),
        start: int = Query(default=1, ge=1),
        limit: int | None = Query(default=None, ge=1, le=100),
        provider: SidebarIndexProvider = Depends(get_sidebar_provider),
    ) -> HTMLResponse:
        cases = fetch_carousel_cases(
            context, procedure_id, start, limit or context.settings.gallery.carousel_limit
        )
        slides = assemble_carousel(
            cases,
            context.options,
            carousel=CarouselOptions(
                procedure_slug_override=procedure_slug,
                standalone=standalone,
                force_nudity=nudity,
            ),
            index=provider.get(context.token),
        )
        return HTMLResponse(renderer_for_request(request).render_slides(slides))

    @app.get("/api/carousel/placeholders", response_class=HTMLResponse)
    def api_carousel_placeholders(
        request: Request,
        start: int = Query(default=0, ge=0),
        count: int = Query(default=3, ge=0, le=100),
        procedure_slug: str = Query(default=""),
    ) -> HTMLResponse:
        placeholders = placeholder_slides(start, count, procedure_slug)
        return HTMLResponse(renderer_for_request(request).render_placeholders(placeholders))

    @app.post("/api/favorites", response_class=HTMLResponse)
    def api_favorites(
        request: Request,
        payload: FavoritesRequest,
        provider: SidebarIndexProvider = Depends(get_sidebar_provider),
    ) -> HTMLResponse:
        cases = fetch_favorite_cases(context, payload)
        view = assemble_favorites(
            cases,
            context.options,
            index=provider.get(context.token),
            card_renderer=context.card_builder,
        )
        return HTMLResponse(renderer_for_request(request).render_favorites(view))

    @app.get(f"{gallery_path}/", response_class=HTMLResponse)
    def gallery_view(
        request: Request,
        provider: SidebarIndexProvider = Depends(get_sidebar_provider),
    ) -> HTMLResponse:
        return render_listing(request, provider, None)

    @app.get(f"{gallery_path}/{{procedure_slug}}/", response_class=HTMLResponse)
    def procedure_view(
        request: Request,
        procedure_slug: str,
        provider: SidebarIndexProvider = Depends(get_sidebar_provider),
    ) -> HTMLResponse:
        return render_listing(request, provider, procedure_slug)

    @app.get(f"{gallery_path}/{{procedure_slug}}/{{case_identifier}}/", response_class=HTMLResponse)
    def case_detail_view(
        request: Request,
        procedure_slug: str,
        case_identifier: str,
        provider: SidebarIndexProvider = Depends(get_sidebar_provider),
    ) -> HTMLResponse:
        categories = load_request_categories(context, provider)
        procedure = find_procedure_by_slug(categories or [], procedure_slug)
        try:
            payload = context.source.fetch_case(
                context.token,
                case_identifier,
                seo_suffix="" if case_identifier.isdigit() else case_identifier,
                procedure_ids=procedure.ids if procedure is not None else (),
            )
        except (GalleryApiError, FileNotFoundError) as exc:
            logger.warning("Case %s could not be loaded: %s", case_identifier, exc)
            raise HTTPException(status_code=502, detail="Case source unavailable") from exc
        if not payload:
            raise HTTPException(status_code=404, detail="Case not found")

        view = compile_case_detail(
            Case.from_dict(payload),
            context.options,
            context=CaseDetailContext(
                procedure_slug=procedure_slug,
                procedure_name=procedure.display_name if procedure is not None else None,
                request_path=request.url.path,
            ),
            index=provider.get(context.token),
        )
        rendered = renderer_for_request(request).render_case_detail(view)
        return render_gallery_template(
            request, "case.html", seo=rendered.seo, case_html=Markup(rendered.html)
        )

    def render_listing(
        request: Request,
        provider: SidebarIndexProvider,
        procedure_slug: str | None,
    ) -> HTMLResponse:
        categories = load_request_categories(context, provider)
        procedure = find_procedure_by_slug(categories or [], procedure_slug)
        if procedure_slug and procedure is None:
            raise HTTPException(status_code=404, detail="Procedure not found")
        renderer = renderer_for_request(request)
        tree = build_navigation_tree(categories, context.options)
        cases = fetch_carousel_cases(
            context,
            procedure.ids[0] if procedure is not None and procedure.ids else None,
            1,
            context.settings.gallery.carousel_limit,
        )
        slides = assemble_carousel(
            cases,
            context.options,
            carousel=CarouselOptions(procedure_slug_override=procedure_slug),
            index=provider.get(context.token),
        )
        return render_gallery_template(
            request,
            "gallery.html",
            procedure=procedure,
            navigation_html=Markup(renderer.render_navigation(tree)),
            slides_html=Markup(renderer.render_slides(slides)),
        )

    return app


def get_context(request: Request) -> GalleryContext:
    return cast(GalleryContext, request.app.state.context)


def request_localizer(request: Request) -> UILocalizer:
    """One localizer per request, negotiated on first use."""
    localizer = getattr(request.state, "localizer", None)
    if not isinstance(localizer, UILocalizer):
        localizer = build_localizer(request)
        request.state.localizer = localizer
    return localizer


def render_page(
    request: Request,
    context: GalleryContext,
    template_name: str,
    page: Mapping[str, Any],
) -> HTMLResponse:
    localizer = request_localizer(request)
    switch_to = localizer.alternate_language
    response = templates.TemplateResponse(
        request,
        template_name,
        {
            **page,
            "settings": context.settings,
            "gallery_path": context.options.gallery_path,
            "lang": localizer.language,
            "t": localizer.t,
            "lang_switch_url": build_language_switch_url(request, switch_to),
            "lang_switch_label": localizer.alternate_language_label,
        },
    )
    apply_ui_language_cookie(response, localizer.language)
    return response


def get_sidebar_provider(request: Request) -> SidebarIndexProvider:
    cached = getattr(request.state, "sidebar_provider", None)
    if isinstance(cached, SidebarIndexProvider):
        return cached
    context = get_context(request)
    provider = build_sidebar_provider(context.settings, context.source)
    request.state.sidebar_provider = provider
    return provider


def load_request_categories(
    context: GalleryContext,
    provider: SidebarIndexProvider,
) -> list[Category] | None:
    return load_categories(
        provider.sidebar_data(context.token),
        canonical_terminology=context.options.canonical_terminology,
    )


def find_procedure_by_slug(
    categories: Sequence[Category],
    procedure_slug: str | None,
) -> Procedure | None:
    if not procedure_slug:
        return None
    for category in categories:
        for procedure in category.procedures:
            if procedure.slug == procedure_slug:
                return procedure
    return None


def fetch_carousel_cases(
    context: GalleryContext,
    procedure_id: int | None,
    start: int,
    limit: int,
) -> list[Case]:
    try:
        payloads = context.source.fetch_carousel(
            context.token, procedure_id=procedure_id, start=start, limit=limit
        )
    except (GalleryApiError, FileNotFoundError) as exc:
        logger.warning("Carousel cases could not be loaded: %s", exc)
        return []
    return load_cases(list(payloads))


def fetch_favorite_cases(context: GalleryContext, payload: FavoritesRequest) -> list[Case]:
    records: list[Mapping[str, Any]] = []
    try:
        if payload.email:
            records.extend(context.source.fetch_favorites(context.token, payload.email))
        for case_id in payload.case_ids:
            record = context.source.fetch_case(context.token, case_id)
            if record:
                records.append(record)
    except (GalleryApiError, FileNotFoundError) as exc:
        logger.warning("Favorite cases could not be loaded: %s", exc)
        raise HTTPException(status_code=502, detail="Case source unavailable") from exc
    return load_cases(records)


def get_app() -> FastAPI:
    return create_app(load_settings())
