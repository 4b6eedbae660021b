from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Final

from fastapi import Request
from starlette.responses import Response

DEFAULT_UI_LANGUAGE: Final[str] = "en"
LANGUAGE_PARAM: Final[str] = "lang"
LANGUAGE_COOKIE: Final[str] = "gallery_ui_lang"
LANGUAGE_COOKIE_MAX_AGE: Final[int] = 365 * 24 * 3600

_ES: Final[dict[str, str]] = {
    "Procedure filters": "Filtros de procedimientos",
    "{name} category filter": "Filtro de categoría {name}",
    "Body": "Cuerpo",
    "No procedures available": "No hay procedimientos disponibles",
    "Slide {current} of {total}": "Diapositiva {current} de {total}",
    "Before and after procedure result": "Resultado del procedimiento antes y después",
    "View case details for {name}": "Ver detalles del caso de {name}",
    "WARNING: Contains Nudity": "ADVERTENCIA: Contiene desnudos",
    "Nudity Warning": "Advertencia de desnudos",
    "This procedure may contain nudity or sensitive content. Click to proceed if you wish to view.": (
        "Este procedimiento puede contener desnudos o contenido sensible. "
        "Haga clic para continuar si desea verlo."
    ),
    "Proceed": "Continuar",
    "Add to favorites": "Añadir a favoritos",
    "Share this image": "Compartir esta imagen",
    "Back to Gallery": "Volver a la galería",
    "Previous case": "Caso anterior",
    "Next case": "Caso siguiente",
    "No images available for this case.": "No hay imágenes disponibles para este caso.",
    "No image available": "Imagen no disponible",
    "Procedures Performed": "Procedimientos realizados",
    "Patient Information": "Información del paciente",
    "Procedure Details": "Detalles del procedimiento",
    "Case Notes": "Notas del caso",
    "Case ID": "ID del caso",
    "Ethnicity": "Etnia",
    "Gender": "Género",
    "Age": "Edad",
    "Height": "Altura",
    "Weight": "Peso",
    "{age} years": "{age} años",
    "{weight} lbs": "{weight} lb",
    "Unknown Procedure": "Procedimiento desconocido",
    "No favorites found. Start adding your favorite cases to see them here!": (
        "No se encontraron favoritos. ¡Empiece a añadir sus casos favoritos para verlos aquí!"
    ),
    "{count} favorite": "{count} favorito",
    "{count} favorites": "{count} favoritos",
    "Before": "Antes",
    "After": "Después",
    "View Case": "Ver caso",
    "Case {case_id}": "Caso {case_id}",
    "Before - Case {case_id}": "Antes - Caso {case_id}",
    "After - Case {case_id}": "Después - Caso {case_id}",
    "My Favorites": "Mis favoritos",
    "{name} - Case #{case_id}": "{name} - Caso n.º {case_id}",
    "View before and after photos for {name} case #{case_id}": (
        "Vea las fotos de antes y después del caso n.º {case_id} de {name}"
    ),
    "{name} - Case {case_id}": "{name} - Caso {case_id}",
    "Switch language": "Cambiar idioma",
}

# English strings are the message keys themselves.
_CATALOGS: Final[dict[str, dict[str, str]]] = {"en": {}, "es": _ES}
_LABELS: Final[dict[str, str]] = {"en": "English", "es": "Español"}
SUPPORTED_UI_LANGUAGES: Final[frozenset[str]] = frozenset(_CATALOGS)


class _KeepPlaceholders(dict[str, str]):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


@dataclass(frozen=True)
class UILocalizer:
    language: str

    @property
    def alternate_language(self) -> str:
        return next(lang for lang in sorted(SUPPORTED_UI_LANGUAGES) if lang != self.language)

    @property
    def language_label(self) -> str:
        return _LABELS[self.language]

    @property
    def alternate_language_label(self) -> str:
        return _LABELS[self.alternate_language]

    def t(self, key: str, **kwargs: object) -> str:
        text = translate_ui_text(key, self.language)
        if kwargs:
            text = text.format_map(_KeepPlaceholders({k: str(v) for k, v in kwargs.items()}))
        return text


def translate_ui_text(key: str, language: str) -> str:
    return _CATALOGS.get(language, {}).get(key, key)


def normalize_ui_language(value: str | None) -> str | None:
    """Reduce a locale tag such as ``es_MX`` or ``en-GB`` to a supported language."""
    primary = str(value or "").strip().lower().replace("_", "-").partition("-")[0]
    return primary if primary in SUPPORTED_UI_LANGUAGES else None


def _requested_languages(request: Request) -> Iterator[str | None]:
    yield request.query_params.get(LANGUAGE_PARAM)
    yield request.cookies.get(LANGUAGE_COOKIE)
    for entry in request.headers.get("accept-language", "").split(","):
        yield entry.partition(";")[0]


def resolve_ui_language(request: Request) -> str:
    for candidate in _requested_languages(request):
        language = normalize_ui_language(candidate)
        if language is not None:
            return language
    return DEFAULT_UI_LANGUAGE


def build_localizer(request: Request) -> UILocalizer:
    return UILocalizer(resolve_ui_language(request))


def build_language_switch_url(request: Request, target_language: str) -> str:
    language = normalize_ui_language(target_language) or DEFAULT_UI_LANGUAGE
    switched = request.url.include_query_params(**{LANGUAGE_PARAM: language})
    return f"{switched.path}?{switched.query}"


def apply_ui_language_cookie(response: Response, language: str) -> None:
    response.set_cookie(
        LANGUAGE_COOKIE,
        normalize_ui_language(language) or DEFAULT_UI_LANGUAGE,
        max_age=LANGUAGE_COOKIE_MAX_AGE,
        path="/",
        samesite="lax",
    )
