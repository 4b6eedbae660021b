# ruff: noqa: RUF001

from __future__ import annotations

import pytest

from app.web_i18n import UILocalizer, normalize_ui_language, translate_ui_text
from domain import messages


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("es", "es"),
        ("ES_mx", "es"),
        (" en-GB ", "en"),
        ("fr", None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_ui_language(raw: str | None, expected: str | None) -> None:
    assert normalize_ui_language(raw) == expected


def test_translate_ui_text_falls_back_to_key() -> None:
    assert translate_ui_text(messages.BACK_TO_GALLERY, "es") == "Volver a la galería"
    assert translate_ui_text(messages.BACK_TO_GALLERY, "en") == "Back to Gallery"
    assert translate_ui_text("Rhinoplasty", "es") == "Rhinoplasty"


def test_localizer_formats_translated_templates() -> None:
    localizer = UILocalizer("es")

    assert localizer.t(messages.SLIDE_LABEL, current=1, total=3) == "Diapositiva 1 de 3"
    assert localizer.t(messages.FAVORITE_COUNT_MANY, count=2) == "2 favoritos"
    assert localizer.t(messages.AGE_VALUE) == "{age} años"
    assert localizer.alternate_language == "en"
    assert localizer.alternate_language_label == "English"


def test_every_domain_message_has_a_spanish_translation() -> None:
    keys = [
        value
        for name, value in vars(messages).items()
        if name.isupper() and isinstance(value, str)
    ]

    missing = [key for key in keys if translate_ui_text(key, "es") == key]

    assert missing == []
