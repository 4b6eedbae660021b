from __future__ import annotations

import re
import unicodedata
from typing import Final

MAX_NAME_LENGTH: Final[int] = 200

_SLUG_RE = re.compile(r"[^a-zA-Z0-9]+")
_TAG_RE = re.compile(r"<[^>]*>")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_CHARS_RE = re.compile(r"[<>\"']")
_UNSAFE_WORDS_RE = re.compile(r"\b(?:script|javascript|vbscript)\b", re.IGNORECASE)
_PARENTHETICAL_RE = re.compile(r"^(.+?)\s*\((.+?)\)")
_LID_RE = re.compile(r"^(lower|upper)[-\s]lid[-\s](.+)$", re.IGNORECASE)
_UPPERCASE_RE = re.compile(r"[A-Z]")
_WORD_START_RE = re.compile(r"(?<!\S)\S")


def _terminology_entries(key: str, value: str) -> dict[str, str]:
    return {key: value, key.replace(" ", "-"): value}


CANONICAL_TERMINOLOGY: Final[dict[str, str]] = {
    "ipl/bbl laser": "IPL / BBL Laser",
    **_terminology_entries("ipl bbl laser", "IPL / BBL Laser"),
    **_terminology_entries("co2 laser", "CO2 Laser"),
    **_terminology_entries("halo laser", "HALO Laser"),
    **_terminology_entries("bbl laser", "BBL Laser"),
    **_terminology_entries("ipl laser", "IPL Laser"),
    **_terminology_entries("rf microneedling", "RF Microneedling"),
    **_terminology_entries("prp therapy", "PRP Therapy"),
    **_terminology_entries("pdo threads", "PDO Threads"),
    **_terminology_entries("lower lid canthoplasty", "Lower Lid (Canthoplasty)"),
    **_terminology_entries("upper lid ptosis repair", "Upper Lid (Ptosis Repair)"),
}


def normalize_procedure_name(raw: object, *, canonical_terminology: bool = False) -> str:
    """Return the display form of a catalog procedure name, or "" when unusable.

    Order: safety guard, optional terminology table, parenthetical split,
    hyphen handling (with the upper/lower lid special case), then casing.
    """
    if raw is None:
        return ""
    text = str(raw)
    if _UNSAFE_CHARS_RE.search(text) or _UNSAFE_WORDS_RE.search(text):
        return ""
    text = _clean_text(text)
    if not text or len(text) > MAX_NAME_LENGTH:
        return ""

    if canonical_terminology:
        canonical = CANONICAL_TERMINOLOGY.get(text.lower())
        if canonical:
            return canonical

    parenthetical = _PARENTHETICAL_RE.match(text)
    if parenthetical:
        head = capitalize_words(parenthetical.group(1).lower())
        inner = capitalize_words(parenthetical.group(2).lower())
        return f"{head} ({inner})"

    if "-" in text:
        lid = _LID_RE.match(text)
        if lid:
            side = capitalize_words(lid.group(1).lower())
            rest = capitalize_words(lid.group(2).replace("-", " "))
            return f"{side} Lid ({rest})"
        return capitalize_words(text.replace("-", " "))

    if _UPPERCASE_RE.search(text):
        return text
    return capitalize_words(text.lower())


def capitalize_words(text: str) -> str:
    # Only the first character of each whitespace-delimited word changes.
    return _WORD_START_RE.sub(lambda match: match.group(0).upper(), text)


def slugify(value: object) -> str:
    text = _TAG_RE.sub("", str(value or ""))
    text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return _SLUG_RE.sub("-", text.lower()).strip("-")


def _clean_text(text: str) -> str:
    text = _TAG_RE.sub("", text)
    text = _CONTROL_RE.sub(" ", text)
    return _WHITESPACE_RE.sub(" ", text).strip()
