from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from domain.catalog import load_flag, load_id_list, load_positive_int

logger = logging.getLogger(__name__)

DetailValue = str | tuple[str, ...]


@dataclass(frozen=True)
class Photo:
    id: str
    image_url: str
    alt_text: str | None = None
    has_nudity: bool = False
    processed_url: str = ""
    before_url: str = ""
    after_url: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Photo:
        alt_text = payload.get("seoAltText")
        return cls(
            id=_as_text(payload.get("id")),
            image_url=_first_text(
                payload, "postProcessedImageLocation", "url", "originalBeforeLocation"
            ),
            alt_text=str(alt_text) if alt_text is not None and alt_text != "" else None,
            has_nudity=load_flag(payload.get("hasNudity")) or load_flag(payload.get("nudity")),
            processed_url=_as_text(payload.get("postProcessedImageLocation")),
            before_url=_as_text(payload.get("beforeLocationUrl")),
            after_url=_as_text(payload.get("afterLocationUrl1")),
        )


@dataclass(frozen=True)
class ProcedureRef:
    id: int | None
    name: str = ""
    slug: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> ProcedureRef:
        return cls(
            id=load_positive_int(payload.get("id")),
            name=_as_text(payload.get("name")),
            slug=_as_text(payload.get("slugName")),
        )


@dataclass(frozen=True)
class PatientAttrs:
    ethnicity: str = ""
    gender: str = ""
    age: str = ""
    height: str = ""
    height_unit: str = ""
    weight: str = ""
    weight_unit: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> PatientAttrs:
        return cls(
            ethnicity=_as_text(payload.get("ethnicity")),
            gender=_as_text(payload.get("gender")),
            age=_as_text(payload.get("age")),
            height=_as_text(payload.get("height")),
            height_unit=_as_text(payload.get("heightUnit")),
            weight=_as_text(payload.get("weight")),
            weight_unit=_as_text(payload.get("weightUnit")),
        )

    def is_empty(self) -> bool:
        return not any((self.ethnicity, self.gender, self.age, self.height, self.weight))


@dataclass(frozen=True)
class SeoFields:
    headline: str = ""
    page_title: str = ""
    page_description: str = ""
    suffix_url: str = ""
    case_id: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> SeoFields:
        return cls(
            headline=_as_text(payload.get("seoHeadline")),
            page_title=_as_text(payload.get("seoPageTitle")),
            page_description=_as_text(payload.get("seoPageDescription")),
            suffix_url=_as_text(payload.get("seoSuffixUrl")),
            case_id=_as_text(payload.get("caseId")),
        )


@dataclass(frozen=True)
class CaseRef:
    slug: str
    procedure_slug: str = ""

    @classmethod
    def from_dict(cls, payload: object) -> CaseRef | None:
        if isinstance(payload, str | int) and not isinstance(payload, bool):
            slug = str(payload).strip()
            return cls(slug=slug) if slug else None
        if not isinstance(payload, Mapping):
            return None
        slug = _first_text(payload, "slug", "seoSuffixUrl", "caseId", "id")
        if not slug:
            return None
        return cls(slug=slug, procedure_slug=_first_text(payload, "procedureSlug", "slugName"))


@dataclass(frozen=True)
class CaseNavigation:
    previous: CaseRef | None = None
    next: CaseRef | None = None

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> CaseNavigation:
        return cls(
            previous=CaseRef.from_dict(payload.get("previous")),
            next=CaseRef.from_dict(payload.get("next")),
        )


@dataclass(frozen=True)
class Case:
    id: str
    procedures: tuple[ProcedureRef, ...] = ()
    procedure_ids: tuple[int, ...] = ()
    photo_sets: tuple[Photo, ...] = ()
    patient: PatientAttrs | None = None
    procedure_details: dict[str, dict[str, DetailValue]] = field(default_factory=dict)
    notes: str = ""
    seo: SeoFields | None = None
    navigation: CaseNavigation | None = None
    fallback_id: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> Case:
        seo = _load_seo(payload.get("caseDetails"))
        patient = PatientAttrs.from_dict(payload)
        navigation = payload.get("navigation")
        raw_photos = payload.get("photoSets")
        if not isinstance(raw_photos, list) or not raw_photos:
            raw_photos = payload.get("photos")
        return cls(
            id=_as_text(payload.get("id")),
            procedures=tuple(
                ProcedureRef.from_dict(item)
                for item in _as_list(payload.get("procedures"))
                if isinstance(item, Mapping)
            ),
            procedure_ids=load_id_list(payload.get("procedureIds")),
            photo_sets=tuple(
                Photo.from_dict(item) for item in _as_list(raw_photos) if isinstance(item, Mapping)
            ),
            patient=None if patient.is_empty() else patient,
            procedure_details=_load_procedure_details(payload.get("procedureDetails")),
            notes=_as_text(payload.get("details")),
            seo=seo,
            navigation=CaseNavigation.from_dict(navigation)
            if isinstance(navigation, Mapping)
            else None,
            fallback_id=_as_text(payload.get("caseId")),
        )

    @property
    def primary_id(self) -> str:
        if self.id:
            return self.id
        if self.seo is not None and self.seo.case_id:
            return self.seo.case_id
        return self.fallback_id

    @property
    def display_id(self) -> str:
        if self.seo is not None and self.seo.case_id:
            return self.seo.case_id
        return self.primary_id

    @property
    def identifier(self) -> str:
        if self.seo is not None and self.seo.suffix_url:
            return self.seo.suffix_url
        return self.id

    @property
    def first_photo(self) -> Photo | None:
        return self.photo_sets[0] if self.photo_sets else None

    def referenced_procedure_ids(self) -> list[int]:
        result: list[int] = []
        for procedure in self.procedures:
            if procedure.id is not None and procedure.id not in result:
                result.append(procedure.id)
        for procedure_id in self.procedure_ids:
            if procedure_id not in result:
                result.append(procedure_id)
        return result


def _load_seo(raw: Any) -> SeoFields | None:
    if not isinstance(raw, list) or not raw or not isinstance(raw[0], Mapping):
        return None
    return SeoFields.from_dict(raw[0])


def _load_procedure_details(raw: Any) -> dict[str, dict[str, DetailValue]]:
    if not isinstance(raw, Mapping):
        return {}
    result: dict[str, dict[str, DetailValue]] = {}
    for procedure_id, details in raw.items():
        if not isinstance(details, Mapping):
            continue
        entries: dict[str, DetailValue] = {}
        for label, value in details.items():
            label_text = str(label).strip()
            if not label_text:
                continue
            if isinstance(value, list | tuple):
                items = tuple(_as_text(item) for item in value if _as_text(item))
                if items:
                    entries[label_text] = items
                continue
            text = _as_text(value)
            if text:
                entries[label_text] = text
        if entries:
            result[str(procedure_id)] = entries
    return result


def _first_text(payload: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        text = _as_text(payload.get(key))
        if text:
            return text
    return ""


def _as_list(raw: Any) -> list[Any]:
    return raw if isinstance(raw, list) else []


def _as_text(raw: Any) -> str:
    if raw is None or isinstance(raw, bool | Mapping | list):
        return ""
    return str(raw).strip()


def load_cases(raw: Any) -> list[Case]:
    """Accept a list of case payloads or an API envelope with a ``data`` list."""
    if isinstance(raw, Mapping):
        raw = raw.get("data")
    cases: list[Case] = []
    for position, item in enumerate(_as_list(raw)):
        if not isinstance(item, Mapping):
            logger.debug("Skipping case record %d: not an object", position)
            continue
        cases.append(Case.from_dict(item))
    return cases
