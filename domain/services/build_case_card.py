from __future__ import annotations

from domain.catalog import ImageDisplayMode, RenderOptions
from domain.models import Case, PatientAttrs
from domain.services.case_links import build_case_url, resolve_case_procedure_slug
from domain.views import CardContext, CaseCardView


class CaseCardBuilder:
    """Default case card renderer used by the favorites grid and case listings."""

    def __init__(self, options: RenderOptions) -> None:
        self._options = options

    def render_card(
        self,
        case: Case,
        display_mode: ImageDisplayMode,
        has_nudity: bool,
        procedure_context: CardContext,
    ) -> CaseCardView:
        case_id = case.display_id
        procedure_slug = procedure_context.procedure_slug or resolve_case_procedure_slug(case)
        first_photo = case.first_photo
        first_procedure = case.procedures[0] if case.procedures else None
        procedure_id = (
            first_procedure.id
            if first_procedure is not None and first_procedure.id is not None
            else None
        )
        return CaseCardView(
            case_id=case_id,
            image_url=first_photo.processed_url if first_photo is not None else "",
            procedure_title=procedure_context.title,
            display_mode=display_mode,
            procedure_id=str(procedure_id) if procedure_id is not None else "",
            procedure_slug=procedure_slug,
            case_url=build_case_url(
                self._options.gallery_slug,
                procedure_slug,
                case.identifier or case_id,
            ),
            before_url=first_photo.before_url if first_photo is not None else "",
            after_url=first_photo.after_url if first_photo is not None else "",
            has_nudity=has_nudity,
            show_favorite=self._options.favorites_enabled,
            show_share=self._options.sharing_enabled,
            data_attributes=patient_data_attributes(case.patient),
        )


def patient_data_attributes(patient: PatientAttrs | None) -> dict[str, str]:
    if patient is None:
        return {}
    attributes: dict[str, str] = {}
    if patient.age:
        attributes["age"] = patient.age
    if patient.gender:
        attributes["gender"] = patient.gender.lower()
    if patient.ethnicity:
        attributes["ethnicity"] = patient.ethnicity.lower()
    if patient.height:
        attributes["height"] = patient.height
        attributes["height-unit"] = patient.height_unit
        attributes["height-full"] = patient.height + patient.height_unit
    if patient.weight:
        attributes["weight"] = patient.weight
        attributes["weight-unit"] = patient.weight_unit
        attributes["weight-full"] = patient.weight + patient.weight_unit
    return attributes
