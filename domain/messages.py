from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Message:
    """Translatable UI string: an English template key plus its format params."""

    key: str
    params: dict[str, str] = field(default_factory=dict)

    @classmethod
    def of(cls, key: str, **params: object) -> Message:
        return cls(key=key, params={name: str(value) for name, value in params.items()})

    @property
    def text(self) -> str:
        if not self.params:
            return self.key
        try:
            return self.key.format(**self.params)
        except KeyError:
            return self.key

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "params": dict(self.params), "text": self.text}


NO_PROCEDURES_AVAILABLE = "No procedures available"
DEFAULT_CATEGORY_NAME = "Body"
CATEGORY_FILTER_LABEL = "{name} category filter"
SLIDE_LABEL = "Slide {current} of {total}"
DEFAULT_ALT_TEXT = "Before and after procedure result"
VIEW_CASE_LABEL = "View case details for {name}"
NUDITY_WARNING = "WARNING: Contains Nudity"
NUDITY_PROCEED = "Proceed"
ADD_TO_FAVORITES = "Add to favorites"
SHARE_IMAGE = "Share this image"
BACK_TO_GALLERY = "Back to Gallery"
PREVIOUS_CASE = "Previous case"
NEXT_CASE = "Next case"
NO_IMAGES = "No images available for this case."
NO_IMAGE = "No image available"
PROCEDURES_PERFORMED = "Procedures Performed"
PATIENT_INFORMATION = "Patient Information"
PROCEDURE_DETAILS = "Procedure Details"
CASE_NOTES = "Case Notes"
CASE_ID = "Case ID"
ETHNICITY = "Ethnicity"
GENDER = "Gender"
AGE = "Age"
HEIGHT = "Height"
WEIGHT = "Weight"
AGE_VALUE = "{age} years"
WEIGHT_VALUE = "{weight} lbs"
UNKNOWN_PROCEDURE = "Unknown Procedure"
NO_FAVORITES = "No favorites found. Start adding your favorite cases to see them here!"
FAVORITE_COUNT_ONE = "{count} favorite"
FAVORITE_COUNT_MANY = "{count} favorites"
SEO_TITLE = "{name} - Case #{case_id}"
SEO_DESCRIPTION = "View before and after photos for {name} case #{case_id}"
MAIN_IMAGE_ALT = "{name} - Case {case_id}"
BEFORE = "Before"
AFTER = "After"
NUDITY_CAPTION = (
    "This procedure may contain nudity or sensitive content. Click to proceed if you wish to view."
)
VIEW_CASE = "View Case"
CASE_IMAGE_ALT = "Case {case_id}"
BEFORE_IMAGE_ALT = "Before - Case {case_id}"
AFTER_IMAGE_ALT = "After - Case {case_id}"
