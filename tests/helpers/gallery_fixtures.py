from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

from adapters.filesystem.json_utils import write_json_atomic

_SIDEBAR: dict[str, Any] = {
    "data": [
        {
            "name": "Face",
            "totalCase": 12,
            "procedures": [
                {
                    "name": "rhinoplasty",
                    "slugName": "rhinoplasty",
                    "ids": [101, 102],
                    "totalCase": 7,
                    "nudity": False,
                },
                {
                    "name": "upper lid (ptosis repair)",
                    "slugName": "upper-lid-ptosis-repair",
                    "ids": [103],
                    "totalCase": 5,
                    "nudity": False,
                },
            ],
        },
        {
            "name": "Body",
            "totalCase": 4,
            "procedures": [
                {
                    "name": "tummy-tuck",
                    "slugName": "tummy-tuck",
                    "ids": [201],
                    "totalCase": 4,
                    "nudity": True,
                },
            ],
        },
    ]
}

_CASE: dict[str, Any] = {
    "id": "123",
    "procedures": [{"id": 101, "name": "rhinoplasty", "slugName": "rhinoplasty"}],
    "procedureIds": [101],
    "photoSets": [
        {
            "id": "p1",
            "postProcessedImageLocation": "https://cdn.test/123/p1.jpg",
            "beforeLocationUrl": "https://cdn.test/123/p1-before.jpg",
            "afterLocationUrl1": "https://cdn.test/123/p1-after.jpg",
            "seoAltText": "Rhinoplasty result",
        },
        {
            "id": "p2",
            "postProcessedImageLocation": "https://cdn.test/123/p2.jpg",
        },
    ],
    "ethnicity": "Caucasian",
    "gender": "female",
    "age": "34",
    "height": "66",
    "heightUnit": "in",
    "weight": "130",
    "weightUnit": "lbs",
    "details": "<p>Patient wanted a <strong>subtle</strong> change.</p><p>Recovery was smooth.</p>",
    "caseDetails": [{"caseId": "123", "seoSuffixUrl": "natural-rhinoplasty"}],
}


def sidebar_payload() -> dict[str, Any]:
    return copy.deepcopy(_SIDEBAR)


def case_payload(**overrides: Any) -> dict[str, Any]:
    payload = copy.deepcopy(_CASE)
    payload.update(overrides)
    return payload


def tummy_tuck_case_payload() -> dict[str, Any]:
    return case_payload(
        id="456",
        procedures=[{"id": 201, "name": "tummy-tuck", "slugName": "tummy-tuck"}],
        procedureIds=[201],
        photoSets=[{"id": "p9", "postProcessedImageLocation": "https://cdn.test/456/p9.jpg"}],
        caseDetails=[{"caseId": "456", "seoSuffixUrl": "tummy-tuck-456"}],
    )


def write_gallery_data(data_dir: Path) -> Path:
    write_json_atomic(data_dir / "sidebar.json", sidebar_payload())
    write_json_atomic(data_dir / "cases" / "123.json", case_payload())
    write_json_atomic(data_dir / "cases" / "456.json", tummy_tuck_case_payload())
    write_json_atomic(
        data_dir / "favorites" / "patient@example.com.json",
        {"data": [case_payload()]},
    )
    return data_dir
