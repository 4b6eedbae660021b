from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import Any

from adapters.filesystem.json_utils import load_json, load_json_object
from domain.catalog import load_id_list
from domain.ports.gallery import CaseSource, SidebarSource

SIDEBAR_FILE = "sidebar.json"
CASES_DIR = "cases"
FAVORITES_DIR = "favorites"


class FileSystemGallerySource(SidebarSource, CaseSource):
    """Serves gallery payloads from a directory of exported API responses.

    Layout: ``sidebar.json``, ``cases/<case id>.json`` and
    ``favorites/<email>.json`` (a list of case payloads).
    """

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir

    def fetch_sidebar(self, token: str) -> Mapping[str, Any]:
        return load_json_object(self._data_dir / SIDEBAR_FILE)

    def fetch_case(
        self,
        token: str,
        case_id: str,
        *,
        seo_suffix: str = "",
        procedure_ids: Sequence[int] = (),
    ) -> Mapping[str, Any] | None:
        path = self._data_dir / CASES_DIR / f"{Path(case_id).name}.json"
        if path.is_file():
            return load_json_object(path)
        suffix = seo_suffix or case_id
        for payload in self._iter_cases():
            if _seo_suffix(payload) == suffix:
                return payload
        return None

    def fetch_carousel(
        self,
        token: str,
        *,
        procedure_id: int | None = None,
        start: int = 1,
        limit: int = 10,
    ) -> list[Mapping[str, Any]]:
        matching = [
            payload
            for payload in self._iter_cases()
            if procedure_id is None or procedure_id in _procedure_ids(payload)
        ]
        offset = max(1, start) - 1
        return matching[offset : offset + max(1, limit)]

    def fetch_favorites(self, token: str, email: str) -> list[Mapping[str, Any]]:
        path = self._data_dir / FAVORITES_DIR / f"{Path(email).name}.json"
        if not path.is_file():
            return []
        data = load_json(path)
        if isinstance(data, dict):
            data = data.get("data")
        if not isinstance(data, list):
            return []
        return [item for item in data if isinstance(item, dict)]

    def _iter_cases(self) -> Iterator[dict[str, Any]]:
        cases_dir = self._data_dir / CASES_DIR
        if not cases_dir.is_dir():
            return
        for path in sorted(cases_dir.glob("*.json")):
            yield load_json_object(path)


def _seo_suffix(payload: Mapping[str, Any]) -> str:
    details = payload.get("caseDetails")
    if not isinstance(details, list) or not details or not isinstance(details[0], dict):
        return ""
    return str(details[0].get("seoSuffixUrl") or "")


def _procedure_ids(payload: Mapping[str, Any]) -> set[int]:
    ids = set(load_id_list(payload.get("procedureIds")))
    procedures = payload.get("procedures")
    if isinstance(procedures, list):
        for procedure in procedures:
            if isinstance(procedure, dict):
                ids.update(load_id_list([procedure.get("id")]))
    return ids
