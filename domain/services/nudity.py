from __future__ import annotations

from collections.abc import Iterable

from domain.models import Case, Photo
from domain.services.sidebar_index import SidebarIndex


def resolve_nudity(
    *,
    force: bool = False,
    photo_flag: bool = False,
    procedure_ids: Iterable[int] = (),
    index: SidebarIndex | None = None,
) -> bool:
    if force:
        return True
    if photo_flag:
        return True
    if index is None:
        return False
    for procedure_id in procedure_ids:
        info = index.lookup(procedure_id)
        if info is not None and info.nudity:
            return True
    return False


def case_has_nudity(case: Case, index: SidebarIndex | None) -> bool:
    return resolve_nudity(procedure_ids=case.referenced_procedure_ids(), index=index)


def photo_has_nudity(
    photo: Photo,
    case: Case,
    index: SidebarIndex | None,
    *,
    force: bool = False,
) -> bool:
    return resolve_nudity(
        force=force,
        photo_flag=photo.has_nudity,
        procedure_ids=case.referenced_procedure_ids(),
        index=index,
    )
