from __future__ import annotations

import logging
from collections.abc import Sequence

from domain import messages
from domain.catalog import Category, Procedure, RenderOptions
from domain.messages import Message
from domain.services.case_links import build_filter_url
from domain.views import NavCategory, NavLink, NavTree

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_SLUG = "body"


def build_navigation_tree(
    categories: Sequence[Category] | None,
    options: RenderOptions,
) -> NavTree:
    nodes: list[NavCategory] = []
    for category in categories or ():
        if not category.name or not category.procedures:
            logger.debug("Skipping navigation category without name or procedures.")
            continue
        links: list[NavLink] = []
        for procedure in category.procedures:
            link = _build_link(category, procedure, options)
            if link is not None:
                links.append(link)
        nodes.append(
            NavCategory(
                slug=category.slug,
                label=category.name,
                total_cases=category.total_cases,
                expanded=options.expand_by_default,
                show_count=options.show_counts,
                aria_label=Message.of(messages.CATEGORY_FILTER_LABEL, name=category.name),
                links=tuple(links),
            )
        )
    if not nodes:
        return NavTree(categories=(_default_category(options),), is_fallback=True)
    return NavTree(categories=tuple(nodes))


def _build_link(
    category: Category,
    procedure: Procedure,
    options: RenderOptions,
) -> NavLink | None:
    if not procedure.display_name:
        logger.debug("Skipping procedure with unusable name in category %s.", category.slug)
        return None
    return NavLink(
        label=procedure.display_name,
        url=build_filter_url(options.page_path, procedure.slug),
        category_slug=category.slug,
        procedure_slug=procedure.slug,
        procedure_ids=",".join(str(procedure_id) for procedure_id in procedure.ids),
        procedure_count=procedure.case_count,
        has_nudity=procedure.has_nudity,
        count_badge=procedure.case_count if options.show_counts else None,
    )


def _default_category(options: RenderOptions) -> NavCategory:
    label = Message.of(messages.DEFAULT_CATEGORY_NAME)
    return NavCategory(
        slug=DEFAULT_CATEGORY_SLUG,
        label=label,
        total_cases=0,
        expanded=options.expand_by_default,
        show_count=options.show_counts,
        aria_label=Message.of(messages.CATEGORY_FILTER_LABEL, name=label.text),
        placeholder=Message.of(messages.NO_PROCEDURES_AVAILABLE),
    )
