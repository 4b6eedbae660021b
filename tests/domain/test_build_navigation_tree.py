from __future__ import annotations

from collections.abc import Callable

import pytest

from domain.catalog import Category, RenderOptions, load_categories
from domain.messages import Message
from domain.services.build_navigation_tree import build_navigation_tree


def test_navigation_tree_emits_category_nodes_and_leaf_links(
    categories: list[Category], render_options: RenderOptions
) -> None:
    tree = build_navigation_tree(categories, render_options)

    assert tree.is_fallback is False
    assert [node.slug for node in tree.categories] == ["face", "body"]
    face = tree.categories[0]
    assert face.label == "Face"
    assert face.aria_label == Message.of("{name} category filter", name="Face")
    assert face.expanded is False

    link = face.links[0]
    assert link.label == "Rhinoplasty"
    assert link.url == "/before-after/rhinoplasty/"
    assert link.category_slug == "face"
    assert link.procedure_ids == "101,102"
    assert link.procedure_count == 7
    assert link.count_badge == 7
    assert link.has_nudity is False
    assert tree.categories[1].links[0].has_nudity is True


def test_navigation_tree_respects_display_flags(
    categories: list[Category],
    render_options_factory: Callable[..., RenderOptions],
) -> None:
    options = render_options_factory(
        show_counts=False, expand_by_default=True, page_path="/gallery/"
    )

    tree = build_navigation_tree(categories, options)

    node = tree.categories[0]
    assert node.expanded is True
    assert node.show_count is False
    assert node.links[0].count_badge is None
    assert node.links[0].url == "/gallery/rhinoplasty/"


@pytest.mark.parametrize("categories", [None, [], load_categories({"data": []})])
def test_navigation_tree_falls_back_to_body_category(
    categories: list[Category] | None, render_options: RenderOptions
) -> None:
    tree = build_navigation_tree(categories, render_options)

    assert tree.is_fallback is True
    assert len(tree.categories) == 1
    node = tree.categories[0]
    assert node.slug == "body"
    assert node.label == Message.of("Body")
    assert node.links == ()
    assert node.placeholder == Message.of("No procedures available")


def test_navigation_tree_skips_procedures_with_unsafe_names(
    render_options: RenderOptions,
) -> None:
    categories = load_categories(
        {
            "data": [
                {
                    "name": "Face",
                    "procedures": [
                        {"name": "<script>alert(1)</script>", "ids": [1]},
                        {"name": "facelift", "ids": [2]},
                    ],
                }
            ]
        }
    )

    tree = build_navigation_tree(categories, render_options)

    assert [link.label for link in tree.categories[0].links] == ["Facelift"]


def test_navigation_tree_only_falls_back_when_nothing_validates(
    render_options: RenderOptions,
) -> None:
    categories = load_categories(
        {"data": [{"name": "Face"}, {"name": "Skin", "procedures": [{"name": "peel"}]}]}
    )

    tree = build_navigation_tree(categories, render_options)

    assert tree.is_fallback is False
    assert [node.label for node in tree.categories] == ["Skin"]
