"""Category Tree - tests for pure traversal over parent_id.

Tests cover:
    - Slug building for top-level and nested categories
    - Descendant collection order, cycles and unknown roots
    - Breadcrumbs and ancestor chains
    - Subtree product counts
"""

from dataclasses import dataclass

from storefront.core.category_tree import (
    ancestor_chain, build_breadcrumbs, build_category_slug, build_hierarchy,
    collect_descendant_ids, compute_subtree_counts, index_by_id, is_in_subtree,
    leaf_slug, slugify,
)


@dataclass
class Cat:
    id: str
    name: str
    slug: str
    parent_id: str | None = None
    product_count: int = 0


def _tree():
    return [
        Cat("food", "Food", "food"),
        Cat("veg", "Vegetables", "food/vegetables", "food"),
        Cat("fruit", "Fruit", "food/fruit", "food"),
        Cat("apples", "Apples", "food/fruit/apples", "fruit"),
        Cat("crafts", "Crafts", "crafts"),
    ]


def test_slugify_collapses_non_alphanumerics():
    assert slugify("  Fresh & Local Produce! ") == "fresh-local-produce"


def test_subcategory_slug_is_prefixed_with_parent():
    assert build_category_slug("apples", "food/fruit") == "food/fruit/apples"


def test_top_level_slug_is_unchanged():
    assert build_category_slug("food", None) == "food"


def test_leaf_slug_takes_last_segment():
    assert leaf_slug("food/fruit/apples") == "apples"
    assert leaf_slug("food") == "food"


def test_descendants_start_with_root_and_follow_name_order():
    assert collect_descendant_ids("food", _tree()) == ["food", "fruit", "apples", "veg"]


def test_descendants_of_leaf_is_only_the_leaf():
    assert collect_descendant_ids("apples", _tree()) == ["apples"]


def test_descendants_of_unknown_id_is_only_that_id():
    assert collect_descendant_ids("missing", _tree()) == ["missing"]


def test_descendants_terminate_on_stored_cycle():
    cyclic = [Cat("a", "A", "a", "b"), Cat("b", "B", "b", "a")]
    assert collect_descendant_ids("a", cyclic) == ["a", "b"]


def test_is_in_subtree():
    assert is_in_subtree("apples", "food", _tree())
    assert is_in_subtree("food", "food", _tree())
    assert not is_in_subtree("crafts", "food", _tree())


def test_ancestor_chain_walks_to_root():
    assert ancestor_chain("apples", index_by_id(_tree())) == ["apples", "fruit", "food"]


def test_ancestor_chain_unknown_id_is_empty():
    assert ancestor_chain("missing", index_by_id(_tree())) == []


def test_breadcrumbs_run_root_to_leaf():
    trail = build_breadcrumbs("apples", index_by_id(_tree()))
    assert [c.name for c in trail] == ["Food", "Fruit", "Apples"]


def test_hierarchy_pairs_top_level_with_direct_children():
    hierarchy = build_hierarchy(_tree())
    assert [parent.id for parent, _ in hierarchy] == ["crafts", "food"]
    food_children = dict((p.id, c) for p, c in hierarchy)["food"]
    assert [c.id for c in food_children] == ["fruit", "veg"]


def test_subtree_counts_roll_up_to_every_ancestor():
    totals = compute_subtree_counts(_tree(), {"apples": 2, "veg": 1, "crafts": 4})
    assert totals == {"food": 3, "veg": 1, "fruit": 2, "apples": 2, "crafts": 4}


def test_subtree_counts_ignore_unknown_category_ids():
    totals = compute_subtree_counts(_tree(), {"ghost": 7})
    assert set(totals.values()) == {0}
