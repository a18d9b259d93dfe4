"""Category Tree - pure traversal over the parent_id relation.

Invariants:
    - Every traversal terminates, even if stored data contains a parent cycle
      (a visited set stops the walk at the first repeated id)
    - collect_descendant_ids always starts with the root id and has no duplicates
    - ancestor_chain and build_breadcrumbs only contain ids that exist in the index
    - Children are visited in name order (same order the admin listing shows)

Design Decisions:
    - Functions take already-loaded categories: the shell loads the table once
      per operation instead of issuing one query per tree level
    - Inputs typed as CategoryLike so ORM rows and test doubles both fit
"""

import re
from collections import defaultdict
from collections.abc import Iterable, Mapping

from storefront.core.repository_protocols import CategoryLike

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


# ─── Slugs ───────────────────────────────────────────────────────

def slugify(name: str) -> str:
    """Lowercase, non-alphanumerics collapsed to single hyphens."""
    return _NON_SLUG_CHARS.sub("-", name.lower()).strip("-")


def leaf_slug(slug: str) -> str:
    """Last path segment of a hierarchical slug ('a/b/c' -> 'c')."""
    return slug.rsplit("/", 1)[-1]


def build_category_slug(slug: str, parent_slug: str | None) -> str:
    """Prefix slug with the parent's slug for subcategories."""
    if parent_slug:
        return f"{parent_slug}/{slug}"
    return slug


# ─── Indexes ─────────────────────────────────────────────────────

def index_by_id(categories: Iterable[CategoryLike]) -> dict[str, CategoryLike]:
    return {c.id: c for c in categories}


def index_children(
    categories: Iterable[CategoryLike],
) -> dict[str, list[CategoryLike]]:
    """parent_id -> children sorted by name. Top-level categories are skipped."""
    children: dict[str, list[CategoryLike]] = defaultdict(list)
    for category in categories:
        if category.parent_id:
            children[category.parent_id].append(category)
    for siblings in children.values():
        siblings.sort(key=lambda c: c.name)
    return dict(children)


# ─── Traversals ──────────────────────────────────────────────────

def collect_descendant_ids(
    root_id: str, categories: Iterable[CategoryLike],
) -> list[str]:
    """[root_id, ...all descendants] in depth-first pre-order."""
    children = index_children(categories)
    result: list[str] = []
    seen: set[str] = set()
    stack = [root_id]
    while stack:
        current = stack.pop()
        if current in seen:
            continue
        seen.add(current)
        result.append(current)
        # reversed so the first child (by name) is popped first
        for child in reversed(children.get(current, [])):
            if child.id not in seen:
                stack.append(child.id)
    return result


def is_in_subtree(
    candidate_id: str, root_id: str, categories: Iterable[CategoryLike],
) -> bool:
    """True when candidate_id is root_id or one of its descendants."""
    return candidate_id in collect_descendant_ids(root_id, categories)


def ancestor_chain(
    category_id: str, by_id: Mapping[str, CategoryLike],
) -> list[str]:
    """[category_id, parent, grandparent, ..., root]. Empty if unknown id."""
    chain: list[str] = []
    current = by_id.get(category_id)
    while current is not None and current.id not in chain:
        chain.append(current.id)
        current = by_id.get(current.parent_id) if current.parent_id else None
    return chain


def build_breadcrumbs(
    category_id: str, by_id: Mapping[str, CategoryLike],
) -> list[CategoryLike]:
    """Root-to-leaf trail ending at category_id."""
    return [by_id[cid] for cid in reversed(ancestor_chain(category_id, by_id))]


def build_hierarchy(
    categories: Iterable[CategoryLike],
) -> list[tuple[CategoryLike, list[CategoryLike]]]:
    """Top-level categories (name order) paired with their direct subcategories."""
    categories = list(categories)
    children = index_children(categories)
    top_level = sorted(
        (c for c in categories if not c.parent_id), key=lambda c: c.name,
    )
    return [(c, children.get(c.id, [])) for c in top_level]


# ─── Counts ──────────────────────────────────────────────────────

def compute_subtree_counts(
    categories: Iterable[CategoryLike], direct_counts: Mapping[str, int],
) -> dict[str, int]:
    """Product count per category: its own products plus every descendant's.

    direct_counts maps category_id -> number of active products assigned
    directly. Ids in direct_counts that are not categories are ignored.
    """
    by_id = index_by_id(categories)
    totals = {cid: 0 for cid in by_id}
    for category_id, count in direct_counts.items():
        for ancestor_id in ancestor_chain(category_id, by_id):
            totals[ancestor_id] += count
    return totals
