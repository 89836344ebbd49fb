"""Category tree builder.

Folds the category fields of blog posts into a hierarchical category tree
with per-name post counts. Posts carry their categories either as a flat
name (``"Tools"``, ``["Tools"]``) or as a full path nested in a list
(``[["Notes", "Frontend"]]``); both shapes are decoded once here so the rest
of the package only ever sees a root-first list of names.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Protocol, TypedDict

from blogstage.core.types import CategoryPath

logger = logging.getLogger(__name__)


class CategoryMap:
    """Bidirectional mapping between category names and URL slugs.

    When several names share a slug, the reverse lookup resolves to the
    first name in mapping order.
    """

    __slots__ = ("_names", "_slugs")

    def __init__(self, mapping: Mapping[str, str] | None = None) -> None:
        self._slugs: dict[str, str] = dict(mapping or {})
        self._names: dict[str, str] = {}
        for name, slug in self._slugs.items():
            self._names.setdefault(slug, name)

    def get_slug(self, name: str) -> str | None:
        """Return the slug for a category name, None if unmapped."""
        return self._slugs.get(name)

    def get_name(self, slug: str) -> str | None:
        """Return the category name for a slug, None if unmapped."""
        return self._names.get(slug)

    def to_dict(self) -> dict[str, str]:
        return dict(self._slugs)

    def __contains__(self, name: object) -> bool:
        return name in self._slugs

    def __len__(self) -> int:
        return len(self._slugs)


@dataclass(frozen=True)
class FlatCategory:
    """Single-level category (``"Tools"`` or ``["Tools"]``)."""

    name: str


@dataclass(frozen=True)
class PathCategory:
    """Full category path, root first (``[["Notes", "Frontend"]]``)."""

    names: tuple[str, ...]


CategoryField = FlatCategory | PathCategory


def parse_category_field(raw: object) -> CategoryField | None:
    """Decode a raw ``categories`` field into a tagged variant.

    Only the first entry of the outer list is considered. Absent, empty or
    malformed fields return None.
    """
    if isinstance(raw, str):
        return FlatCategory(raw) if raw else None

    if not isinstance(raw, list | tuple) or not raw:
        return None

    first = raw[0]
    if isinstance(first, str):
        return FlatCategory(first) if first else None

    if isinstance(first, list | tuple):
        if not first or not all(isinstance(name, str) and name for name in first):
            return None
        return PathCategory(tuple(first))

    return None


def normalize_categories(raw: object) -> CategoryPath:
    """Return the root-first category names of a raw ``categories`` field.

    Never raises: anything that doesn't decode yields an empty list.
    """
    parsed = parse_category_field(raw)
    if parsed is None:
        return []
    if isinstance(parsed, FlatCategory):
        return [parsed.name]
    return list(parsed.names)


class CategorizedRecord(Protocol):
    """Protocol for content records consumed by the tree builder."""

    @property
    def catalog(self) -> bool: ...

    @property
    def categories(self) -> object: ...


class CategoryNodeDict(TypedDict, total=False):
    """Dictionary representation of a category node."""

    name: str
    children: list[CategoryNodeDict]


@dataclass(frozen=True)
class CategoryNode:
    """Category with its subcategories in first-seen order."""

    name: str
    children: tuple[CategoryNode, ...] = ()

    def to_dict(self) -> CategoryNodeDict:
        """Convert to dictionary for JSON serialization."""
        result: CategoryNodeDict = {"name": self.name}
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


class CategoryListDict(TypedDict):
    """Dictionary representation of a category list."""

    categories: list[CategoryNodeDict]
    countMap: dict[str, int]


@dataclass(frozen=True)
class CategoryList:
    """Category tree together with the number of posts per category name."""

    categories: list[CategoryNode] = field(default_factory=list)
    count_map: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> CategoryListDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "categories": [node.to_dict() for node in self.categories],
            "countMap": dict(self.count_map),
        }


class CategoryTreeBuilder:
    """Builder for constructing category trees.

    Nodes live in a flat list with children tracked by indices. Each
    (parent, name) pair maps to exactly one node, so inserting a path that
    shares a prefix with an earlier one reuses the existing nodes.
    """

    def __init__(self) -> None:
        self._names: list[str] = []
        self._children: list[list[int]] = []
        self._roots: list[int] = []
        self._index: dict[tuple[int | None, str], int] = {}
        self._counts: dict[str, int] = {}

    def add_category(self, name: str, parent_idx: int | None = None) -> int:
        """Add a category under a parent, reusing an existing sibling.

        Args:
            name: Category name
            parent_idx: Index of parent category, None for root

        Returns:
            Index of the new or existing category
        """
        key = (parent_idx, name)
        existing = self._index.get(key)
        if existing is not None:
            return existing

        idx = len(self._names)
        self._names.append(name)
        self._children.append([])
        self._index[key] = idx

        if parent_idx is None:
            self._roots.append(idx)
        else:
            self._children[parent_idx].append(idx)

        return idx

    def add_path(self, names: Iterable[str]) -> int | None:
        """Insert a root-first category path and count it once.

        Args:
            names: Category names from root to leaf

        Returns:
            Index of the leaf category, None for an empty path
        """
        path = list(names)
        parent_idx: int | None = None
        for name in path:
            parent_idx = self.add_category(name, parent_idx)

        for name in dict.fromkeys(path):
            self._counts[name] = self._counts.get(name, 0) + 1

        return parent_idx

    def add_post(self, post: CategorizedRecord) -> bool:
        """Add a post's categories if the post is shown in the catalog.

        Returns:
            True if the post contributed to the tree
        """
        if not post.catalog:
            return False

        path = normalize_categories(post.categories)
        if not path:
            return False

        self.add_path(path)
        return True

    def build(self) -> CategoryList:
        """Build the immutable category list."""
        logger.debug(
            f"Built category tree with {len(self._names)} nodes "
            f"and {len(self._roots)} roots"
        )
        return CategoryList(
            categories=[self._build_node(idx) for idx in self._roots],
            count_map=dict(self._counts),
        )

    def _build_node(self, idx: int) -> CategoryNode:
        """Recursively build CategoryNode from index."""
        return CategoryNode(
            name=self._names[idx],
            children=tuple(self._build_node(child) for child in self._children[idx]),
        )


def get_category_list(posts: Iterable[CategorizedRecord]) -> CategoryList:
    """Build the hierarchical category list with counts.

    Args:
        posts: Posts to fold; only those with ``catalog`` set are counted

    Returns:
        CategoryList with the tree and per-name post counts
    """
    builder = CategoryTreeBuilder()
    for post in posts:
        builder.add_post(post)
    return builder.build()
