"""Category path resolution.

Translates between category name paths and category page URLs, and looks
categories up in a built tree. Lookups by URL only consider the last URL
segment: when the same name sits at several depths of the tree, the first
node in pre-order wins.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from blogstage.core.categories import CategoryMap, CategoryNode
from blogstage.core.types import URLPath

logger = logging.getLogger(__name__)

CATEGORIES_ROOT = "categories"


@dataclass(frozen=True)
class BreadcrumbItem:
    """Breadcrumb navigation item for category pages."""

    name: str
    path: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"name": self.name, "path": self.path}


class CategoryPathResolver:
    """Maps category names to URL paths and URL paths back to tree nodes."""

    __slots__ = ("_category_map", "_root")

    def __init__(self, category_map: CategoryMap, root: str = CATEGORIES_ROOT) -> None:
        """Initialize resolver.

        Args:
            category_map: Name to slug mapping
            root: Route prefix for category pages, without slashes
        """
        self._category_map = category_map
        self._root = root.strip("/")

    @property
    def category_map(self) -> CategoryMap:
        return self._category_map

    def build_category_path(self, category_names: str | Sequence[str]) -> URLPath:
        """Build a category page URL from category names.

        A name missing from the category map contributes an empty segment,
        e.g. ``["Notes", "Unknown"]`` -> ``/categories/note/``.

        Args:
            category_names: Single category name or root-first sequence of names

        Returns:
            URL path like "/categories/note/front-end", empty for no names
        """
        if not category_names:
            return URLPath("")

        names = [category_names] if isinstance(category_names, str) else category_names
        slugs: list[str] = []
        for name in names:
            slug = self._category_map.get_slug(name)
            if slug is None:
                logger.debug(f"Category '{name}' has no slug in the category map")
                slug = ""
            slugs.append(slug)

        return URLPath(f"/{self._root}/{'/'.join(slugs)}")

    def get_category_name_by_link(self, link: str) -> str:
        """Get category name from the last segment of a link.

        Args:
            link: URL path like "categories/note/front-end"

        Returns:
            Category name like "Frontend", empty if the slug is unmapped
        """
        if not link:
            return ""

        segments = [segment for segment in link.strip("/").split("/") if segment]
        if not segments:
            return ""

        return self._category_map.get_name(segments[-1]) or ""

    def get_category_by_link(
        self,
        categories: list[CategoryNode],
        link: str | None,
    ) -> CategoryNode | None:
        """Find the category node addressed by a link.

        Args:
            categories: Category tree roots
            link: URL path of a category page

        Returns:
            First matching node in pre-order, None if not found
        """
        name = self.get_category_name_by_link(link or "")
        if not name or not categories:
            return None
        return find_category(categories, name)

    def get_category_links(
        self,
        categories: list[CategoryNode],
        parent_link: str | None = None,
    ) -> list[str]:
        """List slug paths of every category in pre-order.

        Args:
            categories: Category tree roots
            parent_link: Slug path of the parent category

        Returns:
            Paths like ["note", "note/front-end"], without the route prefix
        """
        links: list[str] = []
        for category in categories:
            slug = self._category_map.get_slug(category.name) or ""
            link = f"{parent_link}/{slug}" if parent_link else slug
            links.append(link)
            if category.children:
                links.extend(self.get_category_links(list(category.children), link))
        return links

    def get_breadcrumbs(
        self,
        category: CategoryNode,
        categories: list[CategoryNode],
    ) -> list[BreadcrumbItem]:
        """Build breadcrumbs for a category page.

        Walks parents up to the root. The category itself is not included.

        Args:
            category: Current category
            categories: Category tree roots

        Returns:
            Root-first list of ancestor breadcrumbs
        """
        ancestors: list[CategoryNode] = []
        parent = get_parent_category(category, categories)
        while parent is not None and parent not in ancestors:
            ancestors.append(parent)
            parent = get_parent_category(parent, categories)
        ancestors.reverse()

        breadcrumbs: list[BreadcrumbItem] = []
        names: list[str] = []
        for ancestor in ancestors:
            names.append(ancestor.name)
            path = self.build_category_path(list(names))
            breadcrumbs.append(BreadcrumbItem(name=ancestor.name, path=path))
        return breadcrumbs


def find_category(
    categories: list[CategoryNode] | tuple[CategoryNode, ...],
    name: str,
) -> CategoryNode | None:
    """Depth-first search for the first node with the given name."""
    for category in categories:
        if category.name == name:
            return category
        if category.children:
            found = find_category(category.children, name)
            if found is not None:
                return found
    return None


def get_parent_category(
    category: CategoryNode | None,
    categories: list[CategoryNode] | tuple[CategoryNode, ...],
) -> CategoryNode | None:
    """Find the node whose direct children include a category of that name.

    Args:
        category: Category to find the parent of
        categories: Category tree roots

    Returns:
        Parent node, None for root categories or unknown ones
    """
    if category is None or not categories:
        return None

    for candidate in categories:
        if not candidate.children:
            continue
        if any(child.name == category.name for child in candidate.children):
            return candidate
        for child in candidate.children:
            if child.children:
                found = get_parent_category(category, (child,))
                if found is not None:
                    return found
    return None
