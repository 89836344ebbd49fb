"""Featured series and homepage feed grouping.

A series is a category singled out by configuration and given its own
top-level route. Posts whose top-level category belongs to an enabled series
are kept out of the general homepage feed; the newest post of each series
that highlights on home is shown separately instead.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from blogstage.core.posts import Post
from blogstage.errors import ConfigError, ReservedSlugError

logger = logging.getLogger(__name__)

# Top-level routes owned by the site; a series slug must not shadow them
RESERVED_ROUTES: tuple[str, ...] = (
    "about",
    "api",
    "archives",
    "categories",
    "friends",
    "page",
    "post",
    "rss.xml",
    "search",
    "tags",
)


SERIES_LINK_KEYS = ("github", "rss", "chrome", "docs")


@dataclass(frozen=True)
class SeriesConfig:
    """Featured series definition."""

    slug: str
    category_name: str
    label: str | None = None
    enabled: bool = True
    highlight_on_home: bool = True
    full_name: str | None = None
    description: str | None = None
    cover: str | None = None
    icon: str | None = None
    links: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "slug": self.slug,
            "categoryName": self.category_name,
            "label": self.label,
            "fullName": self.full_name,
            "description": self.description,
            "cover": self.cover,
            "icon": self.icon,
            "links": dict(self.links),
            "highlightOnHome": self.highlight_on_home,
        }


@dataclass
class HomePagePosts:
    """Homepage feed split into highlighted, sticky and regular posts."""

    highlighted: list[Post] = field(default_factory=list)
    sticky: list[Post] = field(default_factory=list)
    regular: list[Post] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """Convert to dictionary for JSON serialization."""
        return {
            "highlightedPosts": [post.to_dict() for post in self.highlighted],
            "stickyPosts": [post.to_dict() for post in self.sticky],
            "regularPosts": [post.to_dict() for post in self.regular],
        }


def _top_level_category(post: Post) -> str | None:
    path = post.category_path
    return path[0] if path else None


def validate_series(
    series: Iterable[SeriesConfig],
    reserved: Iterable[str] = RESERVED_ROUTES,
) -> None:
    """Validate series slugs against reserved routes and each other.

    Raises:
        ReservedSlugError: If a slug matches a reserved route
        ConfigError: If two series share a slug
    """
    reserved_names = tuple(dict.fromkeys(reserved))
    reserved_lookup = {name.lower() for name in reserved_names}
    seen: set[str] = set()

    for item in series:
        normalized = item.slug.strip().lower()
        if normalized in reserved_lookup:
            raise ReservedSlugError(item.slug, reserved_names)
        if normalized in seen:
            raise ConfigError(f"Duplicate series slug: '{item.slug}'")
        seen.add(normalized)


def partition_home_posts(
    posts: Iterable[Post],
    series: Iterable[SeriesConfig],
) -> HomePagePosts:
    """Split newest-first posts into the three homepage groups in one pass.

    A post is featured when its top-level category is the category of an
    enabled series. The first featured post seen for a highlighting series
    becomes its highlighted post; other featured posts are left out of the
    feed. Remaining posts go to sticky or regular by their sticky flag.

    Args:
        posts: Posts sorted newest-first
        series: Series definitions

    Returns:
        HomePagePosts with each input post in at most one group
    """
    by_category: dict[str, SeriesConfig] = {}
    for item in series:
        if item.enabled:
            by_category.setdefault(item.category_name, item)

    result = HomePagePosts()
    claimed: set[str] = set()

    for post in posts:
        top_level = _top_level_category(post)
        matched = by_category.get(top_level) if top_level else None

        if matched is None:
            if post.sticky:
                result.sticky.append(post)
            else:
                result.regular.append(post)
            continue

        if matched.highlight_on_home and matched.slug not in claimed:
            claimed.add(matched.slug)
            result.highlighted.append(post)

    return result


class SeriesRegistry:
    """Validated collection of series definitions.

    Raises ReservedSlugError on construction when a slug collides with a
    reserved route, so a misconfigured site fails before any output.
    """

    __slots__ = ("_series",)

    def __init__(
        self,
        series: Iterable[SeriesConfig],
        reserved: Iterable[str] = RESERVED_ROUTES,
    ) -> None:
        self._series = list(series)
        validate_series(self._series, reserved)

    @property
    def series(self) -> list[SeriesConfig]:
        return list(self._series)

    def get_enabled_series(self) -> list[SeriesConfig]:
        """Get all enabled series in definition order."""
        return [item for item in self._series if item.enabled]

    def get_series_by_slug(self, slug: str) -> SeriesConfig | None:
        """Find an enabled series by slug, ignoring case and whitespace."""
        normalized = slug.strip().lower()
        for item in self._series:
            if item.enabled and item.slug.lower() == normalized:
                return item
        return None

    def get_featured_category_names(self) -> list[str]:
        """Get the category names of all enabled series."""
        return [item.category_name for item in self.get_enabled_series()]

    def get_posts_by_series_slug(self, posts: Iterable[Post], slug: str) -> list[Post]:
        """Get all posts of a series, in input order."""
        item = self.get_series_by_slug(slug)
        if item is None:
            logger.debug(f"No enabled series with slug '{slug}'")
            return []
        return [post for post in posts if _top_level_category(post) == item.category_name]

    def get_non_featured_posts(self, posts: Iterable[Post]) -> list[Post]:
        """Get posts whose top-level category belongs to no enabled series."""
        names = set(self.get_featured_category_names())
        return [post for post in posts if _top_level_category(post) not in names]

    def partition_home_posts(self, posts: Iterable[Post]) -> HomePagePosts:
        return partition_home_posts(posts, self._series)
