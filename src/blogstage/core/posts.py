"""Blog post records and post queries.

Posts are loaded into memory by the content loader; everything here works on
already-loaded lists and never touches the filesystem.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

from blogstage.core.categories import normalize_categories
from blogstage.core.paths import CategoryPathResolver
from blogstage.core.types import CategoryPath


@dataclass(frozen=True, eq=False)
class Post:
    """Blog post front matter.

    Posts compare by identity: two posts with equal front matter are still
    distinct entries of the collection.
    """

    slug: str
    title: str
    date: datetime
    categories: object = None
    catalog: bool = False
    sticky: bool = False
    draft: bool = False
    tags: tuple[str, ...] = ()
    description: str | None = None
    link: str | None = None
    source_path: Path | None = None

    @property
    def category_path(self) -> CategoryPath:
        """Root-first category names."""
        return normalize_categories(self.categories)

    @property
    def url_slug(self) -> str:
        """Slug used in the post URL, custom link first."""
        return self.link or self.slug

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "slug": self.url_slug,
            "title": self.title,
            "date": self.date.isoformat(),
            "categories": self.category_path,
            "tags": list(self.tags),
            "sticky": self.sticky,
            "description": self.description,
        }


def sort_posts(posts: Iterable[Post]) -> list[Post]:
    """Sort posts by date, newest first. Equal dates keep their order."""
    return sorted(posts, key=lambda post: post.date, reverse=True)


def filter_drafts(posts: Iterable[Post], *, include_drafts: bool = False) -> list[Post]:
    """Drop draft posts unless drafts are included."""
    if include_drafts:
        return list(posts)
    return [post for post in posts if not post.draft]


def split_by_sticky(posts: Iterable[Post]) -> tuple[list[Post], list[Post]]:
    """Split posts into (sticky, non_sticky), preserving order."""
    sticky: list[Post] = []
    non_sticky: list[Post] = []
    for post in posts:
        if post.sticky:
            sticky.append(post)
        else:
            non_sticky.append(post)
    return sticky, non_sticky


def is_post_in_category(post: Post, category_name: str) -> bool:
    """Check whether the category appears anywhere in the post's path."""
    return category_name in post.category_path


def get_posts_by_category(posts: Iterable[Post], category_name: str) -> list[Post]:
    """Get all posts under a category, at any depth of their path."""
    return [post for post in posts if is_post_in_category(post, category_name)]


def get_post_last_category(
    post: Post,
    resolver: CategoryPathResolver,
) -> tuple[str, str]:
    """Get the deepest category of a post.

    Returns:
        Tuple of (link, name), both empty when the post has no category
    """
    path = post.category_path
    if not path:
        return "", ""
    return resolver.build_category_path(path), path[-1]


def get_series_posts(posts: Iterable[Post], post: Post) -> list[Post]:
    """Get posts sharing the post's deepest category, in input order."""
    path = post.category_path
    if not path:
        return []
    return get_posts_by_category(posts, path[-1])


def get_adjacent_series_posts(
    posts: Iterable[Post],
    current: Post,
) -> tuple[Post | None, Post | None]:
    """Get the previous and next posts of the same series.

    Posts are expected newest-first, so the previous post is the newer one.

    Returns:
        Tuple of (prev_post, next_post)
    """
    series_posts = get_series_posts(posts, current)
    index = next(
        (i for i, post in enumerate(series_posts) if post.slug == current.slug),
        None,
    )
    if index is None:
        return None, None

    prev_post = series_posts[index - 1] if index > 0 else None
    next_post = series_posts[index + 1] if index < len(series_posts) - 1 else None
    return prev_post, next_post
