"""Post loading from Markdown sources.

Scans a content directory for Markdown files with YAML front matter and
turns them into Post records sorted newest-first.
"""

import logging
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

import yaml

from blogstage.core.excerpt import extract_excerpt
from blogstage.core.posts import Post, filter_drafts, sort_posts

logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---"


class FrontMatterError(ValueError):
    """Front matter is missing required fields or has invalid values."""


def split_front_matter(text: str) -> tuple[dict[str, Any] | None, str]:
    """Split YAML front matter from Markdown text.

    Args:
        text: Full Markdown document

    Returns:
        Tuple of (front matter mapping or None, body)

    Raises:
        yaml.YAMLError: If the front matter block is not valid YAML
    """
    lines = text.splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return None, text

    for idx in range(1, len(lines)):
        if lines[idx].strip() == FRONT_MATTER_DELIMITER:
            data = yaml.safe_load("\n".join(lines[1:idx]))
            body = "\n".join(lines[idx + 1 :])
            if data is None:
                return {}, body
            if not isinstance(data, dict):
                return None, text
            return data, body

    return None, text


def parse_post(
    data: dict[str, Any],
    slug: str,
    source_path: Path | None = None,
    body: str = "",
) -> Post:
    """Build a Post from parsed front matter.

    Without a front matter description, an excerpt of the body is used.

    Raises:
        FrontMatterError: If title or date is missing or invalid
    """
    title = data.get("title")
    if not isinstance(title, str) or not title:
        raise FrontMatterError("title must be a non-empty string")

    tags_raw = data.get("tags") or []
    if isinstance(tags_raw, str):
        tags_raw = [tags_raw]
    if not isinstance(tags_raw, list):
        raise FrontMatterError("tags must be a list")

    description = data.get("description")
    if not isinstance(description, str) or not description:
        description = extract_excerpt(body) or None
    link = data.get("link")

    return Post(
        slug=slug,
        title=title,
        date=_parse_date(data.get("date")),
        categories=data.get("categories"),
        catalog=data.get("catalog") is True,
        sticky=data.get("sticky") is True,
        draft=data.get("draft") is True,
        tags=tuple(str(tag) for tag in tags_raw),
        description=description,
        link=link if isinstance(link, str) and link else None,
        source_path=source_path,
    )


def _parse_date(value: object) -> datetime:
    """Coerce a front matter date into a naive UTC datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise FrontMatterError(f"date is not an ISO date: {value!r}") from e
    else:
        raise FrontMatterError("date is required")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(UTC).replace(tzinfo=None)
    return parsed


class PostLoader:
    """Loads posts from a directory of Markdown files.

    Files and directories whose names start with "." or "_" are skipped.
    Files that can't be parsed are skipped with a warning.
    """

    def __init__(self, source_dir: Path, *, include_drafts: bool = False) -> None:
        """Initialize loader.

        Args:
            source_dir: Root directory containing Markdown posts
            include_drafts: Keep posts marked as drafts
        """
        self._source_dir = source_dir
        self._include_drafts = include_drafts

    @property
    def source_dir(self) -> Path:
        return self._source_dir

    def load(self) -> list[Post]:
        """Load all posts, newest first.

        Returns:
            Sorted posts, empty if the source directory doesn't exist
        """
        if not self._source_dir.is_dir():
            logger.warning(f"Content directory not found: {self._source_dir}")
            return []

        posts: list[Post] = []
        for path in sorted(self._source_dir.rglob("*.md")):
            relative = path.relative_to(self._source_dir)
            if any(part.startswith((".", "_")) for part in relative.parts):
                continue
            post = self._load_file(path, relative)
            if post is not None:
                posts.append(post)

        posts = filter_drafts(posts, include_drafts=self._include_drafts)
        logger.debug(f"Loaded {len(posts)} posts from {self._source_dir}")
        return sort_posts(posts)

    def _load_file(self, path: Path, relative: Path) -> Post | None:
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read {relative}: {e}")
            return None

        # PyYAML raises plain ValueError for out-of-range timestamps
        try:
            data, body = split_front_matter(text)
        except (yaml.YAMLError, ValueError) as e:
            logger.warning(f"Invalid front matter in {relative}: {e}")
            return None

        if data is None:
            logger.warning(f"No front matter in {relative}, skipping")
            return None

        slug = relative.with_suffix("").as_posix()
        try:
            return parse_post(data, slug, source_path=path, body=body)
        except FrontMatterError as e:
            logger.warning(f"Skipping {relative}: {e}")
            return None
