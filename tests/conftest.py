"""Shared test fixtures."""

from collections.abc import Callable
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from blogstage.config import CategoriesConfig, Config, ContentConfig, ServerConfig
from blogstage.core.categories import CategoryMap
from blogstage.core.posts import Post
from blogstage.core.series import SeriesConfig

CATEGORY_MAP = {
    "Tools": "tools",
    "Notes": "note",
    "Frontend": "front-end",
    "React": "react",
    "Algorithm": "algorithm",
    "Weekly": "weekly",
    "Life": "life",
}

PostFactory = Callable[..., Post]


@pytest.fixture
def category_map() -> CategoryMap:
    return CategoryMap(CATEGORY_MAP)


@pytest.fixture
def make_post() -> PostFactory:
    """Create posts with increasing age, so creation order is newest-first."""
    base = datetime(2024, 6, 1)
    counter = 0

    def factory(categories: object = None, **kwargs: object) -> Post:
        nonlocal counter
        counter += 1
        kwargs.setdefault("slug", f"post-{counter}")
        kwargs.setdefault("title", f"Post {counter}")
        kwargs.setdefault("date", base - timedelta(days=counter))
        kwargs.setdefault("catalog", True)
        return Post(categories=categories, **kwargs)  # type: ignore[arg-type]

    return factory


@pytest.fixture
def posts_dir(tmp_path: Path) -> Path:
    """Create a posts directory with a small blog."""
    posts = tmp_path / "posts"
    posts.mkdir()

    (posts / "tools.md").write_text(
        "---\ntitle: Useful Tools\ndate: 2024-05-01\ncatalog: true\n"
        "categories: [Tools]\n---\n\nBody.\n"
    )
    (posts / "frontend.md").write_text(
        "---\ntitle: Frontend Basics\ndate: 2024-04-01\ncatalog: true\n"
        "categories:\n  - [Notes, Frontend]\n---\n\nBody.\n"
    )
    (posts / "react.md").write_text(
        "---\ntitle: React Hooks\ndate: 2024-03-01\ncatalog: true\n"
        "categories:\n  - [Notes, Frontend, React]\n---\n\nBody.\n"
    )
    (posts / "algorithm.md").write_text(
        "---\ntitle: Sorting\ndate: 2024-02-01\ncatalog: true\nsticky: true\n"
        "categories:\n  - [Notes, Algorithm]\n---\n\nBody.\n"
    )
    (posts / "weekly-2.md").write_text(
        "---\ntitle: Weekly 2\ndate: 2024-05-10\ncatalog: true\n"
        "categories: [Weekly]\n---\n\nBody.\n"
    )
    (posts / "weekly-1.md").write_text(
        "---\ntitle: Weekly 1\ndate: 2024-05-03\ncatalog: true\n"
        "categories: [Weekly]\n---\n\nBody.\n"
    )
    (posts / "draft.md").write_text(
        "---\ntitle: Unfinished\ndate: 2024-06-01\ncatalog: true\ndraft: true\n"
        "categories: [Life]\n---\n\nBody.\n"
    )

    return posts


@pytest.fixture
def test_config(posts_dir: Path) -> Config:
    """Create a test configuration pointing at the sample posts."""
    return Config(
        server=ServerConfig(),
        content=ContentConfig(source_dir=posts_dir),
        categories=CategoriesConfig(category_map=dict(CATEGORY_MAP)),
        series=[SeriesConfig(slug="weekly", category_name="Weekly")],
    )
