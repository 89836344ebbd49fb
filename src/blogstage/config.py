"""Configuration management for blogstage.

Supports TOML configuration format with auto-discovery. Series definitions
are validated while loading, so a slug that shadows a reserved route stops
the build before anything is generated.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from blogstage.core.categories import CategoryMap
from blogstage.core.paths import CATEGORIES_ROOT, CategoryPathResolver
from blogstage.core.series import (
    RESERVED_ROUTES,
    SERIES_LINK_KEYS,
    SeriesConfig,
    SeriesRegistry,
    validate_series,
)

CONFIG_FILENAME = "blogstage.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class ContentConfig:
    """Content source configuration."""

    source_dir: Path = field(default_factory=lambda: Path("posts"))
    include_drafts: bool = False


@dataclass
class CategoriesConfig:
    """Category routing configuration."""

    root: str = CATEGORIES_ROOT
    category_map: dict[str, str] = field(default_factory=dict)


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    content: ContentConfig
    categories: CategoriesConfig
    series: list[SeriesConfig] = field(default_factory=list)
    config_path: Path | None = None

    @property
    def reserved_routes(self) -> tuple[str, ...]:
        """Top-level routes series slugs must not use."""
        return tuple(dict.fromkeys((*RESERVED_ROUTES, self.categories.root)))

    def get_category_map(self) -> CategoryMap:
        return CategoryMap(self.categories.category_map)

    def get_resolver(self) -> CategoryPathResolver:
        return CategoryPathResolver(self.get_category_map(), root=self.categories.root)

    def get_series_registry(self) -> SeriesRegistry:
        return SeriesRegistry(self.series, self.reserved_routes)

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for blogstage.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
            ReservedSlugError: If a series slug collides with a reserved route
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Return the nearest blogstage.toml from the working directory upwards."""
        cwd = Path.cwd()
        for directory in (cwd, *cwd.parents):
            candidate = directory / CONFIG_FILENAME
            if candidate.exists():
                return candidate
        return None

    @classmethod
    def _default(cls) -> Config:
        """Create config with all defaults."""
        return cls(
            server=ServerConfig(),
            content=ContentConfig(),
            categories=CategoriesConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary")

        config_dir = path.parent

        server = cls._parse_server(data.get("server"))
        content = cls._parse_content(data.get("content"), config_dir)
        categories = cls._parse_categories(data.get("categories"))
        series = cls._parse_series(data.get("series"))

        config = cls(
            server=server,
            content=content,
            categories=categories,
            series=series,
            config_path=path,
        )
        validate_series(config.series, config.reserved_routes)
        return config

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        """Parse server configuration section."""
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_content(cls, data: object, config_dir: Path) -> ContentConfig:
        """Parse content configuration section.

        Args:
            data: Raw content section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            ContentConfig instance
        """
        if data is None:
            return ContentConfig(source_dir=config_dir / "posts")

        if not isinstance(data, dict):
            raise ValueError("content section must be a dictionary")

        source_dir = data.get("source_dir", "posts")
        if not isinstance(source_dir, str):
            raise ValueError("content.source_dir must be a string")

        include_drafts = data.get("include_drafts", False)
        if not isinstance(include_drafts, bool):
            raise ValueError("content.include_drafts must be a boolean")

        return ContentConfig(
            source_dir=config_dir / source_dir,
            include_drafts=include_drafts,
        )

    @classmethod
    def _parse_categories(cls, data: object) -> CategoriesConfig:
        """Parse categories configuration section.

        The ``map`` table maps category names to URL slugs.
        """
        if data is None:
            return CategoriesConfig()

        if not isinstance(data, dict):
            raise ValueError("categories section must be a dictionary")

        root = data.get("root", CATEGORIES_ROOT)
        if not isinstance(root, str) or not root.strip("/"):
            raise ValueError("categories.root must be a non-empty string")

        mapping_raw = data.get("map", {})
        if not isinstance(mapping_raw, dict):
            raise ValueError("categories.map must be a table")
        category_map: dict[str, str] = {}
        for name, slug in mapping_raw.items():
            if not isinstance(slug, str) or not slug:
                raise ValueError(f"categories.map.{name} must be a non-empty string")
            category_map[name] = slug

        return CategoriesConfig(root=root.strip("/"), category_map=category_map)

    @classmethod
    def _parse_series(cls, data: object) -> list[SeriesConfig]:
        """Parse the series array of tables."""
        if data is None:
            return []

        if isinstance(data, dict):
            # Single [series] table
            data = [data]

        if not isinstance(data, list):
            raise ValueError("series must be an array of tables")

        return [cls._parse_series_item(item, idx) for idx, item in enumerate(data)]

    @classmethod
    def _parse_series_item(cls, data: object, idx: int) -> SeriesConfig:
        prefix = f"series[{idx}]"
        if not isinstance(data, dict):
            raise ValueError(f"{prefix} must be a dictionary")

        slug = data.get("slug")
        if not isinstance(slug, str) or not slug.strip():
            raise ValueError(f"{prefix}.slug must be a non-empty string")

        category_name = data.get("category_name")
        if not isinstance(category_name, str) or not category_name:
            raise ValueError(f"{prefix}.category_name must be a non-empty string")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError(f"{prefix}.enabled must be a boolean")

        highlight_on_home = data.get("highlight_on_home", True)
        if not isinstance(highlight_on_home, bool):
            raise ValueError(f"{prefix}.highlight_on_home must be a boolean")

        optional: dict[str, str | None] = {}
        for key in ("label", "full_name", "description", "cover", "icon"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{prefix}.{key} must be a string")
            optional[key] = value

        links_raw = data.get("links", {})
        if not isinstance(links_raw, dict):
            raise ValueError(f"{prefix}.links must be a table")
        links: dict[str, str] = {}
        for key, url in links_raw.items():
            if key not in SERIES_LINK_KEYS:
                raise ValueError(
                    f"{prefix}.links.{key} is not one of: {', '.join(SERIES_LINK_KEYS)}"
                )
            if not isinstance(url, str) or not url:
                raise ValueError(f"{prefix}.links.{key} must be a non-empty string")
            links[key] = url

        return SeriesConfig(
            slug=slug.strip(),
            category_name=category_name,
            enabled=enabled,
            highlight_on_home=highlight_on_home,
            label=optional["label"],
            full_name=optional["full_name"],
            description=optional["description"],
            cover=optional["cover"],
            icon=optional["icon"],
            links=links,
        )

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        source_dir: Path | None = None,
        include_drafts: bool | None = None,
    ) -> Config:
        """Return a copy with command-line values applied; None keeps the file value."""
        server_changes = {"host": host, "port": port}
        content_changes = {"source_dir": source_dir, "include_drafts": include_drafts}
        return replace(
            self,
            server=replace(self.server, **_given(server_changes)),
            content=replace(self.content, **_given(content_changes)),
        )


def _given(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}
