"""Tests for configuration loading."""

from pathlib import Path
from unittest.mock import patch

import pytest
from blogstage.config import CategoriesConfig, Config, ContentConfig, ServerConfig
from blogstage.core.series import SeriesConfig
from blogstage.errors import ConfigError, ReservedSlugError


class TestConfigLoad:
    """Tests for Config.load()."""

    def test__explicit_path__loads_config(self, tmp_path: Path) -> None:
        """Load config from explicit path."""
        config_file = tmp_path / "blogstage.toml"
        config_file.write_text("""
[server]
host = "0.0.0.0"
port = 3000

[content]
source_dir = "content/blog"
include_drafts = true

[categories]
root = "topics"

[categories.map]
"Notes" = "note"
"Frontend" = "front-end"

[[series]]
slug = "weekly"
category_name = "Weekly"
label = "Weekly"
full_name = "Frontend Weekly"
highlight_on_home = false

[[series]]
slug = "digest"
category_name = "Digest"
enabled = false
""")

        config = Config.load(config_file)

        assert config.server.host == "0.0.0.0"
        assert config.server.port == 3000
        assert config.content.source_dir == tmp_path / "content/blog"
        assert config.content.include_drafts is True
        assert config.categories.root == "topics"
        assert config.categories.category_map == {"Notes": "note", "Frontend": "front-end"}
        assert config.series == [
            SeriesConfig(
                slug="weekly",
                category_name="Weekly",
                label="Weekly",
                full_name="Frontend Weekly",
                highlight_on_home=False,
            ),
            SeriesConfig(slug="digest", category_name="Digest", enabled=False),
        ]
        assert config.config_path == config_file

    def test__minimal_config__uses_defaults(self, tmp_path: Path) -> None:
        """Load minimal config with defaults relative to config file."""
        config_file = tmp_path / "blogstage.toml"
        config_file.write_text("")

        config = Config.load(config_file)

        assert config.server.host == "127.0.0.1"
        assert config.server.port == 8080
        assert config.content.source_dir == tmp_path / "posts"
        assert config.content.include_drafts is False
        assert config.categories.root == "categories"
        assert config.categories.category_map == {}
        assert config.series == []

    def test__missing_explicit_path__raises_error(self, tmp_path: Path) -> None:
        """Raise FileNotFoundError for missing explicit config file."""
        config_file = tmp_path / "nonexistent.toml"

        with pytest.raises(FileNotFoundError, match="Configuration file not found"):
            Config.load(config_file)

    def test__no_path_no_discovery__returns_defaults(self) -> None:
        """Return defaults when no config file found."""
        with patch.object(Config, "_discover_config", return_value=None):
            config = Config.load()

        assert config.content.source_dir == Path("posts")
        assert config.series == []
        assert config.config_path is None

    def test__single_series_table__accepted(self, tmp_path: Path) -> None:
        config_file = tmp_path / "blogstage.toml"
        config_file.write_text('[series]\nslug = "weekly"\ncategory_name = "Weekly"\n')

        config = Config.load(config_file)

        assert config.series == [SeriesConfig(slug="weekly", category_name="Weekly")]

    def test__series_presentation_fields__loaded(self, tmp_path: Path) -> None:
        config_file = tmp_path / "blogstage.toml"
        config_file.write_text("""
[[series]]
slug = "weekly"
category_name = "Weekly"
cover = "/img/weekly.png"
icon = "ri:newspaper-line"

[series.links]
github = "https://github.com/example/weekly"
rss = "/weekly/rss.xml"
""")

        series = Config.load(config_file).series[0]

        assert series.cover == "/img/weekly.png"
        assert series.icon == "ri:newspaper-line"
        assert series.links == {
            "github": "https://github.com/example/weekly",
            "rss": "/weekly/rss.xml",
        }
        assert series.to_dict()["links"] == series.links


class TestSeriesValidation:
    """Tests for series validation during loading."""

    def test__reserved_slug__raises_before_build(self, tmp_path: Path) -> None:
        config_file = tmp_path / "blogstage.toml"
        config_file.write_text('[[series]]\nslug = "categories"\ncategory_name = "Weekly"\n')

        with pytest.raises(ReservedSlugError) as exc_info:
            Config.load(config_file)

        assert exc_info.value.slug == "categories"
        assert "categories" in exc_info.value.reserved

    def test__slug_equal_to_custom_category_root__raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "blogstage.toml"
        config_file.write_text(
            '[categories]\nroot = "topics"\n\n'
            '[[series]]\nslug = "topics"\ncategory_name = "Weekly"\n'
        )

        with pytest.raises(ReservedSlugError, match="topics"):
            Config.load(config_file)

    def test__duplicate_slug__raises(self, tmp_path: Path) -> None:
        config_file = tmp_path / "blogstage.toml"
        config_file.write_text(
            '[[series]]\nslug = "weekly"\ncategory_name = "A"\n\n'
            '[[series]]\nslug = "weekly"\ncategory_name = "B"\n'
        )

        with pytest.raises(ConfigError, match="Duplicate series slug"):
            Config.load(config_file)


class TestConfigValidation:
    """Tests for configuration validation errors."""

    @pytest.mark.parametrize(
        ("content", "message"),
        [
            ('server = "x"', "server section must be a dictionary"),
            ('[server]\nhost = 1', "server.host must be a string"),
            ('[server]\nport = "80"', "server.port must be an integer"),
            ('[content]\nsource_dir = 1', "content.source_dir must be a string"),
            ('[content]\ninclude_drafts = "yes"', "content.include_drafts must be a boolean"),
            ('[categories]\nroot = ""', "categories.root must be a non-empty string"),
            ('[categories]\nmap = "x"', "categories.map must be a table"),
            ('[categories.map]\nNotes = 1', "categories.map.Notes must be a non-empty string"),
            ("series = 1", "series must be an array of tables"),
            ('[[series]]\ncategory_name = "A"', r"series\[0\].slug must be a non-empty string"),
            ('[[series]]\nslug = "a"', r"series\[0\].category_name must be a non-empty string"),
            (
                '[[series]]\nslug = "a"\ncategory_name = "A"\nenabled = 1',
                r"series\[0\].enabled must be a boolean",
            ),
            (
                '[[series]]\nslug = "a"\ncategory_name = "A"\nhighlight_on_home = "no"',
                r"series\[0\].highlight_on_home must be a boolean",
            ),
            (
                '[[series]]\nslug = "a"\ncategory_name = "A"\nlabel = 1',
                r"series\[0\].label must be a string",
            ),
            (
                '[[series]]\nslug = "a"\ncategory_name = "A"\nicon = 1',
                r"series\[0\].icon must be a string",
            ),
            (
                '[[series]]\nslug = "a"\ncategory_name = "A"\nlinks = "x"',
                r"series\[0\].links must be a table",
            ),
            (
                '[[series]]\nslug = "a"\ncategory_name = "A"\n[series.links]\nblog = "x"',
                r"series\[0\].links.blog is not one of",
            ),
            (
                '[[series]]\nslug = "a"\ncategory_name = "A"\n[series.links]\nrss = ""',
                r"series\[0\].links.rss must be a non-empty string",
            ),
        ],
    )
    def test__invalid_value__raises(
        self, tmp_path: Path, content: str, message: str
    ) -> None:
        config_file = tmp_path / "blogstage.toml"
        config_file.write_text(content)

        with pytest.raises(ValueError, match=message):
            Config.load(config_file)


class TestConfigDiscovery:
    """Tests for config file discovery."""

    def test__config_in_current_dir__found(self, tmp_path: Path) -> None:
        config_file = tmp_path / "blogstage.toml"
        config_file.write_text("")

        with patch("pathlib.Path.cwd", return_value=tmp_path):
            discovered = Config._discover_config()

        assert discovered == config_file

    def test__config_in_parent_dir__found(self, tmp_path: Path) -> None:
        config_file = tmp_path / "blogstage.toml"
        config_file.write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        with patch("pathlib.Path.cwd", return_value=nested):
            discovered = Config._discover_config()

        assert discovered == config_file


class TestWithOverrides:
    """Tests for Config.with_overrides()."""

    @pytest.fixture
    def config(self) -> Config:
        return Config(
            server=ServerConfig(),
            content=ContentConfig(source_dir=Path("posts")),
            categories=CategoriesConfig(),
        )

    def test__no_overrides__returns_equal_config(self, config: Config) -> None:
        assert config.with_overrides() == config

    def test__overrides__applied(self, config: Config) -> None:
        result = config.with_overrides(
            host="0.0.0.0",
            port=9000,
            source_dir=Path("blog"),
            include_drafts=True,
        )

        assert result.server.host == "0.0.0.0"
        assert result.server.port == 9000
        assert result.content.source_dir == Path("blog")
        assert result.content.include_drafts is True

    def test__partial_overrides__keep_other_values(self, config: Config) -> None:
        result = config.with_overrides(port=9000, include_drafts=True)

        assert result.server.host == "127.0.0.1"
        assert result.server.port == 9000
        assert result.content.source_dir == Path("posts")
        assert result.content.include_drafts is True

    def test__original__unchanged(self, config: Config) -> None:
        config.with_overrides(port=9000, include_drafts=True)

        assert config.server.port == 8080
        assert config.content.include_drafts is False


class TestConfigHelpers:
    """Tests for Config helper accessors."""

    def test__get_resolver__uses_map_and_root(self) -> None:
        config = Config(
            server=ServerConfig(),
            content=ContentConfig(),
            categories=CategoriesConfig(root="topics", category_map={"Notes": "note"}),
        )

        resolver = config.get_resolver()

        assert resolver.build_category_path("Notes") == "/topics/note"

    def test__get_series_registry__validates(self) -> None:
        config = Config(
            server=ServerConfig(),
            content=ContentConfig(),
            categories=CategoriesConfig(),
            series=[SeriesConfig(slug="post", category_name="X")],
        )

        with pytest.raises(ReservedSlugError):
            config.get_series_registry()
