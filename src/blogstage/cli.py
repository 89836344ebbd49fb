"""CLI interface for blogstage.

Command-line tool for inspecting the category tree and homepage feed of a
blog, validating its configuration, and serving the JSON API.
"""

import json
import logging
import sys
from pathlib import Path

import click

from blogstage.config import Config
from blogstage.core.categories import CategoryNode, get_category_list
from blogstage.core.loader import PostLoader
from blogstage.core.paths import CategoryPathResolver
from blogstage.core.posts import Post
from blogstage.errors import ReservedSlugError

config_option = click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover blogstage.toml)",
)
source_dir_option = click.option(
    "--source-dir",
    "-s",
    type=click.Path(exists=True, path_type=Path, file_okay=False),
    default=None,
    help="Posts source directory (overrides config)",
)
drafts_option = click.option(
    "--drafts/--no-drafts",
    default=None,
    help="Include draft posts (overrides config, default: excluded)",
)


@click.group()
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
def cli(verbose: bool) -> None:
    """blogstage - Category trees and series for static blogs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command()
@config_option
@source_dir_option
@drafts_option
@click.option("--host", default=None, help="Host to bind to (overrides config)")
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
def serve(
    config_path: Path | None,
    source_dir: Path | None,
    drafts: bool | None,
    host: str | None,
    port: int | None,
) -> None:
    """Start the API server."""
    from blogstage.server import run_server

    config = _load_config(config_path, source_dir=source_dir, include_drafts=drafts)
    config = config.with_overrides(host=host, port=port)

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Source directory: {config.content.source_dir}")
    if config.content.include_drafts:
        click.echo("Drafts: included")

    run_server(config)


@cli.command()
@config_option
@source_dir_option
@drafts_option
@click.option("--json", "as_json", is_flag=True, help="Print the tree as JSON")
def categories(
    config_path: Path | None,
    source_dir: Path | None,
    drafts: bool | None,
    as_json: bool,
) -> None:
    """Print the category tree with post counts."""
    config = _load_config(config_path, source_dir=source_dir, include_drafts=drafts)
    posts = _load_posts(config)
    category_list = get_category_list(posts)

    if as_json:
        click.echo(json.dumps(category_list.to_dict(), ensure_ascii=False, indent=2))
        return

    if not category_list.categories:
        click.echo("No categories found")
        return

    resolver = config.get_resolver()
    for node in category_list.categories:
        _echo_category(node, [], category_list.count_map, resolver)


@cli.command()
@config_option
@source_dir_option
@drafts_option
def home(
    config_path: Path | None,
    source_dir: Path | None,
    drafts: bool | None,
) -> None:
    """Print the homepage feed split into highlighted, sticky and regular posts."""
    config = _load_config(config_path, source_dir=source_dir, include_drafts=drafts)
    registry = config.get_series_registry()
    result = registry.partition_home_posts(_load_posts(config))

    _echo_section("Highlighted", result.highlighted)
    _echo_section("Sticky", result.sticky)
    _echo_section("Regular", result.regular)


@cli.command()
@config_option
def check(config_path: Path | None) -> None:
    """Validate configuration and report category map coverage."""
    config = _load_config(config_path)
    category_map = config.get_category_map()

    click.echo(click.style("✓ Configuration is valid", fg="green"))
    click.echo(f"Categories mapped: {len(category_map)}")
    click.echo(f"Series enabled: {len(config.get_series_registry().get_enabled_series())}")

    posts = _load_posts(config)
    category_list = get_category_list(posts)
    unmapped = [name for name in category_list.count_map if name not in category_map]
    if unmapped:
        click.echo(
            click.style(
                f"Warning: categories without a slug: {', '.join(unmapped)}",
                fg="yellow",
            ),
            err=True,
        )


def _load_config(
    config_path: Path | None,
    *,
    source_dir: Path | None = None,
    include_drafts: bool | None = None,
) -> Config:
    """Load configuration or exit with an error message.

    Raises:
        SystemExit: If the configuration can't be loaded or is invalid
    """
    try:
        config = Config.load(config_path)
    except ReservedSlugError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        click.echo("Choose another slug for this series in the configuration.", err=True)
        sys.exit(1)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    return config.with_overrides(source_dir=source_dir, include_drafts=include_drafts)


def _load_posts(config: Config) -> list[Post]:
    loader = PostLoader(
        config.content.source_dir,
        include_drafts=config.content.include_drafts,
    )
    return loader.load()


def _echo_category(
    node: CategoryNode,
    parents: list[str],
    count_map: dict[str, int],
    resolver: CategoryPathResolver,
) -> None:
    """Print a category line and recurse into its children."""
    names = [*parents, node.name]
    indent = "  " * len(parents)
    count = count_map.get(node.name, 0)
    path = resolver.build_category_path(names)
    click.echo(f"{indent}{node.name} ({count})  {path}")
    for child in node.children:
        _echo_category(child, names, count_map, resolver)


def _echo_section(title: str, posts: list[Post]) -> None:
    click.echo(click.style(f"{title} ({len(posts)})", bold=True))
    for post in posts:
        click.echo(f"  {post.date:%Y-%m-%d}  {post.title}")


if __name__ == "__main__":
    cli()
