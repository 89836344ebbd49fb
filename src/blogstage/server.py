"""aiohttp server for blogstage.

Application factory and route registration for the JSON API consumed by
the page-rendering frontend.
"""

import logging

from aiohttp import web

from blogstage.api.categories import create_category_routes
from blogstage.api.home import create_home_routes
from blogstage.api.posts import create_post_routes
from blogstage.app_keys import post_loader_key, resolver_key, series_key
from blogstage.config import Config
from blogstage.core.loader import PostLoader

logger = logging.getLogger(__name__)


def create_app(config: Config) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration

    Returns:
        Configured aiohttp application

    Raises:
        ReservedSlugError: If a series slug collides with a reserved route
    """
    app = web.Application()

    app[series_key] = config.get_series_registry()
    app[resolver_key] = config.get_resolver()
    app[post_loader_key] = PostLoader(
        config.content.source_dir,
        include_drafts=config.content.include_drafts,
    )

    app.router.add_routes(create_category_routes())
    app.router.add_routes(create_home_routes())
    app.router.add_routes(create_post_routes())

    return app


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    logger.info(f"Serving {config.content.source_dir}")
    web.run_app(app, host=config.server.host, port=config.server.port)
