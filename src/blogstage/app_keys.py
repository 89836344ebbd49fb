"""Application keys for type-safe app configuration access."""

from aiohttp import web

from blogstage.core.loader import PostLoader
from blogstage.core.paths import CategoryPathResolver
from blogstage.core.series import SeriesRegistry

post_loader_key = web.AppKey("post_loader", PostLoader)
resolver_key = web.AppKey("resolver", CategoryPathResolver)
series_key = web.AppKey("series", SeriesRegistry)
