"""Homepage and series API endpoints."""

from aiohttp import web

from blogstage.app_keys import post_loader_key, series_key


def create_home_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/home", get_home),
        web.get("/api/series", list_series),
        web.get("/api/series/{slug}", get_series),
    ]


async def get_home(request: web.Request) -> web.Response:
    posts = request.app[post_loader_key].load()
    home = request.app[series_key].partition_home_posts(posts)
    return web.json_response(home.to_dict())


async def list_series(request: web.Request) -> web.Response:
    registry = request.app[series_key]
    return web.json_response(
        {"items": [item.to_dict() for item in registry.get_enabled_series()]}
    )


async def get_series(request: web.Request) -> web.Response:
    slug = request.match_info["slug"]
    registry = request.app[series_key]

    series = registry.get_series_by_slug(slug)
    if series is None:
        return web.json_response(
            {"error": "Series not found", "slug": slug},
            status=404,
        )

    posts = request.app[post_loader_key].load()
    series_posts = registry.get_posts_by_series_slug(posts, slug)
    return web.json_response(
        {
            "series": series.to_dict(),
            "posts": [post.to_dict() for post in series_posts],
        }
    )
