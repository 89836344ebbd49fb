"""Post API endpoint.

Returns a post's metadata with its deepest category and the neighbouring
posts of the same series.
"""

from aiohttp import web

from blogstage.app_keys import post_loader_key, resolver_key
from blogstage.core.posts import Post, get_adjacent_series_posts, get_post_last_category


def create_post_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/posts/{slug:.*}", get_post),
    ]


async def get_post(request: web.Request) -> web.Response:
    slug = request.match_info["slug"]
    posts = request.app[post_loader_key].load()

    post = next((p for p in posts if p.url_slug == slug), None)
    if post is None:
        return web.json_response(
            {"error": "Post not found", "slug": slug},
            status=404,
        )

    link, name = get_post_last_category(post, request.app[resolver_key])
    prev_post, next_post = get_adjacent_series_posts(posts, post)

    return web.json_response(
        {
            "post": post.to_dict(),
            "lastCategory": {"link": link, "name": name},
            "prev": _summary(prev_post),
            "next": _summary(next_post),
        }
    )


def _summary(post: Post | None) -> dict[str, str] | None:
    if post is None:
        return None
    return {"slug": post.url_slug, "title": post.title}
