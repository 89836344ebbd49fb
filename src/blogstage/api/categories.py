"""Category API endpoints.

Provides the full category tree and per-category lookups by URL path.
"""

from aiohttp import web

from blogstage.app_keys import post_loader_key, resolver_key
from blogstage.core.categories import get_category_list
from blogstage.core.paths import get_parent_category
from blogstage.core.posts import get_posts_by_category


def create_category_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/categories", get_categories),
        web.get("/api/categories/{path:.*}", get_category),
    ]


async def get_categories(request: web.Request) -> web.Response:
    posts = request.app[post_loader_key].load()
    category_list = get_category_list(posts)
    return web.json_response(category_list.to_dict())


async def get_category(request: web.Request) -> web.Response:
    path = request.match_info["path"]
    resolver = request.app[resolver_key]
    posts = request.app[post_loader_key].load()
    category_list = get_category_list(posts)

    category = resolver.get_category_by_link(category_list.categories, path)
    if category is None:
        return web.json_response(
            {"error": "Category not found", "path": path},
            status=404,
        )

    parent = get_parent_category(category, category_list.categories)
    breadcrumbs = resolver.get_breadcrumbs(category, category_list.categories)

    return web.json_response(
        {
            "category": category.to_dict(),
            "count": category_list.count_map.get(category.name, 0),
            "parent": parent.to_dict() if parent is not None else None,
            "breadcrumbs": [b.to_dict() for b in breadcrumbs],
            "posts": [
                post.to_dict() for post in get_posts_by_category(posts, category.name)
            ],
        }
    )
