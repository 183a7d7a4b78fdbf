"""Sparkline badge endpoint with ETag revalidation."""
from __future__ import annotations

from aiohttp import web

from metric_charts_service.api.utils import stream_key
from metric_charts_service.services.dependencies import get_badge_controller, get_query_service
from metric_charts_service.settings import settings

routes = web.RouteTableDef()


@routes.get("/{namespace}/{id}/badge.png")
async def get_badge(request: web.Request) -> web.Response:
    namespace, metric_id = stream_key(request)
    window = await get_query_service(request).get_recent_window(
        namespace, metric_id, settings.badge_window_size
    )
    result = await get_badge_controller(request).respond(
        window, metric_id, if_none_match=request.headers.get("If-None-Match")
    )
    headers = {"ETag": result.etag, "Cache-Control": result.cache_control}
    if result.not_modified:
        return web.Response(status=304, headers=headers)
    return web.Response(body=result.body, content_type=result.content_type, headers=headers)
