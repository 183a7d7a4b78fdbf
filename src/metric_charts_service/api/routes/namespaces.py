"""Namespace summary endpoint."""
from __future__ import annotations

from aiohttp import web

from metric_charts_service.api.utils import parse_query
from metric_charts_service.domain.dto import PaginationQuery
from metric_charts_service.services.dependencies import get_query_service
from metric_charts_service.settings import settings

routes = web.RouteTableDef()


@routes.get("/{namespace}")
async def get_namespace(request: web.Request) -> web.Response:
    namespace = request.match_info["namespace"]
    params = parse_query(request, PaginationQuery)
    summary = await get_query_service(request).get_namespace_summary(
        namespace,
        page=params.page,
        page_size=settings.namespace_page_size,
    )
    return web.json_response(summary.to_dict())
