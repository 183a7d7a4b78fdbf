"""Metric ingest and series endpoints."""
from __future__ import annotations

from aiohttp import web

from metric_charts_service.api.utils import parse_query, stream_key
from metric_charts_service.domain.dto import PostMetricQuery
from metric_charts_service.services.dependencies import get_ingest_service, get_query_service

routes = web.RouteTableDef()

OWNER_TOKEN_HEADER = "owner-token"


@routes.post("/{namespace}/{id}")
async def post_metric(request: web.Request) -> web.Response:
    """Append one sample; the store stamps the timestamp."""
    namespace, metric_id = stream_key(request)
    params = parse_query(request, PostMetricQuery)
    service = get_ingest_service(request)
    await service.append_sample(
        namespace,
        metric_id,
        params.value,
        owner_token=request.headers.get(OWNER_TOKEN_HEADER),
    )
    return web.json_response({"status": "ok"})


@routes.get("/{namespace}/{id}")
async def get_chart(request: web.Request) -> web.Response:
    """Full ordered series for the chart view."""
    namespace, metric_id = stream_key(request)
    points = await get_query_service(request).get_series(namespace, metric_id)
    return web.json_response(
        {
            "namespace": namespace,
            "id": metric_id,
            "points": [point.to_dict() for point in points],
        }
    )
