"""Helper utilities for API handlers."""
from __future__ import annotations

from typing import Any, TypeVar

from aiohttp import web
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from metric_charts_service.core.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def parse_query(request: web.Request, model: type[ModelT]) -> ModelT:
    """Validate the query string into ``model``, raising ValidationError."""
    try:
        return model.model_validate(dict(request.rel_url.query))
    except PydanticValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'query'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ValidationError(f"Invalid query parameters: {details}") from exc


def stream_key(request: web.Request) -> tuple[str, str]:
    return request.match_info["namespace"], request.match_info["id"]


def error_payload(message: str) -> dict[str, Any]:
    return {"error": message}
