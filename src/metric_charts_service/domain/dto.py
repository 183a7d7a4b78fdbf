"""Pydantic DTOs for request query parameters."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class PostMetricQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # NaN/inf would poison min/max scaling of the sparkline
    value: float = Field(allow_inf_nan=False)


class PaginationQuery(BaseModel):
    model_config = ConfigDict(extra="ignore")

    page: int = Field(default=1, ge=0)
