"""Shared base model: snake_case in Python, camelCase on the wire."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaginatedResponse(CamelModel):
    total: int = 0
    page: int = 1
    total_pages: int = 0


class OkResponse(CamelModel):
    ok: bool = True
