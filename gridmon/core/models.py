"""
Pydantic models for request/responses to APIs.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """
    Serialized with camelCase keys on the wire, populated by field name in
    Python.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Meta(CamelModel):
    total_count: int | None = None


class ApiResponse(CamelModel, Generic[T]):
    data: T
    meta: Meta | None = None


class ApiError(CamelModel):
    error: str
    details: dict[str, Any] | None = None


class HealthResponse(CamelModel):
    timestamp: str | None
    number_of_servers: int
    number_of_users: int
