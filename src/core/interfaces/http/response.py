"""Standard API response models.

浏览器客户端使用 camelCase 字段名并依赖顶层 success 字段。
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(CamelModel):
    """Standard API response envelope."""

    success: bool = True


class TimestampedResponse(ApiResponse):
    """Response carrying the server time it was produced at."""

    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
