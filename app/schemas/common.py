from typing import Any, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Esquema base: camelCase en el JSON, snake_case en Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None


class MessageResponse(BaseModel):
    message: str


class SuccessResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None
