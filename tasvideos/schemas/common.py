from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from humps import camelize
from pydantic import BaseModel, ConfigDict, Field

MAX_PAGE_SIZE = 100


class CamelModel(BaseModel):
    """
    Base for API representations.

    Fields are declared in snake_case and serialized with camelCase aliases;
    either spelling is accepted on input, and ORM objects can be validated directly.
    """
    model_config = ConfigDict(alias_generator=camelize, populate_by_name=True, from_attributes=True)


class Pagination(BaseModel):
    """Limit/offset paging; a page never holds more than MAX_PAGE_SIZE records."""
    limit: int = Field(MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Max number of records to return")
    offset: int = Field(0, ge=0, description="Number of records to skip")


class MessageResponse(BaseModel):
    message: str = Field(..., description="Human readable message")


class ErrorInfo(BaseModel):
    type: str = Field(..., description="Error kind: validation_error, not_found, http_error or internal_error")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Any] = Field(
        default=None,
        description="Extra context, e.g. {parameter: [messages]} for rejected query parameters",
    )


# PUBLIC_INTERFACE
class ErrorResponse(BaseModel):
    """Body of every non-2xx response produced by the API's exception handlers."""
    status: int = Field(..., description="HTTP status code")
    error: ErrorInfo
    correlation_id: Optional[str] = Field(default=None, description="Value echoed in the X-Correlation-ID header")
    path: Optional[str] = Field(default=None, description="Request path")
    method: Optional[str] = Field(default=None, description="HTTP method")
    timestamp: datetime = Field(..., description="When the error was produced (UTC)")
