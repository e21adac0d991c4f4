"""Shared response envelopes. Every body, success or failure, carries ``success``."""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """A single field-level or contextual error detail."""

    field: str | None = None
    message: str


class ErrorResponse(BaseModel):
    """Error envelope returned by every exception handler."""

    success: bool = False
    message: str
    code: str
    details: list[ErrorDetail] = []
    request_id: str = Field(alias="requestId")

    model_config = {"populate_by_name": True}


class HealthResponse(BaseModel):
    success: bool = True
    status: str = "ok"
