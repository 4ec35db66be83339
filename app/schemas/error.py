"""Error body returned for every domain exception."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard 4xx body: a message for people and a stable code for clients."""

    detail: str = Field(..., description="Human-readable error message")
    code: str = Field(
        ...,
        description="Machine-readable error code, e.g. UNKNOWN_TIER or INSUFFICIENT_TOKENS",
    )
