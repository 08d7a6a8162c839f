"""Response schemas shared by every router."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema."""
    error: str = Field(..., description="Human-readable error message")


class HealthResponse(BaseModel):
    """Health check response schema."""
    message: str = Field(..., description="Health status message")
