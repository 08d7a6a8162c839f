"""
User entity and request schemas.
"""

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """User as stored and returned by the API."""
    id: int = Field(..., ge=1, description="Store-assigned identifier")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="Email address")


class UserCreateRequest(BaseModel):
    """Create user request schema."""
    name: str = Field(..., strict=True, description="Display name")
    email: str = Field(..., strict=True, description="Email address")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Alice",
                "email": "alice@example.com"
            }
        }
    )
