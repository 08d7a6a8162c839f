"""
Student entity and request schemas.
"""

from pydantic import BaseModel, ConfigDict, Field


class Student(BaseModel):
    """Student as stored and returned by the API."""
    id: int = Field(..., ge=1, description="Store-assigned identifier")
    name: str = Field(..., description="Full name")
    age: int = Field(..., description="Age in years")
    email: str = Field(..., description="Email address")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "name": "Ann",
                "age": 22,
                "email": "a@x.com"
            }
        }
    )


class StudentCreateRequest(BaseModel):
    """Create student request schema."""
    name: str = Field(..., strict=True, description="Full name")
    age: int = Field(..., strict=True, description="Age in years")
    email: str = Field(..., strict=True, description="Email address")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "name": "Ann",
                "age": 22,
                "email": "a@x.com"
            }
        }
    )


class StudentUpdateRequest(StudentCreateRequest):
    """
    Update student request schema.

    Updates are a full replace, so every field is required.
    """
