"""
Common response models.

Dependencies: pydantic
System role: Common API response structures
"""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error response schema."""

    success: bool = False
    code: str = Field(description="Stable error code")
    error: str = Field(description="Error message")
    details: dict | None = Field(default=None, description="Additional error context")
