"""
Error envelopes shared by every route: `{code, message, details}`.
"""
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict


class ErrorDetail(BaseModel):
    """A single field-level validation error."""
    field: str
    message: str
    type: str


class ValidationErrorDetails(BaseModel):
    errors: list[ErrorDetail]


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""
    model_config = ConfigDict(from_attributes=True)

    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class ValidationErrorResponse(BaseModel):
    """422 envelope: `code` is always "VALIDATION_ERROR"."""
    code: str
    message: str
    details: ValidationErrorDetails
