from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional, Any, Dict

DataType = TypeVar("DataType")

ERROR_CODES = (
    "BAD_REQUEST", "UNAUTHORIZED", "FORBIDDEN", "NOT_FOUND", "CONFLICT",
    "VALIDATION_ERROR", "STORAGE_FAILURE", "INTERNAL_SERVER_ERROR",
)


class APIResponse(BaseModel, Generic[DataType]):
    """Success envelope shared by every quiz endpoint."""
    message: str = Field(..., description="What the call did, e.g. 'Progress saved'.")
    data: Optional[DataType] = Field(None, description="Task, exam, ledger or stats payload; null for deletes and resets.")


class ErrorDetail(BaseModel):
    code: str = Field(
        ...,
        description=(
            "UNAUTHORIZED: token missing, expired or invalid, sign in again. "
            "FORBIDDEN: admin role required. NOT_FOUND: unknown task, exam or user. "
            "CONFLICT: name already taken. VALIDATION_ERROR: malformed body or out of range points. "
            "STORAGE_FAILURE: the database rejected the read or write."
        ),
        json_schema_extra={"enum": list(ERROR_CODES)}
    )
    message: str = Field(..., description="Readable reason, safe to show in the quiz UI")
    details: Optional[Dict[str, Any]] = Field(None, description="validation_errors for VALIDATION_ERROR, error_type for 500s")


class ErrorResponse(BaseModel):
    """Error envelope returned by the handlers in app.middleware.exceptions."""
    error: ErrorDetail
    timestamp: str = Field(..., description="UTC time the error was raised, ISO 8601")
    path: str = Field(..., description="Full URL of the failed request")
    request_id: Optional[str] = Field(None, description="Request identifier for matching server logs")
