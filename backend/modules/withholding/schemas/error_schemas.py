# backend/modules/withholding/schemas/error_schemas.py

"""
Error response schemas for structured error handling.
"""

from pydantic import BaseModel, Field
from typing import List, Optional, Union


class ErrorDetail(BaseModel):
    """Detailed error information"""

    field: Optional[str] = None
    message: str
    code: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standardized error response"""

    error: str = Field(..., description="Human-readable error message")
    code: Optional[str] = Field(None, description="Machine-readable error code")
    details: Optional[Union[List[ErrorDetail], str]] = Field(
        None, description="Field-level details, or diagnostic text for unexpected failures"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "error": "Employee tax profile not found",
                "code": "WITHHOLDING_TAX_PROFILE_NOT_FOUND",
            }
        }
    }


class WithholdingErrorCodes:
    """Centralized error codes for the withholding module"""

    # Missing records
    TAX_PROFILE_NOT_FOUND = "WITHHOLDING_TAX_PROFILE_NOT_FOUND"
    EMPLOYEE_NOT_FOUND = "WITHHOLDING_EMPLOYEE_NOT_FOUND"

    # Validation errors
    INVALID_PAY_FREQUENCY = "WITHHOLDING_INVALID_PAY_FREQUENCY"
    INVALID_AMOUNT = "WITHHOLDING_INVALID_AMOUNT"

    # Audit
    AUDIT_LOG_ERROR = "WITHHOLDING_AUDIT_LOG_ERROR"

    # Unexpected
    INTERNAL_ERROR = "WITHHOLDING_INTERNAL_ERROR"
