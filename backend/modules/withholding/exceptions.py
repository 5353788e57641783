# backend/modules/withholding/exceptions.py

"""
Custom exceptions for the withholding module.

Only missing records and invalid input escape the calculation pipeline;
engine outages, missing bracket tables and audit write failures are
absorbed by the services.
"""

from typing import Optional, List
from .schemas.error_schemas import ErrorDetail, WithholdingErrorCodes


class WithholdingException(Exception):
    """Base exception for withholding module"""
    def __init__(
        self,
        message: str,
        code: str = WithholdingErrorCodes.INTERNAL_ERROR,
        details: Optional[List[ErrorDetail]] = None,
        status_code: int = 400
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or []
        self.status_code = status_code


class TaxProfileNotFoundError(WithholdingException):
    """The worker has no tax profile on file"""
    def __init__(self, employee_id: str):
        super().__init__(
            message="Employee tax profile not found",
            code=WithholdingErrorCodes.TAX_PROFILE_NOT_FOUND,
            details=[ErrorDetail(field="employee_id", message=str(employee_id))],
            status_code=404
        )
        self.employee_id = employee_id


class EmployeeNotFoundError(WithholdingException):
    """The worker record does not exist"""
    def __init__(self, employee_id: str):
        super().__init__(
            message="Employee not found",
            code=WithholdingErrorCodes.EMPLOYEE_NOT_FOUND,
            details=[ErrorDetail(field="employee_id", message=str(employee_id))],
            status_code=404
        )
        self.employee_id = employee_id


class WithholdingValidationError(WithholdingException):
    """Invalid calculation input"""
    def __init__(self, message: str, field: Optional[str] = None,
                 code: str = WithholdingErrorCodes.INVALID_AMOUNT):
        details = [ErrorDetail(field=field, message=message)] if field else None
        super().__init__(
            message=message,
            code=code,
            details=details,
            status_code=422
        )


class AuditLogError(WithholdingException):
    """Error reading the calculation audit trail"""
    def __init__(self, message: str, operation: Optional[str] = None):
        if operation:
            message = f"Audit {operation}: {message}"
        super().__init__(
            message=message,
            code=WithholdingErrorCodes.AUDIT_LOG_ERROR,
            status_code=500
        )
