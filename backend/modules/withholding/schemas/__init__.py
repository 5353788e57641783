"""Withholding schemas module."""

from .withholding_schemas import (
    Address,
    WorkLocation,
    EmployeeIdentity,
    TaxProfileData,
    PayEvent,
    TaxWithholdingRequest,
    WithholdingAmounts,
    CalculationDetails,
    TaxWithholdingResponse,
    BatchWithholdingRequest,
    BatchWithholdingItem,
    BatchWithholdingError,
    BatchWithholdingResponse,
    TaxCalculationAuditResponse,
    TaxBracketResponse,
)
from .engine_schemas import (
    EngineCalculationRequest,
    EngineCalculationResult,
    EngineOutcome,
)
from .error_schemas import ErrorDetail, ErrorResponse, WithholdingErrorCodes

__all__ = [
    'Address',
    'WorkLocation',
    'EmployeeIdentity',
    'TaxProfileData',
    'PayEvent',
    'TaxWithholdingRequest',
    'WithholdingAmounts',
    'CalculationDetails',
    'TaxWithholdingResponse',
    'BatchWithholdingRequest',
    'BatchWithholdingItem',
    'BatchWithholdingError',
    'BatchWithholdingResponse',
    'TaxCalculationAuditResponse',
    'TaxBracketResponse',
    'EngineCalculationRequest',
    'EngineCalculationResult',
    'EngineOutcome',
    'ErrorDetail',
    'ErrorResponse',
    'WithholdingErrorCodes',
]
