# backend/modules/withholding/routes/withholding_routes.py

"""
Payroll withholding API endpoints.

Provides:
- Per-pay-period withholding calculation (external engine with internal fallback)
- Batch calculation with per-worker failure isolation
- Calculation audit trail
- Tax profile maintenance
- Loaded bracket tables
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from backend.core.database import get_db
from backend.core.exceptions import NotFoundError
from ..config.withholding_config import (
    TaxEngineConfig,
    WithholdingRateConfig,
    get_tax_engine_config,
    get_withholding_rate_config,
)
from ..enums.withholding_enums import FilingStatus
from ..exceptions import WithholdingException
from ..schemas.error_schemas import ErrorResponse
from ..schemas.withholding_schemas import (
    BatchWithholdingRequest,
    BatchWithholdingResponse,
    TaxBracketResponse,
    TaxCalculationAuditResponse,
    TaxProfileData,
    TaxWithholdingRequest,
    TaxWithholdingResponse,
)
from ..services.batch_withholding_service import BatchWithholdingService
from ..services.external_engine_adapter import SymmetryTaxEngineAdapter
from ..services.federal_withholding import FederalWithholdingCalculator
from ..services.state_withholding import StateWithholdingCalculator
from ..services.tax_profile_service import TaxProfileService
from ..services.tax_withholding_service import TaxWithholdingService
from ..services.withholding_audit_service import WithholdingAuditService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/payroll/withholdings", tags=["Payroll Withholdings"])

ERROR_RESPONSES = {
    404: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_withholding_service(
    db: Session = Depends(get_db),
    engine_config: TaxEngineConfig = Depends(get_tax_engine_config),
    rate_config: WithholdingRateConfig = Depends(get_withholding_rate_config),
) -> TaxWithholdingService:
    return TaxWithholdingService(
        db,
        engine_adapter=SymmetryTaxEngineAdapter(engine_config),
        rate_config=rate_config,
    )


def _withholding_error(exc: WithholdingException) -> JSONResponse:
    content = {"error": exc.message, "code": exc.code}
    if exc.details:
        content["details"] = [detail.model_dump(exclude_none=True) for detail in exc.details]
    return JSONResponse(status_code=exc.status_code, content=content)


def _internal_error(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "details": str(exc)},
    )


@router.post("/calculate", response_model=TaxWithholdingResponse, responses=ERROR_RESPONSES)
def calculate_tax_withholdings(
    request: TaxWithholdingRequest,
    service: TaxWithholdingService = Depends(get_withholding_service),
):
    """
    Calculate withholdings for one worker's pay event.

    ## Request Body
    - **employeeId**: Worker with a tax profile on file
    - **grossPay**: Gross wages for the period
    - **payPeriod**: weekly, biweekly, semimonthly or monthly
    - **ytdGrossPay**, **ytdFederalWithheld**, **ytdStateWithheld**,
      **ytdSocialSecurity**, **ytdMedicare**: Year-to-date accumulators
    - **payPeriodStart**, **payPeriodEnd**, **payDate**: Optional pay dates

    ## Response
    Seven withholding categories, total withholdings, net pay and
    calculation details. `calculation_details.engine` is `symmetry` when
    the external engine served the request, otherwise `internal-fallback`.
    """
    try:
        return service.calculate_withholdings(request)
    except WithholdingException as e:
        return _withholding_error(e)
    except Exception as e:
        logger.exception("Error calculating tax withholdings")
        return _internal_error(e)


@router.post("/batch", response_model=BatchWithholdingResponse, responses=ERROR_RESPONSES)
def calculate_batch_withholdings(
    request: BatchWithholdingRequest,
    db: Session = Depends(get_db),
    service: TaxWithholdingService = Depends(get_withholding_service),
):
    """Calculate withholdings for many workers; failures are reported per worker."""
    try:
        return BatchWithholdingService(db, withholding_service=service).process_batch(request)
    except Exception as e:
        logger.exception("Error processing withholding batch")
        return _internal_error(e)


@router.get("/audit/{employee_id}", response_model=List[TaxCalculationAuditResponse], responses=ERROR_RESPONSES)
def get_calculation_audit(
    employee_id: str,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """Calculation audit rows for a worker, newest first."""
    try:
        return WithholdingAuditService(db).list_for_employee(employee_id, limit=limit)
    except WithholdingException as e:
        return _withholding_error(e)


@router.get("/tax-profiles/{employee_id}", response_model=TaxProfileData, responses=ERROR_RESPONSES)
def get_tax_profile(employee_id: str, db: Session = Depends(get_db)):
    try:
        return TaxProfileService(db).get_profile(employee_id)
    except WithholdingException as e:
        return _withholding_error(e)


@router.put("/tax-profiles/{employee_id}", response_model=TaxProfileData, responses=ERROR_RESPONSES)
def update_tax_profile(
    employee_id: str,
    profile: TaxProfileData,
    db: Session = Depends(get_db),
):
    """Create or replace a worker's withholding elections."""
    try:
        return TaxProfileService(db).upsert_profile(employee_id, profile)
    except WithholdingException as e:
        return _withholding_error(e)
    except Exception as e:
        logger.exception(f"Error updating tax profile for employee {employee_id}")
        return _internal_error(e)


@router.get("/brackets", response_model=List[TaxBracketResponse], responses=ERROR_RESPONSES)
def get_tax_brackets(
    filing_status: FilingStatus = Query(FilingStatus.SINGLE),
    state_code: Optional[str] = Query(None, description="Omit for federal brackets"),
    tax_year: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    rate_config: WithholdingRateConfig = Depends(get_withholding_rate_config),
):
    """Bracket rows loaded for a tax year, jurisdiction and filing status."""
    year = tax_year or rate_config.tax_year
    if state_code:
        brackets = StateWithholdingCalculator(db).get_brackets(state_code, year, filing_status.value)
        jurisdiction = state_code.upper()
    else:
        brackets = FederalWithholdingCalculator(db).get_brackets(year, filing_status.value)
        jurisdiction = "federal"

    if not brackets:
        raise NotFoundError(
            f"No {jurisdiction} tax brackets loaded for {year}/{filing_status.value}",
            error_code="TAX_BRACKETS_NOT_FOUND",
        )
    return brackets
