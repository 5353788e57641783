# backend/modules/withholding/services/batch_withholding_service.py

"""
Batch withholding processing.

Runs the withholding calculation for many workers in one call. A failure
for one worker is logged and recorded, and the batch moves on.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..enums.withholding_enums import JobStatus
from ..exceptions import WithholdingException
from ..schemas.withholding_schemas import (
    BatchWithholdingError,
    BatchWithholdingItem,
    BatchWithholdingRequest,
    BatchWithholdingResponse,
    TaxWithholdingRequest,
)
from .tax_withholding_service import TaxWithholdingService
from .withholding_audit_service import WithholdingAuditService

logger = logging.getLogger(__name__)

JOB_TYPE_CALCULATION = "payroll_tax_calculation"
JOB_TYPE_BATCH = "payroll_tax_calculation_batch"


class BatchWithholdingService:
    """Service for batch withholding calculations."""

    def __init__(
        self,
        db: Session,
        withholding_service: Optional[TaxWithholdingService] = None,
    ):
        """Initialize batch withholding service.

        Args:
            db: Database session
            withholding_service: Calculation service; built from ``db`` when omitted
        """
        self.db = db
        self.withholding_service = withholding_service or TaxWithholdingService(db)
        self.audit_service = WithholdingAuditService(db)

    def process_batch(self, request: BatchWithholdingRequest) -> BatchWithholdingResponse:
        """Calculate withholdings for every job in the batch.

        Args:
            request: Batch of single-worker withholding requests

        Returns:
            Successful results plus one error entry per failed worker
        """
        results: List[BatchWithholdingItem] = []
        errors: List[BatchWithholdingError] = []

        for job in request.jobs:
            try:
                results.append(self._process_job(job))
            except WithholdingException as e:
                errors.append(self._record_failure(job, e.message, e.status_code))
            except Exception as e:
                self.db.rollback()
                logger.exception(f"Unexpected error calculating withholdings for {job.employee_id}")
                errors.append(self._record_failure(job, str(e), 500))

        self.audit_service.record_job(
            JOB_TYPE_BATCH,
            JobStatus.COMPLETED,
            job_data={
                "processed_count": len(results),
                "failed_count": len(errors),
                "employee_ids": [job.employee_id for job in request.jobs],
            },
        )
        logger.info(
            f"Withholding batch completed: {len(results)} processed, {len(errors)} failed"
        )

        return BatchWithholdingResponse(
            processed_count=len(results),
            failed_count=len(errors),
            results=results,
            errors=errors,
        )

    def _process_job(self, job: TaxWithholdingRequest) -> BatchWithholdingItem:
        withholdings = self.withholding_service.calculate_withholdings(job)
        # Employer FICA matches the employee share
        return BatchWithholdingItem(
            employee_id=job.employee_id,
            withholdings=withholdings,
            social_security_employer=withholdings.social_security_employee,
            medicare_employer=withholdings.medicare_employee,
        )

    def _record_failure(
        self, job: TaxWithholdingRequest, message: str, status_code: int
    ) -> BatchWithholdingError:
        logger.error(f"Withholding calculation failed for employee {job.employee_id}: {message}")
        self.audit_service.record_job(
            JOB_TYPE_CALCULATION,
            JobStatus.FAILED,
            job_data=job.model_dump(mode="json", by_alias=True),
            error_message=message,
        )
        return BatchWithholdingError(
            employee_id=job.employee_id,
            error=message,
            status_code=status_code,
        )
