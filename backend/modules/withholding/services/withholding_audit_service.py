# backend/modules/withholding/services/withholding_audit_service.py

"""
Withholding audit trail.

Writes are best-effort: a failed insert is rolled back and logged so the
payroll number still reaches the caller. Reads raise ``AuditLogError``.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..enums.withholding_enums import JobStatus
from ..exceptions import AuditLogError
from ..models.withholding_audit import TaxCalculationAudit, WithholdingJobLog
from ..schemas.withholding_schemas import TaxWithholdingResponse

logger = logging.getLogger(__name__)


class WithholdingAuditService:

    def __init__(self, db: Session):
        self.db = db

    def record_calculation(
        self,
        employee_id: str,
        response: TaxWithholdingResponse,
    ) -> Optional[TaxCalculationAudit]:
        """Append one audit row; returns None if the write failed."""
        details = response.calculation_details
        entry = TaxCalculationAudit(
            employee_id=employee_id,
            calculation_id=details.calculation_id,
            engine_used=details.engine.value,
            gross_pay=details.gross_pay,
            pay_period=details.pay_period.value,
            result=response.model_dump(mode="json"),
            calculated_at=details.timestamp,
        )
        try:
            self.db.add(entry)
            self.db.commit()
            return entry
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(
                f"Failed to write tax calculation audit for employee {employee_id} "
                f"({details.calculation_id})"
            )
            return None

    def list_for_employee(
        self, employee_id: str, limit: int = 50
    ) -> List[TaxCalculationAudit]:
        """Audit rows for one worker, newest first."""
        try:
            return (
                self.db.query(TaxCalculationAudit)
                .filter(TaxCalculationAudit.employee_id == employee_id)
                .order_by(
                    TaxCalculationAudit.calculated_at.desc(),
                    TaxCalculationAudit.id.desc(),
                )
                .limit(limit)
                .all()
            )
        except SQLAlchemyError as e:
            raise AuditLogError(str(e), operation="read")

    def record_job(
        self,
        job_type: str,
        status: JobStatus,
        job_data: Optional[Dict[str, Any]] = None,
        error_message: Optional[str] = None,
    ) -> Optional[WithholdingJobLog]:
        entry = WithholdingJobLog(
            job_type=job_type,
            status=status.value,
            job_data=job_data,
            error_message=error_message,
            processed_at=datetime.utcnow(),
        )
        try:
            self.db.add(entry)
            self.db.commit()
            return entry
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Failed to write withholding job log ({job_type}, {status.value})")
            return None

