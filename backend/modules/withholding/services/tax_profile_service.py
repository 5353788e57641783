# backend/modules/withholding/services/tax_profile_service.py

import logging

from sqlalchemy.orm import Session

from ..exceptions import EmployeeNotFoundError, TaxProfileNotFoundError
from ..models.employee_models import Employee, EmployeeTaxProfile
from ..schemas.withholding_schemas import TaxProfileData

logger = logging.getLogger(__name__)


class TaxProfileService:
    """Read and maintain worker withholding elections."""

    def __init__(self, db: Session):
        self.db = db

    def get_profile(self, employee_id: str) -> TaxProfileData:
        profile = self._find(employee_id)
        if profile is None:
            raise TaxProfileNotFoundError(employee_id)
        return TaxProfileData.model_validate(profile)

    def upsert_profile(self, employee_id: str, data: TaxProfileData) -> TaxProfileData:
        """
        Create or replace a worker's tax profile.

        The profile row is updated in place so its history stays attached
        to the same id.
        """
        employee = self.db.query(Employee).filter(Employee.id == employee_id).first()
        if employee is None:
            raise EmployeeNotFoundError(employee_id)

        values = data.model_dump()
        values["filing_status"] = data.filing_status.value
        values["state_filing_status"] = (
            data.state_filing_status.value if data.state_filing_status else None
        )
        values["state_code"] = data.state_code.upper()

        profile = self._find(employee_id)
        if profile is None:
            profile = EmployeeTaxProfile(employee_id=employee_id, **values)
            self.db.add(profile)
            logger.info(f"Created tax profile for employee {employee_id}")
        else:
            for field, value in values.items():
                setattr(profile, field, value)
            logger.info(f"Updated tax profile for employee {employee_id}")

        try:
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(profile)
        return TaxProfileData.model_validate(profile)

    def _find(self, employee_id: str):
        return (
            self.db.query(EmployeeTaxProfile)
            .filter(EmployeeTaxProfile.employee_id == employee_id)
            .first()
        )
