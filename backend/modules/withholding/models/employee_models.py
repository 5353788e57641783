from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, Boolean, JSON
from sqlalchemy.orm import relationship
from backend.core.database import Base
from backend.core.mixins import TimestampMixin
from ..enums.withholding_enums import FilingStatus, NO_STATE_CODE


class Employee(Base, TimestampMixin):
    __tablename__ = "employees"

    id = Column(String(36), primary_key=True, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)

    # {"line1", "city", "state", "zipCode"}
    address = Column(JSON, nullable=True)
    # Optional distinct work location {"state", "city", "zipCode"}
    work_location = Column(JSON, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    tax_profile = relationship(
        "EmployeeTaxProfile", back_populates="employee", uselist=False
    )


class EmployeeTaxProfile(Base, TimestampMixin):
    """
    Federal and state withholding elections for one worker.

    Created at onboarding and updated whenever the worker submits a new W-4
    or state form. Rows are kept for the worker's lifetime for audit.
    """
    __tablename__ = "employee_tax_profiles"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(
        String(36), ForeignKey("employees.id"), nullable=False, unique=True, index=True
    )

    # Federal elections
    filing_status = Column(String(40), default=FilingStatus.SINGLE.value, nullable=False)
    federal_allowances = Column(Integer, default=0, nullable=False)
    additional_federal_withholding = Column(Numeric(12, 2), default=0, nullable=False)
    is_exempt_federal = Column(Boolean, default=False, nullable=False)

    # State elections
    state_code = Column(String(8), default=NO_STATE_CODE, nullable=False)
    state_filing_status = Column(String(40), nullable=True)
    state_allowances = Column(Integer, default=0, nullable=False)
    additional_state_withholding = Column(Numeric(12, 2), default=0, nullable=False)
    is_exempt_state = Column(Boolean, default=False, nullable=False)

    # W-4 (2020+) step elections
    w4_step2_checkbox = Column(Boolean, default=False, nullable=False)
    w4_dependents_amount = Column(Numeric(12, 2), default=0, nullable=False)
    w4_other_income = Column(Numeric(12, 2), default=0, nullable=False)
    w4_deductions = Column(Numeric(12, 2), default=0, nullable=False)

    # Relationships
    employee = relationship("Employee", back_populates="tax_profile")
