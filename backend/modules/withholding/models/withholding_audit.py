# backend/modules/withholding/models/withholding_audit.py

"""
Audit trail models for withholding calculations.

Rows are append-only: one per calculation performed, and one per
batch job outcome.
"""

from sqlalchemy import Column, Integer, String, Numeric, DateTime, Text, JSON, Index
from backend.core.database import Base


class TaxCalculationAudit(Base):
    """Every withholding calculation, tagged with the engine that produced it."""
    __tablename__ = "tax_calculation_audit"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(String(36), nullable=False, index=True)
    calculation_id = Column(String(100), nullable=False, index=True)
    engine_used = Column(String(30), nullable=False)
    gross_pay = Column(Numeric(12, 2), nullable=False)
    pay_period = Column(String(20), nullable=False)
    result = Column(JSON, nullable=False)
    calculated_at = Column(DateTime, nullable=False, index=True)

    __table_args__ = (
        Index('idx_tax_audit_employee_calculated', 'employee_id', 'calculated_at'),
    )


class WithholdingJobLog(Base):
    """Outcome of batch withholding jobs, including per-worker failures."""
    __tablename__ = "withholding_job_logs"

    id = Column(Integer, primary_key=True, index=True)
    job_type = Column(String(60), nullable=False, index=True)
    status = Column(String(20), nullable=False, index=True)
    job_data = Column(JSON, nullable=True)
    error_message = Column(Text, nullable=True)
    processed_at = Column(DateTime, nullable=False)
