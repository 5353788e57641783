# backend/modules/withholding/models/tax_bracket_models.py

"""
Marginal tax bracket reference tables.

Rows for one (tax year, jurisdiction, filing status) are contiguous and
sorted by ``bracket_min``; the top row has ``bracket_max = NULL``.
``base_tax`` is the cumulative tax owed at ``bracket_min``.
"""

from sqlalchemy import Column, Integer, String, Numeric, Index, UniqueConstraint
from backend.core.database import Base


class FederalTaxBracket(Base):
    __tablename__ = "federal_tax_brackets"

    id = Column(Integer, primary_key=True, index=True)
    tax_year = Column(Integer, nullable=False)
    filing_status = Column(String(40), nullable=False)
    bracket_min = Column(Numeric(14, 2), nullable=False)
    bracket_max = Column(Numeric(14, 2), nullable=True)
    tax_rate = Column(Numeric(7, 5), nullable=False)
    base_tax = Column(Numeric(14, 2), default=0, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            'tax_year', 'filing_status', 'bracket_min',
            name='uq_federal_bracket_year_status_min'
        ),
        Index('ix_federal_brackets_year_status', 'tax_year', 'filing_status'),
    )


class StateTaxBracket(Base):
    __tablename__ = "state_tax_brackets"

    id = Column(Integer, primary_key=True, index=True)
    state_code = Column(String(8), nullable=False)
    tax_year = Column(Integer, nullable=False)
    filing_status = Column(String(40), nullable=False)
    bracket_min = Column(Numeric(14, 2), nullable=False)
    bracket_max = Column(Numeric(14, 2), nullable=True)
    tax_rate = Column(Numeric(7, 5), nullable=False)
    base_tax = Column(Numeric(14, 2), default=0, nullable=False)

    # Only the first row's values are used by the withholding calculation
    standard_deduction = Column(Numeric(12, 2), default=0, nullable=False)
    personal_exemption = Column(Numeric(12, 2), default=0, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            'state_code', 'tax_year', 'filing_status', 'bracket_min',
            name='uq_state_bracket_state_year_status_min'
        ),
        Index('ix_state_brackets_state_year_status', 'state_code', 'tax_year', 'filing_status'),
    )
