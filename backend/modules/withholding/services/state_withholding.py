# backend/modules/withholding/services/state_withholding.py

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..enums.withholding_enums import NO_STATE_CODE
from ..models.tax_bracket_models import StateTaxBracket
from .tax_math import ZERO, brackets_are_contiguous, marginal_bracket_tax, to_decimal

logger = logging.getLogger(__name__)


class StateWithholdingCalculator:
    """
    Internal state income tax calculation.

    Returns an annual amount; the caller de-annualizes it.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_brackets(
        self, state_code: str, tax_year: int, filing_status: str
    ) -> List[StateTaxBracket]:
        try:
            return (
                self.db.query(StateTaxBracket)
                .filter(
                    StateTaxBracket.state_code == state_code.upper(),
                    StateTaxBracket.tax_year == tax_year,
                    StateTaxBracket.filing_status == filing_status,
                )
                .order_by(StateTaxBracket.bracket_min)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(
                f"Error loading state brackets for {state_code}/{tax_year}/{filing_status}: {e}"
            )
            return []

    def taxable_income(
        self, adjusted_annual_income: Decimal, brackets: List[StateTaxBracket]
    ) -> Decimal:
        """Income after the state's standard deduction and personal exemption."""
        first = brackets[0]
        taxable = (
            adjusted_annual_income
            - to_decimal(first.standard_deduction)
            - to_decimal(first.personal_exemption)
        )
        return max(ZERO, taxable)

    def calculate(
        self,
        adjusted_annual_income: Decimal,
        state_code: Optional[str],
        filing_status: str,
        tax_year: int,
    ) -> Decimal:
        if not state_code or state_code.upper() == NO_STATE_CODE:
            return ZERO

        brackets = self.get_brackets(state_code, tax_year, filing_status)
        if not brackets:
            logger.warning(
                f"No state tax brackets found for {state_code}/{tax_year}/{filing_status}; "
                f"state withholding set to zero"
            )
            return ZERO

        if not brackets_are_contiguous(brackets):
            logger.warning(
                f"State tax brackets for {state_code}/{tax_year}/{filing_status} are not contiguous"
            )

        taxable = self.taxable_income(adjusted_annual_income, brackets)
        return marginal_bracket_tax(taxable, brackets)
