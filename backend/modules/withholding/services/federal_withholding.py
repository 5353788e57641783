# backend/modules/withholding/services/federal_withholding.py

import logging
from decimal import Decimal
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.tax_bracket_models import FederalTaxBracket
from .tax_math import ZERO, brackets_are_contiguous, marginal_bracket_tax

logger = logging.getLogger(__name__)


class FederalWithholdingCalculator:
    """
    Internal federal income tax withholding, used when the external
    engine cannot serve a request.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_brackets(self, tax_year: int, filing_status: str) -> List[FederalTaxBracket]:
        """Ordered bracket rows for a year and filing status (empty on lookup failure)."""
        try:
            return (
                self.db.query(FederalTaxBracket)
                .filter(
                    FederalTaxBracket.tax_year == tax_year,
                    FederalTaxBracket.filing_status == filing_status,
                )
                .order_by(FederalTaxBracket.bracket_min)
                .all()
            )
        except SQLAlchemyError as e:
            logger.error(
                f"Error loading federal brackets for {tax_year}/{filing_status}: {e}"
            )
            return []

    def has_tables(self, tax_year: int) -> bool:
        try:
            return (
                self.db.query(FederalTaxBracket.id)
                .filter(FederalTaxBracket.tax_year == tax_year)
                .first()
                is not None
            )
        except SQLAlchemyError as e:
            logger.error(f"Error checking federal brackets for {tax_year}: {e}")
            return False

    def calculate(
        self,
        adjusted_annual_income: Decimal,
        filing_status: str,
        step2_checkbox: bool,
        periods_per_year: int,
        tax_year: int,
    ) -> Decimal:
        """
        Per-period federal withholding, unrounded.

        Args:
            adjusted_annual_income: Annualized wages after W-4 adjustments
            filing_status: Federal filing status value
            step2_checkbox: W-4 Step 2 multiple-jobs election; halves the annual tax
            periods_per_year: Pay periods used to de-annualize
            tax_year: Bracket table year

        Returns:
            Withholding for one pay period, or zero when no table is loaded
        """
        brackets = self.get_brackets(tax_year, filing_status)
        if not brackets:
            logger.warning(
                f"No federal tax brackets found for {tax_year}/{filing_status}; "
                f"federal withholding set to zero"
            )
            return ZERO

        if not brackets_are_contiguous(brackets):
            logger.warning(f"Federal tax brackets for {tax_year}/{filing_status} are not contiguous")

        annual_tax = marginal_bracket_tax(adjusted_annual_income, brackets)

        if step2_checkbox:
            annual_tax = annual_tax / 2

        return annual_tax / Decimal(periods_per_year)
