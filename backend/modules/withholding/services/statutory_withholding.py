# backend/modules/withholding/services/statutory_withholding.py

"""
Flat-rate statutory withholdings: Social Security, Medicare, the
Additional Medicare surtax and state disability insurance.

None of these depend on filing status or withholding elections, and
exemption flags never apply to them.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..config.withholding_config import WithholdingRateConfig, get_withholding_rate_config
from ..schemas.withholding_schemas import PayEvent
from .tax_math import ZERO


@dataclass
class StatutoryWithholdings:
    social_security_employee: Decimal
    medicare_employee: Decimal
    medicare_additional: Decimal
    state_disability_insurance: Decimal


class StatutoryWithholdingCalculator:

    def __init__(self, rate_config: Optional[WithholdingRateConfig] = None):
        self.rates = rate_config or get_withholding_rate_config()

    def social_security(self, gross_wages: Decimal, ytd_social_security_wages: Decimal) -> Decimal:
        """Social Security withholding, capped at the annual wage base."""
        rate = self.rates.social_security_rate
        remaining_base = max(ZERO, self.rates.social_security_wage_base - ytd_social_security_wages)
        return min(gross_wages * rate, remaining_base * rate)

    def medicare(self, gross_wages: Decimal) -> Decimal:
        return gross_wages * self.rates.medicare_rate

    def additional_medicare(self, gross_wages: Decimal, ytd_gross_wages: Decimal) -> Decimal:
        """Surtax on this period's wages above the annual threshold."""
        excess = ytd_gross_wages + gross_wages - self.rates.additional_medicare_threshold
        if excess <= 0:
            return ZERO
        return min(excess, gross_wages) * self.rates.additional_medicare_rate

    def state_disability(
        self, gross_wages: Decimal, ytd_gross_wages: Decimal, state_code: Optional[str]
    ) -> Decimal:
        program = self.rates.disability_program_for(state_code)
        if program is None:
            return ZERO
        remaining_base = max(ZERO, program.wage_base - ytd_gross_wages)
        return min(gross_wages * program.rate, remaining_base * program.rate)

    def calculate(self, pay_event: PayEvent, state_code: Optional[str]) -> StatutoryWithholdings:
        gross = pay_event.gross_wages
        return StatutoryWithholdings(
            social_security_employee=self.social_security(
                gross, pay_event.ytd_social_security_wages
            ),
            medicare_employee=self.medicare(gross),
            medicare_additional=self.additional_medicare(gross, pay_event.ytd_gross_wages),
            state_disability_insurance=self.state_disability(
                gross, pay_event.ytd_gross_wages, state_code
            ),
        )
