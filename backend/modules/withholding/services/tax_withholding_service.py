# backend/modules/withholding/services/tax_withholding_service.py

"""
Tax withholding orchestration.

Loads the worker's tax profile and identity, asks the external engine
first and falls back to the internal bracket calculators when the engine
is not configured or fails. Every result is written to the audit trail.
"""

import logging
from dataclasses import astuple, dataclass
from datetime import datetime
from decimal import Decimal, ROUND_DOWN
from typing import Optional, Union

from sqlalchemy.orm import Session

from ..config.withholding_config import WithholdingRateConfig, get_withholding_rate_config
from ..enums.withholding_enums import EngineUsed, PayFrequency, NO_STATE_CODE
from ..exceptions import (
    EmployeeNotFoundError,
    TaxProfileNotFoundError,
    WithholdingValidationError,
)
from ..models.employee_models import Employee, EmployeeTaxProfile
from ..schemas.error_schemas import WithholdingErrorCodes
from ..schemas.withholding_schemas import (
    Address,
    CalculationDetails,
    EmployeeIdentity,
    PayEvent,
    TaxProfileData,
    TaxWithholdingRequest,
    TaxWithholdingResponse,
    WithholdingAmounts,
    WorkLocation,
)
from .external_engine_adapter import SymmetryTaxEngineAdapter
from .federal_withholding import FederalWithholdingCalculator
from .state_withholding import StateWithholdingCalculator
from .statutory_withholding import StatutoryWithholdingCalculator
from .tax_math import CENT, ZERO, round_to_cents
from .withholding_audit_service import WithholdingAuditService

logger = logging.getLogger(__name__)


@dataclass
class InternalCalculation:
    amounts: WithholdingAmounts
    annualized_income: Decimal
    adjusted_annual_income: Decimal
    tax_year: int


class TaxWithholdingService:
    """Single entry point for per-pay-period withholding calculations."""

    def __init__(
        self,
        db: Session,
        engine_adapter: Optional[SymmetryTaxEngineAdapter] = None,
        rate_config: Optional[WithholdingRateConfig] = None,
    ):
        self.db = db
        self.rates = rate_config or get_withholding_rate_config()
        self.engine_adapter = engine_adapter or SymmetryTaxEngineAdapter()
        self.federal_calculator = FederalWithholdingCalculator(db)
        self.state_calculator = StateWithholdingCalculator(db)
        self.statutory_calculator = StatutoryWithholdingCalculator(self.rates)
        self.audit_service = WithholdingAuditService(db)

    @staticmethod
    def periods_per_year(pay_frequency: Union[PayFrequency, str]) -> int:
        """Pay periods per year; unknown frequencies are rejected."""
        try:
            return PayFrequency(pay_frequency).periods_per_year
        except ValueError:
            raise WithholdingValidationError(
                f"Unknown pay frequency: {pay_frequency}",
                field="pay_period",
                code=WithholdingErrorCodes.INVALID_PAY_FREQUENCY,
            )

    def calculate_withholdings(self, request: TaxWithholdingRequest) -> TaxWithholdingResponse:
        """
        Calculate every withholding category for one pay event.

        Raises:
            TaxProfileNotFoundError: No tax profile for the worker
            EmployeeNotFoundError: No worker record
            WithholdingValidationError: Unknown pay frequency
        """
        logger.info(
            f"Calculating withholdings for employee {request.employee_id}, "
            f"gross pay {request.gross_pay}"
        )

        profile = self.load_tax_profile(request.employee_id)
        identity = self.load_identity(request.employee_id)
        pay_event = request.to_pay_event()

        outcome = self.engine_adapter.calculate(identity, profile, pay_event)

        if outcome.succeeded:
            response = self._build_response(
                amounts=outcome.amounts,
                pay_event=pay_event,
                engine=EngineUsed.SYMMETRY,
                calculation_id=outcome.calculation_id,
                timestamp=outcome.timestamp,
            )
        else:
            internal = self.calculate_internal(profile, pay_event)
            response = self._build_response(
                amounts=internal.amounts,
                pay_event=pay_event,
                engine=EngineUsed.INTERNAL_FALLBACK,
                calculation_id=outcome.calculation_id,
                timestamp=outcome.timestamp,
                internal=internal,
                filing_status=profile.filing_status.value,
            )

        self.audit_service.record_calculation(request.employee_id, response)
        logger.info(
            f"Withholdings for employee {request.employee_id} calculated by "
            f"{response.calculation_details.engine.value}: total {response.total_withholdings}"
        )
        return response

    def load_tax_profile(self, employee_id: str) -> TaxProfileData:
        row = (
            self.db.query(EmployeeTaxProfile)
            .filter(EmployeeTaxProfile.employee_id == employee_id)
            .first()
        )
        if row is None:
            raise TaxProfileNotFoundError(employee_id)
        return TaxProfileData.model_validate(row)

    def load_identity(self, employee_id: str) -> EmployeeIdentity:
        employee = self.db.query(Employee).filter(Employee.id == employee_id).first()
        if employee is None:
            raise EmployeeNotFoundError(employee_id)

        work_location = None
        if employee.work_location:
            work_location = WorkLocation.model_validate(employee.work_location)

        return EmployeeIdentity(
            employee_id=employee.id,
            first_name=employee.first_name or "",
            last_name=employee.last_name or "",
            address=Address.model_validate(employee.address or {}),
            work_location=work_location,
        )

    def resolve_tax_year(self, pay_event: PayEvent) -> int:
        """Pay date year when its bracket tables are loaded, else the configured year."""
        if pay_event.pay_date is None:
            return self.rates.tax_year

        pay_year = pay_event.pay_date.year
        if pay_year != self.rates.tax_year and not self.federal_calculator.has_tables(pay_year):
            logger.warning(
                f"No federal tax brackets loaded for {pay_year}; "
                f"using configured tax year {self.rates.tax_year}"
            )
            return self.rates.tax_year
        return pay_year

    def calculate_internal(
        self, profile: TaxProfileData, pay_event: PayEvent
    ) -> InternalCalculation:
        """
        Internal bracket-based calculation.

        Deterministic for a given profile, pay event and bracket tables;
        nothing here writes to the database.
        """
        periods = self.periods_per_year(pay_event.pay_frequency)
        tax_year = self.resolve_tax_year(pay_event)

        annualized_income = pay_event.gross_wages * periods
        adjusted_annual_income = max(
            ZERO,
            annualized_income
            + profile.w4_other_income
            - profile.w4_deductions
            - profile.w4_dependents_amount,
        )

        statutory = self.statutory_calculator.calculate(pay_event, profile.state_code)

        federal = ZERO
        if not profile.is_exempt_federal:
            federal = self.federal_calculator.calculate(
                adjusted_annual_income,
                profile.filing_status.value,
                profile.w4_step2_checkbox,
                periods,
                tax_year,
            ) + profile.additional_federal_withholding

        state = ZERO
        if not profile.is_exempt_state and profile.state_code.upper() != NO_STATE_CODE:
            annual_state = self.state_calculator.calculate(
                adjusted_annual_income,
                profile.state_code,
                profile.effective_state_filing_status.value,
                tax_year,
            )
            state = annual_state / Decimal(periods) + profile.additional_state_withholding

        # Income tax is limited to the wages left after statutory withholdings
        available = max(
            ZERO,
            pay_event.gross_wages
            - sum((round_to_cents(amount) for amount in astuple(statutory)), ZERO),
        ).quantize(CENT, rounding=ROUND_DOWN)
        if federal > available:
            logger.warning(
                f"Federal withholding {round_to_cents(federal)} exceeds available wages "
                f"{available}; capped"
            )
            federal = available
        available -= round_to_cents(federal)
        if state > available:
            logger.warning(
                f"State withholding {round_to_cents(state)} exceeds available wages "
                f"{available}; capped"
            )
            state = available

        amounts = WithholdingAmounts(
            federal_income_tax=federal,
            state_income_tax=state,
            local_income_tax=ZERO,
            social_security_employee=statutory.social_security_employee,
            medicare_employee=statutory.medicare_employee,
            medicare_additional=statutory.medicare_additional,
            state_disability_insurance=statutory.state_disability_insurance,
        )
        return InternalCalculation(
            amounts=amounts,
            annualized_income=annualized_income,
            adjusted_annual_income=adjusted_annual_income,
            tax_year=tax_year,
        )

    def _build_response(
        self,
        amounts: WithholdingAmounts,
        pay_event: PayEvent,
        engine: EngineUsed,
        calculation_id: str,
        timestamp: datetime,
        internal: Optional[InternalCalculation] = None,
        filing_status: Optional[str] = None,
    ) -> TaxWithholdingResponse:
        rounded = WithholdingAmounts(
            **{name: round_to_cents(value) for name, value in amounts.model_dump().items()}
        )
        total = rounded.total()

        details = CalculationDetails(
            engine=engine,
            calculation_id=calculation_id,
            timestamp=timestamp,
            pay_period=pay_event.pay_frequency,
            gross_pay=pay_event.gross_wages,
            filing_status=filing_status,
        )
        if internal is not None:
            details = details.model_copy(update={
                "tax_year": internal.tax_year,
                "annualized_income": round_to_cents(internal.annualized_income),
                "adjusted_annual_income": round_to_cents(internal.adjusted_annual_income),
            })

        return TaxWithholdingResponse(
            **rounded.model_dump(),
            total_withholdings=total,
            net_pay=pay_event.gross_wages - total,
            calculation_details=details,
        )
