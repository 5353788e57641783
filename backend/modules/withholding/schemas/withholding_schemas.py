# backend/modules/withholding/schemas/withholding_schemas.py

"""
Request and response models for withholding calculations.

Inbound payloads use camelCase keys (``employeeId``, ``grossPay``...);
snake_case names are accepted as well.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

from ..enums.withholding_enums import EngineUsed, FilingStatus, PayFrequency, NO_STATE_CODE

# Currency amounts travel as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]

ZERO = Decimal("0")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Address(CamelModel):
    line1: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""


class WorkLocation(CamelModel):
    state: str
    city: Optional[str] = None
    zip_code: Optional[str] = None


class EmployeeIdentity(CamelModel):
    """Who is being paid and where they live and work."""

    employee_id: str
    first_name: str = ""
    last_name: str = ""
    address: Address = Field(default_factory=Address)
    work_location: Optional[WorkLocation] = None


class TaxProfileData(CamelModel):
    """A worker's withholding elections, validated at the API boundary."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

    filing_status: FilingStatus = FilingStatus.SINGLE
    state_filing_status: Optional[FilingStatus] = None
    federal_allowances: int = Field(default=0, ge=0)
    state_allowances: int = Field(default=0, ge=0)
    additional_federal_withholding: Money = Field(default=ZERO, ge=0)
    additional_state_withholding: Money = Field(default=ZERO, ge=0)
    is_exempt_federal: bool = False
    is_exempt_state: bool = False
    state_code: str = Field(default=NO_STATE_CODE, min_length=2, max_length=8)
    w4_step2_checkbox: bool = False
    w4_dependents_amount: Money = Field(default=ZERO, ge=0)
    w4_other_income: Money = Field(default=ZERO, ge=0)
    w4_deductions: Money = Field(default=ZERO, ge=0)

    @property
    def effective_state_filing_status(self) -> FilingStatus:
        return self.state_filing_status or self.filing_status


class PayEvent(BaseModel):
    """One pay period's wages plus year-to-date accumulators before this period."""

    gross_wages: Decimal = Field(..., ge=0)
    pay_frequency: PayFrequency
    ytd_gross_wages: Decimal = Field(default=ZERO, ge=0)
    ytd_federal_withheld: Decimal = Field(default=ZERO, ge=0)
    ytd_state_withheld: Decimal = Field(default=ZERO, ge=0)
    ytd_social_security_wages: Decimal = Field(default=ZERO, ge=0)
    ytd_medicare_wages: Decimal = Field(default=ZERO, ge=0)
    pay_period_start: Optional[date] = None
    pay_period_end: Optional[date] = None
    pay_date: Optional[date] = None


class TaxWithholdingRequest(CamelModel):
    """Request body for a single withholding calculation."""

    employee_id: str = Field(..., min_length=1, description="Employee ID")
    gross_pay: Decimal = Field(..., ge=0, description="Gross pay for the period")
    pay_period: PayFrequency = Field(..., description="Pay frequency")
    ytd_gross_pay: Decimal = Field(default=ZERO, ge=0)
    ytd_federal_withheld: Decimal = Field(default=ZERO, ge=0)
    ytd_state_withheld: Decimal = Field(default=ZERO, ge=0)
    ytd_social_security: Decimal = Field(default=ZERO, ge=0)
    ytd_medicare: Decimal = Field(default=ZERO, ge=0)
    pay_period_start: Optional[date] = None
    pay_period_end: Optional[date] = None
    pay_date: Optional[date] = None

    def to_pay_event(self) -> PayEvent:
        return PayEvent(
            gross_wages=self.gross_pay,
            pay_frequency=self.pay_period,
            ytd_gross_wages=self.ytd_gross_pay,
            ytd_federal_withheld=self.ytd_federal_withheld,
            ytd_state_withheld=self.ytd_state_withheld,
            ytd_social_security_wages=self.ytd_social_security,
            ytd_medicare_wages=self.ytd_medicare,
            pay_period_start=self.pay_period_start,
            pay_period_end=self.pay_period_end,
            pay_date=self.pay_date,
        )


class WithholdingAmounts(BaseModel):
    """The seven withholding categories for one pay event."""

    federal_income_tax: Money = ZERO
    state_income_tax: Money = ZERO
    local_income_tax: Money = ZERO
    social_security_employee: Money = ZERO
    medicare_employee: Money = ZERO
    medicare_additional: Money = ZERO
    state_disability_insurance: Money = ZERO

    def total(self) -> Decimal:
        return (
            self.federal_income_tax
            + self.state_income_tax
            + self.local_income_tax
            + self.social_security_employee
            + self.medicare_employee
            + self.medicare_additional
            + self.state_disability_insurance
        )


class CalculationDetails(CamelModel):
    engine: EngineUsed
    calculation_id: str
    timestamp: datetime
    pay_period: PayFrequency
    gross_pay: Money
    tax_year: Optional[int] = None
    annualized_income: Optional[Money] = None
    adjusted_annual_income: Optional[Money] = None
    filing_status: Optional[str] = None


class TaxWithholdingResponse(WithholdingAmounts):
    """Withholding breakdown returned to payroll callers."""

    total_withholdings: Money
    net_pay: Money
    calculation_details: CalculationDetails


class BatchWithholdingRequest(BaseModel):
    jobs: List[TaxWithholdingRequest] = Field(..., min_length=1)


class BatchWithholdingItem(BaseModel):
    employee_id: str
    withholdings: TaxWithholdingResponse
    social_security_employer: Money
    medicare_employer: Money


class BatchWithholdingError(BaseModel):
    employee_id: str
    error: str
    status_code: int


class BatchWithholdingResponse(BaseModel):
    processed_count: int
    failed_count: int
    results: List[BatchWithholdingItem] = Field(default_factory=list)
    errors: List[BatchWithholdingError] = Field(default_factory=list)


class TaxCalculationAuditResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    employee_id: str
    calculation_id: str
    engine_used: EngineUsed
    gross_pay: Money
    pay_period: str
    result: Dict[str, Any]
    calculated_at: datetime


class TaxBracketResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    tax_year: int
    filing_status: str
    bracket_min: Money
    bracket_max: Optional[Money] = None
    tax_rate: Money
    base_tax: Money
    state_code: Optional[str] = None
    standard_deduction: Optional[Money] = None
    personal_exemption: Optional[Money] = None
