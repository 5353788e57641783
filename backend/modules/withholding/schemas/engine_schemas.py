# backend/modules/withholding/schemas/engine_schemas.py

"""
Wire schema for the Symmetry Tax Engine.

The engine's JSON is treated as untrusted: every withholding field is
optional, defaults to zero and must not be negative; unknown fields are
ignored, so the rest of the module only ever sees ``EngineOutcome``.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

from ..enums.withholding_enums import EngineOutcomeStatus
from .withholding_schemas import WithholdingAmounts

# The engine expects JSON numbers, not decimal strings
EngineNumber = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class EngineModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EngineAddress(EngineModel):
    line1: str
    city: str
    state: str
    zip_code: str


class EngineWorkLocation(EngineModel):
    state: str
    city: Optional[str] = None
    zip_code: Optional[str] = None


class EngineEmployee(EngineModel):
    employee_id: str
    first_name: str
    last_name: str
    address: EngineAddress
    work_location: Optional[EngineWorkLocation] = None


class EngineTaxInfo(EngineModel):
    filing_status: str
    federal_allowances: int
    state_allowances: int
    additional_federal_withholding: EngineNumber
    additional_state_withholding: EngineNumber
    is_exempt_federal: bool
    is_exempt_state: bool
    step2_checkbox: bool
    dependents_amount: EngineNumber
    other_income: EngineNumber
    deductions: EngineNumber


class EnginePayInfo(EngineModel):
    gross_wages: EngineNumber
    pay_frequency: str
    pay_date: str
    pay_period_start: str
    pay_period_end: str
    ytd_gross_wages: EngineNumber
    ytd_federal_withheld: EngineNumber
    ytd_state_withheld: EngineNumber
    ytd_social_security_wages: EngineNumber
    ytd_medicare_wages: EngineNumber


class EngineCalculationRequest(EngineModel):
    employee: EngineEmployee
    tax_info: EngineTaxInfo
    pay_info: EnginePayInfo


class EngineCalculationResult(EngineModel):
    """Engine response body; absent or null amounts count as zero."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    federal_income_tax: Decimal = Field(default=Decimal("0"), ge=0)
    state_income_tax: Decimal = Field(default=Decimal("0"), ge=0)
    local_income_tax: Decimal = Field(default=Decimal("0"), ge=0)
    social_security_employee: Decimal = Field(default=Decimal("0"), ge=0)
    medicare_employee: Decimal = Field(default=Decimal("0"), ge=0)
    medicare_additional: Decimal = Field(default=Decimal("0"), ge=0)
    state_disability_insurance: Decimal = Field(default=Decimal("0"), ge=0)
    total_employee_withholdings: Decimal = Field(default=Decimal("0"), ge=0)
    net_pay: Decimal = Decimal("0")
    calculation_id: Optional[str] = None

    @field_validator(
        "federal_income_tax",
        "state_income_tax",
        "local_income_tax",
        "social_security_employee",
        "medicare_employee",
        "medicare_additional",
        "state_disability_insurance",
        "total_employee_withholdings",
        "net_pay",
        mode="before",
    )
    @classmethod
    def default_missing_to_zero(cls, v):
        return Decimal("0") if v is None else v

    def to_amounts(self) -> WithholdingAmounts:
        return WithholdingAmounts(
            federal_income_tax=self.federal_income_tax,
            state_income_tax=self.state_income_tax,
            local_income_tax=self.local_income_tax,
            social_security_employee=self.social_security_employee,
            medicare_employee=self.medicare_employee,
            medicare_additional=self.medicare_additional,
            state_disability_insurance=self.state_disability_insurance,
        )


class EngineOutcome(BaseModel):
    """Normalized result of one external engine attempt."""

    status: EngineOutcomeStatus
    calculation_id: str
    timestamp: datetime
    amounts: Optional[WithholdingAmounts] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == EngineOutcomeStatus.SUCCESS and self.amounts is not None
