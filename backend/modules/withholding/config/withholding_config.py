# backend/modules/withholding/config/withholding_config.py

from decimal import Decimal
from enum import Enum
from functools import lru_cache
from typing import Dict, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TaxEngineEnvironment(str, Enum):
    """External tax engine environment"""

    SANDBOX = "sandbox"
    PRODUCTION = "production"


class TaxEngineConfig(BaseSettings):
    """
    Credentials and connection settings for the Symmetry Tax Engine.

    Missing credentials are not an error: the withholding service simply
    falls back to its internal calculator.
    """

    model_config = SettingsConfigDict(
        env_prefix="SYMMETRY_", case_sensitive=False, extra="ignore"
    )

    api_key: Optional[str] = Field(default=None, description="Engine API key")
    company_id: Optional[str] = Field(default=None, description="Engine company identifier")
    environment: TaxEngineEnvironment = Field(
        default=TaxEngineEnvironment.SANDBOX, description="sandbox or production"
    )
    api_version: str = Field(default="2024.1", description="Value sent as X-STE-Version")
    user_agent: str = Field(default="Payroll-Withholding/1.0")
    timeout_seconds: float = Field(
        default=30.0, gt=0, description="Transport timeout for the engine call"
    )
    pay_period_lookback_days: int = Field(
        default=14, ge=1,
        description="Pay period length assumed when the caller supplies no dates",
    )

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key) and bool(self.company_id)

    @property
    def base_url(self) -> str:
        if self.environment == TaxEngineEnvironment.PRODUCTION:
            return "https://api.symmetry.com"
        return "https://sandbox-api.symmetry.com"


class DisabilityInsuranceProgram(BaseModel):
    """State disability insurance withheld from employee wages."""

    rate: Decimal = Field(..., ge=0, le=1)
    wage_base: Decimal = Field(..., ge=0)


class WithholdingRateConfig(BaseSettings):
    """Statutory rates and wage bases used by the internal calculator."""

    model_config = SettingsConfigDict(
        env_prefix="WITHHOLDING_", case_sensitive=False, extra="ignore"
    )

    tax_year: int = Field(default=2024, description="Bracket table year when no pay date is given")

    social_security_rate: Decimal = Field(default=Decimal("0.062"), ge=0, le=1)
    social_security_wage_base: Decimal = Field(default=Decimal("160200"), ge=0)
    medicare_rate: Decimal = Field(default=Decimal("0.0145"), ge=0, le=1)
    additional_medicare_rate: Decimal = Field(default=Decimal("0.009"), ge=0, le=1)
    additional_medicare_threshold: Decimal = Field(default=Decimal("200000"), ge=0)

    disability_programs: Dict[str, DisabilityInsuranceProgram] = Field(
        default_factory=lambda: {
            "CA": DisabilityInsuranceProgram(
                rate=Decimal("0.009"), wage_base=Decimal("153164")
            ),
        },
        description="State disability insurance programs keyed by state code",
    )

    @field_validator("disability_programs")
    @classmethod
    def normalize_state_codes(cls, v):
        return {code.upper(): program for code, program in v.items()}

    def disability_program_for(self, state_code: Optional[str]) -> Optional[DisabilityInsuranceProgram]:
        if not state_code:
            return None
        return self.disability_programs.get(state_code.upper())


@lru_cache()
def get_tax_engine_config() -> TaxEngineConfig:
    return TaxEngineConfig()


@lru_cache()
def get_withholding_rate_config() -> WithholdingRateConfig:
    return WithholdingRateConfig()
