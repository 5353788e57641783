# backend/modules/withholding/config/__init__.py

from .withholding_config import (
    TaxEngineConfig,
    TaxEngineEnvironment,
    WithholdingRateConfig,
    DisabilityInsuranceProgram,
    get_tax_engine_config,
    get_withholding_rate_config,
)

__all__ = [
    "TaxEngineConfig",
    "TaxEngineEnvironment",
    "WithholdingRateConfig",
    "DisabilityInsuranceProgram",
    "get_tax_engine_config",
    "get_withholding_rate_config",
]
