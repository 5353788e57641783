from .tax_withholding_service import TaxWithholdingService
from .batch_withholding_service import BatchWithholdingService
from .tax_profile_service import TaxProfileService
from .external_engine_adapter import SymmetryTaxEngineAdapter
from .federal_withholding import FederalWithholdingCalculator
from .state_withholding import StateWithholdingCalculator
from .statutory_withholding import StatutoryWithholdingCalculator
from .withholding_audit_service import WithholdingAuditService
from .bracket_seed import seed_tax_brackets

__all__ = [
    "TaxWithholdingService",
    "BatchWithholdingService",
    "TaxProfileService",
    "SymmetryTaxEngineAdapter",
    "FederalWithholdingCalculator",
    "StateWithholdingCalculator",
    "StatutoryWithholdingCalculator",
    "WithholdingAuditService",
    "seed_tax_brackets",
]
