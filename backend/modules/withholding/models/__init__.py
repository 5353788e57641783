from .employee_models import Employee, EmployeeTaxProfile
from .tax_bracket_models import FederalTaxBracket, StateTaxBracket
from .withholding_audit import TaxCalculationAudit, WithholdingJobLog

__all__ = [
    "Employee",
    "EmployeeTaxProfile",
    "FederalTaxBracket",
    "StateTaxBracket",
    "TaxCalculationAudit",
    "WithholdingJobLog",
]
