# backend/modules/withholding/__init__.py

"""
Payroll Withholding Module

Per-pay-period tax withholding with:
- Symmetry Tax Engine integration
- Internal federal and state bracket calculators as fallback
- Social Security, Medicare, Additional Medicare and state disability insurance
- Calculation audit trail and batch processing
"""

from .routes.withholding_routes import router as withholding_router

__version__ = "1.0.0"
__all__ = ["withholding_router"]
