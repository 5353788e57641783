# backend/modules/withholding/services/tax_math.py

"""
Shared arithmetic for withholding calculations.

Bracket rows are any objects exposing ``bracket_min``, ``bracket_max``,
``tax_rate`` and ``base_tax`` (ORM rows in production, plain objects in
tests). Rows must be sorted ascending by ``bracket_min``.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Sequence

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_to_cents(amount: Decimal) -> Decimal:
    """Round half-up to the nearest cent."""
    return to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def find_applicable_bracket(income: Decimal, brackets: Sequence) -> Optional[object]:
    """Return the bracket whose range (min, max] contains ``income``."""
    for bracket in brackets:
        bracket_min = to_decimal(bracket.bracket_min)
        if income > bracket_min and (
            bracket.bracket_max is None or income <= to_decimal(bracket.bracket_max)
        ):
            return bracket
    return None


def marginal_bracket_tax(income: Decimal, brackets: Sequence) -> Decimal:
    """
    Annual tax for ``income`` over ordered marginal brackets.

    Walks every bracket from the bottom, taxing the slice of income that
    falls in it, then adds the ``base_tax`` of the bracket containing the
    full income. ``base_tax`` already holds the cumulative tax of the lower
    brackets, so the lower slices are counted twice. Payroll history was
    produced with this arithmetic and results must stay comparable.
    """
    annual_tax = ZERO
    remaining = income

    for bracket in brackets:
        if remaining <= 0:
            break

        bracket_min = to_decimal(bracket.bracket_min)
        if bracket.bracket_max is None:
            taxable_in_bracket = remaining
        else:
            taxable_in_bracket = min(remaining, to_decimal(bracket.bracket_max) - bracket_min)

        if taxable_in_bracket > 0:
            annual_tax += taxable_in_bracket * to_decimal(bracket.tax_rate)
            remaining -= taxable_in_bracket

    applicable = find_applicable_bracket(income, brackets)
    if applicable is not None:
        annual_tax += to_decimal(applicable.base_tax)

    return annual_tax


def brackets_are_contiguous(brackets: Sequence) -> bool:
    """True when rows are gap-free, non-overlapping and end unbounded."""
    if not brackets:
        return False
    for lower, upper in zip(brackets, brackets[1:]):
        if lower.bracket_max is None:
            return False
        if to_decimal(lower.bracket_max) != to_decimal(upper.bracket_min):
            return False
    return brackets[-1].bracket_max is None
