# backend/modules/withholding/tests/test_state_withholding.py

from decimal import Decimal

import pytest

from ..models import StateTaxBracket
from ..services.state_withholding import StateWithholdingCalculator


class TestStateWithholdingCalculator:

    def test_california_single_annual_amount(self, seeded_db):
        calculator = StateWithholdingCalculator(seeded_db)

        annual = calculator.calculate(Decimal("52000"), "CA", "single", 2024)

        # taxable 52000 - 5540 - 149 = 46311
        # walk: 107.56 + 294.86 + 589.84 + 6066*0.06 = 1356.22; base_tax 992.26
        assert annual == Decimal("2348.48")

    def test_deduction_and_exemption_come_from_first_row(self, test_db):
        rows = (
            ("0", "20000", "0.05", "0", "1000", "100"),
            # later rows carry different values that must be ignored
            ("20000", None, "0.10", "1000", "9999", "9999"),
        )
        for bracket_min, bracket_max, rate, base, deduction, exemption in rows:
            test_db.add(StateTaxBracket(
                state_code="ZZ",
                tax_year=2024,
                filing_status="single",
                bracket_min=Decimal(bracket_min),
                bracket_max=Decimal(bracket_max) if bracket_max else None,
                tax_rate=Decimal(rate),
                base_tax=Decimal(base),
                standard_deduction=Decimal(deduction),
                personal_exemption=Decimal(exemption),
            ))
        test_db.commit()

        annual = StateWithholdingCalculator(test_db).calculate(Decimal("11100"), "ZZ", "single", 2024)

        # taxable 10000 at 5%, base_tax 0
        assert annual == Decimal("500")

    def test_income_below_deductions_is_untaxed(self, seeded_db):
        calculator = StateWithholdingCalculator(seeded_db)

        assert calculator.calculate(Decimal("5000"), "CA", "single", 2024) == Decimal("0")

    def test_state_code_is_case_insensitive(self, seeded_db):
        calculator = StateWithholdingCalculator(seeded_db)

        assert calculator.calculate(Decimal("52000"), "ca", "single", 2024) == Decimal("2348.48")

    def test_married_table_uses_doubled_deductions(self, seeded_db):
        calculator = StateWithholdingCalculator(seeded_db)
        brackets = calculator.get_brackets("CA", 2024, "married_filing_jointly")

        assert calculator.taxable_income(Decimal("100000"), brackets) == Decimal("88622")

    @pytest.mark.parametrize("state_code", ["NONE", "none", None, ""])
    def test_no_state_tax(self, seeded_db, state_code):
        calculator = StateWithholdingCalculator(seeded_db)

        assert calculator.calculate(Decimal("52000"), state_code, "single", 2024) == Decimal("0")

    def test_state_without_tables_returns_zero(self, seeded_db, caplog):
        calculator = StateWithholdingCalculator(seeded_db)

        assert calculator.calculate(Decimal("52000"), "TX", "single", 2024) == Decimal("0")
        assert "No state tax brackets found for TX/2024/single" in caplog.text
