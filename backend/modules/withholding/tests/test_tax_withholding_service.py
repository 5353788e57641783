# backend/modules/withholding/tests/test_tax_withholding_service.py

from datetime import date
from decimal import Decimal
from unittest.mock import Mock

import httpx
import pytest
from sqlalchemy.exc import OperationalError

from ..enums.withholding_enums import EngineUsed, PayFrequency
from ..exceptions import (
    EmployeeNotFoundError,
    TaxProfileNotFoundError,
    WithholdingValidationError,
)
from ..models import EmployeeTaxProfile, TaxCalculationAudit
from ..schemas.withholding_schemas import TaxWithholdingRequest
from ..services.bracket_seed import seed_tax_brackets
from ..services.external_engine_adapter import SymmetryTaxEngineAdapter
from ..services.tax_withholding_service import TaxWithholdingService


def make_request(employee_id, **overrides):
    values = {
        "employee_id": employee_id,
        "gross_pay": Decimal("2000"),
        "pay_period": PayFrequency.BIWEEKLY,
    }
    values.update(overrides)
    return TaxWithholdingRequest(**values)


def audit_rows(db, employee_id):
    return db.query(TaxCalculationAudit).filter(
        TaxCalculationAudit.employee_id == employee_id
    ).all()


class TestEndToEndScenarios:

    def test_federal_exempt_california_single(self, withholding_service, employee_factory):
        employee = employee_factory(is_exempt_federal=True)

        result = withholding_service.calculate_withholdings(make_request(employee.id))

        assert result.federal_income_tax == Decimal("0.00")
        assert result.social_security_employee == Decimal("124.00")
        assert result.medicare_employee == Decimal("29.00")
        assert result.medicare_additional == Decimal("0.00")
        assert result.state_disability_insurance == Decimal("18.00")
        # 2348.48 annual California tax / 26
        assert result.state_income_tax == Decimal("90.33")
        assert result.local_income_tax == Decimal("0.00")
        assert result.total_withholdings == Decimal("261.33")
        assert result.net_pay == Decimal("1738.67")
        assert result.calculation_details.engine == EngineUsed.INTERNAL_FALLBACK

    def test_additional_medicare_on_threshold_crossing(self, withholding_service, employee_factory):
        employee = employee_factory(state_code="NONE")

        result = withholding_service.calculate_withholdings(
            make_request(employee.id, gross_pay=Decimal("3000"), ytd_gross_pay=Decimal("199000"))
        )

        assert result.medicare_additional == Decimal("18.00")
        assert result.medicare_employee == Decimal("43.50")
        assert result.state_income_tax == Decimal("0.00")

    def test_social_security_at_wage_base(self, withholding_service, employee_factory):
        employee = employee_factory(state_code="NONE")

        result = withholding_service.calculate_withholdings(
            make_request(employee.id, gross_pay=Decimal("1000"), ytd_social_security=Decimal("160200"))
        )

        assert result.social_security_employee == Decimal("0.00")
        assert result.medicare_employee == Decimal("14.50")

    def test_federal_single_filer(self, withholding_service, employee_factory):
        employee = employee_factory(state_code="NONE")

        result = withholding_service.calculate_withholdings(make_request(employee.id))

        # includes the base_tax double count, see test_tax_math
        assert result.federal_income_tax == Decimal("458.42")
        assert result.calculation_details.annualized_income == Decimal("52000.00")
        assert result.calculation_details.adjusted_annual_income == Decimal("52000.00")
        assert result.calculation_details.filing_status == "single"
        assert result.calculation_details.tax_year == 2024


class TestInvariants:

    @pytest.mark.parametrize("gross,frequency,ytd_gross", [
        ("2000", PayFrequency.BIWEEKLY, "0"),
        ("833.33", PayFrequency.WEEKLY, "45000"),
        ("12500.50", PayFrequency.SEMIMONTHLY, "190000"),
        ("30000", PayFrequency.MONTHLY, "300000"),
        ("0", PayFrequency.MONTHLY, "0"),
    ])
    def test_net_pay_is_gross_minus_total(
        self, withholding_service, employee_factory, gross, frequency, ytd_gross
    ):
        employee = employee_factory()

        result = withholding_service.calculate_withholdings(make_request(
            employee.id,
            gross_pay=Decimal(gross),
            pay_period=frequency,
            ytd_gross_pay=Decimal(ytd_gross),
        ))

        categories = (
            result.federal_income_tax
            + result.state_income_tax
            + result.local_income_tax
            + result.social_security_employee
            + result.medicare_employee
            + result.medicare_additional
            + result.state_disability_insurance
        )
        assert result.total_withholdings == categories
        assert result.total_withholdings >= 0
        assert result.net_pay == Decimal(gross) - result.total_withholdings

    def test_additional_withholding_capped_at_available_wages(
        self, withholding_service, employee_factory
    ):
        employee = employee_factory(additional_federal_withholding=Decimal("500"))

        result = withholding_service.calculate_withholdings(make_request(
            employee.id, gross_pay=Decimal("100"), pay_period=PayFrequency.WEEKLY
        ))

        # statutory: 6.20 + 1.45 + 0.90 leaves 91.45 for income tax
        assert result.federal_income_tax == Decimal("91.45")
        assert result.state_income_tax == Decimal("0.00")
        assert result.total_withholdings == Decimal("100.00")
        assert result.net_pay == Decimal("0.00")

    def test_other_income_never_drives_net_pay_negative(
        self, withholding_service, employee_factory
    ):
        employee = employee_factory(
            w4_other_income=Decimal("200000"), additional_state_withholding=Decimal("25")
        )

        result = withholding_service.calculate_withholdings(
            make_request(employee.id, gross_pay=Decimal("0"))
        )

        assert result.federal_income_tax == Decimal("0.00")
        assert result.state_income_tax == Decimal("0.00")
        assert result.net_pay == Decimal("0.00")

    def test_state_gets_wages_left_after_federal(self, withholding_service, employee_factory):
        employee = employee_factory(
            additional_federal_withholding=Decimal("50"),
            additional_state_withholding=Decimal("400"),
        )

        result = withholding_service.calculate_withholdings(make_request(
            employee.id, gross_pay=Decimal("500"), pay_period=PayFrequency.WEEKLY
        ))

        assert result.total_withholdings <= Decimal("500")
        assert result.net_pay >= 0
        assert result.state_income_tax == (
            Decimal("500")
            - result.federal_income_tax
            - result.social_security_employee
            - result.medicare_employee
            - result.state_disability_insurance
        )

    def test_each_category_rounded_before_summing(self, withholding_service, employee_factory):
        employee = employee_factory()

        result = withholding_service.calculate_withholdings(
            make_request(employee.id, gross_pay=Decimal("1234.57"), pay_period=PayFrequency.WEEKLY)
        )

        for amount in (
            result.federal_income_tax,
            result.state_income_tax,
            result.social_security_employee,
            result.medicare_employee,
            result.state_disability_insurance,
        ):
            assert amount == amount.quantize(Decimal("0.01"))

    def test_internal_calculation_is_deterministic(self, withholding_service, employee_factory):
        employee = employee_factory(w4_step2_checkbox=True, w4_other_income=Decimal("5000"))
        profile = withholding_service.load_tax_profile(employee.id)
        pay_event = make_request(employee.id, ytd_gross_pay=Decimal("40000")).to_pay_event()

        first = withholding_service.calculate_internal(profile, pay_event)
        second = withholding_service.calculate_internal(profile, pay_event)

        assert first.amounts.model_dump_json() == second.amounts.model_dump_json()
        assert first.adjusted_annual_income == second.adjusted_annual_income


class TestExemptions:

    def test_federal_exemption_ignores_additional_withholding(self, withholding_service, employee_factory):
        employee = employee_factory(
            is_exempt_federal=True, additional_federal_withholding=Decimal("50")
        )

        result = withholding_service.calculate_withholdings(make_request(employee.id))

        assert result.federal_income_tax == Decimal("0.00")
        assert result.social_security_employee == Decimal("124.00")

    def test_state_exemption_keeps_sdi(self, withholding_service, employee_factory):
        employee = employee_factory(is_exempt_state=True, additional_state_withholding=Decimal("10"))

        result = withholding_service.calculate_withholdings(make_request(employee.id))

        assert result.state_income_tax == Decimal("0.00")
        assert result.state_disability_insurance == Decimal("18.00")

    def test_additional_withholding_added_when_not_exempt(self, withholding_service, employee_factory):
        employee = employee_factory(
            additional_federal_withholding=Decimal("50"),
            additional_state_withholding=Decimal("10"),
        )

        result = withholding_service.calculate_withholdings(make_request(employee.id))

        assert result.federal_income_tax == Decimal("508.42")
        assert result.state_income_tax == Decimal("100.33")


class TestElections:

    def test_w4_adjustments_change_adjusted_income(self, withholding_service, employee_factory):
        employee = employee_factory(
            state_code="NONE",
            w4_other_income=Decimal("8000"),
            w4_deductions=Decimal("3000"),
            w4_dependents_amount=Decimal("2000"),
        )

        result = withholding_service.calculate_withholdings(make_request(employee.id))

        assert result.calculation_details.adjusted_annual_income == Decimal("55000.00")

    def test_adjusted_income_never_negative(self, withholding_service, employee_factory):
        employee = employee_factory(w4_deductions=Decimal("100000"))

        result = withholding_service.calculate_withholdings(make_request(employee.id))

        assert result.calculation_details.adjusted_annual_income == Decimal("0.00")
        assert result.federal_income_tax == Decimal("0.00")
        assert result.state_income_tax == Decimal("0.00")

    def test_state_filing_status_overrides_federal(self, withholding_service, employee_factory):
        employee = employee_factory(
            filing_status="single", state_filing_status="married_filing_jointly"
        )

        result = withholding_service.calculate_withholdings(make_request(employee.id))

        # married table: taxable 52000 - 11080 - 298 = 40622
        # walk 215.12 + 19110*0.02 = 597.32; base_tax 215.12; 812.44 / 26
        assert result.state_income_tax == Decimal("31.25")

    def test_pay_date_selects_tax_year(self, withholding_service, employee_factory, seeded_db):
        seed_tax_brackets(seeded_db, tax_year=2025)
        seeded_db.commit()
        employee = employee_factory()

        result = withholding_service.calculate_withholdings(
            make_request(employee.id, pay_date=date(2025, 3, 14))
        )

        assert result.calculation_details.tax_year == 2025
        assert result.federal_income_tax == Decimal("458.42")

    def test_pay_date_without_tables_uses_configured_year(
        self, withholding_service, employee_factory, caplog
    ):
        employee = employee_factory()

        result = withholding_service.calculate_withholdings(
            make_request(employee.id, pay_date=date(2026, 10, 16))
        )

        assert result.calculation_details.tax_year == 2024
        assert result.federal_income_tax == Decimal("458.42")
        assert result.state_income_tax == Decimal("90.33")
        assert "No federal tax brackets loaded for 2026" in caplog.text


class TestMissingRecords:

    def test_missing_tax_profile(self, withholding_service, employee_factory, seeded_db):
        employee = employee_factory(with_profile=False)

        with pytest.raises(TaxProfileNotFoundError) as exc_info:
            withholding_service.calculate_withholdings(make_request(employee.id))

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Employee tax profile not found"
        assert audit_rows(seeded_db, employee.id) == []

    def test_missing_employee(self, withholding_service, seeded_db):
        # profile row without a worker record
        seeded_db.add(EmployeeTaxProfile(employee_id="orphan", filing_status="single"))
        seeded_db.commit()

        with pytest.raises(EmployeeNotFoundError) as exc_info:
            withholding_service.calculate_withholdings(make_request("orphan"))

        assert exc_info.value.message == "Employee not found"
        assert audit_rows(seeded_db, "orphan") == []

    def test_unknown_pay_frequency(self):
        with pytest.raises(WithholdingValidationError) as exc_info:
            TaxWithholdingService.periods_per_year("fortnightly")

        assert exc_info.value.status_code == 422

    def test_known_pay_frequencies(self):
        assert TaxWithholdingService.periods_per_year("weekly") == 52
        assert TaxWithholdingService.periods_per_year(PayFrequency.BIWEEKLY) == 26
        assert TaxWithholdingService.periods_per_year("semimonthly") == 24
        assert TaxWithholdingService.periods_per_year("monthly") == 12


class TestEngineSelection:

    def test_unconfigured_engine_falls_back(self, withholding_service, employee_factory, seeded_db):
        employee = employee_factory()

        result = withholding_service.calculate_withholdings(make_request(employee.id))

        assert result.calculation_details.engine == EngineUsed.INTERNAL_FALLBACK
        assert result.calculation_details.calculation_id.startswith("fallback_")
        rows = audit_rows(seeded_db, employee.id)
        assert len(rows) == 1
        assert rows[0].engine_used == "internal-fallback"
        assert rows[0].result["total_withholdings"] == float(result.total_withholdings)

    def test_engine_failure_falls_back(
        self, seeded_db, rate_config, configured_engine_config, employee_factory
    ):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
        service = TaxWithholdingService(
            seeded_db,
            engine_adapter=SymmetryTaxEngineAdapter(configured_engine_config, client=client),
            rate_config=rate_config,
        )
        employee = employee_factory(is_exempt_federal=True)

        result = service.calculate_withholdings(make_request(employee.id))

        assert result.calculation_details.engine == EngineUsed.INTERNAL_FALLBACK
        assert result.calculation_details.calculation_id.startswith("error_")
        assert result.total_withholdings == Decimal("261.33")

    def test_engine_success_short_circuits_internal_path(
        self, seeded_db, rate_config, configured_engine_config, employee_factory
    ):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={
            "federalIncomeTax": 201.234,
            "stateIncomeTax": 55.5,
            "localIncomeTax": 4.25,
            "socialSecurityEmployee": 124,
            "medicareEmployee": 29,
            "calculationId": "ste-777",
        })))
        service = TaxWithholdingService(
            seeded_db,
            engine_adapter=SymmetryTaxEngineAdapter(configured_engine_config, client=client),
            rate_config=rate_config,
        )
        service.calculate_internal = Mock(side_effect=AssertionError("internal path used"))
        employee = employee_factory()

        result = service.calculate_withholdings(make_request(employee.id))

        assert result.calculation_details.engine == EngineUsed.SYMMETRY
        assert result.calculation_details.calculation_id == "ste-777"
        assert result.federal_income_tax == Decimal("201.23")
        assert result.local_income_tax == Decimal("4.25")
        assert result.state_disability_insurance == Decimal("0.00")
        assert result.total_withholdings == Decimal("413.98")
        assert result.net_pay == Decimal("1586.02")
        assert result.calculation_details.annualized_income is None

        rows = audit_rows(seeded_db, employee.id)
        assert [row.engine_used for row in rows] == ["symmetry"]
        assert rows[0].calculation_id == "ste-777"


class TestAuditFailure:

    def test_audit_write_failure_does_not_fail_calculation(
        self, withholding_service, employee_factory, seeded_db, monkeypatch, caplog
    ):
        employee = employee_factory()
        monkeypatch.setattr(
            seeded_db,
            "commit",
            Mock(side_effect=OperationalError("INSERT", {}, Exception("database is locked"))),
        )

        result = withholding_service.calculate_withholdings(make_request(employee.id))
        monkeypatch.undo()

        assert result.total_withholdings > 0
        assert "Failed to write tax calculation audit" in caplog.text
        assert audit_rows(seeded_db, employee.id) == []
