# backend/modules/withholding/tests/conftest.py

"""
Pytest fixtures and factories for withholding module tests.

Each test gets a fresh in-memory SQLite database with the 2024 bracket
tables loaded.
"""

import uuid
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional

import pytest
from sqlalchemy.orm import sessionmaker

from backend.core.database import Base, build_engine
from ..config.withholding_config import TaxEngineConfig, WithholdingRateConfig
from ..models import Employee, EmployeeTaxProfile
from ..services.bracket_seed import seed_tax_brackets
from ..services.external_engine_adapter import SymmetryTaxEngineAdapter
from ..services.tax_withholding_service import TaxWithholdingService


@pytest.fixture
def test_db():
    """Create test database"""
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)

    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()

    yield db

    db.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def seeded_db(test_db):
    seed_tax_brackets(test_db, tax_year=2024)
    return test_db


@pytest.fixture
def rate_config():
    return WithholdingRateConfig(tax_year=2024)


@pytest.fixture
def unconfigured_engine_config():
    return TaxEngineConfig(api_key=None, company_id=None)


@pytest.fixture
def configured_engine_config():
    return TaxEngineConfig(api_key="test-key", company_id="company-42")


@pytest.fixture
def withholding_service(seeded_db, rate_config, unconfigured_engine_config):
    """Withholding service that always takes the internal path."""
    return TaxWithholdingService(
        seeded_db,
        engine_adapter=SymmetryTaxEngineAdapter(unconfigured_engine_config),
        rate_config=rate_config,
    )


@pytest.fixture
def employee_factory(test_db):
    """Factory for workers with a tax profile."""
    def create_employee(
        employee_id: Optional[str] = None,
        with_profile: bool = True,
        address: Optional[dict] = None,
        **profile_fields
    ) -> Employee:
        employee = Employee(
            id=employee_id or str(uuid.uuid4()),
            first_name="Dana",
            last_name="Reyes",
            address=address if address is not None else {
                "line1": "100 Market St",
                "city": "San Francisco",
                "state": "CA",
                "zipCode": "94105",
            },
        )
        test_db.add(employee)

        if with_profile:
            defaults = {
                "filing_status": "single",
                "state_code": "CA",
            }
            defaults.update(profile_fields)
            test_db.add(EmployeeTaxProfile(employee_id=employee.id, **defaults))

        test_db.commit()
        return employee

    return create_employee


@pytest.fixture
def bracket_factory():
    """Plain bracket rows for exercising the bracket arithmetic without a database."""
    def create_brackets(*rows):
        return [
            SimpleNamespace(
                bracket_min=Decimal(str(bracket_min)),
                bracket_max=Decimal(str(bracket_max)) if bracket_max is not None else None,
                tax_rate=Decimal(str(tax_rate)),
                base_tax=Decimal(str(base_tax)),
            )
            for bracket_min, bracket_max, tax_rate, base_tax in rows
        ]

    return create_brackets
