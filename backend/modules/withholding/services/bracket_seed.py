# backend/modules/withholding/services/bracket_seed.py

"""
Reference bracket tables for the internal withholding calculator.

Each row is (bracket_min, bracket_max, tax_rate, base_tax); ``base_tax`` is
the cumulative tax at ``bracket_min``. Amounts are 2024 IRS Publication 15-T
annual figures and the 2024 California withholding schedule.
"""

import logging
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..enums.withholding_enums import FilingStatus
from ..models.tax_bracket_models import FederalTaxBracket, StateTaxBracket

logger = logging.getLogger(__name__)

BracketRow = Tuple[str, Optional[str], str, str]

FEDERAL_BRACKETS_2024: Dict[FilingStatus, List[BracketRow]] = {
    FilingStatus.SINGLE: [
        ("0", "11600", "0.10", "0"),
        ("11600", "47150", "0.12", "1160"),
        ("47150", "100525", "0.22", "5426"),
        ("100525", "191950", "0.24", "17168.50"),
        ("191950", "243725", "0.32", "39110.50"),
        ("243725", "609350", "0.35", "55678.50"),
        ("609350", None, "0.37", "183647.25"),
    ],
    FilingStatus.MARRIED_FILING_JOINTLY: [
        ("0", "23200", "0.10", "0"),
        ("23200", "94300", "0.12", "2320"),
        ("94300", "201050", "0.22", "10852"),
        ("201050", "383900", "0.24", "34337"),
        ("383900", "487450", "0.32", "78221"),
        ("487450", "731200", "0.35", "111357"),
        ("731200", None, "0.37", "196669.50"),
    ],
    FilingStatus.HEAD_OF_HOUSEHOLD: [
        ("0", "16550", "0.10", "0"),
        ("16550", "63100", "0.12", "1655"),
        ("63100", "100500", "0.22", "7241"),
        ("100500", "191950", "0.24", "15469"),
        ("191950", "243700", "0.32", "37417"),
        ("243700", "609350", "0.35", "53977"),
        ("609350", None, "0.37", "181954.50"),
    ],
}

# (standard_deduction, personal_exemption, rows)
STATE_BRACKETS_2024: Dict[str, Dict[FilingStatus, Tuple[str, str, List[BracketRow]]]] = {
    "CA": {
        FilingStatus.SINGLE: ("5540", "149", [
            ("0", "10756", "0.01", "0"),
            ("10756", "25499", "0.02", "107.56"),
            ("25499", "40245", "0.04", "402.42"),
            ("40245", "55866", "0.06", "992.26"),
            ("55866", "70606", "0.08", "1929.52"),
            ("70606", "360659", "0.093", "3108.72"),
            ("360659", "432787", "0.103", "30083.65"),
            ("432787", "721314", "0.113", "37512.83"),
            ("721314", None, "0.123", "70116.38"),
        ]),
        FilingStatus.MARRIED_FILING_JOINTLY: ("11080", "298", [
            ("0", "21512", "0.01", "0"),
            ("21512", "50998", "0.02", "215.12"),
            ("50998", "80490", "0.04", "804.84"),
            ("80490", "111732", "0.06", "1984.52"),
            ("111732", "141212", "0.08", "3859.04"),
            ("141212", "721318", "0.093", "6217.44"),
            ("721318", "865574", "0.103", "60167.30"),
            ("865574", "1442628", "0.113", "75025.66"),
            ("1442628", None, "0.123", "140232.76"),
        ]),
    },
}


def _bracket_values(row: BracketRow) -> dict:
    bracket_min, bracket_max, tax_rate, base_tax = row
    return {
        "bracket_min": Decimal(bracket_min),
        "bracket_max": Decimal(bracket_max) if bracket_max is not None else None,
        "tax_rate": Decimal(tax_rate),
        "base_tax": Decimal(base_tax),
    }


def seed_tax_brackets(db: Session, tax_year: int = 2024) -> int:
    """
    Load the bundled federal and state bracket tables for ``tax_year``.

    Tables that already have rows for the year are left untouched.

    Returns:
        Number of bracket rows inserted
    """
    inserted = 0

    for filing_status, rows in FEDERAL_BRACKETS_2024.items():
        existing = db.query(FederalTaxBracket).filter(
            FederalTaxBracket.tax_year == tax_year,
            FederalTaxBracket.filing_status == filing_status.value,
        ).first()
        if existing:
            logger.info(f"Federal brackets for {tax_year}/{filing_status.value} already exist, skipping")
            continue

        for row in rows:
            db.add(FederalTaxBracket(
                tax_year=tax_year,
                filing_status=filing_status.value,
                **_bracket_values(row),
            ))
            inserted += 1

    for state_code, tables in STATE_BRACKETS_2024.items():
        for filing_status, (standard_deduction, personal_exemption, rows) in tables.items():
            existing = db.query(StateTaxBracket).filter(
                StateTaxBracket.state_code == state_code,
                StateTaxBracket.tax_year == tax_year,
                StateTaxBracket.filing_status == filing_status.value,
            ).first()
            if existing:
                logger.info(
                    f"State brackets for {state_code}/{tax_year}/{filing_status.value} "
                    f"already exist, skipping"
                )
                continue

            for row in rows:
                db.add(StateTaxBracket(
                    state_code=state_code,
                    tax_year=tax_year,
                    filing_status=filing_status.value,
                    standard_deduction=Decimal(standard_deduction),
                    personal_exemption=Decimal(personal_exemption),
                    **_bracket_values(row),
                ))
                inserted += 1

    db.commit()
    logger.info(f"Seeded {inserted} tax bracket rows for {tax_year}")
    return inserted
