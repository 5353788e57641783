# backend/scripts/seed_tax_brackets.py

"""
Script to create the withholding tables and seed tax bracket tables

Usage:
    python -m backend.scripts.seed_tax_brackets [tax_year]
"""

import logging
import sys

from backend.core.database import Base, SessionLocal, engine
from backend.core.logging_config import configure_logging
from backend.modules.withholding import models  # noqa: F401
from backend.modules.withholding.services.bracket_seed import seed_tax_brackets

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main function"""
    configure_logging()
    args = sys.argv[1:] if argv is None else argv
    tax_year = int(args[0]) if args else 2024

    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    try:
        seed_tax_brackets(db, tax_year=tax_year)
    except Exception as e:
        logger.error(f"Error seeding tax brackets: {str(e)}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
