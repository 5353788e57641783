from enum import Enum


class FilingStatus(str, Enum):
    SINGLE = "single"
    MARRIED_FILING_JOINTLY = "married_filing_jointly"
    MARRIED_FILING_SEPARATELY = "married_filing_separately"
    HEAD_OF_HOUSEHOLD = "head_of_household"


class PayFrequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    SEMIMONTHLY = "semimonthly"
    MONTHLY = "monthly"

    @property
    def periods_per_year(self) -> int:
        return PERIODS_PER_YEAR[self]

    @property
    def engine_label(self) -> str:
        """Capitalized form expected by the external tax engine, e.g. "Weekly"."""
        return self.value[:1].upper() + self.value[1:]


PERIODS_PER_YEAR = {
    PayFrequency.WEEKLY: 52,
    PayFrequency.BIWEEKLY: 26,
    PayFrequency.SEMIMONTHLY: 24,
    PayFrequency.MONTHLY: 12,
}


class EngineUsed(str, Enum):
    """Which calculator produced a withholding result."""
    SYMMETRY = "symmetry"
    INTERNAL_FALLBACK = "internal-fallback"


class EngineOutcomeStatus(str, Enum):
    SUCCESS = "success"
    NOT_CONFIGURED = "not_configured"
    FAILED = "failed"


class JobStatus(str, Enum):
    """Status values for withholding job logs."""
    COMPLETED = "completed"
    FAILED = "failed"


# Sentinel state code for workers with no state income tax withholding
NO_STATE_CODE = "NONE"
