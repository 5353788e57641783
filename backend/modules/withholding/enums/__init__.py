from .withholding_enums import (
    FilingStatus,
    PayFrequency,
    PERIODS_PER_YEAR,
    EngineUsed,
    EngineOutcomeStatus,
    JobStatus,
    NO_STATE_CODE,
)

__all__ = [
    "FilingStatus",
    "PayFrequency",
    "PERIODS_PER_YEAR",
    "EngineUsed",
    "EngineOutcomeStatus",
    "JobStatus",
    "NO_STATE_CODE",
]
