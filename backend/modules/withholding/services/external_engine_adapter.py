# backend/modules/withholding/services/external_engine_adapter.py

"""
Adapter for the Symmetry Tax Engine (STE).

The adapter never raises: missing credentials, transport errors, non-2xx
responses and malformed bodies all come back as an ``EngineOutcome`` whose
status tells the caller to use the internal calculator instead.
"""

import logging
import time
from datetime import date, datetime, timedelta
from typing import Optional

import httpx

from ..config.withholding_config import TaxEngineConfig, get_tax_engine_config
from ..enums.withholding_enums import EngineOutcomeStatus
from ..schemas.engine_schemas import (
    EngineAddress,
    EngineCalculationRequest,
    EngineCalculationResult,
    EngineEmployee,
    EngineOutcome,
    EnginePayInfo,
    EngineTaxInfo,
    EngineWorkLocation,
)
from ..schemas.withholding_schemas import EmployeeIdentity, PayEvent, TaxProfileData

logger = logging.getLogger(__name__)

CALCULATE_PATH = "/api/v1/calculate"


def _millis() -> int:
    return int(time.time() * 1000)


class SymmetryTaxEngineAdapter:
    """Translate withholding inputs into one STE calculation call."""

    def __init__(
        self,
        config: Optional[TaxEngineConfig] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.config = config or get_tax_engine_config()
        self._client = client

    @property
    def calculate_url(self) -> str:
        return f"{self.config.base_url}{CALCULATE_PATH}"

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
            "X-Company-Id": self.config.company_id or "",
            "X-STE-Version": self.config.api_version,
            "User-Agent": self.config.user_agent,
        }

    def build_request(
        self,
        identity: EmployeeIdentity,
        profile: TaxProfileData,
        pay_event: PayEvent,
        today: Optional[date] = None,
    ) -> EngineCalculationRequest:
        """
        Build the engine payload.

        Pay dates supplied with the pay event are passed through; any that
        are missing default to today and a fixed look-back window.
        """
        today = today or date.today()
        pay_date = pay_event.pay_date or today
        period_end = pay_event.pay_period_end or today
        period_start = pay_event.pay_period_start or (
            period_end - timedelta(days=self.config.pay_period_lookback_days)
        )

        address = identity.address
        work_location = None
        if identity.work_location is not None:
            work_location = EngineWorkLocation(
                state=identity.work_location.state,
                city=identity.work_location.city,
                zip_code=identity.work_location.zip_code,
            )

        return EngineCalculationRequest(
            employee=EngineEmployee(
                employee_id=identity.employee_id,
                first_name=identity.first_name,
                last_name=identity.last_name,
                address=EngineAddress(
                    line1=address.line1,
                    city=address.city,
                    state=address.state or profile.state_code,
                    zip_code=address.zip_code,
                ),
                work_location=work_location,
            ),
            tax_info=EngineTaxInfo(
                filing_status=profile.filing_status.value,
                federal_allowances=profile.federal_allowances,
                state_allowances=profile.state_allowances,
                additional_federal_withholding=profile.additional_federal_withholding,
                additional_state_withholding=profile.additional_state_withholding,
                is_exempt_federal=profile.is_exempt_federal,
                is_exempt_state=profile.is_exempt_state,
                step2_checkbox=profile.w4_step2_checkbox,
                dependents_amount=profile.w4_dependents_amount,
                other_income=profile.w4_other_income,
                deductions=profile.w4_deductions,
            ),
            pay_info=EnginePayInfo(
                gross_wages=pay_event.gross_wages,
                pay_frequency=pay_event.pay_frequency.engine_label,
                pay_date=pay_date.isoformat(),
                pay_period_start=period_start.isoformat(),
                pay_period_end=period_end.isoformat(),
                ytd_gross_wages=pay_event.ytd_gross_wages,
                ytd_federal_withheld=pay_event.ytd_federal_withheld,
                ytd_state_withheld=pay_event.ytd_state_withheld,
                ytd_social_security_wages=pay_event.ytd_social_security_wages,
                ytd_medicare_wages=pay_event.ytd_medicare_wages,
            ),
        )

    def _post(self, payload: dict) -> httpx.Response:
        if self._client is not None:
            return self._client.post(
                self.calculate_url,
                json=payload,
                headers=self._headers(),
                timeout=self.config.timeout_seconds,
            )
        with httpx.Client(timeout=self.config.timeout_seconds) as client:
            return client.post(self.calculate_url, json=payload, headers=self._headers())

    def calculate(
        self,
        identity: EmployeeIdentity,
        profile: TaxProfileData,
        pay_event: PayEvent,
        today: Optional[date] = None,
    ) -> EngineOutcome:
        """Run one engine calculation; one HTTP round-trip at most, no retries."""
        if not self.config.is_configured:
            logger.info("Symmetry Tax Engine not configured, using internal calculation")
            return EngineOutcome(
                status=EngineOutcomeStatus.NOT_CONFIGURED,
                calculation_id=f"fallback_{_millis()}",
                timestamp=datetime.utcnow(),
                error="Symmetry Tax Engine not configured",
            )

        try:
            payload = self.build_request(identity, profile, pay_event, today).model_dump(
                mode="json", by_alias=True
            )
            response = self._post(payload)

            if not response.is_success:
                return self._failed(
                    f"STE API Error: {response.status_code} {response.reason_phrase}"
                )

            result = EngineCalculationResult.model_validate(response.json())

        except httpx.HTTPError as e:
            return self._failed(f"STE request failed: {e}")
        except ValueError as e:
            # Covers undecodable JSON and bodies that fail schema validation
            return self._failed(f"Invalid STE response: {e}")
        except Exception as e:
            logger.exception("Unexpected error calling Symmetry Tax Engine")
            return self._failed(str(e))

        calculation_id = result.calculation_id or f"ste_{_millis()}"
        logger.info(
            f"Symmetry Tax Engine calculated withholdings for employee "
            f"{identity.employee_id} ({calculation_id})"
        )
        return EngineOutcome(
            status=EngineOutcomeStatus.SUCCESS,
            calculation_id=calculation_id,
            timestamp=datetime.utcnow(),
            amounts=result.to_amounts(),
        )

    def _failed(self, message: str) -> EngineOutcome:
        logger.warning(f"Symmetry Tax Engine unavailable, falling back: {message}")
        return EngineOutcome(
            status=EngineOutcomeStatus.FAILED,
            calculation_id=f"error_{_millis()}",
            timestamp=datetime.utcnow(),
            error=message,
        )
