import logging
from datetime import date, datetime
from typing import Any, Dict, List

from fhir.resources.R4B.observation import Observation

from app.models.report.dto import ReportEntry
from app.services.api.registry_api import RegistryApi, RegistryApiException
from app.services.submission.exceptions import ProcessingFailure
from app.services.submission.security import build_meta

logger = logging.getLogger(__name__)


def _as_text(value: date | datetime | str | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def build_observation(
    observation: Observation,
    source_id: str,
    patient_id: str,
    ccn: str,
    ccn_system: str,
    identifier_system: str,
) -> Dict[str, Any]:
    """
    Builds the registry observation for a report observation. The subject points to the
    registry patient and the source identifier is kept, so a resubmission can be detected.
    """
    resource: Dict[str, Any] = {
        "resourceType": "Observation",
        "meta": build_meta(ccn, ccn_system),
        "identifier": [
            {
                "use": "official",
                "system": identifier_system,
                "value": source_id,
            }
        ],
        "status": observation.status,
        "subject": {"reference": f"Patient/{patient_id}"},
    }

    effective = observation.effectiveDateTime
    if effective is None and observation.effectivePeriod is not None:
        effective = observation.effectivePeriod.start
    if effective is not None:
        resource["effectiveDateTime"] = _as_text(effective)

    code = observation.code
    if code is not None and code.coding:
        coding = code.coding[0]
        resource["code"] = {
            "coding": [
                {
                    "system": coding.system,
                    "code": coding.code,
                    "display": coding.display,
                }
            ]
        }
    elif code is not None and code.text:
        resource["code"] = {"text": code.text}

    quantity = observation.valueQuantity
    if quantity is not None:
        resource["valueQuantity"] = {
            "value": float(quantity.value) if quantity.value is not None else None,
            "unit": quantity.unit,
            "system": quantity.system,
            "code": quantity.code,
        }

    return resource


class ObservationSubmitter:
    def __init__(self, api: RegistryApi, ccn_system: str, identifier_system: str) -> None:
        self.__api = api
        self.__ccn_system = ccn_system
        self.__identifier_system = identifier_system

    def select(self, candidates: List[ReportEntry], patient_created: bool) -> List[ReportEntry]:
        """
        Returns the observations that still need to be submitted. Observations without a
        source identifier are dropped, and so are repeats of a source identifier within the
        report. For a patient that existed before, every observation is looked up in the
        registry by its source identifier and skipped when found.
        """
        selected: List[ReportEntry] = []
        seen: set[str] = set()
        for entry in candidates:
            if not entry.full_url:
                logger.warning("Skipping observation without a source identifier")
                continue

            if entry.full_url in seen:
                logger.warning(f"Skipping duplicate observation {entry.full_url} in report")
                continue
            seen.add(entry.full_url)

            # A brand-new patient cannot have observations yet
            if not patient_created and self.__exists(entry.full_url):
                logger.info(f"Observation {entry.full_url} already submitted, skipping")
                continue

            selected.append(entry)

        return selected

    def submit(
        self,
        ccn: str,
        patient_id: str,
        candidates: List[ReportEntry],
        patient_created: bool,
    ) -> int:
        """
        Submits every observation not yet in the registry in one transaction and returns
        how many were submitted. Nothing is sent when there is nothing to submit.
        """
        selected = self.select(candidates, patient_created)
        if not selected:
            logger.info("No new observations to submit")
            return 0

        entries = [
            {
                "request": {"method": "POST", "url": "Observation"},
                "resource": build_observation(
                    observation=entry.resource,  # type: ignore[arg-type]
                    source_id=entry.full_url,  # type: ignore[arg-type]
                    patient_id=patient_id,
                    ccn=ccn,
                    ccn_system=self.__ccn_system,
                    identifier_system=self.__identifier_system,
                ),
            }
            for entry in selected
        ]

        try:
            errors = self.__api.post_transaction(entries)
        except RegistryApiException as e:
            raise ProcessingFailure(f"Observation batch submit failed: {e}") from e

        if errors:
            raise ProcessingFailure(f"Observation batch was rejected: {errors}")

        logger.info(f"Submitted {len(entries)} observations for patient {patient_id}")
        return len(entries)

    def __exists(self, source_id: str) -> bool:
        try:
            result = self.__api.search_observations(identifier=source_id)
        except RegistryApiException as e:
            raise ProcessingFailure(f"Observation existence check failed for {source_id}: {e}") from e

        return result.count > 0
