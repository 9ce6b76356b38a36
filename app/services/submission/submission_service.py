from contextlib import nullcontext
import logging
from typing import Any, ContextManager, Dict

from app.config import ConfigRegistry
from app.models.report.dto import PatientDemographics, Report
from app.models.submission.outcome import FailureCategory, SubmissionOutcome
from app.services.api.authenticators.factory import AuthenticatorFactory
from app.services.api.registry_api import RegistryApi
from app.services.fhir.report_parser import get_patient_demographics, parse_report
from app.services.submission.ccn_resolver import resolve_ccn
from app.services.submission.exceptions import SubmissionException, ValidationFailure
from app.services.submission.existence_guard import ExistenceGuard
from app.services.submission.identity_resolver import IdentityResolver
from app.services.submission.locks import KeyedLock
from app.services.submission.observation_submitter import ObservationSubmitter
from app.services.submission.outcome_reporter import OutcomeReporter
from app.services.submission.patient_registrar import PatientRegistrar
from app.stats import Stats, NoopStats

logger = logging.getLogger(__name__)


class SubmissionService:
    """
    Synchronizes one report with the registry:

        report -> CCN -> CRID -> existing patient? -> create patient -> new observations

    Every step gates the next one and the first failure ends the submission. Nothing is
    retried here, retry policy belongs to the caller.

    The existence check and the patient create are two separate registry calls. Two
    concurrent submissions for the same CRID can both see no patient and both create one.
    Pass a KeyedLock to serialize submissions per CCN and CRID within this process; across
    processes the caller has to serialize or the registry has to merge duplicates.
    """

    def __init__(
        self,
        config: ConfigRegistry,
        stats: Stats | None = None,
        lock: KeyedLock | None = None,
    ) -> None:
        self.__config = config
        self.__auth_factory = AuthenticatorFactory(config)
        self.__stats = stats if stats is not None else NoopStats()
        self.__lock = lock

    def submit(self, report_data: Dict[str, Any], credential: str | None) -> SubmissionOutcome:
        reporter = OutcomeReporter()
        self.__stats.inc("submission.started")

        with self.__stats.timer("submission.duration"):
            try:
                outcome = self.__run(report_data, credential, reporter)
            except SubmissionException as e:
                logger.warning(f"Submission failed ({e.category.value}): {e}")
                outcome = reporter.failure(e.category, f"Submission failed: {e}", e)
            except Exception as e:
                logger.exception("Unexpected error during submission")
                outcome = reporter.failure(
                    FailureCategory.PROCESSING, f"Submission failed unexpectedly: {e}", e
                )

        if outcome.success:
            self.__stats.inc("submission.success")
            self.__stats.inc("submission.observations.submitted", outcome.observations_submitted)
        elif outcome.failure_category is not None:
            self.__stats.inc(f"submission.failure.{outcome.failure_category.value}")

        return outcome

    def __run(
        self, report_data: Dict[str, Any], credential: str | None, reporter: OutcomeReporter
    ) -> SubmissionOutcome:
        report, demographics = self.__validate(report_data)
        reporter.step(f"Report parsed with {len(report.observations)} observations")

        ccn = resolve_ccn(report.header, report.entries, self.__config.ccn_system)
        reporter.step(f"Resolved CCN {ccn}")

        api = RegistryApi(self.__config, self.__auth_factory.create_authenticator(credential))

        crid = IdentityResolver(api).resolve(ccn, demographics)
        reporter.crid = crid
        reporter.step(f"Resolved CRID {crid}")

        with self.__hold(f"{ccn}:{crid}"):
            existing_id = ExistenceGuard(api, self.__config.ccn_system).find_patient(ccn, crid)
            if existing_id is not None:
                patient_id = existing_id
                reporter.patient_created = False
                reporter.step(f"Patient already exists with id {patient_id}")
            else:
                registrar = PatientRegistrar(
                    api, self.__config.ccn_system, self.__config.crid_system
                )
                patient_id = registrar.register(ccn, crid)
                reporter.patient_created = True
                reporter.step(f"Patient created with id {patient_id}")
            reporter.patient_id = patient_id

            submitter = ObservationSubmitter(
                api, self.__config.ccn_system, self.__config.observation_identifier_system
            )
            submitted = submitter.submit(
                ccn=ccn,
                patient_id=patient_id,
                candidates=report.observations,
                patient_created=reporter.patient_created,
            )

        if submitted == 0:
            reporter.step("No new observations to submit, batch skipped")
        else:
            reporter.step(f"Submitted {submitted} observations in one batch")

        return reporter.success(submitted)

    @staticmethod
    def __validate(report_data: Dict[str, Any]) -> tuple[Report, PatientDemographics]:
        report = parse_report(report_data)
        if report.patient is None:
            raise ValidationFailure("Content bundle contains no Patient")

        return report, get_patient_demographics(report.patient.resource)  # type: ignore[arg-type]

    def __hold(self, key: str) -> ContextManager[Any]:
        if self.__lock is None:
            return nullcontext()
        return self.__lock.hold(key)
