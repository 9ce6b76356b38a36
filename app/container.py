import inject

from app.config import get_config
from app.services.submission.locks import KeyedLock
from app.services.submission.submission_service import SubmissionService
from app.stats import setup_stats


def container_config(binder: inject.Binder) -> None:
    config = get_config()

    stats = setup_stats(config.stats)

    submission_service = SubmissionService(
        config=config.registry,
        stats=stats,
        lock=KeyedLock(),
    )
    binder.bind(SubmissionService, submission_service)


def get_submission_service() -> SubmissionService:
    return inject.instance(SubmissionService)


def setup_container() -> None:
    inject.configure(container_config, once=True)
