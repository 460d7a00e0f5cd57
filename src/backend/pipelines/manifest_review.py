from __future__ import annotations

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from adapters.manifests import ManifestDecodeError, load_manifest_file
from common.rules_engine.models import DocumentResult, FileError, ReviewReport
from common.rules_engine.runner import RulesRunner
from common.rules_engine.severity import count_by_severity, exit_code_for, run_severity

from .discovery import ManifestInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileReview:
    source: str
    documents: tuple[DocumentResult, ...] = ()
    error: Optional[FileError] = None


def review_file(item: ManifestInput, runner: RulesRunner) -> FileReview:
    try:
        resources = load_manifest_file(item.path)
    except ManifestDecodeError as exc:
        logger.warning("Error parsing %s: %s", item.label, exc)
        return FileReview(source=item.label, error=FileError(source=item.label, message=str(exc)))
    return FileReview(
        source=item.label,
        documents=tuple(runner.review(resource, source=item.label) for resource in resources),
    )


def review_files(
    files: Sequence[ManifestInput],
    runner: RulesRunner,
    *,
    workers: int = 1,
) -> ReviewReport:
    """
    Decode and evaluate a batch of manifest files.

    A file that cannot be decoded is recorded in `errors` and skipped; the
    rest of the batch still runs. Files are independent, so with
    `workers > 1` they are reviewed on a thread pool; `map` keeps input
    order, so the report is identical to a sequential run.
    """
    if workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="kubecheck") as pool:
            reviews = list(pool.map(lambda item: review_file(item, runner), files))
    else:
        reviews = [review_file(item, runner) for item in files]
    return build_report(reviews)


def build_report(reviews: Iterable[FileReview]) -> ReviewReport:
    documents: List[DocumentResult] = []
    errors: List[FileError] = []
    for review in reviews:
        documents.extend(review.documents)
        if review.error is not None:
            errors.append(review.error)

    severities = [doc.severity for doc in documents]
    overall = run_severity(severities)
    return ReviewReport(
        run_id=str(uuid.uuid4()),
        generated_at=datetime.now(timezone.utc),
        documents=documents,
        errors=errors,
        totals=count_by_severity(severities),
        severity=overall,
        exit_code=exit_code_for(overall),
    )
