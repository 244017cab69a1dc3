"""Filter and aggregate backup jobs reported by a Veeam server."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol, Sequence

from .models import AggregateResult, JobRecord, JobStatus

_LOGGER = logging.getLogger(__name__)

DEFAULT_EXCLUSIONS = ("test", "temp", "old")

_COMPLETED = (JobStatus.SUCCESS, JobStatus.WARNING, JobStatus.FAILED)


class JobSource(Protocol):
    def fetch_records(self, host: str) -> Sequence[JobRecord]:
        ...


def is_excluded(name: str, exclusions: Iterable[str] = DEFAULT_EXCLUSIONS) -> bool:
    """Return True if *name* contains any of *exclusions*, ignoring case."""
    lowered = (name or "").lower()
    return any(pattern and pattern.lower() in lowered for pattern in exclusions)


def select_jobs(
    records: Iterable[JobRecord], exclusions: Iterable[str] = DEFAULT_EXCLUSIONS
) -> List[JobRecord]:
    """Keep scheduled backup jobs whose name is not excluded."""
    exclusions = tuple(exclusions)
    selected = []
    for record in records:
        if not record.is_backup or not record.schedule_enabled:
            continue
        if is_excluded(record.name, exclusions):
            _LOGGER.debug("Skipping excluded job %s", record.name)
            continue
        selected.append(record)
    return selected


def aggregate(records: Iterable[JobRecord]) -> AggregateResult:
    result = AggregateResult()
    duration_sum = 0.0
    completed = 0

    for record in records:
        result.jobs_total += 1
        if record.is_running:
            result.running_count += 1
            result.status_counts[JobStatus.NONE] += 1
            continue
        result.status_counts[record.last_status] += 1
        if record.last_status in _COMPLETED:
            duration_sum += record.duration_minutes
            completed += 1

    if completed:
        result.average_duration_minutes = duration_sum / completed
    return result


class JobCollector:
    """Collect an :class:`AggregateResult` from one backup server."""

    def __init__(self, source: JobSource) -> None:
        self._source = source

    def fetch_aggregate(
        self, host: str, exclusions: Optional[Iterable[str]] = None
    ) -> AggregateResult:
        """Return the aggregate for *host*.

        Every failure, whether in the transport, the remote script or while
        aggregating, is raised as a single :class:`ConnectionError`. There is
        no retry.
        """
        if exclusions is None:
            exclusions = DEFAULT_EXCLUSIONS
        try:
            records = self._source.fetch_records(host)
            result = aggregate(select_jobs(records, exclusions))
        except Exception as exc:
            _LOGGER.error("Collecting jobs from %s failed: %s", host, exc)
            raise ConnectionError(f"Request to target server {host} failed") from exc

        _LOGGER.info(
            "Collected %s jobs from %s (%s running)",
            result.jobs_total,
            host,
            result.running_count,
        )
        return result
