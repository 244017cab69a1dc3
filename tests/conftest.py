from __future__ import annotations

from typing import List, Sequence

import pytest

from veeam_job_sensor.models import JobRecord, JobStatus


class FakeSource:
    """Job source returning canned records, or raising *error*."""

    def __init__(self, records: Sequence[JobRecord] = (), error: Exception | None = None) -> None:
        self.records = list(records)
        self.error = error
        self.hosts: List[str] = []

    def fetch_records(self, host: str) -> List[JobRecord]:
        self.hosts.append(host)
        if self.error is not None:
            raise self.error
        return self.records


def job(
    name: str = "Daily Backup",
    status: JobStatus = JobStatus.SUCCESS,
    minutes: float = 10.0,
    running: bool = False,
    is_backup: bool = True,
    schedule_enabled: bool = True,
) -> JobRecord:
    return JobRecord(
        name=name,
        is_backup=is_backup,
        schedule_enabled=schedule_enabled,
        is_running=running,
        last_status=JobStatus.NONE if running else status,
        duration_minutes=0.0 if running else minutes,
    )


@pytest.fixture
def mixed_jobs() -> List[JobRecord]:
    """Ten scheduled backup jobs: one running, nine with a finished session."""
    records = [job(f"Success {i}", JobStatus.SUCCESS, 10.0) for i in range(6)]
    records += [job(f"Warning {i}", JobStatus.WARNING, 20.0) for i in range(2)]
    records.append(job("Failed 0", JobStatus.FAILED, 40.0))
    records.append(job("Running 0", running=True))
    return records


@pytest.fixture
def make_job():
    return job


@pytest.fixture
def fake_source():
    return FakeSource
