"""Data models for job rows, aggregates and PRTG channels."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class JobStatus(Enum):
    """Result of the last session of a job as reported by Veeam."""

    NONE = "None"
    SUCCESS = "Success"
    WARNING = "Warning"
    FAILED = "Failed"

    @classmethod
    def parse(cls, value: Any) -> "JobStatus":
        """Return the status for *value*, falling back to ``NONE``."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower()
        for status in cls:
            if status.value.lower() == text:
                return status
        return cls.NONE


@dataclass
class JobRecord:
    name: str
    is_backup: bool
    schedule_enabled: bool
    is_running: bool = False
    last_status: JobStatus = JobStatus.NONE
    duration_minutes: float = 0.0


def _empty_counts() -> Dict[JobStatus, int]:
    return {status: 0 for status in JobStatus}


@dataclass
class AggregateResult:
    """Counters for one collection run."""

    jobs_total: int = 0
    running_count: int = 0
    average_duration_minutes: float = 0.0
    status_counts: Dict[JobStatus, int] = field(default_factory=_empty_counts)


@dataclass(frozen=True)
class Channel:
    """A single PRTG result row plus its optional presentation hints."""

    name: str
    value: Any
    is_float: bool = False
    decimal_places: Optional[int] = None
    unit: Optional[str] = None
    custom_unit: Optional[str] = None
    limit_max_error: Optional[float] = None

    def fields(self) -> List[Tuple[str, Any]]:
        """Return the PRTG elements of this channel in output order."""
        out: List[Tuple[str, Any]] = [("Channel", self.name), ("Value", self.value)]
        if self.is_float:
            out.append(("Float", 1))
        if self.decimal_places is not None:
            out.append(("DecimalMode", self.decimal_places))
        if self.unit:
            out.append(("Unit", self.unit))
        if self.custom_unit:
            out.append(("CustomUnit", self.custom_unit))
        if self.limit_max_error is not None:
            out.append(("LimitMode", 1))
            out.append(("LimitMaxError", self.limit_max_error))
        return out


Report = Tuple[Channel, ...]
