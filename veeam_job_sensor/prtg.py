"""Render aggregates as PRTG "EXE/Script Advanced" XML."""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence, Tuple, Union
from xml.dom import minidom
from xml.sax.saxutils import escape

from .models import AggregateResult, Channel, JobStatus, Report

Record = Union[Channel, Mapping[str, Any], Sequence[Tuple[str, Any]]]

ROOT = "PRTG"
RESULT = "Result"


def build_channels(result: AggregateResult) -> Report:
    """Project *result* onto the six channels of the sensor."""
    counts = result.status_counts
    return (
        Channel("Total Jobs", result.jobs_total),
        Channel("Currently Running Jobs", result.running_count),
        Channel(
            "Average Job Runtime (min)",
            f"{result.average_duration_minutes:.2f}",
            is_float=True,
            decimal_places=2,
            unit="Custom",
            custom_unit="Min.",
        ),
        Channel("Job Status: Success", counts.get(JobStatus.SUCCESS, 0)),
        Channel(
            "Job Status: Failed",
            counts.get(JobStatus.FAILED, 0),
            limit_max_error=0.5,
        ),
        Channel("Job Status: None", counts.get(JobStatus.NONE, 0)),
    )


def _pairs(record: Record) -> Iterable[Tuple[str, Any]]:
    if isinstance(record, Channel):
        return record.fields()
    if isinstance(record, Mapping):
        return record.items()
    return record


def render_report(records: Iterable[Record]) -> str:
    """Return a tab indented ``<PRTG>`` document with a single ``<Result>``.

    The fields of every record are appended to that ``<Result>``, keeping
    record order and field order as given. Values are converted with
    ``str()``.
    """
    doc = minidom.Document()
    root = doc.createElement(ROOT)
    doc.appendChild(root)
    node = doc.createElement(RESULT)
    root.appendChild(node)
    for record in records:
        for name, value in _pairs(record):
            child = doc.createElement(name)
            child.appendChild(doc.createTextNode(str(value)))
            node.appendChild(child)
    return root.toprettyxml(indent="\t")


def render_error(message: str) -> str:
    return f"<{ROOT}><Error>1</Error><Text>{escape(str(message))}</Text></{ROOT}>"
