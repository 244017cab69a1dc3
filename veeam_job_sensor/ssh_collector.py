"""SSH transport for reading Veeam jobs from a backup server."""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

import paramiko
import voluptuous as vol

from .config import Settings
from .models import JobRecord, JobStatus
from .remote_script import powershell_command

_LOGGER = logging.getLogger(__name__)


def run_ssh(
    host: str,
    username: Optional[str],
    password: Optional[str] = None,
    key: Optional[str] = None,
    port: int = 22,
    cmd: str = "echo ok",
    timeout: float = 30,
) -> str:
    ssh = paramiko.SSHClient()
    ssh.set_missing_host_key_policy(paramiko.AutoAddPolicy())
    try:
        ssh.connect(
            hostname=host,
            port=port,
            username=username,
            password=password,
            key_filename=key,
            timeout=10,
            banner_timeout=10,
            auth_timeout=10,
        )
        _, stdout, stderr = ssh.exec_command(cmd, timeout=timeout)
        out = stdout.read().decode("utf-8", "ignore")
        err = stderr.read().decode("utf-8", "ignore")
        if err and not out:
            raise RuntimeError(err.strip())
        return out
    finally:
        ssh.close()


def parse_json_output(output: str) -> Any:
    """Parse JSON output while tolerating surrounding text."""

    stripped = output.strip()
    if not stripped:
        raise json.JSONDecodeError("Empty response", output, 0)

    try:
        return json.loads(stripped)
    except json.JSONDecodeError as err:
        # Login banners or module warnings may surround the payload and
        # contain brackets themselves, so try every opening bracket
        decoder = json.JSONDecoder()
        first: Optional[Tuple[int, int, Any]] = None
        for start, char in enumerate(stripped):
            if char not in "[{":
                continue
            try:
                parsed, end = decoder.raw_decode(stripped, start)
            except json.JSONDecodeError:
                continue
            suffix = len(stripped) - end
            if not stripped[end:].strip():
                first = (start, suffix, parsed)
                break
            if first is None:
                first = (start, suffix, parsed)

        if first is None:
            _LOGGER.debug("SSH output missing JSON payload: %s", stripped[:200])
            raise err

        start, suffix, parsed = first
        _LOGGER.debug(
            "Parsed JSON from SSH output after trimming prefix/suffix (prefix length %s, suffix length %s)",
            start,
            suffix,
        )
        return parsed


def _timestamp(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


JOB_ROW_SCHEMA = vol.Schema(
    {
        vol.Required("name"): vol.All(vol.Any(None, str), lambda v: v or ""),
        vol.Required("is_backup"): vol.Boolean(),
        vol.Required("schedule_enabled"): vol.Boolean(),
        vol.Optional("is_running", default=False): vol.Boolean(),
        vol.Optional("last_result", default=JobStatus.NONE): JobStatus.parse,
        vol.Optional("session_start", default=None): _timestamp,
        vol.Optional("session_end", default=None): _timestamp,
    },
    extra=vol.REMOVE_EXTRA,
)


def duration_minutes(start: Optional[float], end: Optional[float]) -> float:
    """Return the session length in minutes, ``0.0`` when incomplete."""
    if start is None or end is None:
        return 0.0
    return max(0.0, (end - start) / 60.0)


def to_job_record(row: Dict[str, Any]) -> JobRecord:
    """Validate a raw job row and convert it into a :class:`JobRecord`.

    Raises :class:`voluptuous.Invalid` when the row is malformed.
    """
    data = JOB_ROW_SCHEMA(row)
    running = data["is_running"]
    return JobRecord(
        name=data["name"],
        is_backup=data["is_backup"],
        schedule_enabled=data["schedule_enabled"],
        is_running=running,
        last_status=JobStatus.NONE if running else data["last_result"],
        duration_minutes=(
            0.0 if running else duration_minutes(data["session_start"], data["session_end"])
        ),
    )


class SshJobSource:
    """Fetch job rows by running the remote script over SSH."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def fetch_records(self, host: str) -> List[JobRecord]:
        settings = self._settings
        _LOGGER.debug("Connecting to %s:%s as %s", host, settings.port, settings.username)
        out = run_ssh(
            host=host,
            username=settings.username,
            password=settings.password,
            key=settings.key,
            port=settings.port,
            cmd=powershell_command(),
            timeout=settings.timeout,
        )
        data = parse_json_output(out)
        # A single job may arrive as a bare object
        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            raise vol.Invalid(f"Expected a list of jobs, got {type(data).__name__}")
        records = [to_job_record(row) for row in data]
        _LOGGER.debug("Received %s jobs from %s", len(records), host)
        return records
