"""Command line entry point for the PRTG sensor."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, NoReturn, Optional, Sequence, TextIO

import voluptuous as vol

from .collector import DEFAULT_EXCLUSIONS, JobCollector, JobSource
from .config import load_settings
from .prtg import build_channels, render_error, render_report
from .ssh_collector import SshJobSource

_LOGGER = logging.getLogger(__name__)


def _setup_logging(debug: bool) -> None:
    """Configure logging; handlers write to stderr so stdout stays XML only."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(message)s",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="veeam-job-sensor",
        description="Report Veeam backup job counters as PRTG sensor XML.",
    )
    parser.add_argument("host", help="Veeam Backup & Replication server")
    parser.add_argument(
        "exclusions",
        nargs="*",
        metavar="EXCLUDE",
        help="skip jobs whose name contains one of these (default: %s)"
        % ", ".join(DEFAULT_EXCLUSIONS),
    )
    parser.add_argument(
        "--extend-exclusions",
        action="store_true",
        help="add EXCLUDE to the default exclusions instead of replacing them",
    )
    parser.add_argument("--username", help="SSH user (env VEEAM_SSH_USER)")
    parser.add_argument("--password", help="SSH password (env VEEAM_SSH_PASSWORD)")
    parser.add_argument("--key", help="SSH private key file (env VEEAM_SSH_KEY)")
    parser.add_argument("--port", help="SSH port (env VEEAM_SSH_PORT, default 22)")
    parser.add_argument(
        "--timeout", help="remote command timeout in seconds (env VEEAM_SSH_TIMEOUT)"
    )
    parser.add_argument(
        "--debug", action="store_true", default=None, help="log debug output to stderr"
    )
    return parser


def effective_exclusions(exclusions: Sequence[str], extend: bool = False) -> List[str]:
    """Return the exclusion patterns for a run."""
    if not exclusions:
        return list(DEFAULT_EXCLUSIONS)
    if extend:
        return list(DEFAULT_EXCLUSIONS) + [e for e in exclusions if e not in DEFAULT_EXCLUSIONS]
    return list(exclusions)


def report_error(message: str, stream: Optional[TextIO] = None) -> NoReturn:
    """Write the PRTG error document and end the process.

    PRTG reads the state from the document, so the exit status is 0.
    """
    stream = stream or sys.stdout
    stream.write(render_error(message) + "\n")
    stream.flush()
    sys.exit(0)


def run(
    argv: Optional[Sequence[str]] = None,
    stream: Optional[TextIO] = None,
    source: Optional[JobSource] = None,
) -> int:
    stream = stream or sys.stdout
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(
            {
                "username": args.username,
                "password": args.password,
                "key": args.key,
                "port": args.port,
                "timeout": args.timeout,
                "debug": args.debug,
            }
        )
    except vol.Invalid as err:
        _setup_logging(bool(args.debug))
        _LOGGER.error("Invalid settings: %s", err)
        report_error(f"Invalid settings: {err}", stream)

    _setup_logging(settings.debug)
    collector = JobCollector(source or SshJobSource(settings))
    exclusions = effective_exclusions(args.exclusions, args.extend_exclusions)
    _LOGGER.debug("Using exclusions %s", exclusions)

    try:
        result = collector.fetch_aggregate(args.host, exclusions)
    except ConnectionError as err:
        report_error(str(err), stream)

    stream.write(render_report(build_channels(result)))
    stream.flush()
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
