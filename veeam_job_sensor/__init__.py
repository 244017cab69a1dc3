"""PRTG sensor reporting Veeam backup job counters."""

__version__ = "0.1.0"
