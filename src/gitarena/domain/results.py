"""Failure values returned across component boundaries.

None of these are raised. Sources hand them back in place of the value they
could not produce, and the dashboard builder turns them into placeholders.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class DataUnavailable:
    """A store query for a count or latest entity failed or timed out."""

    source: str
    reason: str


@dataclass(frozen=True, slots=True)
class FieldUnavailable:
    """A telemetry field could not be read on this host."""

    field: str
    reason: str


@dataclass(frozen=True, slots=True)
class VersionUnresolved:
    """A component version could not be determined at startup."""

    name: str
    reason: str
