"""Abstract baseline store interface.

A baseline store holds the raw text of the coverage report that pull requests
are compared against. The CLI depends on BaselineStore, not on a concrete
backend, so the local-file and Gist backends are interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import PurePosixPath

BASELINE_PREFIX = "coverage-baseline"


def baseline_key(filename: str) -> str:
    """Deterministic remote key for a report, e.g. coverage-baseline/clover.xml."""
    name = PurePosixPath(filename.replace("\\", "/")).name
    return f"{BASELINE_PREFIX}/{name}"


class BaselineStore(ABC):
    """Pluggable storage for the baseline coverage report."""

    @abstractmethod
    def key_for(self, filename: str) -> str:
        """Return the name under which the report configured as `filename` is stored."""

    @abstractmethod
    def load(self, name: str) -> str | None:
        """Return the stored report text, or None if nothing is stored under `name`.

        Transport failures are raised, not mapped to None.
        """

    @abstractmethod
    def save(self, name: str, content: str) -> None:
        """Store `content` under `name`, replacing any previous baseline."""

    def close(self) -> None:
        """Release any resources held by the store.

        Default is a no-op so callers can always call close() safely.
        """
