"""Clover report parsing.

Only the project-level aggregate is read:

    <coverage>
      <project>
        <metrics elements=".." coveredelements=".." statements=".." .../>
        <file>...</file>
      </project>
    </coverage>

Per-file <metrics> nodes are ignored.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

from covmon_core.errors import MalformedReportError

logger = logging.getLogger(__name__)

_BOM = "\ufeff"

# Clover attribute name -> RawCounts field name.
_ATTRIBUTES = {
    "elements": "elements",
    "coveredelements": "covered_elements",
    "statements": "statements",
    "coveredstatements": "covered_statements",
    "methods": "methods",
    "coveredmethods": "covered_methods",
    "conditionals": "conditionals",
    "coveredconditionals": "covered_conditionals",
}


@dataclass(frozen=True)
class RawCounts:
    """Aggregate element counts as written in the report."""

    elements: int
    covered_elements: int
    statements: int
    covered_statements: int
    methods: int
    covered_methods: int
    conditionals: int
    covered_conditionals: int


def _to_count(name: str, value: str | None) -> int:
    if value is None:
        raise MalformedReportError(f"Coverage report metrics are missing the '{name}' attribute.")
    text = value.strip()
    try:
        count = int(text)
    except ValueError:
        # Some generators write "12.0"; accept it only when it is integral.
        try:
            as_float = float(text)
        except ValueError:
            raise MalformedReportError(f"Coverage report attribute '{name}' is not numeric: {value!r}")
        if not as_float.is_integer():
            raise MalformedReportError(f"Coverage report attribute '{name}' is not a whole number: {value!r}")
        count = int(as_float)
    if count < 0:
        raise MalformedReportError(f"Coverage report attribute '{name}' is negative: {value!r}")
    return count


def parse_report(text: str) -> RawCounts:
    """Parse Clover XML text into RawCounts.

    Raises MalformedReportError when the document is not XML, when the
    coverage → project → metrics path is absent, or when any count is missing
    or non-numeric. Never returns a partial result.
    """
    try:
        root = ET.fromstring(text.lstrip(_BOM))
    except ET.ParseError as e:
        raise MalformedReportError(f"Coverage report is not valid XML: {e}")

    if root.tag != "coverage":
        raise MalformedReportError(f"Expected a <coverage> root element, found <{root.tag}>.")

    project = root.find("project")
    if project is None:
        raise MalformedReportError("Coverage report has no <project> element.")

    metrics = project.find("metrics")
    if metrics is None:
        raise MalformedReportError("Coverage report <project> has no <metrics> element.")

    values = {field: _to_count(attr, metrics.get(attr)) for attr, field in _ATTRIBUTES.items()}
    return RawCounts(**values)


def read_report_text(path: str | Path) -> str:
    """Read a report file as UTF-8 with any byte-order mark removed."""
    return Path(path).read_text(encoding="utf-8").replace(_BOM, "")


def load_report(path: str | Path) -> RawCounts:
    """Read and parse the current report; a missing file is a malformed report."""
    try:
        text = read_report_text(path)
    except FileNotFoundError:
        raise MalformedReportError(f"Coverage report not found: {path}")
    except UnicodeDecodeError as e:
        raise MalformedReportError(f"Coverage report {path} is not UTF-8 text: {e}")
    logger.debug("Read %d characters from %s", len(text), path)
    return parse_report(text)
