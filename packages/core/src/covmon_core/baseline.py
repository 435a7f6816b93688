"""Baseline resolution: a Metric from a previously recorded report, or None."""

from __future__ import annotations

import logging
from typing import Protocol

from covmon_core.errors import BaselineUnavailable, MalformedReportError
from covmon_core.metrics import Metric, compute_metric
from covmon_core.report import parse_report

logger = logging.getLogger(__name__)


class BaselineSource(Protocol):
    def load(self, name: str) -> str | None: ...


def _load_baseline(source: BaselineSource, name: str) -> Metric:
    try:
        text = source.load(name)
    except FileNotFoundError:
        text = None
    except UnicodeDecodeError as e:
        raise BaselineUnavailable(f"Baseline report {name} is not UTF-8 text: {e}")
    if text is None:
        raise BaselineUnavailable(f"No baseline report at {name}")
    try:
        return compute_metric(parse_report(text))
    except MalformedReportError as e:
        raise BaselineUnavailable(f"Baseline report {name} could not be parsed: {e}")


def resolve_baseline(source: BaselineSource, name: str) -> Metric | None:
    """Return the baseline Metric, or None when there is nothing to compare against.

    A first run against a new baseline location has no report yet; that is
    not an error. Transport failures from the source are not absorbed.
    """
    try:
        return _load_baseline(source, name)
    except BaselineUnavailable as e:
        logger.warning("%s; skipping regression comparison.", e)
        return None
