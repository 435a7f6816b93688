"""Error taxonomy for a coverage monitor run.

Only MalformedReportError, UnsupportedEventError, ConfigError and
CollaboratorError are fatal. BaselineUnavailable never escapes
resolve_baseline(): a missing or broken baseline means "no comparison".
"""

from __future__ import annotations


class CovmonError(Exception):
    """Base class for every error raised by covmon."""


class MalformedReportError(CovmonError):
    """The current coverage report is missing, unparsable or lacks required counts."""


class BaselineUnavailable(CovmonError):
    """The baseline report does not exist or could not be parsed."""


class UnsupportedEventError(CovmonError):
    """The triggering event is not a pull request event."""


class CollaboratorError(CovmonError):
    """A call to the hosting platform or baseline storage failed."""


class ConfigError(CovmonError):
    """Required configuration is missing or invalid."""
