"""
Exceptions and warnings raised when the plate data no longer match the
assumptions hard-coded into the analysis.

All data-integrity errors derive from `SporefitError`, itself a
`ValueError`, so callers that only care about bad input can catch
`ValueError`. The pipeline catches `SporefitError` per analysis block and
records the failure in the report.
"""

class SporefitError(ValueError):
    """Base class for data-integrity failures."""


class MismatchedPairing(SporefitError):
    """Two rows that must describe the same plate/replicate do not."""


class MissingReference(SporefitError):
    """No pure-culture observation exists for a mixture row."""


class UnpairedInput(SporefitError):
    """The two sides of a paired test do not share pairing-key values."""


class UnknownPair(SporefitError):
    """A strain pair has no configured initial densities."""


class UnknownLevel(SporefitError):
    """A requested factor level is not among the observed levels."""


class InsufficientGroupSize(SporefitError):
    """Fewer than two observations on one side of a comparison."""


class StaleExclusionRule(UserWarning):
    """An exclusion rule matched no rows."""
