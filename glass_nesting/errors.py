# glass_nesting/errors.py
# Error taxonomy for the nesting core.
#
# - InvalidInput: the request itself is wrong (raised before any placement work).
# - AlgorithmFailure: a strategy or post-processing step blew up mid-run.
#
# A piece that does not fit is NOT an error; it shows up in the statistics.

from __future__ import annotations


class NestingError(Exception):
    """Base class for all errors raised by glass_nesting."""


class InvalidInput(NestingError, ValueError):
    """Caller error: missing designs/sheet, bad quantity, unknown algorithm, bad options."""


class AlgorithmFailure(NestingError, RuntimeError):
    """Unexpected fault during placement. The whole run is aborted, no partial record."""

    @classmethod
    def wrap(cls, exc: BaseException) -> "AlgorithmFailure":
        return cls(f"Optimization failed: {exc}")
