from __future__ import annotations


class ConfigurationError(ValueError):
    """Invalid or contradictory test configuration.

    Raised before any session is constructed; a failed construction attempt
    leaves nothing behind.
    """


class ResultsLogError(RuntimeError):
    """A finished session could not be written to the results log."""
