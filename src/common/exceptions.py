"""Exception types shared by the estimator and the history importer."""

from __future__ import annotations


class PriceEngineError(Exception):
    """Base class for all price engine errors."""


class InvalidQueryError(PriceEngineError):
    """A suggestion was requested without a usable model or use case."""


class InvalidInputError(PriceEngineError):
    """A record carries data that cannot be aggregated (e.g. a non-numeric price)."""


class ImportFileError(PriceEngineError):
    """An import file is missing, unreadable, or of an unsupported type."""
