"""Exception types raised by FuzzyCast."""

from __future__ import annotations


class FuzzyCastError(Exception):
    """Base class for FuzzyCast errors."""


class SchemaResolutionError(FuzzyCastError):
    """The record schema behind a source or statement cannot be determined."""


class CastError(FuzzyCastError):
    """A search term cannot be coerced into a field type.

    Raised by individual cast rules and converted into a ``CastRejection``
    at the per-(term, field) boundary; it never leaves ``compose``.
    """
