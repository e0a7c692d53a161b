"""Exception types raised by the registration solvers."""

from __future__ import annotations


class AlignmentError(Exception):
    """Base class for every failure raised while estimating a pose."""


class InvalidInputError(AlignmentError, ValueError):
    """Correspondences violate a solver precondition (shape, count, weights)."""


class NumericalDegeneracyError(AlignmentError, RuntimeError):
    """A decomposition or solve step produced non-finite values."""
