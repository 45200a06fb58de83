"""
Error kinds raised by the factor plotting helpers.

All of them derive from ``ValueError`` so callers that already guard
against bad input with ``except ValueError`` keep working.
"""


class FactorPlotError(ValueError):
    """Base class for invalid input to the factor plotting functions."""


class InvalidSpecification(FactorPlotError):
    """An annotation argument has an unrecognised shape or the wrong length."""


class UnknownFactor(FactorPlotError):
    """A requested factor name or index is not present in the model."""


class TooManyShapeLevels(FactorPlotError):
    """A shape annotation has more distinct values than markers available."""


class AmbiguousAnnotationName(FactorPlotError):
    """A feature name matches rows in more than one view."""
