"""
soapfilm exceptions.

Two kinds of failure exist in the engine:

- ConfigurationError: a topology was wired incorrectly (an average over
  zero points, a coordinate outside the grid, mismatched patch sizes, an
  unknown estimator or builder name, a malformed run file). Raised while a
  topology is being built, never during iteration.
- DegenerateGeometryError: a condition needs a direction that does not
  exist (a zero-length rail, a zero normal).
"""


class SoapFilmError(Exception):
    """Base exception for soapfilm errors."""
    pass


class ConfigurationError(SoapFilmError):
    """A patch, condition or run file was configured incorrectly."""
    pass


class DegenerateGeometryError(SoapFilmError):
    """A geometric quantity needed for evaluation has zero length."""
    pass


__all__ = ["SoapFilmError", "ConfigurationError", "DegenerateGeometryError"]
