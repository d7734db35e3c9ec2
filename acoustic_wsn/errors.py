# acoustic_wsn/errors.py
"""Exception hierarchy of the package."""


class WsnError(Exception):
    """Base class for every failure raised by acoustic_wsn."""
    pass


class InvalidPhysicalInput(WsnError, ValueError):
    """Negative distance, duration or energy handed to the node model."""
    pass


class ConfigError(WsnError, ValueError):
    """Inconsistent configuration values."""
    pass


class RecordNotFoundError(WsnError, LookupError):
    """A (population, vehicle) record is absent from a saved guess file."""
    pass


class GuessMismatchError(WsnError, ValueError):
    """A loaded initial guess does not partition the requested nodes."""
    pass
