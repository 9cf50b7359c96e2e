"""
Error types raised by plate-loader core and io layers.

Empty states (no day selected, no previous session, no plates for a unit)
are ordinary return values and never raise.
"""


class PlateLoaderError(Exception):
    """Base class for all plate-loader errors."""

    pass


class ValidationError(PlateLoaderError):
    """Raised when user input or stored data fails validation.

    Always raised before any state is mutated.
    """

    pass


class PersistenceError(PlateLoaderError):
    """Raised when the data store cannot be read or written."""

    pass
