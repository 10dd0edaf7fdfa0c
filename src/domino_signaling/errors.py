"""
Exceptions raised by domino-signaling.

All errors abort the current call. Missing genes are not errors: they are
dropped and reported with a warning.
"""


class DominoError(Exception):
    """Base class for domino-signaling errors."""


class ConfigError(DominoError, ValueError):
    """Unrecognized option (scale, normalize, scale_by, layout, ...)."""


class PreconditionError(DominoError, RuntimeError):
    """The network is in a state that does not allow the operation."""


class DomainError(DominoError, ArithmeticError):
    """Mathematically invalid transform, e.g. log of negative values."""


class NoClustersError(PreconditionError, ConfigError):
    """No clusters were given and the network has no cluster assignment."""

    def __init__(self, message: str = "no clusters available"):
        super().__init__(message)
