# argon/errors.py


class ArgonError(Exception):
    """Base class for errors raised by the argon cluster simulation."""


class ConfigurationError(ArgonError, ValueError):
    """A simulation parameter is missing, malformed or out of range."""


class SequencingError(ArgonError, RuntimeError):
    """A simulation phase was requested before the phases it depends on."""


class NumericalSingularityError(ArgonError, FloatingPointError):
    """
    Forces or potentials became non-finite.

    Usually two atoms sit on top of each other, either because the initial
    placement is invalid or because the integration blew up.
    """

    def __init__(self, message, pairs=None):
        super().__init__(message)
        self.pairs = [] if pairs is None else list(pairs)
