"""Exception types raised by the feature engine."""


class TimbralError(Exception):
    """Base class for all errors raised by timbral."""


class InvalidParameterError(TimbralError, ValueError):
    """A frame size, hop length, window length or tuning constant is out of range."""


class InvalidSignalError(TimbralError, ValueError):
    """A sample buffer does not have the expected shape or element type."""
