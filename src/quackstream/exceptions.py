"""
Custom exceptions for the quackstream library.
"""


class QuackstreamError(Exception):
    """Base exception for all quackstream errors."""
    pass


class ConfigError(QuackstreamError):
    """Raised for invalid stream configuration, formats, options or schemas."""
    pass


class DecodeError(QuackstreamError):
    """Raised when a relation cannot be decoded into a typed sequence."""
    pass
