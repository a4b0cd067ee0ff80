"""
Exception types raised by the validator bridge.
"""


class PyValidatorError(Exception):
    """Base class for bridge errors."""


class ScriptLoadError(PyValidatorError):
    """A user script could not be found or raised while loading."""


class ContextReleasedError(PyValidatorError):
    """A result context was used or released after cleanup."""


class OutputFileError(PyValidatorError):
    """Output file references of a result could not be parsed."""
