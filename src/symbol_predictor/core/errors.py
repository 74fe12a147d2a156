"""
Error taxonomy for the symbol predictor.

ConfigurationError is raised while a stage or model is being set up and
must stop pipeline construction. InvalidInputError is raised for a single
frame and aborts only that frame.
"""


class SymbolPredictorError(Exception):
    """Base class for all symbol predictor errors."""


class ConfigurationError(SymbolPredictorError):
    """Invalid wiring or malformed model constants, detected at setup."""


class InvalidInputError(SymbolPredictorError):
    """A frame's landmarks or features do not have the expected shape."""
