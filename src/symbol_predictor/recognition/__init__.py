"""Symbol recognition module."""
from .linear_classifier import LinearSymbolClassifier
from .model import MatrixRecord, SymbolModel, default_model

__all__ = [
    "LinearSymbolClassifier",
    "MatrixRecord",
    "SymbolModel",
    "default_model",
]
