"""
Landmark Symbol Predictor
==========================

Fixed-weight linear classifier mapping one frame's 21 hand landmarks to a
symbol label and its text.

Modules:
    - core: Shared types, errors and the per-frame predict-symbol stage
    - detection: Landmark -> feature vector extraction
    - recognition: Model constants and the linear classifier
    - utils: Configuration and logging
"""

from .core.errors import ConfigurationError, InvalidInputError, SymbolPredictorError
from .core.pipeline import PredictSymbolStage, PredictorConfig, build_stage
from .detection.features import FeatureExtractor
from .recognition.linear_classifier import LinearSymbolClassifier
from .recognition.model import SymbolModel, default_model

__version__ = "1.0.0"

__all__ = [
    "ConfigurationError",
    "InvalidInputError",
    "SymbolPredictorError",
    "PredictSymbolStage",
    "PredictorConfig",
    "build_stage",
    "FeatureExtractor",
    "LinearSymbolClassifier",
    "SymbolModel",
    "default_model",
]
