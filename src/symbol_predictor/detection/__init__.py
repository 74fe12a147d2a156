"""Landmark feature extraction."""
from .features import FeatureExtractor, validate_input_streams

__all__ = ["FeatureExtractor", "validate_input_streams"]
