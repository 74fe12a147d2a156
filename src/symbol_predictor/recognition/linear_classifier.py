"""
Linear Symbol Classifier
=========================

Maps a 63-dim landmark feature vector to one symbol label:

    raw       = features @ W            (1x63 . 63x4)
    corrected = raw + bias
    label     = decision rule (below)
    text      = label table[label]

Decision rule, applied in order; each step may override the previous one:
    1. argmax of corrected scores, first index wins ties
    2. max corrected score < 0          -> NO_SYMBOL
    3. corrected[0] < -100              -> label 1
    4. features[0] == 0.0 exactly       -> NO_SYMBOL (no usable landmarks)
"""

import logging
from typing import Optional

import numpy as np

from symbol_predictor.core.errors import ConfigurationError, InvalidInputError
from symbol_predictor.core.types import NO_SYMBOL, SymbolPrediction
from symbol_predictor.detection.features import FeatureExtractor
from symbol_predictor.recognition.model import SymbolModel, default_model
from symbol_predictor.utils.logger import log_timing

logger = logging.getLogger(__name__)

# Class forced when the first score collapses below the floor
FLOOR_LABEL = 1
FIRST_SCORE_FLOOR = -100.0


def argmax_first(scores: np.ndarray) -> int:
    """Index of the maximum score. Only a strictly greater value replaces
    the running max, so the lowest index wins a tie."""
    best = 0
    for i in range(1, len(scores)):
        if scores[i] > scores[best]:
            best = i
    return best


class LinearSymbolClassifier:
    """Fixed-weight linear classifier over flattened hand landmarks.

    Stateless: the model is read-only and nothing is kept between calls,
    so one instance may serve any number of frames or threads.

    Example:
        >>> classifier = LinearSymbolClassifier()
        >>> prediction = classifier.predict(hand_landmarks)
        >>> prediction.text
        'A'
    """

    def __init__(self, model: Optional[SymbolModel] = None,
                 extractor: Optional[FeatureExtractor] = None):
        self.model = model or default_model()
        self.extractor = extractor or FeatureExtractor()

        if self.extractor.feature_dim != self.model.num_features:
            raise ConfigurationError(
                "%d landmarks give %d features but the model expects %d"
                % (self.extractor.num_landmarks, self.extractor.feature_dim, self.model.num_features)
            )

    def scores(self, features: np.ndarray) -> np.ndarray:
        """Bias-corrected per-class scores for a feature vector."""
        features = np.asarray(features, dtype=np.float64)
        if features.shape != (self.model.num_features,):
            raise InvalidInputError(
                "Expected a feature vector of length %d, got shape %s"
                % (self.model.num_features, str(features.shape))
            )
        raw = features @ self.model.weights
        return raw + self.model.bias

    def decide(self, features: np.ndarray, corrected: np.ndarray) -> int:
        """Apply the ordered decision rule to corrected scores."""
        label = argmax_first(corrected)

        if corrected[label] < 0:
            label = NO_SYMBOL

        if corrected[0] < FIRST_SCORE_FLOOR:
            label = FLOOR_LABEL

        if features[0] == 0.0:
            label = NO_SYMBOL

        return label

    def classify(self, features: np.ndarray) -> SymbolPrediction:
        """
        Classify one frame's feature vector.

        Args:
            features: (63,) vector from FeatureExtractor.extract

        Returns:
            SymbolPrediction with label, mapped text and corrected scores
        """
        features = np.asarray(features, dtype=np.float64)
        corrected = self.scores(features)
        label = self.decide(features, corrected)
        text = self.model.text_for(label)

        logger.debug("Scores %s -> label %d (%r)", np.array2string(corrected, precision=4), label, text)
        return SymbolPrediction(label=label, text=text, scores=corrected)

    @log_timing
    def predict(self, landmarks) -> SymbolPrediction:
        """Extract features from landmarks and classify them."""
        return self.classify(self.extractor.extract(landmarks))
