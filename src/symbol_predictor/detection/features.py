"""
Landmark Feature Extraction
============================

Flattens a frame's 21 hand landmarks into the 63-dim feature vector the
linear symbol model was trained on.

Feature layout (63 dimensions), point-major:
    [x0, y0, z0, x1, y1, z1, ..., x20, y20, z20]

Absolute and normalized landmarks are flattened identically. Which of the
two a stage consumes is decided once, when the stage is wired.
"""

import logging
from typing import Iterable

import numpy as np

from symbol_predictor.core.errors import ConfigurationError, InvalidInputError
from symbol_predictor.core.types import (
    COORDS_PER_LANDMARK, NUM_LANDMARKS, LandmarkKind,
)

logger = logging.getLogger(__name__)


def validate_input_streams(landmarks_wired: bool, norm_landmarks_wired: bool) -> LandmarkKind:
    """Check that exactly one landmark input kind is wired.

    Args:
        landmarks_wired: True if the absolute LANDMARKS stream is connected
        norm_landmarks_wired: True if the NORM_LANDMARKS stream is connected

    Returns:
        The LandmarkKind the stage will consume

    Raises:
        ConfigurationError: if neither or both kinds are wired
    """
    if not landmarks_wired and not norm_landmarks_wired:
        raise ConfigurationError("None of the input streams are provided.")
    if landmarks_wired and norm_landmarks_wired:
        raise ConfigurationError(
            "Can only one type of landmark can be taken. "
            "Either absolute or normalized landmarks."
        )
    return LandmarkKind.ABSOLUTE if landmarks_wired else LandmarkKind.NORMALIZED


def _iter_points(landmarks) -> Iterable:
    """Unwrap a LandmarkList-style container (``.landmark`` field) if given."""
    return getattr(landmarks, "landmark", landmarks)


class FeatureExtractor:
    """Converts an ordered landmark set into a flat float64 feature vector.

    Accepts Landmark tuples, MediaPipe ``Landmark`` / ``NormalizedLandmark``
    protos (or a ``LandmarkList`` holding them), Tasks-API landmark objects,
    or an (N, 3) array.

    Example:
        >>> extractor = FeatureExtractor()
        >>> features = extractor.extract(hand_landmarks)
        >>> features.shape
        (63,)
    """

    def __init__(self, num_landmarks: int = NUM_LANDMARKS):
        # bool is an int subclass but never a landmark count
        if isinstance(num_landmarks, bool) or not isinstance(num_landmarks, int) or num_landmarks <= 0:
            logger.error("Invalid landmark count: %r", num_landmarks)
            raise ConfigurationError(
                f"num_landmarks must be a positive int, got {num_landmarks!r}"
            )
        self._num_landmarks = num_landmarks
        self._feature_dim = num_landmarks * COORDS_PER_LANDMARK

    @property
    def num_landmarks(self) -> int:
        return self._num_landmarks

    @property
    def feature_dim(self) -> int:
        return self._feature_dim

    def extract(self, landmarks) -> np.ndarray:
        """Convert landmarks to a (3 * num_landmarks,) feature vector.

        Landmark ``i`` fills positions ``3i``, ``3i + 1``, ``3i + 2`` with
        its x, y and z.

        Raises:
            InvalidInputError: if the number of landmarks is wrong
        """
        if isinstance(landmarks, np.ndarray):
            return self._extract_array(landmarks)

        points = list(_iter_points(landmarks))
        if len(points) != self._num_landmarks:
            raise InvalidInputError(
                "Expected %d landmarks, got %d" % (self._num_landmarks, len(points))
            )

        features = np.empty(self._feature_dim, dtype=np.float64)
        for i, point in enumerate(points):
            features[i * 3 + 0] = point.x
            features[i * 3 + 1] = point.y
            features[i * 3 + 2] = point.z
        return features

    def _extract_array(self, landmarks: np.ndarray) -> np.ndarray:
        expected = (self._num_landmarks, COORDS_PER_LANDMARK)
        if landmarks.shape != expected:
            raise InvalidInputError(
                "Expected %s landmarks, got %s" % (str(expected), str(landmarks.shape))
            )
        # Row-major flatten is already point-major
        return np.asarray(landmarks, dtype=np.float64).reshape(-1).copy()
