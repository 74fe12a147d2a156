"""
Shared domain types for the symbol predictor.

Centralizes enums, data classes, and type definitions used across modules
to eliminate circular imports and ensure type consistency.
"""

from enum import Enum
from typing import Optional, NamedTuple
import numpy as np


# =============================================================================
# Landmark Types
# =============================================================================

NUM_LANDMARKS = 21
COORDS_PER_LANDMARK = 3
FEATURE_DIM = NUM_LANDMARKS * COORDS_PER_LANDMARK  # 63
NUM_CLASSES = 4

NO_SYMBOL = -1


class Landmark(NamedTuple):
    """A single 3-D keypoint. Absolute and normalized points share this type."""
    x: float
    y: float
    z: float


class LandmarkKind(Enum):
    """Landmark coordinate space, keyed by the input stream tag it arrives on."""
    ABSOLUTE = "LANDMARKS"
    NORMALIZED = "NORM_LANDMARKS"

    @property
    def tag(self) -> str:
        return self.value


# =============================================================================
# Data Containers
# =============================================================================

class SymbolPrediction:
    """Container for one classification result.

    Uses __slots__ since one is created per frame.
    """

    __slots__ = ("label", "text", "scores")

    def __init__(self, label: int, text: str, scores: Optional[np.ndarray] = None):
        self.label = label
        self.text = text
        self.scores = scores  # bias-corrected, shape (NUM_CLASSES,)

    def __repr__(self):
        return f"SymbolPrediction(label={self.label}, text={self.text!r})"

    @property
    def is_blank(self) -> bool:
        return self.label == NO_SYMBOL


class LandmarkPacket:
    """One frame's landmarks as delivered on an input stream."""

    __slots__ = ("tag", "landmarks", "timestamp")

    def __init__(self, tag: str, landmarks, timestamp: int):
        self.tag = tag
        self.landmarks = landmarks
        self.timestamp = timestamp

    def __repr__(self):
        return f"LandmarkPacket({self.tag}, ts={self.timestamp})"


class TextPacket:
    """Output packet: the predicted text, stamped with the input frame's timestamp."""

    __slots__ = ("text", "timestamp", "label")

    def __init__(self, text: str, timestamp: int, label: int = NO_SYMBOL):
        self.text = text
        self.timestamp = timestamp
        self.label = label

    def __repr__(self):
        return f"TextPacket({self.text!r}, ts={self.timestamp})"

    def __eq__(self, other):
        if not isinstance(other, TextPacket):
            return NotImplemented
        return (self.text, self.timestamp, self.label) == (other.text, other.timestamp, other.label)
