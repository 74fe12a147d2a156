"""
Predict-symbol stage for a frame-synchronous landmark pipeline.

Architecture:
    LANDMARKS | NORM_LANDMARKS -> FeatureExtractor -> LinearSymbolClassifier -> TEXT

The stage is wired once: exactly one of the two landmark streams must feed
it, which is checked in the constructor so a misconfigured graph never
reaches per-frame execution. Each processed frame yields one TextPacket
carrying the input frame's timestamp unchanged.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from symbol_predictor.core.errors import ConfigurationError, InvalidInputError
from symbol_predictor.core.types import (
    NUM_LANDMARKS, LandmarkKind, LandmarkPacket, TextPacket,
)
from symbol_predictor.detection.features import FeatureExtractor, validate_input_streams
from symbol_predictor.recognition.linear_classifier import LinearSymbolClassifier
from symbol_predictor.recognition.model import SymbolModel, default_model
from symbol_predictor.utils.config import Config
from symbol_predictor.utils.logger import configure_logging

logger = logging.getLogger(__name__)

_KNOWN_TAGS = {kind.tag for kind in LandmarkKind}


@dataclass
class PredictorConfig:
    """Predict-symbol stage configuration."""
    input_stream: str = LandmarkKind.NORMALIZED.tag
    num_landmarks: int = NUM_LANDMARKS
    # None -> packaged model
    model_path: Optional[str] = None

    @classmethod
    def from_dict(cls, d: dict) -> "PredictorConfig":
        """Create config from dictionary."""
        # null in config.yaml means "use the default"
        num_landmarks = d.get("num_landmarks")
        return cls(
            input_stream=d.get("input_stream") or LandmarkKind.NORMALIZED.tag,
            num_landmarks=NUM_LANDMARKS if num_landmarks is None else num_landmarks,
            model_path=d.get("model_path"),
        )


class PredictSymbolStage:
    """Per-frame stage turning one hand's landmarks into symbol text.

    Example:
        >>> stage = PredictSymbolStage({"NORM_LANDMARKS"})
        >>> out = stage.process(LandmarkPacket("NORM_LANDMARKS", landmarks, ts))
        >>> out.text, out.timestamp
        ('A', ts)
    """

    def __init__(
        self,
        input_streams: Iterable[str],
        model: Optional[SymbolModel] = None,
        num_landmarks: int = NUM_LANDMARKS,
    ):
        input_streams = set(input_streams)
        unknown = input_streams - _KNOWN_TAGS
        if unknown:
            logger.error("Unknown input stream(s) wired: %s", sorted(unknown))
            raise ConfigurationError(f"Unknown input stream(s): {sorted(unknown)}")

        try:
            self._kind = validate_input_streams(
                LandmarkKind.ABSOLUTE.tag in input_streams,
                LandmarkKind.NORMALIZED.tag in input_streams,
            )
        except ConfigurationError as e:
            logger.error("Invalid stage wiring: %s", e)
            raise

        self._classifier = LinearSymbolClassifier(
            model=model or default_model(),
            extractor=FeatureExtractor(num_landmarks),
        )

        logger.info("PredictSymbolStage wired to %s (%r)", self._kind.tag, self._classifier.model)

    @classmethod
    def from_config(cls, config: Union[PredictorConfig, dict]) -> "PredictSymbolStage":
        """Build a stage from a PredictorConfig or the 'predictor' config section."""
        if isinstance(config, dict):
            config = PredictorConfig.from_dict(config)
        model = SymbolModel.load(config.model_path) if config.model_path else None
        return cls({config.input_stream}, model=model, num_landmarks=config.num_landmarks)

    @property
    def kind(self) -> LandmarkKind:
        return self._kind

    @property
    def classifier(self) -> LinearSymbolClassifier:
        return self._classifier

    def process(self, packet: LandmarkPacket) -> TextPacket:
        """Classify one frame packet and emit its text at the same timestamp.

        Raises:
            InvalidInputError: packet from an unwired stream or with the
                wrong number of landmarks. Only this frame is affected.
        """
        if packet.tag != self._kind.tag:
            raise InvalidInputError(
                f"Packet on stream '{packet.tag}' but stage is wired to '{self._kind.tag}'"
            )
        return self.process_frame(packet.landmarks, packet.timestamp)

    def process_frame(self, landmarks, timestamp: int) -> TextPacket:
        """Classify one frame's landmarks; the timestamp passes through unchanged."""
        try:
            prediction = self._classifier.predict(landmarks)
        except InvalidInputError as e:
            logger.warning("Frame at ts=%s rejected: %s", timestamp, e)
            raise

        logger.debug("ts=%s -> %r", timestamp, prediction)
        return TextPacket(prediction.text, timestamp, label=prediction.label)


def build_stage(config_path: Optional[str] = None) -> PredictSymbolStage:
    """Load config.yaml, apply its logging section and build the stage from 'predictor'."""
    config = Config().load(config_path)
    configure_logging(config.logging)
    return PredictSymbolStage.from_config(config.predictor)
