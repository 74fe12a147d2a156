"""
Symbol Model Constants
=======================

Loads the trained linear symbol model: a (63, 4) weight matrix, a 4-value
bias vector and the label -> text table.

The model is validated once at load time and is read-only afterwards. The
arrays are flagged non-writeable and the label table is exposed through a
read-only mapping, so one instance can be shared by every frame and every
stage without locking.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple

import numpy as np
import yaml

from symbol_predictor.core.errors import ConfigurationError
from symbol_predictor.core.types import FEATURE_DIM, NUM_CLASSES, NO_SYMBOL
from symbol_predictor.recognition.matrix_proto import format_text_proto, parse_text_proto

logger = logging.getLogger(__name__)

DEFAULT_MODEL_PATH = Path(__file__).parent.parent / "data" / "symbol_model.yaml"


@dataclass(frozen=True)
class MatrixRecord:
    """Serialized matrix: shape plus values in row-major order."""
    rows: int
    cols: int
    packed_data: Tuple[float, ...]

    @classmethod
    def from_dict(cls, d: dict) -> "MatrixRecord":
        """Create record from a ``{rows, cols, packed_data}`` dictionary."""
        try:
            return cls(
                rows=int(d["rows"]),
                cols=int(d["cols"]),
                packed_data=tuple(float(v) for v in d["packed_data"]),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed matrix record: {e!r}") from e

    @classmethod
    def from_text_proto(cls, text: str) -> "MatrixRecord":
        """Create record from its text-proto form (``rows: 63`` ...)."""
        rows, cols, values = parse_text_proto(text)
        return cls(rows=rows, cols=cols, packed_data=tuple(values))

    @classmethod
    def from_array(cls, matrix: np.ndarray) -> "MatrixRecord":
        matrix = np.asarray(matrix, dtype=np.float64)
        if matrix.ndim != 2:
            raise ConfigurationError(f"Expected a 2-D matrix, got shape {matrix.shape}")
        rows, cols = matrix.shape
        return cls(rows=rows, cols=cols, packed_data=tuple(float(v) for v in matrix.reshape(-1)))

    def to_dict(self) -> dict:
        return {"rows": self.rows, "cols": self.cols, "packed_data": list(self.packed_data)}

    def to_text_proto(self) -> str:
        return format_text_proto(self.rows, self.cols, self.packed_data)

    def to_array(self) -> np.ndarray:
        """Unpack to a (rows, cols) float64 array, reading values row-major."""
        if self.rows < 0 or self.cols < 0 or len(self.packed_data) != self.rows * self.cols:
            raise ConfigurationError(
                f"Matrix record holds {len(self.packed_data)} values, "
                f"expected rows * cols = {self.rows} * {self.cols}"
            )
        return np.array(self.packed_data, dtype=np.float64).reshape(self.rows, self.cols)


def _read_only(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


class SymbolModel:
    """Immutable weights, bias and label table of the linear symbol model.

    Shape checks happen here, once, so the per-frame classifier never has
    to look at them again:
        - weights must be (FEATURE_DIM, NUM_CLASSES) = (63, 4)
        - bias must hold NUM_CLASSES values
        - labels must map NO_SYMBOL and every class index to text
    """

    __slots__ = ("_weights", "_bias", "_labels", "_source")

    def __init__(
        self,
        weights: np.ndarray,
        bias: Sequence[float],
        labels: Mapping[int, str],
        source: str = "<memory>",
    ):
        weights = np.array(weights, dtype=np.float64)
        bias = np.array(bias, dtype=np.float64)

        if weights.shape != (FEATURE_DIM, NUM_CLASSES):
            raise ConfigurationError(
                f"Weight matrix must be {FEATURE_DIM}x{NUM_CLASSES} "
                f"(features x classes), got {'x'.join(str(n) for n in weights.shape)}"
            )
        if bias.shape != (NUM_CLASSES,):
            raise ConfigurationError(
                f"Bias vector must hold {NUM_CLASSES} values, got shape {bias.shape}"
            )

        labels = {int(k): str(v) for k, v in labels.items()}
        missing = [k for k in range(NO_SYMBOL, NUM_CLASSES) if k not in labels]
        if missing:
            raise ConfigurationError(f"Label table has no text for labels {missing}")

        self._weights = _read_only(weights)
        self._bias = _read_only(bias)
        self._labels = MappingProxyType(labels)
        self._source = source

    def __repr__(self):
        return f"SymbolModel({self.num_features}x{self.num_classes}, source={self._source})"

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    @property
    def bias(self) -> np.ndarray:
        return self._bias

    @property
    def labels(self) -> Mapping[int, str]:
        return self._labels

    @property
    def num_features(self) -> int:
        return self._weights.shape[0]

    @property
    def num_classes(self) -> int:
        return self._weights.shape[1]

    @property
    def source(self) -> str:
        return self._source

    def text_for(self, label: int) -> str:
        return self._labels[label]

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_record(
        cls,
        record: MatrixRecord,
        bias: Sequence[float],
        labels: Mapping[int, str],
        source: str = "<memory>",
    ) -> "SymbolModel":
        return cls(record.to_array(), bias, labels, source=source)

    @classmethod
    def from_dict(cls, d: dict, source: str = "<memory>") -> "SymbolModel":
        """Create model from a ``{weights, bias, labels}`` dictionary."""
        for key in ("weights", "bias", "labels"):
            if key not in d:
                raise ConfigurationError(f"Model definition is missing '{key}'")
        if not isinstance(d["labels"], dict):
            raise ConfigurationError("Model 'labels' must be a mapping of label -> text")
        try:
            bias = [float(v) for v in d["bias"]]
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Malformed bias vector: {e!r}") from e
        record = MatrixRecord.from_dict(d["weights"])
        return cls.from_record(record, bias, d["labels"], source=source)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "SymbolModel":
        """Load a model definition from YAML (default: the packaged model)."""
        path = Path(path) if path else DEFAULT_MODEL_PATH
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            logger.error("Model file not found: %s", path)
            raise ConfigurationError(f"Model file not found: {path}") from e
        except yaml.YAMLError as e:
            logger.error("Model file %s is not valid YAML: %s", path, e)
            raise ConfigurationError(f"Model file {path} is not valid YAML") from e

        if not isinstance(data, dict):
            raise ConfigurationError(f"Model file {path} must contain a mapping")

        model = cls.from_dict(data, source=str(path))
        logger.info("Loaded symbol model from %s (%dx%d)", path, model.num_features, model.num_classes)
        return model

    def to_dict(self) -> Dict:
        return {
            "weights": MatrixRecord.from_array(self._weights).to_dict(),
            "bias": [float(v) for v in self._bias],
            "labels": dict(self._labels),
        }


@lru_cache(maxsize=None)
def default_model() -> SymbolModel:
    """Process-wide packaged model, loaded on first use."""
    return SymbolModel.load()
