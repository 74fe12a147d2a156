"""
Tests for the Linear Symbol Classifier
=======================================
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from symbol_predictor.core.errors import ConfigurationError, InvalidInputError
from symbol_predictor.core.types import Landmark, NO_SYMBOL
from symbol_predictor.detection.features import FeatureExtractor
from symbol_predictor.recognition.linear_classifier import LinearSymbolClassifier, argmax_first
from symbol_predictor.recognition.model import SymbolModel, default_model

LABELS = {-1: "  ", 0: "A", 1: " ", 2: "H", 3: "Я"}


def create_model(first_row, bias=(0.0, 0.0, 0.0, 0.0)) -> SymbolModel:
    """Model whose scores depend only on features[0]: raw = features[0] * first_row."""
    weights = np.zeros((63, 4))
    weights[0] = first_row
    return SymbolModel(weights, bias, LABELS)


def create_features(first: float = 1.0) -> np.ndarray:
    features = np.zeros(63)
    features[0] = first
    return features


class TestArgmaxFirst:
    """Test suite for the tie-breaking argmax."""

    def test_single_maximum(self):
        assert argmax_first(np.array([0.1, 0.9, 0.3, 0.2])) == 1

    def test_tie_lowest_index_wins(self):
        assert argmax_first(np.array([5.0, 5.0, 1.0, 1.0])) == 0
        assert argmax_first(np.array([1.0, 3.0, 1.0, 3.0])) == 1

    def test_all_negative(self):
        assert argmax_first(np.array([-4.0, -3.0, -2.0, -1.0])) == 3


class TestDecisionRule:
    """Test suite for the ordered override chain."""

    def test_argmax_label(self):
        classifier = LinearSymbolClassifier(create_model([0.1, 0.2, 3.0, 0.4]))
        prediction = classifier.classify(create_features())

        assert prediction.label == 2
        assert prediction.text == "H"

    def test_tie_break_post_bias(self):
        """corrected = [5, 5, 1, 1] -> label 0."""
        classifier = LinearSymbolClassifier(create_model([5.0, 5.0, 1.0, 1.0]))
        prediction = classifier.classify(create_features())

        np.testing.assert_array_equal(prediction.scores, [5.0, 5.0, 1.0, 1.0])
        assert prediction.label == 0
        assert prediction.text == "A"

    def test_negative_max_is_blank(self):
        classifier = LinearSymbolClassifier(create_model([-1.0, -2.0, -3.0, -4.0]))
        prediction = classifier.classify(create_features())

        assert prediction.label == NO_SYMBOL
        assert prediction.text == "  "
        assert prediction.is_blank

    def test_first_score_floor_overrides_argmax(self):
        """corrected[0] < -100 forces label 1 even when class 2 scores highest."""
        classifier = LinearSymbolClassifier(create_model([-1000.0, 0.0, 1000.0, 0.0]))
        prediction = classifier.classify(create_features())

        assert prediction.scores[2] == max(prediction.scores)
        assert prediction.label == 1
        assert prediction.text == " "

    def test_first_score_floor_overrides_negative_max(self):
        classifier = LinearSymbolClassifier(create_model([-500.0, -1.0, -1.0, -1.0]))

        assert classifier.classify(create_features()).label == 1

    def test_first_score_at_floor_is_not_overridden(self):
        """Exactly -100 is not below the floor."""
        classifier = LinearSymbolClassifier(create_model([-100.0, -1.0, -1.0, -1.0]))

        assert classifier.classify(create_features()).label == NO_SYMBOL

    def test_zero_sentinel_overrides_everything(self):
        """features[0] == 0.0 is blank even if the other scores are huge."""
        weights = np.zeros((63, 4))
        weights[1] = [0.0, 0.0, 50.0, 0.0]
        classifier = LinearSymbolClassifier(SymbolModel(weights, (0.0, 0.0, 0.0, 0.0), LABELS))

        features = np.zeros(63)
        features[1] = 10.0
        prediction = classifier.classify(features)

        assert prediction.scores[2] == 500.0
        assert prediction.label == NO_SYMBOL

    def test_zero_sentinel_beats_floor(self):
        weights = np.zeros((63, 4))
        weights[1] = [-1000.0, 0.0, 0.0, 0.0]
        classifier = LinearSymbolClassifier(SymbolModel(weights, (0.0, 0.0, 0.0, 0.0), LABELS))

        features = np.zeros(63)
        features[1] = 1.0

        assert classifier.classify(features).label == NO_SYMBOL

    def test_float_comparison_not_truncated(self):
        """Scores compare as floats: fractional maxima are not truncated to 0.

        A truncating comparison would treat 0.7 and 0.3 as equal-ish running
        maxima and return class 1; float semantics return class 0.
        """
        classifier = LinearSymbolClassifier(create_model([0.7, 0.3, 0.0, 0.0]))
        assert classifier.classify(create_features()).label == 0

    def test_small_negative_scores_are_blank(self):
        """Scores in (-1, 0) are negative, not truncated to zero."""
        classifier = LinearSymbolClassifier(create_model([-0.5, -0.2, -0.9, -0.9]))
        assert classifier.classify(create_features()).label == NO_SYMBOL


class TestDefaultModelClassification:
    """End-to-end behaviour with the packaged model."""

    @pytest.fixture
    def classifier(self):
        return LinearSymbolClassifier()

    def test_all_zero_landmarks_are_blank(self, classifier):
        landmarks = [Landmark(0.0, 0.0, 0.0)] * 21
        prediction = classifier.predict(landmarks)

        assert prediction.label == NO_SYMBOL
        assert prediction.text == "  "

    def test_bias_only_scores(self, classifier):
        """Near-zero features leave only the bias, whose argmax is class 1."""
        prediction = classifier.classify(create_features(1e-9))

        np.testing.assert_allclose(prediction.scores, default_model().bias, atol=1e-8)
        assert prediction.label == 1
        assert prediction.text == " "

    def test_large_first_coordinate_hits_floor(self, classifier):
        """weights[0, 0] is negative, so a large x0 drives corrected[0] below -100."""
        prediction = classifier.classify(create_features(1000.0))

        assert prediction.scores[0] < -100
        assert prediction.label == 1

    def test_classify_is_pure(self, classifier):
        rng = np.random.default_rng(7)
        features = rng.uniform(-1.0, 1.0, 63)

        first = classifier.classify(features)
        second = classifier.classify(features.copy())

        assert first.label == second.label
        assert first.text == second.text
        np.testing.assert_array_equal(first.scores, second.scores)

    def test_zero_first_feature_with_random_rest(self, classifier):
        rng = np.random.default_rng(11)
        for _ in range(20):
            features = rng.uniform(-5.0, 5.0, 63)
            features[0] = 0.0
            assert classifier.classify(features).label == NO_SYMBOL

    def test_text_always_from_table(self, classifier):
        rng = np.random.default_rng(3)
        for _ in range(50):
            prediction = classifier.classify(rng.uniform(-2.0, 2.0, 63))
            assert prediction.label in LABELS
            assert prediction.text == LABELS[prediction.label]

    def test_scores_match_matrix_product(self, classifier):
        rng = np.random.default_rng(5)
        features = rng.uniform(0.0, 1.0, 63)
        model = classifier.model

        expected = features @ model.weights + model.bias
        np.testing.assert_array_equal(classifier.scores(features), expected)

    def test_wrong_feature_length(self, classifier):
        with pytest.raises(InvalidInputError):
            classifier.classify(np.ones(62))

    def test_extractor_model_mismatch(self):
        with pytest.raises(ConfigurationError):
            LinearSymbolClassifier(extractor=FeatureExtractor(num_landmarks=20))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
