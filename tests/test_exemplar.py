"""Tests for exemplar classification methodologies."""
import pytest

from colorboard.errors import ClassificationError, UnsupportedMethodError
from colorboard.models.colors import MAGENTA, RED, YELLOW
from colorboard.models.exemplar import (
    ClassificationMethod,
    MaxLikelihoodClassifier,
    MedianExemplarClassifier,
    circular_median,
    get_classifier,
)


class TestCircularMedian:

    def test_plain_median(self):
        assert circular_median([10.0, 20.0, 90.0]) == pytest.approx(20.0)

    def test_wraps_through_zero(self):
        assert circular_median([350.0, 10.0]) == pytest.approx(0.0)
        assert circular_median([355.0, 359.0, 3.0]) == pytest.approx(359.0)

    def test_empty(self):
        with pytest.raises(ValueError):
            circular_median([])


class TestMedianExemplarClassifier:
    """Test suite for nearest-group-median classification."""

    def setup_method(self):
        self.classifier = MedianExemplarClassifier()
        self.sample_hues = [0.0, 63.0, 316.0, 10.0, 70.0]
        self.sample_classes = [RED, YELLOW, MAGENTA, RED, YELLOW]

    def test_group_medians(self):
        medians = self.classifier.group_medians(self.sample_hues, self.sample_classes)
        assert list(medians) == [RED, YELLOW, MAGENTA]
        assert medians[RED] == pytest.approx(5.0)
        assert medians[YELLOW] == pytest.approx(66.5)
        assert medians[MAGENTA] == pytest.approx(316.0)

    def test_classify(self):
        labels = self.classifier.classify(
            self.sample_hues, self.sample_classes, [5.0, 60.0, 300.0, 350.0],
        )
        assert labels == [RED, YELLOW, MAGENTA, RED]

    def test_total_and_deterministic(self):
        data = [float(h) for h in range(0, 360, 7)]
        first = self.classifier.classify(self.sample_hues, self.sample_classes, data)
        second = self.classifier.classify(self.sample_hues, self.sample_classes, data)
        assert len(first) == len(data)
        assert first == second

    def test_ties_go_to_first_group(self):
        labels = self.classifier.classify([0.0, 100.0], [RED, YELLOW], [50.0])
        assert labels == [RED]

    def test_no_samples(self):
        with pytest.raises(ClassificationError):
            self.classifier.classify([], [], [10.0])

    def test_mismatched_samples(self):
        with pytest.raises(ValueError):
            self.classifier.classify([1.0, 2.0], [RED], [10.0])

    def test_no_data(self):
        assert self.classifier.classify(self.sample_hues, self.sample_classes, []) == []


class TestGetClassifier:

    def test_median_by_name(self):
        assert isinstance(get_classifier("median"), MedianExemplarClassifier)

    def test_default_is_median(self):
        assert get_classifier().method is ClassificationMethod.MEDIAN

    def test_max_likelihood_is_unsupported(self):
        classifier = get_classifier(ClassificationMethod.MAX_LIKELIHOOD)
        assert isinstance(classifier, MaxLikelihoodClassifier)
        with pytest.raises(UnsupportedMethodError) as excinfo:
            classifier.classify([0.0], [RED], [0.0])
        assert isinstance(excinfo.value, NotImplementedError)
        assert isinstance(excinfo.value, ClassificationError)

    def test_invalid_type(self):
        with pytest.raises(ClassificationError):
            get_classifier("nearest-neighbour")
