"""
Exemplar Classification – data cells vs. sample cells
=====================================================

The first cells of every board carry colours known a priori.  Data cells
are labelled by comparing their mean hue against those samples.

Methodologies:
  • ``median``        – group samples by class, take the circular median
                        hue of each group and assign every data cell to the
                        nearest group by angular distance.
  • ``maxlikelihood`` – reserved; raises ``UnsupportedMethodError``.

A methodology is any object with ``classify(sample_hues, sample_classes,
data_hues) -> list[ColorClass]``.  The result is deterministic and total:
every data cell receives exactly one class.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Sequence, Union

import numpy as np

from colorboard.errors import ClassificationError, UnsupportedMethodError
from colorboard.models.colors import ColorClass, hue_distance

log = logging.getLogger(__name__)


class ClassificationMethod(str, Enum):
    MEDIAN = "median"
    MAX_LIKELIHOOD = "maxlikelihood"


class ExemplarClassifier(ABC):
    """Assigns a class to each data hue given labelled sample hues."""

    method: ClassificationMethod

    @abstractmethod
    def classify(
        self,
        sample_hues: Sequence[float],
        sample_classes: Sequence[ColorClass],
        data_hues: Sequence[float],
    ) -> List[ColorClass]:
        ...


def circular_median(hues: Sequence[float]) -> float:
    """Median hue, computed on the arc centred at the first hue.

    Keeps groups that straddle 0°/360° (reds) from collapsing to cyan.
    """
    if len(hues) == 0:
        raise ValueError("Cannot take the median of no hues")
    ref = float(hues[0])
    unwrapped = [ref + ((h - ref + 180.0) % 360.0) - 180.0 for h in hues]
    return float(np.median(unwrapped)) % 360.0


class MedianExemplarClassifier(ExemplarClassifier):
    """Nearest group median by angular hue distance."""

    method = ClassificationMethod.MEDIAN

    def group_medians(
        self,
        sample_hues: Sequence[float],
        sample_classes: Sequence[ColorClass],
    ) -> Dict[ColorClass, float]:
        if len(sample_hues) != len(sample_classes):
            raise ValueError(
                f"Got {len(sample_hues)} sample hues for "
                f"{len(sample_classes)} sample classes"
            )
        if len(sample_hues) == 0:
            raise ClassificationError("No sample cells to classify against")

        groups: Dict[ColorClass, List[float]] = {}
        for hue, color in zip(sample_hues, sample_classes):
            groups.setdefault(color, []).append(float(hue))
        return {color: circular_median(hues) for color, hues in groups.items()}

    def classify(
        self,
        sample_hues: Sequence[float],
        sample_classes: Sequence[ColorClass],
        data_hues: Sequence[float],
    ) -> List[ColorClass]:
        medians = self.group_medians(sample_hues, sample_classes)
        log.debug("Sample group medians: %s",
                  {c.name: round(m, 2) for c, m in medians.items()})

        labels: List[ColorClass] = []
        for hue in data_hues:
            # min() keeps the first group on ties, i.e. sample order
            best = min(medians, key=lambda c: hue_distance(hue, medians[c]))
            labels.append(best)
        return labels


class MaxLikelihoodClassifier(ExemplarClassifier):
    """Placeholder for a per-channel likelihood model."""

    method = ClassificationMethod.MAX_LIKELIHOOD

    def classify(
        self,
        sample_hues: Sequence[float],
        sample_classes: Sequence[ColorClass],
        data_hues: Sequence[float],
    ) -> List[ColorClass]:
        raise UnsupportedMethodError(
            "Max-likelihood classification is not implemented"
        )


_CLASSIFIERS = {
    ClassificationMethod.MEDIAN: MedianExemplarClassifier,
    ClassificationMethod.MAX_LIKELIHOOD: MaxLikelihoodClassifier,
}


def get_classifier(
    method: Union[str, ClassificationMethod] = ClassificationMethod.MEDIAN,
) -> ExemplarClassifier:
    """Instantiate the classifier for *method*.

    Raises
    ------
    ClassificationError
        If *method* names no known methodology.
    """
    try:
        key = ClassificationMethod(method)
    except ValueError:
        raise ClassificationError(f"Invalid classifier type: {method!r}") from None
    return _CLASSIFIERS[key]()
