"""
Nearest-match classification of a live pose against the sign vocabulary.
"""
import logging
from typing import Iterable, Optional

import numpy as np

from .types import NormalizedPose, SignRecord

logger = logging.getLogger(__name__)

# Mean per-landmark distance (normalized image units) below which two poses
# count as the same sign
DEFAULT_MATCH_THRESHOLD = 0.04


def mean_distance(a: NormalizedPose, b: NormalizedPose) -> Optional[float]:
    """
    Mean Euclidean distance between corresponding landmarks of two poses.

    Returns:
        The distance, or None if the poses have different cardinalities
    """
    if len(a) != len(b) or not a:
        return None
    pa = np.array([p.as_tuple() for p in a], dtype=np.float64)
    pb = np.array([p.as_tuple() for p in b], dtype=np.float64)
    return float(np.linalg.norm(pa - pb, axis=1).mean())


def classify(live: NormalizedPose, vocabulary: Iterable[SignRecord],
             threshold: float = DEFAULT_MATCH_THRESHOLD) -> Optional[str]:
    """
    Name of the first sign, in vocabulary order, closer than threshold.

    This is first-match rather than best-match: a closer sign later in the
    vocabulary never displaces an earlier qualifying one. Stored signs whose
    landmark count differs from the live pose are skipped.

    Returns:
        The matching sign's name, or None for no match
    """
    for record in vocabulary:
        d = mean_distance(record.landmarks, live)
        if d is None:
            logger.debug(f"Skipping sign '{record.name}': {len(record.landmarks)} landmarks, live has {len(live)}")
            continue
        if d < threshold:
            return record.name
    return None


class Matcher:
    """Classifier bound to a single configured threshold."""

    def __init__(self, threshold: float = DEFAULT_MATCH_THRESHOLD):
        if not threshold > 0:
            raise ValueError(f"Match threshold must be positive, got {threshold}")
        self.threshold = threshold

    def classify(self, live: NormalizedPose, vocabulary: Iterable[SignRecord]) -> Optional[str]:
        return classify(live, vocabulary, self.threshold)


_UNSET = object()


class ClassificationDebouncer:
    """
    Suppresses repeats of the same classification across consecutive frames.

    update() returns True only when the result differs from the last one
    reported. After reset() the next result is always reported, including
    an initial no-match.
    """

    def __init__(self):
        self._last = _UNSET

    @property
    def has_result(self) -> bool:
        return self._last is not _UNSET

    @property
    def last(self) -> Optional[str]:
        """Last reported classification (None before any report or for no-match)."""
        return None if self._last is _UNSET else self._last

    def update(self, result: Optional[str]) -> bool:
        if self._last is not _UNSET and self._last == result:
            return False
        self._last = result
        return True

    def reset(self) -> None:
        self._last = _UNSET
