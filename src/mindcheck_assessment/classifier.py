"""Severity classifier — maps a completed answer record to a SeverityResult.

Scoring:
  1. Group branch answers by question category (the root and any qid the
     bank does not know are ignored).
  2. Take the mean option index per populated category.
  3. The worst (maximum) mean drives both outputs:
       score = round_half_up(max_mean * SCORE_MULTIPLIER)
       level = minor if max_mean <= MINOR_MAX_MEAN
               mild  if max_mean <= MILD_MAX_MEAN
               major otherwise

A well-formed session populates exactly one category, but several are
accepted so that combined answer sets can be classified as a whole.
"""

from __future__ import annotations

import logging
import math
from typing import Mapping

from mindcheck_assessment.constants import (
    MAX_SCORE,
    MILD_MAX_MEAN,
    MINOR_MAX_MEAN,
    SCORE_MULTIPLIER,
)
from mindcheck_assessment.errors import InsufficientData
from mindcheck_assessment.models.result import SeverityLevel, SeverityResult
from mindcheck_assessment.question_bank import QuestionBank

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def category_means(answers: Mapping[str, int], bank: QuestionBank) -> dict[str, float]:
    """Mean option index for every category with at least one answer."""
    grouped: dict[str, list[int]] = {}
    for qid, index in answers.items():
        if qid not in bank:
            logger.debug("Ignoring answer for unknown qid %s", qid)
            continue
        category = bank.category_of(qid)
        if category is None:
            # root answer selects the branch, it is not scored
            continue
        grouped.setdefault(category, []).append(index)
    return {cat: sum(values) / len(values) for cat, values in grouped.items()}


def level_for_mean(mean: float) -> SeverityLevel:
    """Severity level for a category mean."""
    if mean <= MINOR_MAX_MEAN:
        return "minor"
    if mean <= MILD_MAX_MEAN:
        return "mild"
    return "major"


def classify(answers: Mapping[str, int], bank: QuestionBank) -> SeverityResult:
    """Classify a completed answer record.

    Pure and deterministic; calling it twice on the same record yields the
    same result.

    Raises:
        InsufficientData: if no scorable (categorised) answer is present.
    """
    means = category_means(answers, bank)
    if not means:
        raise InsufficientData("No categorised answers to score")

    max_mean = max(means.values())
    score = min(round_half_up(max_mean * SCORE_MULTIPLIER), MAX_SCORE)
    return SeverityResult(level=level_for_mean(max_mean), score=score)
