"""Severity classifier: category means, thresholds and half-up rounding."""

import importlib

import pytest

from mindcheck_assessment import constants
from mindcheck_assessment.classifier import (
    category_means,
    classify,
    level_for_mean,
    round_half_up,
)
from mindcheck_assessment.errors import InsufficientData


def _branch(category, values):
    answers = {"initial-1": 0}
    for i, v in enumerate(values, start=1):
        answers[f"{category}-{i}"] = v
    return answers


class TestClassify:

    @pytest.mark.parametrize(
        "values,level,score",
        [
            ([0, 0, 0], "minor", 0),
            ([0, 1, 1], "minor", 3),
            ([1, 1, 1], "minor", 5),
            ([1, 1, 2], "mild", 7),
            ([2, 2, 2], "mild", 10),
            ([2, 2, 3], "major", 12),
            ([3, 3, 3], "major", 15),
        ],
    )
    def test_single_branch(self, bank, values, level, score):
        result = classify(_branch("sleep", values), bank)
        assert result.level == level
        assert result.score == score

    def test_worst_category_wins(self, bank):
        answers = {**_branch("mood", [0, 0, 0]), **_branch("anxiety", [3, 3, 3])}
        result = classify(answers, bank)
        assert result.level == "major"
        assert result.score == 15

    def test_half_scores_round_up(self, bank):
        # mean 0.5 -> 2.5 -> 3 (banker's rounding would give 2)
        result = classify({"mood-1": 0, "mood-2": 1}, bank)
        assert result.score == 3
        assert result.level == "minor"

    def test_root_and_unknown_qids_ignored(self, bank):
        answers = {**_branch("work", [2, 2, 2]), "retired-1": 3}
        assert classify(answers, bank) == classify(_branch("work", [2, 2, 2]), bank)

    def test_empty_answers(self, bank):
        with pytest.raises(InsufficientData):
            classify({}, bank)

    def test_root_only(self, bank):
        with pytest.raises(InsufficientData):
            classify({"initial-1": 2}, bank)

    def test_deterministic(self, bank):
        answers = _branch("social", [1, 2, 3])
        assert classify(answers, bank) == classify(answers, bank)


class TestHelpers:

    def test_category_means(self, bank):
        answers = {**_branch("mood", [0, 1, 2]), "anxiety-1": 3}
        assert category_means(answers, bank) == {"mood": 1.0, "anxiety": 3.0}

    @pytest.mark.parametrize(
        "mean,level",
        [(0.0, "minor"), (1.0, "minor"), (1.01, "mild"), (2.0, "mild"), (2.01, "major")],
    )
    def test_level_boundaries(self, mean, level):
        assert level_for_mean(mean) == level

    @pytest.mark.parametrize(
        "value,expected",
        [(0.49, 0), (0.5, 1), (2.5, 3), (3.5, 4), (6.666, 7), (15.0, 15)],
    )
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_thresholds_ignore_environment(self, monkeypatch):
        monkeypatch.setenv("MINOR_MAX_MEAN", "2.5")
        monkeypatch.setenv("MILD_MAX_MEAN", "0.5")
        reloaded = importlib.reload(constants)
        assert reloaded.MINOR_MAX_MEAN == 1.0
        assert reloaded.MILD_MAX_MEAN == 2.0
