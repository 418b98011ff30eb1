"""
Unit tests for the post-session exposure score.
"""

import pytest
import sys
import os

# Add backend to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from exposure_score_calculator import (
    MAX_RAW_EXPOSURE,
    RECOMMENDATIONS,
    calculate_exposure_score,
    calculate_raw_exposure,
    classify_score,
    get_exposure_recommendation,
    get_protection_factor,
    score_raw_exposure,
)
from fixtures.mock_data import SKIN_TYPES


class TestScoreCalculation:
    """Reference scores."""

    def test_excessive_session(self):
        # 5 * 30 * 1.0 * 1.0 = 150; 150 / 120 * 100 = 125
        result = calculate_exposure_score(30, uv_index=5, skin_type=3)
        assert result.raw_exposure == 150
        assert result.score == 125
        assert result.status == "Excessive"
        assert result.safe_limit == 120

    def test_optimal_session(self):
        # 50 / 120 * 100 = 41.7 -> 42
        result = calculate_exposure_score(10, uv_index=5, skin_type=3)
        assert result.score == 42
        assert result.status == "Optimal"

    def test_low_session(self):
        # 25 / 120 * 100 = 20.8 -> 21
        result = calculate_exposure_score(5, uv_index=5, skin_type=3)
        assert result.score == 21
        assert result.status == "Low"

    def test_sunscreen_halves_dose(self):
        # 150 * 0.5 = 75; 75 / 120 * 100 = 62.5 -> 63
        result = calculate_exposure_score(30, uv_index=5, skin_type=3, has_sunscreen=True)
        assert result.raw_exposure == 75
        assert result.score == 63
        assert result.status == "Optimal"

    def test_cloud_cover_reduces_dose(self):
        result = calculate_exposure_score(30, uv_index=5, skin_type=3, is_cloudy=True)
        assert result.raw_exposure == 105
        assert result.status == "High"

    def test_fair_skin_scores_higher(self):
        fair = calculate_exposure_score(10, uv_index=5, skin_type=1)
        medium = calculate_exposure_score(10, uv_index=5, skin_type=3)
        assert fair.safe_limit == 80
        assert fair.score > medium.score
        assert fair.status == "High"

    def test_result_carries_recommendation(self):
        result = calculate_exposure_score(30, uv_index=5, skin_type=3)
        assert result.recommendation == RECOMMENDATIONS["Excessive"].message
        assert result.short_recommendation == "Reduce exposure immediately"
        assert result.priority == "warning"
        assert result.color == "#F44336"

    def test_to_dict(self):
        data = calculate_exposure_score(10, uv_index=5, skin_type=3).to_dict()
        assert data["score"] == 42
        assert data["status"] == "Optimal"


class TestProtectionFactor:
    """Protection factor combinations."""

    @pytest.mark.parametrize("sunscreen,cloudy,expected", [
        (False, False, 1.0),
        (True, False, 0.5),
        (False, True, 0.7),
        (True, True, 0.35),
    ])
    def test_factor(self, sunscreen, cloudy, expected):
        assert get_protection_factor(sunscreen, cloudy) == expected


class TestBands:
    """Score banding and recommendations."""

    @pytest.mark.parametrize("score,expected", [
        (0, "Low"),
        (39, "Low"),
        (39.5, "Low"),
        (40, "Optimal"),
        (80, "Optimal"),
        (81, "High"),
        (120, "High"),
        (121, "Excessive"),
        (500, "Excessive"),
    ])
    def test_band_edges(self, score, expected):
        assert classify_score(score)[0] == expected

    def test_recommendation_priorities(self):
        assert get_exposure_recommendation(10).priority == "low"
        assert get_exposure_recommendation(60).priority == "optimal"
        assert get_exposure_recommendation(100).priority == "caution"
        assert get_exposure_recommendation(200).priority == "warning"

    def test_unreadable_score_is_low(self):
        assert classify_score(None)[0] == "Low"


class TestMonotonicity:
    """More dose never lowers the score."""

    @pytest.mark.parametrize("skin_type", SKIN_TYPES)
    def test_longer_sessions_score_higher(self, skin_type):
        scores = [calculate_exposure_score(d, 6, skin_type).score for d in range(0, 121, 5)]
        assert scores == sorted(scores)

    @pytest.mark.parametrize("skin_type", SKIN_TYPES)
    def test_higher_uv_scores_higher(self, skin_type):
        scores = [calculate_exposure_score(20, uv, skin_type).score for uv in range(0, 16)]
        assert scores == sorted(scores)

    def test_fairer_skin_scores_higher(self):
        scores = [calculate_exposure_score(20, 6, t).score for t in SKIN_TYPES]
        assert scores == sorted(scores, reverse=True)

    def test_protection_never_raises_score(self):
        for uv in range(0, 16):
            bare = calculate_exposure_score(30, uv, 3).score
            assert calculate_exposure_score(30, uv, 3, has_sunscreen=True).score <= bare
            assert calculate_exposure_score(30, uv, 3, is_cloudy=True).score <= bare


class TestEdgeCases:
    """Degenerate inputs."""

    @pytest.mark.parametrize("duration", [0, -10, None, "abc"])
    def test_no_duration_scores_zero(self, duration):
        result = calculate_exposure_score(duration, uv_index=8, skin_type=2)
        assert result.score == 0
        assert result.status == "Low"

    def test_negative_uv_counts_as_zero(self):
        assert calculate_raw_exposure(30, -4, 3) == 0

    def test_unknown_skin_type_uses_baseline(self):
        result = calculate_exposure_score(30, uv_index=5, skin_type=9)
        assert result.safe_limit == 120
        assert result.score == 125

    def test_overflowing_dose_is_excessive(self):
        # 1e200 * 1e200 overflows to inf before scoring
        result = calculate_exposure_score(1e200, uv_index=1e200, skin_type=3)
        assert result.status == "Excessive"
        assert result.raw_exposure == MAX_RAW_EXPOSURE
        assert isinstance(result.score, int)

    def test_infinite_and_nan_doses(self):
        assert score_raw_exposure(float("inf"), 3).status == "Excessive"
        assert score_raw_exposure(float("nan"), 3).score == 0
        assert score_raw_exposure(-50, 3).score == 0

    def test_huge_integer_skin_type_uses_baseline(self):
        assert calculate_exposure_score(30, uv_index=5, skin_type=10 ** 400).safe_limit == 120
