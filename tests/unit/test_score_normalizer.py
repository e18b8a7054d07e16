"""Unit tests for score_normalizer.py."""

import math

import pytest

from services.score_normalizer import normalize_score


class TestNormalizeScore:
    @pytest.mark.parametrize("raw, expected", [
        (8.5, 85),
        (10, 100),
        (1, 10),
        (4.5, 45),
        (0.3, 3),
    ])
    def test_ten_point_scale_is_rescaled(self, raw, expected):
        assert normalize_score(raw) == expected

    @pytest.mark.parametrize("raw, expected", [
        (95, 95),
        (10.4, 10),
        (72.5, 73),
        (150, 100),
    ])
    def test_hundred_point_scale_is_kept_and_clamped(self, raw, expected):
        assert normalize_score(raw) == expected

    def test_zero_and_negative_values_clamp_to_zero(self):
        assert normalize_score(0) == 0
        assert normalize_score(-5) == 0
        assert normalize_score(-0.5) == 0

    @pytest.mark.parametrize("raw", [None, "85", True, False, [90], {"score": 90}, math.nan, math.inf, -math.inf])
    def test_non_numeric_or_non_finite_is_unknown(self, raw):
        assert normalize_score(raw) is None

    def test_result_is_always_an_int(self):
        for raw in (0.25, 3.333, 55.5, 99.99, 250.0):
            result = normalize_score(raw)
            assert isinstance(result, int)
            assert 0 <= result <= 100

    def test_huge_integers_clamp_without_float_overflow(self):
        huge = int("1" + "0" * 400)
        assert normalize_score(huge) == 100
        assert normalize_score(-huge) == 0
