"""Tests for quadrant geometry.

Validates the four corner constructors, the thickness-derived offset sign
conventions and the digit-position → quadrant order.
"""

from __future__ import annotations

import dataclasses

import pytest

from cistercian.numerals.quadrant import Quadrant, quadrants_for


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


class TestConstructors:
    def test_top_right_reference_values(self) -> None:
        q = Quadrant.top_right(50, 5 // 2)
        assert q == Quadrant(x1=50, y1=0, x2=100, y2=50, x_offset=2, y_offset=2)

    def test_top_left(self) -> None:
        q = Quadrant.top_left(50, 2)
        assert (q.x1, q.y1, q.x2, q.y2) == (50, 0, 0, 50)
        assert (q.x_offset, q.y_offset) == (-2, 2)

    def test_bottom_right(self) -> None:
        q = Quadrant.bottom_right(50, 2)
        assert (q.x1, q.y1, q.x2, q.y2) == (50, 200, 100, 150)
        assert (q.x_offset, q.y_offset) == (2, -2)

    def test_bottom_left(self) -> None:
        q = Quadrant.bottom_left(50, 2)
        assert (q.x1, q.y1, q.x2, q.y2) == (50, 200, 0, 150)
        assert (q.x_offset, q.y_offset) == (-2, -2)

    @pytest.mark.parametrize("length", [1, 7, 50, 128])
    def test_all_quadrants_start_on_stem(self, length: int) -> None:
        for q in quadrants_for(length, 0):
            assert q.x1 == length

    def test_zero_offset(self) -> None:
        q = Quadrant.bottom_left(10, 0)
        assert q.x_offset == 0
        assert q.y_offset == 0


class TestImmutability:
    def test_frozen(self) -> None:
        q = Quadrant.top_right(50, 2)
        with pytest.raises(dataclasses.FrozenInstanceError):
            q.x1 = 0  # type: ignore[misc]


# ---------------------------------------------------------------------------
# Position order
# ---------------------------------------------------------------------------


class TestQuadrantsFor:
    def test_digit_position_order(self) -> None:
        units, tens, hundreds, thousands = quadrants_for(50, 2)
        assert units == Quadrant.top_right(50, 2)
        assert tens == Quadrant.top_left(50, 2)
        assert hundreds == Quadrant.bottom_right(50, 2)
        assert thousands == Quadrant.bottom_left(50, 2)

    def test_quadrants_stay_on_canvas(self) -> None:
        length = 50
        for q in quadrants_for(length, 2):
            for x in (q.x1, q.x2):
                assert 0 <= x <= 2 * length
            for y in (q.y1, q.y2):
                assert 0 <= y <= 4 * length
