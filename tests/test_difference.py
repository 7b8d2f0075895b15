"""Tests for the difference renderer.

Validates that:
    - Segments shared by two numbers cancel per digit position
    - A number paired with itself yields a blank image (no stem)
    - A single number yields its own segments, without the stem
    - Three or more sightings keep the pairwise-cancel behaviour (not parity)
    - Cache keys keep input order
"""

from __future__ import annotations

import numpy as np
import pytest

from cistercian.numerals.cache import MemoryArtifactCache
from cistercian.numerals.difference import (
    DifferenceRenderer,
    difference_key,
    difference_segments,
)
from cistercian.numerals.renderer import decompose
from cistercian.numerals.segments import Segment, segment_set
from cistercian.utils.validators import GeneratorConfigV1

TOP, BOTTOM, DIAG_ONE, DIAG_TWO, RIGHT = (
    Segment.TOP, Segment.BOTTOM, Segment.DIAG_ONE, Segment.DIAG_TWO, Segment.RIGHT,
)


@pytest.fixture()
def config(tmp_path) -> GeneratorConfigV1:
    return GeneratorConfigV1(segment_length=50, line_thickness=5, output_directory=tmp_path)


@pytest.fixture()
def renderer(config) -> DifferenceRenderer:
    return DifferenceRenderer(config, cache=MemoryArtifactCache())


def alpha(img) -> np.ndarray:
    return np.asarray(img.convert("RGBA"))[..., 3]


# ---------------------------------------------------------------------------
# Segment fold
# ---------------------------------------------------------------------------


class TestDifferenceSegments:
    def test_reference_pair(self) -> None:
        # 5038 → (8, 3, 0, 5), 4245 → (5, 4, 2, 4)
        units, tens, hundreds, thousands = difference_segments([5038, 4245])
        assert units == [BOTTOM, RIGHT, TOP, DIAG_TWO]
        assert tens == [DIAG_ONE, DIAG_TWO]
        assert hundreds == [BOTTOM]
        assert thousands == [TOP]

    @pytest.mark.parametrize("a", [0, 1, 5038, 9999])
    def test_number_with_itself_cancels(self, a: int) -> None:
        assert difference_segments([a, a]) == ([], [], [], [])

    @pytest.mark.parametrize("a", [1, 5038, 7457, 9999])
    def test_single_number_is_its_segment_sets(self, a: int) -> None:
        surviving = difference_segments([a])
        expected = tuple(list(segment_set(d)) for d in decompose(a))
        assert surviving == expected

    def test_result_ignores_order(self) -> None:
        forward = difference_segments([5038, 4245])
        backward = difference_segments([4245, 5038])
        assert [set(s) for s in forward] == [set(s) for s in backward]

    def test_third_sighting_stays_cancelled(self) -> None:
        # True parity would keep TOP; the pairwise fold drops it for good.
        assert difference_segments([1, 1, 1]) == ([], [], [], [])

    def test_three_way_mixed_digits(self) -> None:
        # 1 {TOP}, 7 {TOP, RIGHT}, 9 {BOTTOM, RIGHT, TOP}
        units, _, _, _ = difference_segments([1, 7, 9])
        assert units == [BOTTOM]

    def test_demo_triple(self) -> None:
        # 112 → (2, 1, 1, 0), 6754 → (4, 5, 7, 6), 6050 → (0, 5, 0, 6)
        units, tens, hundreds, thousands = difference_segments([112, 6754, 6050])
        assert units == [BOTTOM, DIAG_TWO]
        assert tens == []
        assert hundreds == [RIGHT]
        assert thousands == []

    def test_positions_are_independent(self) -> None:
        # Same digit in different positions never cancels.
        units, tens, _, _ = difference_segments([1, 10])
        assert units == [TOP]
        assert tens == [TOP]


class TestDifferenceKey:
    def test_keeps_input_order(self) -> None:
        assert difference_key([5038, 4245]) == "difference-5038-4245"
        assert difference_key([4245, 5038]) == "difference-4245-5038"

    def test_single(self) -> None:
        assert difference_key([7]) == "difference-7"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRenderDifference:
    def test_self_pair_is_blank(self, renderer: DifferenceRenderer) -> None:
        img = renderer.open_difference([5038, 5038])
        assert img.size == (100, 200)
        assert alpha(img).max() == 0

    def test_single_number_matches_numeral_without_stem(self, renderer: DifferenceRenderer) -> None:
        numeral = alpha(renderer.open(5038))
        difference = alpha(renderer.open_difference([5038]))

        # No stem in the middle of the canvas
        assert numeral[100, 50] == 255
        assert difference[100, 50] == 0
        # Every difference stroke pixel is also set in the numeral
        assert not (difference.astype(bool) & ~numeral.astype(bool)).any()
        # Away from the stem both images agree
        assert (numeral[:, :45] == difference[:, :45]).all()
        assert (numeral[:, 56:] == difference[:, 56:]).all()

    def test_reference_pair_pixels(self, renderer: DifferenceRenderer) -> None:
        a = alpha(renderer.open_difference([5038, 4245]))
        assert a[2, 75] == 255     # units TOP survives
        assert a[52, 75] == 255    # units BOTTOM survives
        assert a[25, 25] == 255    # tens DIAG_ONE survives
        assert a[148, 75] == 255   # hundreds BOTTOM (mirrored up to y=150-2)
        assert a[198, 25] == 255   # thousands TOP survives
        assert a[174, 24] == 0     # thousands DIAG_TWO cancelled

    def test_cache_key_is_order_sensitive(self, renderer: DifferenceRenderer) -> None:
        renderer.render_difference([5038, 4245])
        renderer.render_difference([4245, 5038])
        artifacts = renderer.cache.artifacts
        assert set(artifacts) == {"difference-5038-4245", "difference-4245-5038"}
        assert artifacts["difference-5038-4245"] == artifacts["difference-4245-5038"]

    def test_cache_hit(self, renderer: DifferenceRenderer) -> None:
        first = renderer.render_difference([1, 2])
        second = renderer.render_difference([1, 2])
        assert first == second
        assert renderer.cache.renders == 1

    def test_file_path_scheme(self, config: GeneratorConfigV1) -> None:
        path = DifferenceRenderer(config).render_difference([8030, 59])
        assert path == config.numerals_directory / "difference-8030-59.png"
        assert path.exists()

    def test_accepts_any_sequence(self, renderer: DifferenceRenderer) -> None:
        assert renderer.render_difference((3, 4)) == renderer.render_difference([3, 4])

    def test_empty_rejected(self, renderer: DifferenceRenderer) -> None:
        with pytest.raises(ValueError, match="at least one number"):
            renderer.render_difference([])
