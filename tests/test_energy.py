"""Tests for energy profiling and content-adaptive grid detection."""

from collections.abc import Callable

import numpy as np
import pytest

from storyboard_grid.splitting import PixelBuffer
from storyboard_grid.splitting.energy import (
    detect_grid,
    energy_profile,
    find_segments,
    separator_mask,
)

pytestmark = pytest.mark.visual


def _blocks(length: int, *spans: tuple[int, int]) -> np.ndarray:
    profile = np.zeros(length, dtype=np.float64)
    for start, end in spans:
        profile[start:end] = 100.0
    return profile


class TestEnergyProfile:
    def test_flat_image_has_no_energy(self) -> None:
        flat = PixelBuffer.blank(50, 40, (90, 90, 90))
        assert not energy_profile(flat, "y").any()
        assert energy_profile(flat, "x").shape == (50,)

    def test_profile_lengths_follow_axis(
        self,
        noise_buffer: Callable[[int, int], PixelBuffer],
    ) -> None:
        pixels = noise_buffer(120, 80)
        assert energy_profile(pixels, "y").shape == (80,)
        assert energy_profile(pixels, "x").shape == (120,)

    def test_green_separator_lines_score_zero(
        self,
        noise_buffer: Callable[[int, int], PixelBuffer],
    ) -> None:
        pixels = noise_buffer(200, 100)
        data = pixels.data.copy()
        data[50, :120, :3] = (0, 255, 0)
        data[:, 30, :3] = (0, 255, 0)
        striped = PixelBuffer(data)

        rows = energy_profile(striped, "y")
        cols = energy_profile(striped, "x")
        assert rows[50] == 0.0
        assert cols[30] == 0.0
        assert rows[10] > 0.0
        assert cols[100] > 0.0

    @pytest.mark.parametrize(
        ("green_samples", "zeroed"),
        [(3, False), (4, True)],
    )
    def test_separator_ratio_must_be_exceeded(
        self,
        green_samples: int,
        zeroed: bool,  # noqa: FBT001
    ) -> None:
        """Width 21 at stride 2 gives ten samples per row: 3 is exactly 30%."""
        data = PixelBuffer.blank(21, 4).data.copy()
        data[1, :, 0] = np.arange(21) * 10
        sample_cols = list(range(2, 21, 2))[:green_samples]
        data[1, sample_cols, :3] = (0, 255, 0)

        rows = energy_profile(PixelBuffer(data), "y")
        assert (rows[1] == 0.0) is zeroed

    def test_separator_mask(self) -> None:
        rgb = np.array([[[0, 255, 0], [250, 250, 250], [90, 210, 90]]])
        assert separator_mask(rgb).tolist() == [[True, False, True]]

    def test_narrow_line_has_no_samples(self) -> None:
        pixels = PixelBuffer.blank(2, 10, (255, 255, 255))
        assert energy_profile(pixels, "y").tolist() == [0.0] * 10


class TestFindSegments:
    def test_separated_blocks(self) -> None:
        profile = _blocks(300, (10, 90), (110, 190), (210, 290))
        segments = find_segments(profile)
        assert [s.start for s in segments] == [10, 110, 210]
        assert [s.size for s in segments] == [80, 80, 80]

    def test_surplus_pruned_to_largest_in_order(self) -> None:
        profile = _blocks(300, (10, 90), (110, 150), (210, 290))
        segments = find_segments(profile, expected=2)
        assert [s.start for s in segments] == [10, 210]

    def test_shortfall_falls_back_to_uniform_split(self) -> None:
        profile = _blocks(300, (10, 90), (110, 190), (210, 290))
        segments = find_segments(profile, expected=4)
        assert [(s.start, s.end) for s in segments] == [
            (0, 75), (75, 150), (150, 225), (225, 300),
        ]
        assert all(s.size == s.end - s.start for s in segments)

    def test_single_sample_dip_is_absorbed(self) -> None:
        profile = _blocks(300, (10, 90))
        profile[50] = 0.0
        segments = find_segments(profile)
        assert [(s.start, s.end) for s in segments] == [(10, 90)]

    def test_tiny_segments_are_noise(self) -> None:
        profile = _blocks(300, (10, 90), (200, 205))
        segments = find_segments(profile)
        assert [(s.start, s.end) for s in segments] == [(10, 90)]

    def test_empty_profile(self) -> None:
        assert find_segments(np.zeros(0)) == []
        assert find_segments(np.zeros(100)) == []


class TestDetectGrid:
    @pytest.fixture
    def guttered(
        self,
        noise_buffer: Callable[[int, int], PixelBuffer],
    ) -> PixelBuffer:
        """600x300 noise with black gutters making a 3x2 grid."""
        data = noise_buffer(600, 300).data.copy()
        data[:, 194:206, :3] = 0
        data[:, 394:406, :3] = 0
        data[144:156, :, :3] = 0
        return PixelBuffer(data)

    def test_finds_spans_between_gutters(self, guttered: PixelBuffer) -> None:
        detected = detect_grid(guttered, expected_cols=3, expected_rows=2)
        assert detected is not None
        assert [span.start for span in detected.rows] == [0, 156]
        assert [span.start for span in detected.cols] == [0, 206, 406]
        assert detected.cols[0].size == 194
        assert detected.rows[1].size == 144

    def test_blank_image_detects_nothing(self) -> None:
        assert detect_grid(PixelBuffer.blank(300, 200)) is None

    def test_wide_images_map_back_to_source_coordinates(
        self,
        guttered: PixelBuffer,
    ) -> None:
        wide = guttered.resize((1200, 600))
        detected = detect_grid(wide, expected_cols=3, expected_rows=2)
        assert detected is not None
        assert len(detected.cols) == 3
        assert len(detected.rows) == 2
        assert detected.cols[1].start == pytest.approx(412, abs=12)
        assert detected.rows[1].start == pytest.approx(312, abs=12)
