# -*- coding: utf-8 -*-
"""
Spatial Filter Tests - Box blur, majority, max/min, median, 1D, Gaussian, unsharp.

Tests correctness against brute-force window references and
scipy.ndimage, border clipping, mirror boundaries, buffer validation,
and per-channel dispatch.

Dependencies
------------
pytest
scipy

License
-------
MIT License
Copyright (c) 2024 geoint.org
See LICENSE file for full text.

Created
-------
2026-10-18

Modified
--------
2026-10-18
"""

import numpy as np
import pytest
from scipy.ndimage import correlate1d, maximum_filter, minimum_filter

from grainseg.exceptions import ShapeMismatchError, ValidationError, WindowSizeError
from grainseg.image import PixelBuffer
from grainseg.image_processing._validation import validate_window
from grainseg.image_processing.filters._window import WindowFilter
from grainseg.image_processing.filters import (
    BinaryMedianFilter,
    BoxBlur,
    Filter1D,
    GaussianFilter,
    MaxFilter,
    MedianFilter,
    MinFilter,
    UnsharpMask,
    convolve_1d,
    gaussian_kernel,
    integral_image,
    mirror_indices,
)


def _brute_window(plane, height, width, func):
    """Apply ``func`` to every clipped window, the slow way."""
    rows, cols = plane.shape
    hy, hx = height // 2, width // 2
    out = np.empty_like(plane, dtype=np.float64)
    for r in range(rows):
        for c in range(cols):
            window = plane[max(0, r - hy):r + hy + 1, max(0, c - hx):c + hx + 1]
            out[r, c] = func(window)
    return out


def quantize_level(value):
    return np.floor(value * 255.0 + 0.5) / 255.0


def _lower_median(window):
    values = np.sort(window.ravel())
    return values[(values.size - 1) // 2]


WINDOW_SIZES = [(1, 1), (3, 3), (5, 5), (3, 5), (5, 1)]


# ---------------------------------------------------------------------------
# Validation helper tests
# ---------------------------------------------------------------------------

class TestValidation:
    """Test shared window validation."""

    def test_valid_windows(self):
        for size in (1, 3, 5, 101):
            validate_window(size)

    def test_even_window_raises(self):
        with pytest.raises(WindowSizeError, match="odd"):
            validate_window(4)

    def test_window_too_small_raises(self):
        with pytest.raises(WindowSizeError, match=">= 1"):
            validate_window(-1)

    def test_window_not_int_raises(self):
        with pytest.raises(WindowSizeError, match="integer"):
            validate_window(3.0)

    def test_window_size_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            validate_window(2)


WINDOW_FILTERS = [BoxBlur, BinaryMedianFilter, MaxFilter, MinFilter,
                  MedianFilter]


class TestWindowFilters:
    """Every odd-window filter shares one base and its checks."""

    @pytest.mark.parametrize("cls", WINDOW_FILTERS)
    def test_shared_base(self, cls):
        assert issubclass(cls, WindowFilter)
        assert [s.name for s in cls.__param_specs__] == ['width', 'height']

    @pytest.mark.parametrize("cls", WINDOW_FILTERS)
    def test_even_size_rejected_at_construction(self, cls):
        with pytest.raises(WindowSizeError, match="height"):
            cls(width=3, height=4)

    @pytest.mark.parametrize("cls", WINDOW_FILTERS)
    def test_even_size_rejected_per_call(self, cls, random_plane):
        with pytest.raises(WindowSizeError, match="width"):
            cls().apply(random_plane, width=2)


# ---------------------------------------------------------------------------
# Integral image / BoxBlur
# ---------------------------------------------------------------------------

class TestIntegralImage:
    """Test summed-area table."""

    def test_matches_cumsum(self, random_plane):
        expected = random_plane.cumsum(axis=0).cumsum(axis=1)
        np.testing.assert_allclose(integral_image(random_plane), expected)

    def test_writes_into_out(self, random_plane):
        out = np.empty_like(random_plane)
        result = integral_image(random_plane, out)
        assert result is out
        assert out[-1, -1] == pytest.approx(random_plane.sum())


class TestBoxBlur:
    """Test BoxBlur correctness and buffer handling."""

    def test_identity_window(self, random_plane):
        """A 1x1 window copies the input exactly."""
        result = BoxBlur(width=1, height=1).apply(random_plane)
        np.testing.assert_array_equal(result.channel(0), random_plane)

    @pytest.mark.parametrize("height,width", WINDOW_SIZES)
    def test_matches_brute_force(self, random_plane, height, width):
        result = BoxBlur(width=width, height=height).apply(random_plane)
        expected = _brute_window(random_plane, height, width, np.mean)
        np.testing.assert_allclose(result.channel(0), expected, atol=1e-5)

    def test_constant_image_unchanged(self, flat_image):
        result = BoxBlur(width=5, height=5).apply(flat_image)
        np.testing.assert_allclose(result.channel(0), flat_image, atol=1e-12)

    def test_corner_uses_clipped_area(self):
        """Top-left pixel of a 3x3 blur averages the 2x2 corner only."""
        plane = np.zeros((4, 4))
        plane[0, 0] = 4.0
        result = BoxBlur(width=3, height=3).apply(plane)
        assert result.channel(0)[0, 0] == pytest.approx(1.0)

    def test_scratch_receives_integral(self, random_plane):
        scratch = PixelBuffer.create(13, 9)
        BoxBlur(width=3, height=3).apply(random_plane, buffer=scratch)
        np.testing.assert_allclose(scratch.channel(0),
                                   integral_image(random_plane))

    def test_writes_into_out(self, random_plane):
        out = PixelBuffer.create(13, 9)
        result = BoxBlur().apply(random_plane, out=out)
        assert result is out

    def test_out_alias_rejected(self, random_plane):
        buf = PixelBuffer(random_plane.copy())
        with pytest.raises(ValidationError, match="share memory"):
            BoxBlur().apply(buf, out=buf)

    def test_out_shape_mismatch(self, random_plane):
        with pytest.raises(ShapeMismatchError):
            BoxBlur().apply(random_plane, out=PixelBuffer.create(9, 13))

    def test_buffer_channel_mismatch(self, random_plane):
        with pytest.raises(ShapeMismatchError):
            BoxBlur().apply(random_plane,
                            buffer=PixelBuffer.create(13, 9, channels=2))

    def test_even_window_rejected(self):
        with pytest.raises(WindowSizeError):
            BoxBlur(width=4)

    def test_channels_independent(self, rng):
        data = rng.random((3, 8, 8))
        result = BoxBlur(width=3, height=3).apply(data)
        for c in range(3):
            single = BoxBlur(width=3, height=3).apply(data[c])
            np.testing.assert_allclose(result.channel(c), single.channel(0))


class TestBinaryMedianFilter:
    """Test the integral-image majority filter."""

    def test_identity_window(self, two_squares):
        result = BinaryMedianFilter(width=1, height=1).apply(two_squares)
        np.testing.assert_array_equal(result.channel(0), two_squares)

    def test_matches_nominal_area_rule(self, rng):
        plane = (rng.random((10, 10)) > 0.5).astype(np.float64)
        result = BinaryMedianFilter(width=3, height=3).apply(plane)
        expected = _brute_window(plane, 3, 3, lambda w: w.sum() > 4.5)
        np.testing.assert_array_equal(result.channel(0), expected)

    def test_removes_isolated_pixel(self):
        plane = np.zeros((7, 7))
        plane[3, 3] = 1.0
        result = BinaryMedianFilter(width=3, height=3).apply(plane)
        assert result.channel(0).sum() == 0.0

    def test_border_leans_to_background(self):
        """A full corner window holds 4 of the nominal 9 pixels."""
        plane = np.ones((5, 5))
        result = BinaryMedianFilter(width=3, height=3).apply(plane)
        assert result.channel(0)[0, 0] == 0.0
        assert result.channel(0)[0, 2] == 1.0


# ---------------------------------------------------------------------------
# Rank filters
# ---------------------------------------------------------------------------

class TestMaxMinFilter:
    """Test sliding-window max/min against references."""

    @pytest.mark.parametrize("height,width", WINDOW_SIZES)
    def test_max_matches_brute_force(self, random_plane, height, width):
        result = MaxFilter(width=width, height=height).apply(random_plane)
        expected = _brute_window(random_plane, height, width, np.max)
        np.testing.assert_allclose(result.channel(0), expected, atol=1e-5)

    @pytest.mark.parametrize("height,width", WINDOW_SIZES)
    def test_min_matches_brute_force(self, random_plane, height, width):
        result = MinFilter(width=width, height=height).apply(random_plane)
        expected = _brute_window(random_plane, height, width, np.min)
        np.testing.assert_allclose(result.channel(0), expected, atol=1e-5)

    def test_max_matches_scipy_nearest(self, rng):
        """Clipped windows equal scipy's 'nearest' border mode."""
        plane = rng.random((16, 11))
        result = MaxFilter(width=5, height=3).apply(plane)
        expected = maximum_filter(plane, size=(3, 5), mode='nearest')
        np.testing.assert_array_equal(result.channel(0), expected)

    def test_min_matches_scipy_nearest(self, rng):
        plane = rng.random((16, 11))
        result = MinFilter(width=3, height=7).apply(plane)
        expected = minimum_filter(plane, size=(7, 3), mode='nearest')
        np.testing.assert_array_equal(result.channel(0), expected)

    def test_monotone_ramp(self):
        """Decreasing rows evict the holder at every step."""
        plane = np.tile(np.arange(10, 0, -1, dtype=np.float64), (3, 1))
        result = MaxFilter(width=3, height=1).apply(plane)
        expected = _brute_window(plane, 1, 3, np.max)
        np.testing.assert_array_equal(result.channel(0), expected)

    def test_ties(self):
        plane = np.array([[0.5, 0.5, 0.2, 0.5, 0.5, 0.1]])
        result = MinFilter(width=3, height=1).apply(plane)
        np.testing.assert_array_equal(
            result.channel(0), [[0.5, 0.2, 0.2, 0.2, 0.1, 0.1]],
        )

    def test_scratch_holds_horizontal_pass(self, random_plane):
        scratch = PixelBuffer.create(13, 9)
        MaxFilter(width=3, height=3).apply(random_plane, buffer=scratch)
        expected = _brute_window(random_plane, 1, 3, np.max)
        np.testing.assert_allclose(scratch.channel(0), expected)

    def test_max_ge_min(self, random_plane):
        hi = MaxFilter(width=5, height=5).apply(random_plane).channel(0)
        lo = MinFilter(width=5, height=5).apply(random_plane).channel(0)
        assert np.all(hi >= random_plane)
        assert np.all(lo <= random_plane)


class TestMedianFilter:
    """Test sliding-histogram median."""

    def test_identity_window(self, random_plane):
        result = MedianFilter(width=1, height=1).apply(random_plane)
        np.testing.assert_array_equal(result.channel(0), random_plane)

    @pytest.mark.parametrize("height,width", WINDOW_SIZES[1:])
    def test_matches_brute_force(self, quantized_plane, height, width):
        result = MedianFilter(width=width, height=height).apply(quantized_plane)
        expected = _brute_window(quantized_plane, height, width, _lower_median)
        np.testing.assert_allclose(result.channel(0), expected, atol=1e-9)

    def test_removes_salt_noise(self):
        plane = np.full((9, 9), 0.2)
        plane[4, 4] = 1.0
        result = MedianFilter(width=3, height=3).apply(plane)
        np.testing.assert_allclose(result.channel(0), quantize_level(0.2))

    def test_repeated_columns(self):
        """Identical departing and incoming columns keep the median."""
        row = np.tile([0.0, 1.0, 0.4], 4)
        plane = np.tile(row, (3, 1))
        result = MedianFilter(width=3, height=3).apply(plane)
        expected = _brute_window(plane, 3, 3, _lower_median)
        np.testing.assert_array_equal(result.channel(0), expected)

    def test_output_on_8bit_grid(self, random_plane):
        result = MedianFilter(width=3, height=3).apply(random_plane)
        levels = result.channel(0) * 255.0
        np.testing.assert_allclose(levels, np.round(levels), atol=1e-9)


# ---------------------------------------------------------------------------
# Linear filters
# ---------------------------------------------------------------------------

class TestMirrorIndices:
    """Test mirror boundary index arithmetic."""

    def test_low_edge_reflects_to_minus_p(self):
        idx = mirror_indices(5, 3)
        np.testing.assert_array_equal(idx[0], [3, 2, 1, 0, 1, 2, 3])

    def test_high_edge_reflects_to_2l_minus_p_minus_2(self):
        idx = mirror_indices(5, 3)
        np.testing.assert_array_equal(idx[4], [1, 2, 3, 4, 3, 2, 1])

    def test_interior_unchanged(self):
        idx = mirror_indices(10, 2)
        np.testing.assert_array_equal(idx[5], [3, 4, 5, 6, 7])


class TestConvolve1D:
    """Test 1D correlation with mirror boundaries."""

    def test_matches_scipy_mirror_rows(self, random_plane):
        coef = [0.1, -0.3, 0.5, 0.2, 0.4]
        result = convolve_1d(random_plane, coef)
        expected = correlate1d(random_plane, coef, axis=1, mode='mirror')
        np.testing.assert_allclose(result, expected, atol=1e-12)

    def test_matches_scipy_mirror_columns(self, random_plane):
        coef = [0.25, 0.5, 0.25]
        result = convolve_1d(random_plane, coef, vertical=True)
        expected = correlate1d(random_plane, coef, axis=0, mode='mirror')
        np.testing.assert_allclose(result, expected, atol=1e-12)

    def test_orientation(self):
        """coefficients[0] weights the sample to the left."""
        plane = np.array([[0.0, 1.0, 2.0, 3.0]])
        result = convolve_1d(plane, [1.0, 0.0, 0.0])
        np.testing.assert_array_equal(result, [[1.0, 0.0, 1.0, 2.0]])

    def test_longest_allowed_kernel(self):
        plane = np.arange(3, dtype=np.float64)[np.newaxis]
        result = convolve_1d(plane, np.ones(5))
        # Row 0 reads [2, 1, 0, 1, 2], row 2 reads [0, 1, 2, 1, 0].
        np.testing.assert_array_equal(result, [[6.0, 5.0, 4.0]])

    def test_too_long_rejected(self):
        with pytest.raises(WindowSizeError, match="too long"):
            convolve_1d(np.zeros((4, 3)), np.ones(7))

    def test_vertical_length_checked_against_rows(self):
        with pytest.raises(WindowSizeError):
            convolve_1d(np.zeros((2, 50)), np.ones(5), vertical=True)

    def test_even_length_rejected(self):
        with pytest.raises(WindowSizeError, match="odd"):
            convolve_1d(np.zeros((5, 5)), [0.5, 0.5])

    def test_filter1d_processor(self, random_plane):
        f = Filter1D([0.25, 0.5, 0.25], vertical=True)
        result = f.apply(random_plane)
        expected = convolve_1d(random_plane, [0.25, 0.5, 0.25], vertical=True)
        np.testing.assert_allclose(result.channel(0), expected)

    def test_filter1d_even_rejected(self):
        with pytest.raises(WindowSizeError):
            Filter1D([1.0, 1.0])


class TestGaussianKernel:
    """Test Gaussian coefficient generation."""

    def test_binomial_3(self):
        np.testing.assert_array_equal(gaussian_kernel(-3), [0.25, 0.5, 0.25])

    def test_binomial_5(self):
        np.testing.assert_array_equal(
            gaussian_kernel(-5), [0.0625, 0.25, 0.375, 0.25, 0.0625],
        )

    def test_binomial_7(self):
        k = gaussian_kernel(-7)
        assert k.size == 7
        assert k[3] == 0.28125
        assert k.sum() == pytest.approx(1.0)

    @pytest.mark.parametrize("sigma,taps", [(0.5, 3), (1.0, 5), (1.2, 5),
                                            (2.0, 9), (3.0, 13)])
    def test_tap_count(self, sigma, taps):
        assert gaussian_kernel(sigma).size == taps

    def test_normalized_and_symmetric(self):
        k = gaussian_kernel(2.5)
        assert k.sum() == pytest.approx(1.0)
        np.testing.assert_allclose(k, k[::-1])
        assert np.argmax(k) == k.size // 2

    @pytest.mark.parametrize("sigma", [0.0, -1.0, -4.0])
    def test_invalid_sigma(self, sigma):
        with pytest.raises(ValidationError, match="sigma"):
            gaussian_kernel(sigma)


class TestGaussianFilter:
    """Test separable Gaussian smoothing."""

    def test_constant_image_unchanged(self, flat_image):
        result = GaussianFilter(sigma_x=1.5).apply(flat_image)
        np.testing.assert_allclose(result.channel(0), flat_image, atol=1e-12)

    def test_equals_two_1d_passes(self, random_plane):
        result = GaussianFilter(sigma_x=1.0, sigma_y=-3).apply(random_plane)
        horizontal = convolve_1d(random_plane, gaussian_kernel(1.0))
        expected = convolve_1d(horizontal, gaussian_kernel(-3), vertical=True)
        np.testing.assert_allclose(result.channel(0), expected, atol=1e-12)

    def test_sigma_y_defaults_to_sigma_x(self):
        f = GaussianFilter(sigma_x=2.0)
        assert f.sigma_y == 2.0

    def test_preserves_mass_in_interior(self):
        plane = np.zeros((21, 21))
        plane[10, 10] = 1.0
        result = GaussianFilter(sigma_x=1.0).apply(plane)
        assert result.channel(0).sum() == pytest.approx(1.0)

    def test_invalid_sigma_rejected(self):
        with pytest.raises(ValidationError):
            GaussianFilter(sigma_x=-2.0)


class TestUnsharpMask:
    """Test unsharp masking."""

    def test_flat_image_unchanged(self, flat_image):
        result = UnsharpMask(sigma=1.0, amount=2.0).apply(flat_image)
        np.testing.assert_allclose(result.channel(0), flat_image, atol=1e-12)

    def test_one_sided_by_default(self):
        plane = np.zeros((9, 9))
        plane[:, 5:] = 1.0
        result = UnsharpMask(sigma=1.0, amount=1.0).apply(plane).channel(0)
        # Dark side of the edge has negative diff and is left alone.
        np.testing.assert_array_equal(result[:, :5], plane[:, :5])
        assert result[4, 5] > 1.0

    def test_absolute_sharpens_both_sides(self):
        plane = np.zeros((9, 9))
        plane[:, 5:] = 1.0
        result = UnsharpMask(sigma=1.0, amount=1.0,
                             absolute=True).apply(plane).channel(0)
        assert result[4, 4] < 0.0
        assert result[4, 5] > 1.0

    def test_threshold_suppresses_small_differences(self, rng):
        plane = 0.5 + rng.uniform(-0.01, 0.01, size=(12, 12))
        result = UnsharpMask(sigma=1.0, threshold=0.1).apply(plane)
        np.testing.assert_array_equal(result.channel(0), plane)

    def test_formula(self, random_plane):
        f = UnsharpMask(sigma=-5, threshold=0.05, amount=0.7)
        result = f.apply(random_plane).channel(0)
        blurred = GaussianFilter(sigma_x=-5).apply(random_plane).channel(0)
        diff = random_plane - blurred
        expected = np.where(diff > 0.05, random_plane + 0.7 * diff,
                            random_plane)
        np.testing.assert_allclose(result, expected, atol=1e-12)

    def test_negative_amount_softens(self, random_plane):
        f = UnsharpMask(sigma=1.0, amount=-0.5)
        result = f.apply(random_plane).channel(0)
        diff = random_plane - GaussianFilter(sigma_x=1.0).apply(
            random_plane).channel(0)
        expected = np.where(diff > 0.0, random_plane - 0.5 * diff,
                            random_plane)
        np.testing.assert_allclose(result, expected, atol=1e-12)

    def test_negative_amount_override(self, random_plane):
        f = UnsharpMask(sigma=1.0)
        assert f._resolve_params({'amount': -1.0})['amount'] == -1.0
