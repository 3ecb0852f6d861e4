# -*- coding: utf-8 -*-
"""
Shared Test Fixtures - Synthetic images and masks for grainseg tests.

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

from grainseg.image import PixelBuffer


@pytest.fixture
def rng():
    """Seeded random generator."""
    return np.random.default_rng(12345)


@pytest.fixture
def random_plane(rng):
    """Small 2D random image in [0, 1], non-square to catch axis mix-ups."""
    return rng.random((9, 13))


@pytest.fixture
def quantized_plane(rng):
    """Random image whose samples are exact 8-bit levels / 255."""
    return rng.integers(0, 256, size=(10, 12)) / 255.0


@pytest.fixture
def flat_image():
    """Constant-valued 20x20 image."""
    return np.full((20, 20), 0.4)


@pytest.fixture
def two_squares():
    """20x20 mask with two disjoint 5x5 squares."""
    mask = np.zeros((20, 20))
    mask[2:7, 3:8] = 1.0
    mask[10:15, 12:17] = 1.0
    return mask


@pytest.fixture
def grain_photo(rng):
    """64x64 grayscale image with four bright discs on a dark, noisy field."""
    rows, cols = np.mgrid[0:64, 0:64]
    image = np.full((64, 64), 0.2)
    for cy, cx in ((14, 14), (14, 48), (48, 16), (46, 46)):
        image[(rows - cy) ** 2 + (cols - cx) ** 2 <= 36] = 0.8
    image += rng.uniform(-0.05, 0.05, size=image.shape)
    return PixelBuffer(image)
