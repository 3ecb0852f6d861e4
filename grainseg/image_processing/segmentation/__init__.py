# -*- coding: utf-8 -*-
"""
Segmentation - Threshold selection, binarization, and component labeling.

Turns grayscale buffers into binary foreground masks and splits the
foreground into 4-connected components.

Thresholding
    ``otsu_threshold``, ``threshold_otsu`` -- Otsu's global level
    ``Binarize`` -- fixed threshold
    ``OtsuThreshold`` -- per-channel Otsu binarization
    ``AdaptiveThreshold`` -- comparison with the local box mean

Labeling
    ``FloodFillLabeler`` -- stack-based flood fill
    ``UnionFindLabeler`` -- two-pass union-find
    ``label_components``, ``get_labeler``, ``filter_components``

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

from grainseg.image_processing.segmentation.threshold import (
    AdaptiveThreshold,
    Binarize,
    OtsuThreshold,
    otsu_threshold,
    threshold_otsu,
)
from grainseg.image_processing.segmentation.labeling import (
    LABELING_METHODS,
    ComponentLabeler,
    ConnectedComponent,
    FloodFillLabeler,
    UnionFindLabeler,
    filter_components,
    get_labeler,
    label_components,
)

__all__ = [
    'otsu_threshold',
    'threshold_otsu',
    'Binarize',
    'OtsuThreshold',
    'AdaptiveThreshold',
    'ConnectedComponent',
    'ComponentLabeler',
    'FloodFillLabeler',
    'UnionFindLabeler',
    'LABELING_METHODS',
    'filter_components',
    'get_labeler',
    'label_components',
]
