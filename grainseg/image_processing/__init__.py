# -*- coding: utf-8 -*-
"""
Image Processing Module - Filters, morphology, thresholding, and labeling.

Provides the processors that take a grayscale photograph to a list of
counted objects: spatial filters, intensity normalization, binary
morphology, threshold segmentation, connected-component labeling, and
composable pipelines. All processors inherit from ``ImageProcessor``
which provides version checking and tunable parameter validation.

Sub-modules
-----------
filters/
    Spatial image filters -- integral-image (box blur, binary majority),
    rank (max, min, median), and separable linear (1D mirror
    convolution, Gaussian, unsharp mask).
intensity.py
    ``Normalize`` global per-channel range stretch.
morphology.py
    Binary dilation, erosion, opening, closing under a structuring
    element with explicit origin.
segmentation/
    Otsu threshold selection, binarization, flood-fill and union-find
    component labeling.
pipeline.py
    Sequential composition of ``ImageTransform`` steps.
versioning.py
    ``@processor_version`` and ``@processor_tags`` decorators.
params.py
    ``Range``, ``Options``, ``Desc`` constraint markers for tunable
    parameters via ``Annotated`` type hints.

Usage
-----
Count grains in a photograph:

    >>> from grainseg.image import PixelBuffer
    >>> from grainseg.image_processing import (
    ...     GaussianFilter, MorphologicalFilter, OtsuThreshold, Pipeline,
    ...     label_components,
    ... )
    >>>
    >>> mask = Pipeline([
    ...     GaussianFilter(sigma_x=1.0),
    ...     OtsuThreshold(),
    ...     MorphologicalFilter(operation='open', diameter=3),
    ... ]).apply(PixelBuffer(photo))
    >>> grains = label_components(mask, min_pixels=20)

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

from grainseg.image_processing.base import (
    BandwiseTransformMixin,
    ImageProcessor,
    ImageTransform,
)
from grainseg.image_processing.params import Desc, Options, ParamSpec, Range
from grainseg.image_processing.versioning import processor_tags, processor_version
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
)
from grainseg.image_processing.intensity import Normalize
from grainseg.image_processing.morphology import (
    MorphologicalFilter,
    StructuringElement,
    circular_kernel,
    closing,
    dilate,
    erode,
    opening,
)
from grainseg.image_processing.segmentation import (
    LABELING_METHODS,
    AdaptiveThreshold,
    Binarize,
    ComponentLabeler,
    ConnectedComponent,
    FloodFillLabeler,
    OtsuThreshold,
    UnionFindLabeler,
    filter_components,
    get_labeler,
    label_components,
    otsu_threshold,
    threshold_otsu,
)
from grainseg.image_processing.pipeline import Pipeline

__all__ = [
    # Base
    'ImageProcessor',
    'ImageTransform',
    'BandwiseTransformMixin',
    'Pipeline',
    'processor_version',
    'processor_tags',
    'Range',
    'Options',
    'Desc',
    'ParamSpec',
    # Filters
    'BoxBlur',
    'BinaryMedianFilter',
    'MaxFilter',
    'MinFilter',
    'MedianFilter',
    'Filter1D',
    'GaussianFilter',
    'UnsharpMask',
    'integral_image',
    'convolve_1d',
    'gaussian_kernel',
    # Intensity
    'Normalize',
    # Morphology
    'MorphologicalFilter',
    'StructuringElement',
    'circular_kernel',
    'dilate',
    'erode',
    'opening',
    'closing',
    # Segmentation
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
