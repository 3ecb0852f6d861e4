# -*- coding: utf-8 -*-
"""
Vocabulary - Canonical enums for the grainseg library.

Defines the controlled vocabularies used to tag processors: processor
categories and the kind of segmentation output a processor produces.
Tag values are enum members so typos fail at import time.

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

from enum import Enum


class ProcessorCategory(Enum):
    """Processing categories for processor tagging.

    Each value corresponds to a functional grouping of image processing
    operations.
    """

    FILTERS = "filters"
    BINARY = "binary"
    ENHANCE = "enhance"
    THRESHOLD = "threshold"
    SEGMENTATION = "segmentation"


class SegmentationType(Enum):
    """Type of segmentation a segmentation processor produces."""

    BINARY = "binary"
    INSTANCE = "instance"
