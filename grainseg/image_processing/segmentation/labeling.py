# -*- coding: utf-8 -*-
"""
Connected-Component Labeling - Flood-fill and union-find labelers.

Provides two interchangeable strategies for labeling 4-connected
foreground regions of a single-channel binary buffer:

- ``FloodFillLabeler``: raster scan, growing each new region with an
  explicit stack
- ``UnionFindLabeler``: two raster passes, recording label equivalences
  in a union-find table

Both mutate the buffer in place so that every foreground pixel (sample
``> 0``) carries the dense integer label (1..N, in raster order of each
region's first pixel) of its component, and background becomes 0. Both
return the components that satisfy the size minimums; components that
fail them stay labeled in the buffer. Given the same input the two
strategies produce the same label image.

Dependencies
------------
numpy

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

# Standard library
import logging
from abc import abstractmethod
from dataclasses import dataclass
from typing import Annotated, Any, Dict, List, Sequence, Type

# Third-party
import numpy as np

# grainseg internal
from grainseg.exceptions import ValidationError
from grainseg.image import PixelBuffer, Rectangle, as_buffer
from grainseg.image_processing.base import ImageProcessor
from grainseg.image_processing.params import Desc, Range
from grainseg.image_processing.versioning import processor_tags, processor_version
from grainseg.image_processing._validation import validate_single_channel
from grainseg.vocabulary import ProcessorCategory, SegmentationType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectedComponent:
    """One labeled region.

    Attributes
    ----------
    label : int
        Label value carried by the region's pixels.
    n_pixels : int
        Number of pixels in the region.
    roi : Rectangle
        Inclusive bounding box.
    """

    label: int
    n_pixels: int
    roi: Rectangle

    @property
    def width(self) -> int:
        return self.roi.width

    @property
    def height(self) -> int:
        return self.roi.height


def filter_components(
    components: Sequence[ConnectedComponent],
    min_width: int = 0,
    min_height: int = 0,
    min_pixels: int = 0,
) -> List[ConnectedComponent]:
    """Keep components meeting every size minimum, preserving order."""
    return [
        c for c in components
        if c.n_pixels >= min_pixels
        and c.width >= min_width
        and c.height >= min_height
    ]


class ComponentLabeler(ImageProcessor):
    """Abstract base for connected-component labelers.

    Subclasses implement ``_label``, which labels a 2D plane in place
    and returns every component found. ``label`` handles validation and
    size filtering.

    Parameters
    ----------
    min_width : int
        Discard components narrower than this. Default 0.
    min_height : int
        Discard components shorter than this. Default 0.
    min_pixels : int
        Discard components with fewer pixels than this. Default 0.
    """

    min_width: Annotated[int, Range(min=0),
                         Desc('Minimum bounding-box width')] = 0
    min_height: Annotated[int, Range(min=0),
                          Desc('Minimum bounding-box height')] = 0
    min_pixels: Annotated[int, Range(min=0),
                          Desc('Minimum pixel count')] = 0

    def label(self, buffer: PixelBuffer, **kwargs: Any) -> List[ConnectedComponent]:
        """Label ``buffer`` in place and return the surviving components.

        Parameters
        ----------
        buffer : PixelBuffer or np.ndarray
            Single-channel binary image; samples ``> 0`` are foreground.
            Overwritten with labels. An array must be writeable, float64
            and C-contiguous so the labels land in it.
        **kwargs
            Overrides for ``min_width``, ``min_height``, ``min_pixels``.

        Returns
        -------
        List[ConnectedComponent]
            Components meeting the size minimums, in label order.

        Raises
        ------
        ShapeMismatchError
            If ``buffer`` has more than one channel.
        ValidationError
            If ``buffer`` is an array that cannot be labeled in place.
        """
        params = self._resolve_params(kwargs)
        buf = as_buffer(buffer, 'buffer')
        validate_single_channel(buf, 'buffer')
        if isinstance(buffer, np.ndarray) and not (
            buffer.flags.writeable and np.shares_memory(buf.data, buffer)
        ):
            raise ValidationError(
                f"buffer must be a writeable C-contiguous float64 array to be "
                f"labeled in place, got {buffer.dtype} array; convert it or "
                f"pass a PixelBuffer"
            )

        components = self._label(buf.channel(0))
        kept = filter_components(components, **params)
        logger.debug(
            "%s: %d components found, %d kept",
            type(self).__name__, len(components), len(kept),
        )
        return kept

    @abstractmethod
    def _label(self, plane: np.ndarray) -> List[ConnectedComponent]:
        """Label a 2D plane in place; return all components found."""
        ...


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.SEGMENTATION,
                segmentation_types=[SegmentationType.INSTANCE])
class FloodFillLabeler(ComponentLabeler):
    """Stack-based flood-fill labeling.

    Scans in raster order; each unlabeled foreground pixel seeds a new
    label, which is spread to 4-neighbours (left, right, up, down) using
    an explicit stack, so region size is not limited by recursion depth.

    Examples
    --------
    >>> from grainseg.image_processing.segmentation import FloodFillLabeler
    >>> grains = FloodFillLabeler(min_pixels=20).label(mask)
    """

    def _label(self, plane: np.ndarray) -> List[ConnectedComponent]:
        rows, cols = plane.shape
        # -1 marks foreground not yet labeled.
        grid = [[-1 if v > 0 else 0 for v in row] for row in plane.tolist()]

        components: List[ConnectedComponent] = []
        label = 0
        for r in range(rows):
            for c in range(cols):
                if grid[r][c] >= 0:
                    continue
                label += 1
                grid[r][c] = label
                stack = [(r, c)]
                n_pixels = 0
                top, bottom, left, right = r, r, c, c

                while stack:
                    y, x = stack.pop()
                    n_pixels += 1
                    if y < top:
                        top = y
                    if y > bottom:
                        bottom = y
                    if x < left:
                        left = x
                    if x > right:
                        right = x

                    if x > 0 and grid[y][x - 1] < 0:
                        grid[y][x - 1] = label
                        stack.append((y, x - 1))
                    if x < cols - 1 and grid[y][x + 1] < 0:
                        grid[y][x + 1] = label
                        stack.append((y, x + 1))
                    if y > 0 and grid[y - 1][x] < 0:
                        grid[y - 1][x] = label
                        stack.append((y - 1, x))
                    if y < rows - 1 and grid[y + 1][x] < 0:
                        grid[y + 1][x] = label
                        stack.append((y + 1, x))

                components.append(ConnectedComponent(
                    label=label,
                    n_pixels=n_pixels,
                    roi=Rectangle(top, bottom, left, right),
                ))

        plane[...] = grid
        return components


def _find(parent: List[int], label: int) -> int:
    """Root of ``label``; roots have parent 0."""
    while parent[label] != 0:
        label = parent[label]
    return label


def _union(parent: List[int], a: int, b: int) -> None:
    """Merge the classes of ``a`` and ``b``; the smaller root survives."""
    root_a = _find(parent, a)
    root_b = _find(parent, b)
    if root_a == root_b:
        return
    if root_a < root_b:
        parent[root_b] = root_a
    else:
        parent[root_a] = root_b


@processor_version('1.0.0')
@processor_tags(category=ProcessorCategory.SEGMENTATION,
                segmentation_types=[SegmentationType.INSTANCE])
class UnionFindLabeler(ComponentLabeler):
    """Two-pass raster labeling with a union-find equivalence table.

    The first pass gives each foreground pixel the label of its north or
    west neighbour (the smaller one when both are labeled, recording the
    two as equivalent) or a new provisional label. The second pass
    replaces every provisional label by its root, compacted to 1..N,
    while accumulating pixel counts and bounding boxes. The equivalence
    table is local to each call.
    """

    def _label(self, plane: np.ndarray) -> List[ConnectedComponent]:
        rows, cols = plane.shape
        grid = [[-1 if v > 0 else 0 for v in row] for row in plane.tolist()]
        n_foreground = sum(row.count(-1) for row in grid)

        # Index 0 is unused; a provisional label whose entry is 0 is a root.
        parent = [0] * (n_foreground + 1)
        next_label = 1

        for i in range(rows):
            for j in range(cols):
                if grid[i][j] >= 0:
                    continue
                up = grid[i - 1][j] if i > 0 else 0
                left = grid[i][j - 1] if j > 0 else 0

                if up <= 0 and left <= 0:
                    grid[i][j] = next_label
                    next_label += 1
                elif up == left:
                    grid[i][j] = up
                elif up > 0 and left > 0:
                    grid[i][j] = min(up, left)
                    _union(parent, up, left)
                elif up > 0:
                    grid[i][j] = up
                else:
                    grid[i][j] = left

        dense = [0] * next_label
        n_components = 0
        for provisional in range(1, next_label):
            if parent[provisional] == 0:
                n_components += 1
                dense[provisional] = n_components

        counts = [0] * (n_components + 1)
        tops = [rows] * (n_components + 1)
        bottoms = [-1] * (n_components + 1)
        lefts = [cols] * (n_components + 1)
        rights = [-1] * (n_components + 1)

        for i in range(rows):
            row = grid[i]
            for j in range(cols):
                if row[j] <= 0:
                    continue
                k = dense[_find(parent, row[j])]
                row[j] = k
                counts[k] += 1
                if i < tops[k]:
                    tops[k] = i
                if i > bottoms[k]:
                    bottoms[k] = i
                if j < lefts[k]:
                    lefts[k] = j
                if j > rights[k]:
                    rights[k] = j

        plane[...] = grid
        return [
            ConnectedComponent(
                label=k,
                n_pixels=counts[k],
                roi=Rectangle(tops[k], bottoms[k], lefts[k], rights[k]),
            )
            for k in range(1, n_components + 1)
        ]


LABELING_METHODS = ('flood_fill', 'union_find')

_LABELERS: Dict[str, Type[ComponentLabeler]] = {
    'flood_fill': FloodFillLabeler,
    'union_find': UnionFindLabeler,
}


def get_labeler(method: str = 'flood_fill', **kwargs: Any) -> ComponentLabeler:
    """Instantiate a labeler by name.

    Parameters
    ----------
    method : str
        One of ``LABELING_METHODS``.
    **kwargs
        Size minimums forwarded to the labeler.

    Raises
    ------
    ValidationError
        If ``method`` is unknown.
    """
    try:
        cls = _LABELERS[method]
    except KeyError:
        raise ValidationError(
            f"Unknown labeling method '{method}'. "
            f"Must be one of {LABELING_METHODS}"
        ) from None
    return cls(**kwargs)


def label_components(
    buffer: PixelBuffer,
    method: str = 'flood_fill',
    min_width: int = 0,
    min_height: int = 0,
    min_pixels: int = 0,
) -> List[ConnectedComponent]:
    """Label ``buffer`` in place with the named strategy.

    Examples
    --------
    >>> from grainseg.image_processing.segmentation import label_components
    >>> grains = label_components(mask, method='union_find', min_pixels=20)
    """
    labeler = get_labeler(
        method,
        min_width=min_width,
        min_height=min_height,
        min_pixels=min_pixels,
    )
    return labeler.label(buffer)
