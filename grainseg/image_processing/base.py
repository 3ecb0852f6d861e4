# -*- coding: utf-8 -*-
"""
Image Processing Base Classes - Abstract interfaces for image processors.

Defines the ``ImageProcessor`` common base class for every grainseg
processor (transforms and component labelers) and the ``ImageTransform``
ABC for buffer-to-buffer transforms. ``ImageProcessor`` provides version
checking at first instantiation and ``typing.Annotated``-based tunable
parameter declarations with automatic ``__init__`` generation and runtime
resolution through ``**kwargs``.

Transforms write into a caller-supplied ``out`` buffer when one is given
and may use a caller-supplied scratch ``buffer`` for intermediate passes.
Shapes are checked before any computation. Windowed transforms refuse an
``out`` buffer that overlaps ``source``; elementwise transforms
(``__elementwise__ = True``) may run in place.

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
import warnings
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

# Third-party
import numpy as np

# grainseg internal
from grainseg.image import PixelBuffer, as_buffer, optional_buffer
from grainseg.image_processing._validation import (
    validate_no_alias,
    validate_same_shape,
)
from grainseg.image_processing.params import ParamSpec, collect_param_specs, _make_init

logger = logging.getLogger(__name__)


class ImageProcessor(ABC):
    """
    Common base class for all image processors.

    Both buffer transforms (``ImageTransform``) and connected-component
    labelers (``ComponentLabeler``) inherit from this class.

    Provides two cross-cutting capabilities:

    **Version checking**: Concrete subclasses that do not declare a processor
    version via ``@processor_version('x.y.z')`` will trigger a
    ``UserWarning`` at first instantiation.  The check uses ``__new__``
    rather than ``__init_subclass__`` so that decorators have been applied
    by the time the check runs.

    **Tunable parameter flow**: Subclasses declare tunable parameters as
    ``typing.Annotated`` class-body fields using constraint markers from
    :mod:`grainseg.image_processing.params` (``Range``, ``Options``,
    ``Desc``).  ``__init_subclass__`` collects these into
    ``__param_specs__`` and auto-generates an ``__init__`` (unless the
    subclass defines its own).  At runtime, ``_resolve_params(kwargs)``
    merges instance defaults with keyword-argument overrides and validates
    constraints.
    """

    # Track which classes have been checked to warn only once per class.
    _version_warned_classes: set = set()

    #: Tuple of :class:`~grainseg.image_processing.params.ParamSpec` built
    #: automatically by ``__init_subclass__`` from ``Annotated`` fields.
    __param_specs__: Tuple[ParamSpec, ...] = ()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls.__param_specs__ = collect_param_specs(cls)
        # Auto-generate __init__ only when the subclass has Annotated
        # params and neither it nor a base defines its own __init__.
        inherited = next(
            k.__dict__['__init__'] for k in cls.__mro__ if '__init__' in k.__dict__
        )
        if cls.__param_specs__ and (
            inherited is object.__init__
            or getattr(inherited, '__generated_init__', False)
        ):
            cls.__init__ = _make_init(cls.__param_specs__)

    # -----------------------------------------------------------------
    # Version checking (fires once per class at first instantiation)
    # -----------------------------------------------------------------
    def __new__(cls, *args: Any, **kwargs: Any) -> 'ImageProcessor':
        if cls not in ImageProcessor._version_warned_classes:
            ImageProcessor._version_warned_classes.add(cls)
            if (
                not getattr(cls, '__processor_version__', None)
                and not getattr(cls, '__abstractmethods__', None)
            ):
                warnings.warn(
                    f"{cls.__qualname__} does not declare a processor version. "
                    f"Use @processor_version('x.y.z') to declare one.",
                    UserWarning,
                    stacklevel=2,
                )
        logger.debug("Instantiating %s", cls.__qualname__)
        return super().__new__(cls)

    # -----------------------------------------------------------------
    # Tunable parameter resolution
    # -----------------------------------------------------------------
    def _resolve_params(self, kwargs: Dict[str, Any]) -> Dict[str, Any]:
        """Merge instance defaults with runtime *kwargs* overrides.

        For each declared parameter in ``__param_specs__``:

        1. If present in *kwargs*, use the *kwargs* value.
        2. Otherwise use the instance attribute (``self.<name>``).

        Every resolved value is validated against its spec's type, range,
        and choices constraints.

        Parameters
        ----------
        kwargs : Dict[str, Any]
            Runtime keyword arguments.  May contain non-param keys
            (e.g. ``progress_callback``); those are ignored.

        Returns
        -------
        Dict[str, Any]
            ``{param_name: resolved_value}`` for every declared param.

        Raises
        ------
        TypeError
            If a value has the wrong type.
        ValidationError
            If a value violates range or choices constraints.
        """
        resolved: Dict[str, Any] = {}
        for spec in type(self).__param_specs__:
            if spec.name in kwargs:
                value = kwargs[spec.name]
            else:
                value = getattr(self, spec.name)
            spec.validate(value)
            resolved[spec.name] = value
        self._check_params(resolved)
        return resolved

    def _check_params(self, params: Dict[str, Any]) -> None:
        """Cross-field checks on resolved parameters.

        Called by ``_resolve_params`` after per-field validation.  The
        default does nothing; subclasses override it for constraints a
        ``Range`` cannot express (odd window sizes, ordered ranges).
        """

    # -----------------------------------------------------------------
    # Progress reporting
    # -----------------------------------------------------------------
    def _report_progress(
        self, kwargs: Dict[str, Any], fraction: float
    ) -> None:
        """Report progress to an optional callback.

        If the caller provided a ``progress_callback`` keyword argument,
        it is called with the current fraction (0.0 to 1.0). If no
        callback is provided, this is a no-op.

        Parameters
        ----------
        kwargs : Dict[str, Any]
            The keyword arguments passed to the processor method.
        fraction : float
            Progress fraction in [0.0, 1.0].
        """
        cb = kwargs.get('progress_callback')
        if cb is not None:
            cb(float(fraction))


class ImageTransform(ImageProcessor):
    """
    Abstract base class for buffer-to-buffer image transforms.

    Subclasses implement ``apply`` which reads a ``PixelBuffer`` (or a
    2D/3D NumPy array, wrapped on entry) and returns the output
    ``PixelBuffer``.
    """

    #: Whether each output sample depends only on the input sample at the
    #: same position.  Elementwise transforms may write into ``source``.
    __elementwise__: bool = False

    @abstractmethod
    def apply(
        self,
        source: PixelBuffer,
        out: Optional[PixelBuffer] = None,
        buffer: Optional[PixelBuffer] = None,
        **kwargs: Any,
    ) -> PixelBuffer:
        """
        Apply the transform to a source buffer.

        Parameters
        ----------
        source : PixelBuffer or np.ndarray
            Input image, ``(rows, cols)`` or ``(channels, rows, cols)``.
        out : PixelBuffer, optional
            Destination buffer with the same shape as ``source``.
            Allocated when omitted.
        buffer : PixelBuffer, optional
            Scratch buffer with the same shape as ``source``, used by
            multi-pass transforms.  Allocated when omitted and needed.

        Returns
        -------
        PixelBuffer
            The output buffer (``out`` when given).
        """
        ...

    def _prepare_buffers(
        self,
        source: Any,
        out: Any = None,
        buffer: Any = None,
    ) -> Tuple[PixelBuffer, PixelBuffer, Optional[PixelBuffer]]:
        """Wrap and validate source, output, and scratch buffers.

        Returns
        -------
        Tuple[PixelBuffer, PixelBuffer, Optional[PixelBuffer]]
            ``(source, out, buffer)``; ``out`` is freshly allocated when
            not supplied.

        Raises
        ------
        ShapeMismatchError
            If ``out`` or ``buffer`` differs in shape from ``source``.
        ValidationError
            If ``out`` overlaps ``source`` for a non-elementwise
            transform, or ``buffer`` overlaps either of them.
        """
        src = as_buffer(source, 'source')
        dst = optional_buffer(out, 'out')
        scratch = optional_buffer(buffer, 'buffer')

        if dst is not None:
            validate_same_shape(src, dst, 'out')
            if not type(self).__elementwise__:
                validate_no_alias(src, dst, 'out')
        else:
            dst = src.empty_like()

        if scratch is not None:
            validate_same_shape(src, scratch, 'buffer')
            validate_no_alias(src, scratch, 'buffer')
            validate_no_alias(dst, scratch, 'buffer')

        return src, dst, scratch


class BandwiseTransformMixin:
    """Mixin that applies a per-channel transform across a ``PixelBuffer``.

    When mixed into an ``ImageTransform`` subclass, this implements
    ``apply()`` by validating the buffers, resolving tunable parameters
    once, and calling the subclass's ``_apply_2d()`` for each channel
    independently.

    Usage
    -----
    Subclasses should inherit from both the mixin and ``ImageTransform``::

        class MyFilter(BandwiseTransformMixin, ImageTransform):
            def _apply_2d(self, plane, out, scratch, **params):
                out[...] = ...

    ``plane``, ``out`` and ``scratch`` are 2D ``(rows, cols)`` views of
    one channel; ``scratch`` is None when the caller gave no scratch
    buffer.
    """

    def apply(
        self,
        source: PixelBuffer,
        out: Optional[PixelBuffer] = None,
        buffer: Optional[PixelBuffer] = None,
        **kwargs: Any,
    ) -> PixelBuffer:
        """Apply the transform channel by channel.

        Parameters
        ----------
        source : PixelBuffer or np.ndarray
            2D ``(rows, cols)`` or 3D ``(channels, rows, cols)`` input.
        out : PixelBuffer, optional
            Destination buffer, same shape as ``source``.
        buffer : PixelBuffer, optional
            Scratch buffer, same shape as ``source``.
        **kwargs
            Tunable parameter overrides and ``progress_callback``.

        Returns
        -------
        PixelBuffer
            The output buffer.
        """
        params = self._resolve_params(kwargs)
        src, dst, scratch = self._prepare_buffers(source, out, buffer)
        n = src.channels
        for c in range(n):
            self._apply_2d(
                src.channel(c),
                dst.channel(c),
                None if scratch is None else scratch.channel(c),
                **params,
            )
            self._report_progress(kwargs, (c + 1) / n)
        return dst

    @abstractmethod
    def _apply_2d(
        self,
        plane: np.ndarray,
        out: np.ndarray,
        scratch: Optional[np.ndarray],
        **params: Any,
    ) -> None:
        """Transform one 2D channel into ``out``.

        Parameters
        ----------
        plane : np.ndarray
            Input channel, shape ``(rows, cols)``.
        out : np.ndarray
            Output channel view, written in place.
        scratch : np.ndarray or None
            Scratch channel view.
        **params
            Resolved tunable parameters.
        """
        ...
