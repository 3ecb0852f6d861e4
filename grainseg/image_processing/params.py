# -*- coding: utf-8 -*-
"""
Tunable Parameters - Window sizes, sigmas and thresholds declared on the class.

A processor declares each tunable value once, as a class-body field
annotated with ``typing.Annotated`` and one or more markers::

    class BoxBlur(ImageTransform):
        width: Annotated[int, Range(min=1), Desc('Window width (odd)')] = 3

``ImageProcessor.__init_subclass__`` turns those fields into
``ParamSpec`` records (``collect_param_specs``) and, when the class has
no constructor of its own, installs a keyword-only one (``_make_init``).
Every field must carry a default; the constructor overrides it per
instance and ``_resolve_params`` overrides it per call.

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
from dataclasses import dataclass
from typing import (
    Annotated,
    Any,
    Dict,
    List,
    Optional,
    Tuple,
    Union,
    get_origin,
    get_type_hints,
)

# grainseg internal
from grainseg.exceptions import ValidationError

Number = Union[int, float]


class ParamMeta:
    """Base marker for tunable parameter metadata in ``Annotated`` types."""


@dataclass(frozen=True)
class Range(ParamMeta):
    """Inclusive numeric bounds; either end may be open."""

    min: Optional[Number] = None
    max: Optional[Number] = None


class Options(ParamMeta):
    """Closed set of allowed values, e.g. ``Options('erode', 'dilate')``."""

    def __init__(self, *choices: Any) -> None:
        if not choices:
            raise ValueError("Options requires at least one choice")
        self.choices = choices

    def __repr__(self) -> str:
        return f"Options{self.choices!r}"


@dataclass(frozen=True)
class Desc(ParamMeta):
    """Human-readable parameter description."""

    text: str


@dataclass(frozen=True)
class ParamSpec:
    """One tunable parameter, as collected from its ``Annotated`` field.

    Attributes
    ----------
    name : str
        Field name, also the keyword accepted by the constructor and by
        ``apply``/``label`` overrides.
    param_type : type
        ``int``, ``float``, ``str`` or ``bool``.
    default : Any
        Class-level default.
    description : str
        Text from ``Desc``, or empty.
    min_value, max_value : int or float, optional
        Inclusive bounds from ``Range``.
    choices : tuple, optional
        Allowed values from ``Options``.
    """

    name: str
    param_type: type
    default: Any
    description: str = ''
    min_value: Optional[Number] = None
    max_value: Optional[Number] = None
    choices: Optional[Tuple[Any, ...]] = None

    def _check_type(self, value: Any) -> None:
        if self.param_type in (int, float):
            # bool is an int subclass but never a window size or sigma.
            allowed = (int, float) if self.param_type is float else (int,)
            ok = isinstance(value, allowed) and not isinstance(value, bool)
        else:
            ok = isinstance(value, self.param_type)
        if not ok:
            raise TypeError(
                f"Parameter '{self.name}' must be "
                f"{self.param_type.__name__}, got {type(value).__name__}"
            )

    def validate(self, value: Any) -> None:
        """Check *value* against the type, bounds and choices.

        Raises
        ------
        TypeError
            If *value* has the wrong type. ``int`` passes for ``float``;
            ``bool`` never passes for a number.
        ValidationError
            If *value* is out of bounds or not an allowed choice.
        """
        self._check_type(value)
        if self.min_value is not None and value < self.min_value:
            raise ValidationError(
                f"Parameter '{self.name}' value {value!r} "
                f"is below minimum {self.min_value!r}"
            )
        if self.max_value is not None and value > self.max_value:
            raise ValidationError(
                f"Parameter '{self.name}' value {value!r} "
                f"is above maximum {self.max_value!r}"
            )
        if self.choices is not None and value not in self.choices:
            raise ValidationError(
                f"Parameter '{self.name}' value {value!r} "
                f"is not in allowed choices {self.choices!r}"
            )


def _field_names(cls: type) -> List[str]:
    """Annotated field names, base classes first, declaration order."""
    names: Dict[str, None] = {}
    for klass in reversed(cls.__mro__):
        for name in getattr(klass, '__annotations__', {}):
            names.setdefault(name)
    return list(names)


def collect_param_specs(cls: type) -> Tuple[ParamSpec, ...]:
    """Build the ``ParamSpec`` tuple for *cls*.

    Only fields whose ``Annotated`` metadata holds a ``ParamMeta`` marker
    count as parameters. A field redeclared by a subclass keeps its
    base-class position but takes the subclass's markers and default.

    Raises
    ------
    TypeError
        If a field combines ``Range`` with ``Options``, or has no default.
    """
    hints = get_type_hints(cls, include_extras=True)

    specs = []
    for name in _field_names(cls):
        hint = hints.get(name)
        if get_origin(hint) is not Annotated:
            continue
        markers = {type(m): m for m in hint.__metadata__
                   if isinstance(m, ParamMeta)}
        if not markers:
            continue

        bounds = markers.get(Range)
        options = markers.get(Options)
        desc = markers.get(Desc)
        if bounds is not None and options is not None:
            raise TypeError(
                f"Parameter '{name}' on {cls.__qualname__}: "
                f"Range and Options are mutually exclusive"
            )
        if name not in dir(cls):
            raise TypeError(
                f"Parameter '{name}' on {cls.__qualname__} has no default"
            )

        specs.append(ParamSpec(
            name=name,
            param_type=hint.__origin__,
            default=getattr(cls, name),
            description=desc.text if desc else '',
            min_value=bounds.min if bounds else None,
            max_value=bounds.max if bounds else None,
            choices=options.choices if options else None,
        ))
    return tuple(specs)


def _make_init(param_specs: Tuple[ParamSpec, ...]):
    """Build a keyword-only ``__init__`` that validates and stores each spec."""
    known = {spec.name for spec in param_specs}

    def __init__(self, **kwargs):
        unexpected = sorted(set(kwargs) - known)
        if unexpected:
            raise TypeError(
                f"{type(self).__name__}() got unexpected "
                f"keyword arguments: {', '.join(unexpected)}"
            )
        for spec in param_specs:
            value = kwargs.get(spec.name, spec.default)
            spec.validate(value)
            setattr(self, spec.name, value)

    __init__.__qualname__ = '__init__'
    __init__.__generated_init__ = True
    return __init__
