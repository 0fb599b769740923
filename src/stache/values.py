"""Value model - how render data is read by the engine.

Render data is made of ordinary Python values: `None`, `bool`, `int`,
`float`, `str`, sequences, mappings, plus the few types defined here.
Host objects are read through a `ValueAccessor`; the engine never falls
back to arbitrary attribute access.
"""

from __future__ import annotations

import dataclasses
import inspect
import types
from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence, Set
from functools import lru_cache
from typing import Any, Callable, Optional, Tuple

import msgspec
from pydantic import BaseModel


class _Missing:
    """Result of a lookup that found nothing."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class Lambda:
    """A callable in the render data.

    Used as a section it receives the raw section text; used as a variable
    it receives an empty string. Callables declared without parameters are
    called without arguments.
    """

    def __init__(self, fn: Callable[..., Any]):
        self.fn = fn
        self._takes_text = _accepts_argument(fn)

    def __call__(self, text: str = "") -> Any:
        if self._takes_text:
            return self.fn(text)
        return self.fn()

    def __repr__(self) -> str:
        return f"Lambda({self.fn!r})"


def _accepts_argument(fn: Callable[..., Any]) -> bool:
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return True
    for parameter in signature.parameters.values():
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
            inspect.Parameter.VAR_POSITIONAL,
        ):
            return True
    return False


def as_lambda(value: Any) -> Lambda | None:
    """Return `value` as a `Lambda` if it is one or is a plain function."""
    if isinstance(value, Lambda):
        return value
    if isinstance(value, (types.FunctionType, types.MethodType, types.BuiltinFunctionType)):
        return Lambda(value)
    return None


class CustomRenderable:
    """Mixin for objects that control their own output and truthiness."""

    def render_text(self) -> str:
        return str(self)

    def is_null(self) -> bool:
        return False


class Parent(ABC):
    """Explicit named-child lookup for host objects."""

    @abstractmethod
    def child(self, name: str) -> Any:
        """Return the child called `name`, or `MISSING`."""


class Transformable(ABC):
    """Host objects that provide their own transforms."""

    @abstractmethod
    def transform(self, name: str) -> Any:
        """Return the transformed value, or `MISSING` if unsupported."""


@lru_cache(maxsize=None)
def _dataclass_fields(cls: type) -> Tuple[str, ...]:
    return tuple(f.name for f in dataclasses.fields(cls))


class ValueAccessor:
    """Looks up named children of render values.

    Mappings and `Parent` objects answer directly. Other objects answer
    through an explicit property table: dataclass fields, `msgspec.Struct`
    fields, pydantic model fields, named tuple fields and the attributes of
    a `SimpleNamespace`. Subclass and override `properties` to expose more.
    """

    def child(self, value: Any, name: str) -> Any:
        if isinstance(value, Parent):
            return value.child(name)
        if isinstance(value, Mapping):
            return value[name] if name in value else MISSING
        if name in self.properties(value):
            return getattr(value, name, MISSING)
        return MISSING

    def properties(self, value: Any) -> Tuple[str, ...]:
        if isinstance(value, type):
            return ()
        if isinstance(value, msgspec.Struct):
            return value.__struct_fields__
        if isinstance(value, BaseModel):
            return tuple(type(value).model_fields)
        if dataclasses.is_dataclass(value):
            return _dataclass_fields(type(value))
        if isinstance(value, tuple) and hasattr(value, "_fields"):
            return value._fields
        if isinstance(value, types.SimpleNamespace):
            return tuple(vars(value))
        return ()


def is_sequence(value: Any) -> bool:
    """Whether sections iterate over `value`."""
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    return isinstance(value, (Sequence, Set))


def stringify(value: Any) -> str:
    """Default text of a value used as a variable."""
    if isinstance(value, CustomRenderable):
        return value.render_text()
    if value is None or value is MISSING:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
