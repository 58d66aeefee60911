"""Domain models used throughout the container."""

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

__all__ = [
    "Production",
    "Instance",
    "OverrideMap",
    "Recipe",
    "Binding",
    "ConstructorParameter",
]


@dataclass(frozen=True)
class Production:
    """A recipe that produces a value by calling ``func(container)``."""

    func: Callable[[Any], Any]


@dataclass(frozen=True)
class Instance:
    """A recipe holding a value that was constructed outside the container."""

    value: Any


@dataclass(frozen=True)
class OverrideMap:
    """A recipe asking the container to make ``target`` with primitive overrides.

    Attributes:
        target: The class to construct.
        overrides: Constructor parameter names mapped to the values to pass verbatim.
    """

    target: type
    overrides: Mapping[str, Any]


Recipe = Union[Production, Instance, OverrideMap]
"""The closed set of shapes a binding's recipe can take before normalisation."""


@dataclass
class Binding:
    """The stored recipe and lifecycle state for a logical name.

    Attributes:
        name: The logical name the binding is registered under.
        recipe: The production function invoked with the container. Bindings
            registered as ready-made instances hold a function returning the
            instance, which is never called because they start out resolved.
        is_factory: True if the recipe is invoked on every resolution.
        resolved: For singletons, whether the value has been produced. Always
            ``None`` for factories, which are never resolved.
        value: The cached value of a resolved singleton.
    """

    name: str
    recipe: Callable[[Any], Any]
    is_factory: bool
    resolved: Optional[bool] = None
    value: Any = None

    @property
    def is_singleton(self) -> bool:
        return not self.is_factory


@dataclass(frozen=True)
class ConstructorParameter:
    """A constructor parameter as read from a class signature at build time.

    Attributes:
        name: The parameter name, matched against override keys.
        declared_type: The class the parameter is annotated with, if it names a
            buildable dependency.
        has_default: Whether the signature supplies a default value.
        default: The default value, when ``has_default`` is True.
        keyword_only: Whether the argument must be passed by keyword.
    """

    name: str
    declared_type: Optional[type]
    has_default: bool
    default: Any = None
    keyword_only: bool = False
