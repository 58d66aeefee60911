"""Normalisation of the recipe shapes accepted by :meth:`Capsule.bind`.

Callers may pass a production function, a mapping of primitive overrides, or
nothing at all. Each is classified into one of the :data:`~capsule.domain.Recipe`
variants and then reduced to a single production function, so that resolution
only ever has to call ``recipe(container)``.
"""

from collections.abc import Mapping
from typing import Any, Callable

from capsule.domain import Instance, OverrideMap, Production, Recipe
from capsule.errors import InvalidRecipeError

__all__ = ["classify", "as_production"]


def classify(name: str, target: type, raw: Any) -> Recipe:
    """Classify a raw recipe argument.

    Args:
        name: The binding name, used in error messages.
        target: The class the binding is associated with.
        raw: ``None``, a mapping of constructor parameter names to values, or a
            callable taking the container.

    Returns:
        An :class:`OverrideMap` for ``None`` and mappings, otherwise a :class:`Production`.

    Raises:
        InvalidRecipeError: If ``raw`` is neither a mapping nor callable.
    """
    if raw is None:
        return OverrideMap(target, {})
    if isinstance(raw, Mapping):
        return OverrideMap(target, dict(raw))
    if callable(raw):
        return Production(raw)
    raise InvalidRecipeError(
        f"Could not bind '{name}' to the container, the given value is not "
        "a mapping of primitives or a callable."
    )


def as_production(recipe: Recipe) -> Callable[[Any], Any]:
    """Reduce a recipe to a function of the container."""
    if isinstance(recipe, Production):
        return recipe.func
    if isinstance(recipe, OverrideMap):
        target, overrides = recipe.target, recipe.overrides

        def build_target(container):
            return container.build(target, overrides)

        return build_target
    if isinstance(recipe, Instance):
        value = recipe.value
        return lambda _container: value
    raise InvalidRecipeError(f"Unsupported recipe {recipe!r}")
