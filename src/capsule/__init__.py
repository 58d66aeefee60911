"""Capsule dependency injection container.

Capsule resolves objects by logical name or by type. Each name is bound to a
recipe and a lifecycle: a *factory* recipe runs every time the name is
resolved, while a *singleton* recipe runs once and its value is cached until
the binding is destroyed. Classes that have no binding can still be
constructed, with their class-typed constructor parameters built recursively.

Key Features:
    - Name and type based lookup through a shared alias index
    - Singleton and factory lifecycles, plus pre-built instances
    - Constructor autowiring from standard type hints
    - Primitive overrides for parameters the container cannot infer
    - Optional cycle detection and thread safety

Basic Usage:
    >>> from capsule import Capsule
    >>>
    >>> capsule = Capsule()
    >>> capsule.singleton("db", Database, {"dsn": "sqlite://"})
    >>> capsule.bind("users", UserService, lambda c: UserService(c.get("db")))
    >>>
    >>> users = capsule.get(UserService)
    >>> report = capsule.make(ReportBuilder, {"title": "Weekly"})

The package consists of several modules:
    - container: The :class:`Capsule` container and its public API
    - builder: Constructor introspection and recursive construction
    - registry: Binding storage and the type alias index
    - recipes: Normalisation of the recipe shapes accepted by ``bind``
    - domain: Core domain models (Binding, ConstructorParameter, recipes)
    - errors: Container-specific exceptions
"""

from capsule.container import Capsule
from capsule.errors import (
    AlreadyResolvedError,
    CapsuleError,
    ClassBuildingError,
    CyclicDependencyError,
    InvalidRecipeError,
    NotFoundError,
    UnknownTypeError,
)

__version__ = "0.1.0"

__all__ = [
    "Capsule",
    "CapsuleError",
    "UnknownTypeError",
    "InvalidRecipeError",
    "AlreadyResolvedError",
    "NotFoundError",
    "ClassBuildingError",
    "CyclicDependencyError",
]
