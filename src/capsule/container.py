"""The container: binding, resolution, construction and destruction.

A :class:`Capsule` maps logical names to recipes. Each binding is either a
*factory*, whose recipe runs on every :meth:`~Capsule.get`, or a *singleton*,
whose recipe runs once and whose value is cached until the binding is
destroyed. Every binding is also associated with a class, so it can be
requested by that class as well as by its name.

Classes that were never bound can still be constructed with
:meth:`~Capsule.make`, which reads the constructor signature and builds any
class-typed parameters recursively.

Example:
    >>> capsule = Capsule()
    >>> capsule.singleton("transport", SmtpTransport, {"host": "localhost"})
    >>> capsule.bind("mailer", Mailer, lambda c: Mailer(c.get("transport")))
    >>> capsule.get(Mailer).transport is capsule.get("transport")
    True
"""

import inspect
import threading
from contextlib import nullcontext
from typing import Any, Iterator, Mapping, Optional

from loguru import logger

from capsule.builder import ClassBuilder
from capsule.domain import Binding, Instance
from capsule.errors import (
    AlreadyResolvedError,
    CapsuleError,
    ClassBuildingError,
    CyclicDependencyError,
    NotFoundError,
    UnknownTypeError,
)
from capsule.recipes import as_production, classify
from capsule.registry import AliasIndex, BindingRegistry
from capsule.type_identity import TypeIdentity, find_type, short_name

__all__ = ["Capsule"]


_MISSING = object()


class Capsule:
    """A dependency injection container.

    The container is an ordinary object: create one in the composition root and
    pass it to whatever needs it. Recipes receive the container as their only
    argument.

    Args:
        detect_cycles: If True (the default), a singleton whose recipe resolves
            itself, or a class whose constructor graph leads back to itself,
            raises :class:`~capsule.errors.CyclicDependencyError`. If False,
            such cycles recurse until Python raises ``RecursionError``.
        thread_safe: If True (the default), ``bind``, ``instance``, ``get``,
            ``make`` and ``destroy`` hold one re-entrant lock for their whole
            duration, so a singleton's recipe runs at most once even when
            resolved from several threads.
    """

    def __init__(self, detect_cycles: bool = True, thread_safe: bool = True):
        self._bindings = BindingRegistry()
        self._aliases = AliasIndex()
        self._builder = ClassBuilder(self.make, detect_cycles)
        self._detect_cycles = detect_cycles
        self._resolving: list[str] = []
        self._lock = threading.RLock() if thread_safe else nullcontext()

    def bind(
        self,
        name: str,
        type_identity: TypeIdentity,
        recipe: Any = None,
        singleton: bool = False,
    ) -> "Capsule":
        """Register a recipe under ``name``.

        Args:
            name: The logical name of the binding.
            type_identity: The class (or dotted path to the class) the binding
                provides. The binding can be resolved by this type as well as by name.
            recipe: A callable taking the container and returning the value, or a
                mapping of constructor parameter names to values, meaning "make
                ``type_identity`` with these overrides". ``None`` is the same as an
                empty mapping.
            singleton: If True, the recipe runs at most once and its value is cached.

        Returns:
            The container, to allow chained calls.

        Raises:
            AlreadyResolvedError: If binding a singleton whose value was already produced.
            UnknownTypeError: If ``type_identity`` does not name a loadable class.
            InvalidRecipeError: If ``recipe`` is neither callable nor a mapping.
        """
        with self._lock:
            if singleton:
                self._check_not_resolved(name)
            cls = self._require_type(type_identity)
            production = as_production(classify(name, cls, recipe))

            self._bindings.store(
                Binding(name, production, not singleton, False if singleton else None)
            )
            self._aliases.remove_name(name)
            self._add_aliases(name, cls, type_identity)

        logger.debug(
            f"Bound {'singleton' if singleton else 'factory'} '{name}' to {cls.__name__}"
        )
        return self

    def singleton(self, name: str, type_identity: TypeIdentity, recipe: Any = None) -> "Capsule":
        """Register a singleton recipe; see :meth:`bind`."""
        return self.bind(name, type_identity, recipe, True)

    def instance(self, name: str, type_or_value: Any, value: Any = _MISSING) -> "Capsule":
        """Register an already constructed value under ``name``.

        Called with two arguments, the second is the value itself; if that value
        is a class, the class is aliased to ``name``. Called with three, the
        second is the type identity to alias and the third the value.

        The binding is a singleton that is resolved from the start, so no recipe
        is ever invoked for it.

        Raises:
            AlreadyResolvedError: If ``name`` is a singleton that was already resolved.
            UnknownTypeError: If a type identity is given that does not name a
                loadable class.
        """
        with self._lock:
            self._check_not_resolved(name)
            if value is _MISSING:
                value = type_or_value
                cls = value if inspect.isclass(value) else None
            else:
                cls = self._require_type(type_or_value)

            self._bindings.store(
                Binding(name, as_production(Instance(value)), False, True, value)
            )
            self._aliases.remove_name(name)
            if cls is not None:
                self._add_aliases(name, cls, type_or_value)

        logger.debug(f"Bound instance '{name}'")
        return self

    def get(self, name_or_type: Any) -> Any:
        """Resolve a binding by name or by the type it was bound to.

        Factories run their recipe on every call. A singleton runs its recipe on
        the first call only; later calls return the cached value.

        Raises:
            NotFoundError: If no binding exists for ``name_or_type``.
            CyclicDependencyError: If a singleton's recipe resolves the same
                singleton again and cycle detection is enabled.
        """
        with self._lock:
            binding = self._bindings.lookup(self._aliases.translate(name_or_type))
            if binding is None:
                raise NotFoundError(
                    f"Can not retrieve non-existent instance '{_describe(name_or_type)}' "
                    "from the container."
                )

            if binding.is_factory:
                return binding.recipe(self)
            if binding.resolved:
                return binding.value
            return self._resolve_singleton(binding)

    def make(self, type_identity: TypeIdentity, overrides: Optional[Mapping[str, Any]] = None) -> Any:
        """Construct ``type_identity``, resolving its constructor parameters.

        If the type is bound as a singleton, the singleton's value is returned
        instead and ``overrides`` are ignored.

        Args:
            type_identity: The class, or dotted path to the class, to construct.
            overrides: Values for constructor parameters, keyed by parameter name.
                Overrides apply only to this class, not to nested dependencies.

        Returns:
            The singleton value or a new instance.

        Raises:
            ClassBuildingError: If the class does not exist, is not instantiable,
                or has a parameter that can not be resolved.
        """
        with self._lock:
            binding = self._bindings.lookup(self._aliases.translate(type_identity))
            if binding is not None and binding.is_singleton:
                return self.get(binding.name)
            return self.build(type_identity, overrides)

    def build(self, type_identity: TypeIdentity, overrides: Optional[Mapping[str, Any]] = None) -> Any:
        """Construct a new instance of ``type_identity``, ignoring any bindings for it.

        Nested class-typed parameters are still obtained through :meth:`make`.

        Raises:
            ClassBuildingError: See :meth:`make`.
        """
        with self._lock:
            cls = find_type(type_identity)
            if cls is None:
                raise ClassBuildingError(
                    f"Cannot make non-existent class '{short_name(type_identity)}'."
                )
            return self._builder.build(cls, overrides)

    def destroy(self, name_or_type: Any) -> None:
        """Remove a binding, its lifecycle state and every alias pointing at it.

        Raises:
            NotFoundError: If no binding exists for ``name_or_type``.
        """
        with self._lock:
            name = self._aliases.translate(name_or_type)
            if name not in self._bindings:
                raise NotFoundError(
                    f"Can not destroy '{_describe(name_or_type)}' because it does not exist."
                )
            self._bindings.remove(name)
            self._aliases.remove_name(name)

        logger.debug(f"Destroyed '{name}'")

    def has(self, name_or_type: Any) -> bool:
        """Return True if a binding exists for the name or type."""
        return self._lookup(name_or_type) is not None

    def has_namespace(self, type_identity: TypeIdentity) -> bool:
        """Return True if ``type_identity`` has been bound under some name."""
        return type_identity in self._aliases

    def is_factory(self, name_or_type: Any) -> bool:
        binding = self._lookup(name_or_type)
        return binding is not None and binding.is_factory

    def is_singleton(self, name_or_type: Any) -> bool:
        binding = self._lookup(name_or_type)
        return binding is not None and binding.is_singleton

    def is_resolved(self, name_or_type: Any) -> bool:
        """Return True if the singleton's value has been produced.

        Factories are never resolved.
        """
        binding = self._lookup(name_or_type)
        return binding is not None and binding.is_singleton and bool(binding.resolved)

    def names(self) -> list[str]:
        """Return the bound names in registration order."""
        return self._bindings.names()

    def __getitem__(self, name_or_type: Any) -> Any:
        return self.get(name_or_type)

    def __setitem__(self, name: Any, value: Any):
        raise CapsuleError(
            f"Can not set '{_describe(name)}' directly, use bind(), singleton() "
            "or instance() to register it with the container."
        )

    def __delitem__(self, name_or_type: Any):
        self.destroy(name_or_type)

    def __contains__(self, name_or_type: Any) -> bool:
        return self.has(name_or_type)

    def __iter__(self) -> Iterator[str]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def _lookup(self, name_or_type: Any) -> Optional[Binding]:
        return self._bindings.lookup(self._aliases.translate(name_or_type))

    def _resolve_singleton(self, binding: Binding) -> Any:
        name = binding.name
        if self._detect_cycles and name in self._resolving:
            raise CyclicDependencyError(self._resolving[self._resolving.index(name):] + [name])

        self._resolving.append(name)
        try:
            value = binding.recipe(self)
        finally:
            self._resolving.pop()

        binding.value = value
        binding.resolved = True
        logger.debug(f"Resolved singleton '{name}'")
        return value

    def _check_not_resolved(self, name: str):
        existing = self._bindings.lookup(name)
        if existing is not None and existing.resolved:
            raise AlreadyResolvedError(f"The singleton '{name}' has already been resolved.")

    def _require_type(self, type_identity: TypeIdentity) -> type:
        cls = find_type(type_identity)
        if cls is None:
            raise UnknownTypeError(
                f"Can not bind to non-existent class '{short_name(type_identity)}'."
            )
        return cls

    def _add_aliases(self, name: str, cls: type, type_identity: TypeIdentity):
        self._aliases.add(cls, name)
        if isinstance(type_identity, str):
            self._aliases.add(type_identity, name)


def _describe(name_or_type: Any) -> str:
    if inspect.isclass(name_or_type):
        return name_or_type.__name__
    return str(name_or_type)
