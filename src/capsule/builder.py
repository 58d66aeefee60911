"""Recursive construction of classes from their constructor signatures.

The :class:`ClassBuilder` reads a class's ``__init__`` signature and supplies
each parameter, in declaration order, from the first source that can satisfy it:

1. a caller-supplied override with the same name as the parameter;
2. the container, when the parameter is annotated with a buildable class;
3. the parameter's default value.

A parameter that none of these can satisfy is reported as a
:class:`~capsule.errors.ClassBuildingError`. Errors raised while building a
nested dependency are propagated to the caller unchanged.
"""

import inspect
from types import SimpleNamespace
from typing import (
    Annotated,
    Any,
    Callable,
    Mapping,
    Optional,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from loguru import logger

from capsule.domain import ConstructorParameter
from capsule.errors import ClassBuildingError, CyclicDependencyError

__all__ = ["ClassBuilder", "constructor_parameters", "is_instantiable"]


# Annotations naming plain data rather than a service to construct.
PRIMITIVE_TYPES = frozenset(
    {int, float, complex, str, bytes, bytearray, bool, list, tuple, dict, set, frozenset, type, object}
)


def is_instantiable(cls: Any) -> bool:
    """Return True if ``cls`` is a concrete class that may be called to create instances.

    Abstract base classes with unimplemented abstract methods and
    :class:`typing.Protocol` classes are not instantiable.
    """
    if not inspect.isclass(cls):
        return False
    if inspect.isabstract(cls):
        return False
    return not getattr(cls, "_is_protocol", False)


def has_constructor(cls: type) -> bool:
    return cls.__init__ is not object.__init__


def constructor_parameters(cls: type) -> list[ConstructorParameter]:
    """Describe the parameters of ``cls.__init__``, excluding ``self``.

    Variadic ``*args`` and ``**kwargs`` parameters are omitted since they are
    never required.

    Args:
        cls: The class to inspect.

    Returns:
        The parameters in declaration order.

    Example:
        >>> class Mailer:
        ...     def __init__(self, transport: Transport, retries=3): ...
        >>> constructor_parameters(Mailer)
        [ConstructorParameter(name='transport', declared_type=Transport, has_default=False, ...),
         ConstructorParameter(name='retries', declared_type=None, has_default=True, default=3, ...)]
    """
    try:
        signature = inspect.signature(cls.__init__)
    except (ValueError, TypeError):
        raise ClassBuildingError(
            f"Can not build class '{cls.__name__}' because its constructor "
            "signature can not be inspected."
        )
    hints = _type_hints(cls.__init__)
    parameters = []

    for index, (name, parameter) in enumerate(signature.parameters.items()):
        if index == 0:
            continue  # self
        if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
            continue

        annotation = hints.get(name, parameter.annotation)
        has_default = parameter.default is not parameter.empty
        parameters.append(
            ConstructorParameter(
                name,
                _dependency_type(annotation),
                has_default,
                parameter.default if has_default else None,
                parameter.kind == parameter.KEYWORD_ONLY,
            )
        )

    return parameters


def _type_hints(func: Callable) -> dict[str, Any]:
    """Resolve the annotations of ``func``, one parameter at a time if needed.

    An annotation naming something only imported under ``TYPE_CHECKING`` can not
    be resolved at runtime. It is left out, and the remaining hints are kept.
    """
    try:
        return get_type_hints(func, include_extras=True)
    except NameError:
        pass

    hints = {}
    global_namespace = getattr(func, "__globals__", {})
    for name, annotation in getattr(func, "__annotations__", {}).items():
        single = SimpleNamespace(__annotations__={name: annotation}, __globals__=global_namespace)
        try:
            hints.update(get_type_hints(single, include_extras=True))
        except NameError:
            continue
    return hints


def _dependency_type(annotation: Any) -> Optional[type]:
    """Return the class a parameter depends on, or None if it is not a buildable dependency.

    ``Annotated[X, ...]`` and ``Optional[X]`` are unwrapped to ``X``.
    """
    if annotation is inspect.Parameter.empty:
        return None

    if get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]

    if get_origin(annotation) is Union:
        members = [a for a in get_args(annotation) if a is not type(None)]
        if len(members) != 1:
            return None
        annotation = members[0]

    if not inspect.isclass(annotation) or annotation in PRIMITIVE_TYPES:
        return None
    return annotation


class ClassBuilder:
    """Instantiate classes, resolving class-typed parameters through ``make``.

    Args:
        make: Called with a parameter's declared class to obtain its value.
            The container passes its own ``make`` here, so nested dependencies
            honour singleton bindings.
        detect_cycles: If True, building a class that is already being built
            further up the stack raises :class:`CyclicDependencyError`. If False,
            cycles recurse until Python's recursion limit is reached.
    """

    def __init__(self, make: Callable[[type], Any], detect_cycles: bool = True):
        self._make = make
        self._detect_cycles = detect_cycles
        self._in_progress: list[type] = []

    def build(self, cls: type, overrides: Optional[Mapping[str, Any]] = None) -> Any:
        """Instantiate ``cls``, resolving each constructor parameter.

        Args:
            cls: The class to instantiate.
            overrides: Values to pass verbatim for the parameters they name.

        Returns:
            The new instance.

        Raises:
            ClassBuildingError: If ``cls`` is not instantiable or a parameter
                cannot be resolved.
            CyclicDependencyError: If ``cls`` depends on itself and cycle
                detection is enabled.
        """
        if not is_instantiable(cls):
            raise ClassBuildingError(
                f"Can not build the class '{getattr(cls, '__name__', cls)}' "
                "as it is not instantiable."
            )

        if self._detect_cycles and cls in self._in_progress:
            chain = self._in_progress[self._in_progress.index(cls):] + [cls]
            raise CyclicDependencyError([c.__name__ for c in chain])

        self._in_progress.append(cls)
        try:
            return self._instantiate(cls, overrides or {})
        finally:
            self._in_progress.pop()

    def _instantiate(self, cls: type, overrides: Mapping[str, Any]) -> Any:
        if not has_constructor(cls):
            logger.debug(f"Building {cls.__name__} with no constructor")
            return cls()

        args = []
        kwargs = {}
        for parameter in constructor_parameters(cls):
            value = self._resolve_parameter(cls, parameter, overrides)
            if parameter.keyword_only:
                kwargs[parameter.name] = value
            else:
                args.append(value)

        logger.debug(f"Building {cls.__name__} with {len(args) + len(kwargs)} argument(s)")
        return cls(*args, **kwargs)

    def _resolve_parameter(
        self, cls: type, parameter: ConstructorParameter, overrides: Mapping[str, Any]
    ) -> Any:
        if parameter.name in overrides:
            return overrides[parameter.name]
        if parameter.declared_type is not None:
            return self._make(parameter.declared_type)
        if parameter.has_default:
            return parameter.default
        raise ClassBuildingError(
            f"Can not build class '{cls.__name__}' because parameter "
            f"'{parameter.name}' can not be resolved."
        )
