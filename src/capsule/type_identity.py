"""Helpers for the two ways a caller can identify a type.

A type identity is either a class object or a dotted import path naming one,
such as ``"myapp.services.Mailer"``. Both spellings of the same class share a
single alias key, so a binding made with one can be looked up with the other.
"""

import importlib
import inspect
import sys
from typing import Any, Optional

__all__ = ["TypeIdentity", "find_type", "loaded_type", "type_key", "short_name"]


TypeIdentity = Any
"""A class object or a dotted import path string."""


def find_type(identity: TypeIdentity) -> Optional[type]:
    """Return the class named by ``identity``, or None if it cannot be loaded.

    Dotted paths are imported lazily. Nested classes are supported by walking
    the path from the longest importable module prefix.

    Example:
        >>> find_type("collections.OrderedDict")
        <class 'collections.OrderedDict'>
        >>> find_type("collections.Nope") is None
        True
    """
    if inspect.isclass(identity):
        return identity
    if not isinstance(identity, str) or "." not in identity:
        return None

    parts = identity.strip(".").split(".")
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            module = importlib.import_module(module_name)
        except ImportError as exc:
            if not _is_missing(module_name, exc):
                raise
            continue
        return _class_in(module, parts[split:])
    return None


def loaded_type(identity: str) -> Optional[type]:
    """Return the class a dotted path names among already imported modules.

    Unlike :func:`find_type` this never imports anything, so it is safe to call
    on every lookup. A path that re-exports a class, such as ``"pkg.Clock"``
    for ``pkg.impl.Clock``, resolves to that class once ``pkg`` is imported.
    """
    if not isinstance(identity, str):
        return None
    parts = identity.strip(".").split(".")
    for split in range(len(parts) - 1, 0, -1):
        module = sys.modules.get(".".join(parts[:split]))
        if module is not None:
            return _class_in(module, parts[split:])
    return None


def _class_in(module: Any, attributes: list[str]) -> Optional[type]:
    target = module
    for attribute in attributes:
        target = getattr(target, attribute, None)
        if target is None:
            return None
    return target if inspect.isclass(target) else None


def _is_missing(module_name: str, exc: ImportError) -> bool:
    """True if ``exc`` reports ``module_name`` itself (or a parent package) as absent.

    Any other import failure comes from inside an existing module and is re-raised.
    """
    missing = getattr(exc, "name", None)
    return missing is not None and (
        module_name == missing or module_name.startswith(missing + ".")
    )


def type_key(identity: TypeIdentity) -> Optional[str]:
    """Return the alias key for a type identity.

    Classes are keyed by ``module.qualname``; strings are taken to be that key
    already. :class:`~capsule.registry.AliasIndex` falls back to
    :func:`loaded_type` for paths that reach the class through a re-export.
    """
    if inspect.isclass(identity):
        return f"{identity.__module__}.{identity.__qualname__}"
    if isinstance(identity, str):
        return identity.strip(".")
    return None


def short_name(identity: TypeIdentity) -> str:
    """Return the short identifier used in error messages."""
    if inspect.isclass(identity):
        return identity.__name__
    return str(identity).rstrip(".").rsplit(".", 1)[-1]
