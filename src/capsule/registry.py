"""Storage for bindings and the aliases that map type identities onto them."""

from typing import Iterator, Optional

from capsule.domain import Binding
from capsule.type_identity import TypeIdentity, loaded_type, type_key

__all__ = ["AliasIndex", "BindingRegistry"]


class AliasIndex:
    """Maps type identities to the logical name they were bound under.

    Each type identity has at most one alias; binding the same type under a
    second name moves the alias to the newest name.

    Example:
        >>> aliases = AliasIndex()
        >>> aliases.add(Mailer, "mailer")
        >>> aliases.translate(Mailer)
        'mailer'
        >>> aliases.translate("mailer")   # not a known type, passed through
        'mailer'
    """

    def __init__(self):
        self._names: dict[str, str] = {}

    def add(self, identity: TypeIdentity, name: str):
        self._names[type_key(identity)] = name

    def __contains__(self, identity: TypeIdentity) -> bool:
        return self._known_key(identity) is not None

    def translate(self, identity: TypeIdentity):
        """Return the bound name for a known type identity, else the input unchanged."""
        key = self._known_key(identity)
        if key is not None:
            return self._names[key]
        return identity

    def _known_key(self, identity: TypeIdentity) -> Optional[str]:
        key = type_key(identity)
        if key is None:
            return None
        if key in self._names:
            return key
        # a dotted path through a re-export names the class by another module
        cls = loaded_type(identity)
        if cls is not None and type_key(cls) in self._names:
            return type_key(cls)
        return None

    def remove_name(self, name: str):
        """Drop every alias that points at ``name``."""
        for key in [k for k, bound in self._names.items() if bound == name]:
            del self._names[key]


class BindingRegistry:
    """Holds one :class:`~capsule.domain.Binding` per logical name, in registration order."""

    def __init__(self):
        self._bindings: dict[str, Binding] = {}

    def store(self, binding: Binding):
        """Register a binding, replacing any previous binding under the same name."""
        self._bindings[binding.name] = binding

    def lookup(self, name) -> Optional[Binding]:
        try:
            return self._bindings.get(name)
        except TypeError:
            # unhashable keys can never name a binding
            return None

    def remove(self, name: str) -> Binding:
        return self._bindings.pop(name)

    def names(self) -> list[str]:
        return list(self._bindings)

    def __contains__(self, name) -> bool:
        return self.lookup(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._bindings)
