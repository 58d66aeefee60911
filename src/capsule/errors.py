"""Exceptions raised by the container.

Every failure is raised at the point where it is detected and is never caught
inside the package, so callers always see the original condition.
"""

__all__ = [
    "CapsuleError",
    "UnknownTypeError",
    "InvalidRecipeError",
    "AlreadyResolvedError",
    "NotFoundError",
    "ClassBuildingError",
    "CyclicDependencyError",
]


class CapsuleError(Exception):
    """Base class for all container failures."""

    pass


class UnknownTypeError(CapsuleError):
    """Raised when a type identity does not name a loadable class."""

    pass


class InvalidRecipeError(CapsuleError):
    """Raised when a binding's recipe is neither a callable nor an override mapping."""

    pass


class AlreadyResolvedError(CapsuleError):
    """Raised when rebinding a singleton whose value has already been produced."""

    pass


class NotFoundError(CapsuleError, LookupError):
    """Raised when a name or type identity has no binding."""

    pass


class ClassBuildingError(CapsuleError):
    """Raised when a class cannot be constructed from its constructor signature."""

    pass


class CyclicDependencyError(ClassBuildingError):
    """Raised when resolving a binding or building a class requires itself again."""

    def __init__(self, chain):
        self.chain = list(chain)
        super().__init__(
            f"Can not resolve '{self.chain[-1]}' because of a dependency cycle: "
            f"{' -> '.join(map(str, self.chain))}"
        )
