"""Exceptions raised while wiring a container."""

__all__ = [
    "DependencyError",
    "UnresolvableDependencyError",
    "CircularDependencyError",
    "AmbiguousConstructorError",
    "BeanCreationError",
    "DuplicateBeanError",
    "ContainerStateError",
]


class DependencyError(Exception):
    """Raised when a bean's dependency cannot be resolved or is misannotated."""

    pass


class UnresolvableDependencyError(DependencyError):
    """Raised when a type cannot be instantiated by the container.

    Abstract classes, protocols, builtins and annotations that are not classes
    (``Optional[Foo]``, ``Callable[..., Foo]``) all end up here.
    """

    pass


class CircularDependencyError(DependencyError):
    """Raised when a type depends on itself, directly or transitively."""

    def __init__(self, path: tuple[type, ...]):
        self.path = path
        super().__init__(
            "Circular dependency: " + " -> ".join(t.__qualname__ for t in path)
        )


class AmbiguousConstructorError(DependencyError):
    """Raised when no single constructor can be chosen for a type."""

    pass


class BeanCreationError(DependencyError):
    """Raised when a constructor fails or returns an unusable value."""

    def __init__(self, bean_type: type, message: str):
        self.bean_type = bean_type
        super().__init__(message)


class DuplicateBeanError(DependencyError):
    """Raised when a type is registered twice."""

    pass


class ContainerStateError(DependencyError):
    """Raised when a container is used out of lifecycle order."""

    pass
