"""Write-once mapping from types to their singleton instances.

The registry backs a container's ``get_bean`` lookups. Each type maps to at
most one instance, and once a type has been registered its instance is never
replaced.
"""

from typing import Any, Iterator, Optional, TypeVar

from beanfactory.errors import DuplicateBeanError

__all__ = ["TypeRegistry"]

T = TypeVar("T")


class TypeRegistry:
    """Singleton instances keyed by their type.

    Example:
        >>> registry = TypeRegistry()
        >>> registry.register(UserService, UserService())
        >>> registry.get(UserService)
        <UserService object at ...>
        >>> registry.get(UserController) is None
        True
    """

    def __init__(self):
        self._instances: dict[type, Any] = {}

    def register(self, bean_type: type, instance: Any) -> None:
        """Store the singleton for ``bean_type``.

        Raises:
            DuplicateBeanError: If ``bean_type`` already has an instance.
        """
        if bean_type in self._instances:
            raise DuplicateBeanError(
                f"{bean_type.__qualname__} is already registered"
            )
        self._instances[bean_type] = instance

    def get(self, bean_type: type[T]) -> Optional[T]:
        return self._instances.get(bean_type)

    def __getitem__(self, bean_type: type[T]) -> T:
        return self._instances[bean_type]

    def __contains__(self, bean_type: object) -> bool:
        return bean_type in self._instances

    def __iter__(self) -> Iterator[type]:
        return iter(self._instances)

    def __len__(self) -> int:
        return len(self._instances)
