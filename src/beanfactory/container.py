"""
The container: eager construction of a singleton object graph.

A :class:`Container` is initialized once with a set of candidate types. Every
candidate is built, along with anything its constructor needs, and the
resulting singletons are served by :meth:`Container.get_bean` for the rest of
the container's life.
"""

import enum
import logging
import threading
from typing import Any, FrozenSet, Iterable, Optional, TypeVar

from beanfactory.errors import ContainerStateError
from beanfactory.instance_builder import InstanceBuilder
from beanfactory.metadata import ReflectiveTypeMetadata, TypeMetadataProvider
from beanfactory.selector import ConstructorSelector
from beanfactory.type_registry import TypeRegistry

__all__ = ["Container", "ContainerState"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ContainerState(enum.Enum):
    NEW = "new"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class Container:
    """
    A registry of singleton beans built by constructor injection.

    Types built only because another bean needed them are registered as well,
    so they are shared and can be looked up like any candidate.

    Initialization happens once, under a lock. Lookups after initialization are
    lock-free reads of a registry that no longer changes.

    Example:
        >>> container = Container()
        >>> container.initialize({UserController, UserService})
        >>> controller = container.get_bean(UserController)
        >>> controller.user_service is container.get_bean(UserService)
        True
    """

    def __init__(
        self,
        metadata: Optional[TypeMetadataProvider] = None,
        strict_constructors: bool = False,
    ):
        self._metadata = metadata or ReflectiveTypeMetadata()
        self._strict_constructors = strict_constructors
        self._registry = TypeRegistry()
        self._candidates: FrozenSet[type] = frozenset()
        self._state = ContainerState.NEW
        self._lock = threading.RLock()

    @property
    def state(self) -> ContainerState:
        return self._state

    @property
    def initialized(self) -> bool:
        return self._state is ContainerState.READY

    @property
    def candidates(self) -> FrozenSet[type]:
        return self._candidates

    def initialize(self, candidates: Iterable[type]) -> None:
        """Build a singleton for every candidate type.

        Candidates are visited in the order given. Dependencies are built as
        they are needed, so the visiting order does not change the result.

        Args:
            candidates: The types the container manages.

        Raises:
            ContainerStateError: If the container has already been initialized,
                or initialization is already in progress.
            DependencyError: If any bean cannot be built. The container is left
                in the FAILED state.
        """
        with self._lock:
            if self._state is not ContainerState.NEW:
                raise ContainerStateError(
                    f"Container cannot be initialized in state {self._state.value}"
                )
            self._state = ContainerState.INITIALIZING

            try:
                ordered = list(dict.fromkeys(candidates))
                self._candidates = frozenset(ordered)
                builder = InstanceBuilder(
                    self._registry,
                    self._candidates,
                    ConstructorSelector(self._metadata, self._strict_constructors),
                )
                for candidate in ordered:
                    if candidate not in self._registry:
                        builder.get_or_create(candidate)
            except BaseException:
                self._state = ContainerState.FAILED
                raise

            self._state = ContainerState.READY

        logger.info(
            "Container initialized with %d beans from %d candidates",
            len(self._registry),
            len(self._candidates),
        )

    def get_bean(self, bean_type: type[T]) -> Optional[T]:
        """Return the singleton for ``bean_type``, or None if it is not managed.

        A container that has not finished initializing manages nothing yet, so
        every lookup returns None.
        """
        if not self.initialized:
            return None
        try:
            return self._registry.get(bean_type)
        except TypeError:
            # unhashable key
            return None

    def bean_types(self) -> list[type]:
        if not self.initialized:
            return []
        return list(self._registry)

    def __contains__(self, bean_type: Any) -> bool:
        try:
            return self.initialized and bean_type in self._registry
        except TypeError:
            return False

    def __len__(self) -> int:
        return len(self._registry) if self.initialized else 0
