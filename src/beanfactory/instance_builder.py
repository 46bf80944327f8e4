"""Building instances by resolving constructor arguments.

This module provides the InstanceBuilder class, which selects a constructor
for a type, resolves each of its parameters from the type registry (building
missing dependencies recursively), and invokes the constructor with the
resolved arguments.
"""

import inspect
import logging
from typing import Any, FrozenSet, Protocol

from beanfactory.domain import ConstructorDescriptor, ParameterDescriptor
from beanfactory.errors import (
    BeanCreationError,
    CircularDependencyError,
    DependencyError,
    UnresolvableDependencyError,
)
from beanfactory.selector import ConstructorSelector
from beanfactory.type_registry import TypeRegistry

__all__ = ["InstanceBuilder"]

logger = logging.getLogger(__name__)

_UNSET = object()


class InstanceBuilder:
    """Construct instances with their dependencies injected.

    Dependencies that are not yet in the registry are built on demand and
    registered, so every type is constructed at most once.
    """

    def __init__(
        self,
        registry: TypeRegistry,
        candidates: FrozenSet[type],
        selector: ConstructorSelector,
    ):
        self._registry = registry
        self._candidates = candidates
        self._selector = selector
        self._resolving: list[type] = []

    def create_instance(self, bean_type: type) -> Any:
        """Build a new instance of ``bean_type``.

        The instance itself is not registered; dependencies built along the
        way are.

        Args:
            bean_type: The type to construct.

        Returns:
            The constructed instance, never None.

        Raises:
            CircularDependencyError: If ``bean_type`` is already being built
                further up the dependency chain.
            UnresolvableDependencyError: If ``bean_type`` or one of its
                dependencies cannot be instantiated.
            BeanCreationError: If a constructor raises or returns an unusable value.
        """
        _check_instantiable(bean_type)
        if bean_type in self._resolving:
            cycle_start = self._resolving.index(bean_type)
            raise CircularDependencyError(
                tuple(self._resolving[cycle_start:]) + (bean_type,)
            )

        self._resolving.append(bean_type)
        try:
            chosen = self._selector.select(bean_type)
            args, kwargs = self._resolve_arguments(chosen)
            return _invoke(chosen, args, kwargs)
        finally:
            self._resolving.pop()

    def get_or_create(self, bean_type: type) -> Any:
        """Return the registered singleton for ``bean_type``, building it if needed."""
        instance = self._registry.get(bean_type)
        if instance is not None or bean_type in self._registry:
            return instance

        instance = self.create_instance(bean_type)
        self._registry.register(bean_type, instance)
        logger.debug("Registered %s", bean_type.__qualname__)
        return instance

    def _resolve_arguments(
        self, chosen: ConstructorDescriptor
    ) -> tuple[list[Any], dict[str, Any]]:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        # once a positional parameter keeps its default, later ones go by keyword
        skipped_positional = False

        for parameter in chosen.parameters:
            if parameter.is_variadic:
                continue

            value = self._resolve_parameter(chosen, parameter)
            if value is _UNSET:
                skipped_positional = skipped_positional or not parameter.is_keyword_only
                continue
            if parameter.is_keyword_only or skipped_positional:
                if parameter.kind is inspect.Parameter.POSITIONAL_ONLY:
                    raise DependencyError(
                        f"Dependency {parameter.name} of {chosen} is positional-only "
                        "and follows a parameter left to its default"
                    )
                kwargs[parameter.name] = value
            else:
                args.append(value)

        return args, kwargs

    def _resolve_parameter(
        self, chosen: ConstructorDescriptor, parameter: ParameterDescriptor
    ) -> Any:
        declared_type = parameter.declared_type

        if declared_type is None:
            if parameter.has_default:
                return _UNSET
            raise DependencyError(
                f"Dependency {parameter.name} of {chosen} is not annotated"
            )

        # only candidates override a default
        if parameter.has_default and declared_type not in self._candidates:
            return _UNSET

        if declared_type in self._registry:
            return self._registry[declared_type]

        return self.get_or_create(declared_type)


def _invoke(chosen: ConstructorDescriptor, args: list[Any], kwargs: dict[str, Any]) -> Any:
    bean_type = chosen.owner
    try:
        instance = chosen.factory(*args, **kwargs)
    except Exception as e:
        raise BeanCreationError(
            bean_type, f"Failed to instantiate {bean_type.__qualname__} via {chosen}: {e}"
        ) from e

    if instance is None:
        raise BeanCreationError(bean_type, f"{chosen} returned None")
    if not isinstance(instance, bean_type):
        raise BeanCreationError(
            bean_type,
            f"{chosen} returned {type(instance).__qualname__}, "
            f"not an instance of {bean_type.__qualname__}",
        )
    return instance


def _check_instantiable(bean_type: Any) -> None:
    if not inspect.isclass(bean_type):
        raise UnresolvableDependencyError(
            f"{bean_type!r} is not a class and cannot be instantiated"
        )
    if bean_type.__module__ == "builtins":
        raise UnresolvableDependencyError(
            f"Builtin type {bean_type.__qualname__} cannot be managed by the container"
        )
    if getattr(bean_type, "_is_protocol", False) and Protocol in bean_type.__mro__:
        raise UnresolvableDependencyError(
            f"{bean_type.__qualname__} is a protocol and has no registered implementation"
        )
    if inspect.isabstract(bean_type):
        raise UnresolvableDependencyError(
            f"{bean_type.__qualname__} is abstract and has no registered implementation"
        )
