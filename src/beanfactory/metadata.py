"""Type metadata: how the container learns about a type's constructors.

Two providers are available. :class:`ReflectiveTypeMetadata` inspects classes
at runtime, reading ``__init__`` and any alternate constructors declared with
:func:`constructor`. :class:`TypeMetadataTable` is an explicit registration
table for when reflection is unwanted or unavailable.
"""

import inspect
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Any, Callable, Iterable, Optional, get_type_hints

from beanfactory.domain import ConstructorDescriptor, ParameterDescriptor
from beanfactory.errors import DependencyError, UnresolvableDependencyError

__all__ = [
    "inject",
    "constructor",
    "TypeMetadataProvider",
    "ReflectiveTypeMetadata",
    "TypeMetadataTable",
]

_INJECT_MARKER = "__inject__"
_CONSTRUCTOR_MARKER = "__bean_constructor__"


def _unwrap(target: Any) -> Any:
    if isinstance(target, (classmethod, staticmethod)):
        return target.__func__
    return target


def inject(target: Any) -> Any:
    """Mark a constructor as the one the container should use.

    May decorate ``__init__`` or an alternate constructor, above or below
    :func:`constructor`.

    Example:
        >>> class UserController:
        ...     @inject
        ...     def __init__(self, user_service: UserService):
        ...         self.user_service = user_service
    """
    setattr(_unwrap(target), _INJECT_MARKER, True)
    return target


def constructor(target: Any) -> classmethod:
    """Declare a classmethod as an alternate constructor of its class.

    Example:
        >>> class Repository:
        ...     def __init__(self, url: str): ...
        ...
        ...     @constructor
        ...     @inject
        ...     def from_settings(cls, settings: Settings) -> "Repository":
        ...         return cls(settings.url)
    """
    func = _unwrap(target)
    setattr(func, _CONSTRUCTOR_MARKER, True)
    return classmethod(func)


def is_injected(func: Any) -> bool:
    return bool(getattr(_unwrap(func), _INJECT_MARKER, False))


class TypeMetadataProvider(ABC):
    """Reports the constructors available for a type."""

    @abstractmethod
    def constructors(self, bean_type: type) -> list[ConstructorDescriptor]:
        """Return the constructors of ``bean_type``, in the provider's order.

        Raises:
            DependencyError: If the type's constructors cannot be described.
        """


class ReflectiveTypeMetadata(TypeMetadataProvider):
    """Describe classes by inspecting their signatures and type hints.

    A class's constructors are its ``__init__`` followed by the classmethods it
    declares with :func:`constructor`, in definition order. Alternate
    constructors are not inherited.
    """

    def constructors(self, bean_type: type) -> list[ConstructorDescriptor]:
        if not inspect.isclass(bean_type):
            raise UnresolvableDependencyError(f"{bean_type!r} is not a class")

        found = [self._init_constructor(bean_type)]
        for name, attr in vars(bean_type).items():
            if isinstance(attr, classmethod) and getattr(
                attr.__func__, _CONSTRUCTOR_MARKER, False
            ):
                found.append(self._alternate_constructor(bean_type, name, attr.__func__))
        return found

    def _init_constructor(self, bean_type: type) -> ConstructorDescriptor:
        init = bean_type.__init__
        if init is object.__init__:
            return ConstructorDescriptor(bean_type, "__init__", bean_type, ())

        try:
            signature = inspect.signature(init)
        except (TypeError, ValueError) as e:
            raise UnresolvableDependencyError(
                f"Cannot inspect constructor of {bean_type.__qualname__}"
            ) from e

        # drop self
        parameters = list(signature.parameters.values())[1:]
        return ConstructorDescriptor(
            bean_type,
            "__init__",
            bean_type,
            _describe_parameters(bean_type, init, parameters),
            is_injected(init),
        )

    def _alternate_constructor(
        self, bean_type: type, name: str, func: Callable
    ) -> ConstructorDescriptor:
        bound = getattr(bean_type, name)
        parameters = list(inspect.signature(bound).parameters.values())
        return ConstructorDescriptor(
            bean_type,
            name,
            bound,
            _describe_parameters(bean_type, func, parameters),
            is_injected(func),
        )


def _describe_parameters(
    bean_type: type, func: Callable, parameters: Iterable[inspect.Parameter]
) -> tuple[ParameterDescriptor, ...]:
    try:
        hints = get_type_hints(func) if inspect.isfunction(func) else {}
    except (NameError, TypeError) as e:
        raise DependencyError(
            f"Cannot resolve type annotations of {bean_type.__qualname__}.{func.__name__}: {e}"
        ) from e

    return tuple(
        ParameterDescriptor(
            parameter.name,
            hints.get(parameter.name),
            parameter.kind,
            parameter.default is not inspect.Parameter.empty,
        )
        for parameter in parameters
    )


class TypeMetadataTable(TypeMetadataProvider):
    """Constructor metadata registered up front instead of discovered.

    Example:
        >>> table = TypeMetadataTable()
        >>> table.register(UserService).register(
        ...     UserController, parameter_types=[UserService], injected=True
        ... )
        >>> container = make_container({UserController, UserService}, metadata=table)
    """

    def __init__(self):
        self._constructors: dict[type, list[ConstructorDescriptor]] = defaultdict(list)

    def register(
        self,
        bean_type: type,
        factory: Optional[Callable[..., Any]] = None,
        parameter_types: Iterable[type] = (),
        injected: bool = False,
    ) -> "TypeMetadataTable":
        """Add a constructor for ``bean_type``.

        Args:
            bean_type: The type the constructor builds.
            factory: Callable invoked with the resolved arguments, positionally.
                Defaults to ``bean_type`` itself.
            parameter_types: The types of the factory's arguments, in order.
            injected: Whether this constructor carries the injection marker.

        Returns:
            This table, so registrations can be chained.
        """
        factory = factory or bean_type
        name = "__init__" if factory is bean_type else getattr(factory, "__name__", repr(factory))
        parameters = tuple(
            ParameterDescriptor(f"arg{index}", parameter_type, inspect.Parameter.POSITIONAL_ONLY)
            for index, parameter_type in enumerate(parameter_types)
        )
        self._constructors[bean_type].append(
            ConstructorDescriptor(bean_type, name, factory, parameters, injected)
        )
        return self

    def constructors(self, bean_type: type) -> list[ConstructorDescriptor]:
        if bean_type not in self._constructors:
            raise UnresolvableDependencyError(
                f"No constructors registered for {getattr(bean_type, '__qualname__', bean_type)}"
            )
        return list(self._constructors[bean_type])

    def __contains__(self, bean_type: type) -> bool:
        return bean_type in self._constructors
