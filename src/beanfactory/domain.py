"""Domain models used throughout the framework."""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class ParameterDescriptor:
    """A single parameter of a constructor.

    Attributes:
        name: The parameter name in the constructor's signature.
        declared_type: The annotated type, or None if the parameter is unannotated.
        kind: The ``inspect.Parameter`` kind, deciding whether the resolved value
            is passed positionally or by keyword.
        has_default: Whether the signature supplies a default value.
    """

    name: str
    declared_type: Optional[Any]
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD
    has_default: bool = False

    @property
    def is_variadic(self) -> bool:
        return self.kind in (
            inspect.Parameter.VAR_POSITIONAL,
            inspect.Parameter.VAR_KEYWORD,
        )

    @property
    def is_keyword_only(self) -> bool:
        return self.kind is inspect.Parameter.KEYWORD_ONLY


@dataclass(frozen=True)
class ConstructorDescriptor:
    """
    A way of constructing instances of a type.

    Attributes:
        owner: The type this constructor builds.
        name: ``"__init__"`` for the class itself, otherwise the name of the
            alternate constructor.
        factory: The callable invoked with the resolved arguments.
        parameters: The constructor's parameters, in declaration order.
        injected: True if the constructor carries the ``@inject`` marker.
    """

    owner: type
    name: str
    factory: Callable[..., Any]
    parameters: tuple[ParameterDescriptor, ...]
    injected: bool = False

    @property
    def parameter_types(self) -> list[Optional[Any]]:
        return [p.declared_type for p in self.parameters]

    def __str__(self) -> str:
        params = ", ".join(
            f"{p.name}: {getattr(p.declared_type, '__qualname__', p.declared_type)}"
            for p in self.parameters
        )
        if self.name == "__init__":
            return f"{self.owner.__qualname__}({params})"
        return f"{self.owner.__qualname__}.{self.name}({params})"
