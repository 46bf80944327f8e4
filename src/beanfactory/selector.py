"""Choosing which constructor builds a type."""

import logging

from beanfactory.domain import ConstructorDescriptor
from beanfactory.errors import AmbiguousConstructorError, UnresolvableDependencyError
from beanfactory.metadata import TypeMetadataProvider

__all__ = ["ConstructorSelector"]

logger = logging.getLogger(__name__)


class ConstructorSelector:
    """Pick the constructor the container uses for a type.

    A constructor marked with ``@inject`` always wins. Without a marker the
    first constructor reported by the metadata provider is used; when the type
    has several, that choice depends on the provider's ordering, so it is
    logged, or refused outright when ``strict`` is set.
    """

    def __init__(self, metadata: TypeMetadataProvider, strict: bool = False):
        self._metadata = metadata
        self._strict = strict

    def select(self, bean_type: type) -> ConstructorDescriptor:
        """Return the constructor to build ``bean_type`` with.

        Raises:
            AmbiguousConstructorError: If several constructors are marked for
                injection, or if strict and several unmarked constructors exist.
            UnresolvableDependencyError: If the type has no constructors.
        """
        constructors = self._metadata.constructors(bean_type)
        if not constructors:
            raise UnresolvableDependencyError(
                f"{bean_type.__qualname__} has no constructors"
            )

        injected = [c for c in constructors if c.injected]
        if len(injected) > 1:
            raise AmbiguousConstructorError(
                f"{bean_type.__qualname__} has multiple @inject constructors: "
                f"{[str(c) for c in injected]}"
            )
        if injected:
            return injected[0]

        if len(constructors) > 1:
            if self._strict:
                raise AmbiguousConstructorError(
                    f"{bean_type.__qualname__} has {len(constructors)} constructors "
                    "and none is marked with @inject"
                )
            logger.warning(
                "%s has %d constructors and none is marked with @inject; using %s",
                bean_type.__qualname__,
                len(constructors),
                constructors[0],
            )
        return constructors[0]
