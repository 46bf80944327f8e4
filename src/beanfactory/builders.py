"""High level entry points for constructing containers."""

from typing import Iterable, Optional

from beanfactory.container import Container
from beanfactory.metadata import TypeMetadataProvider

__all__ = ["make_container"]


def make_container(
    candidates: Iterable[type],
    metadata: Optional[TypeMetadataProvider] = None,
    strict_constructors: bool = False,
) -> Container:
    """Construct and return a fully initialized :class:`Container`.

    Args:
        candidates: The types the container manages.
        metadata: Where constructor information comes from. Defaults to
            reflecting over the classes themselves.
        strict_constructors: If True, a type with several constructors and no
            ``@inject`` marker is an error rather than a logged warning.

    Returns:
        The initialized :class:`Container`.

    Raises:
        DependencyError: If any candidate or dependency cannot be built.

    Example:
        >>> container = make_container({UserController, UserService})
        >>> container.get_bean(UserController).user_service
        <UserService object at ...>
    """
    container = Container(metadata, strict_constructors)
    container.initialize(candidates)
    return container
