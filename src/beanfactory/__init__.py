"""Beanfactory: a minimal constructor-injection container.

Give the container a set of classes and it builds one instance of each,
resolving constructor parameters by their annotated types. Dependencies are
built on demand and shared, so every type in the graph is a singleton.

Key Features:
    - Eager, singleton, constructor-based injection
    - Dependencies resolved by standard type hints
    - ``@inject`` marker and alternate ``@constructor`` classmethods
    - Reflective or table-driven type metadata
    - Cycle detection with the offending dependency path

Basic Usage:
    >>> from beanfactory.builders import make_container
    >>>
    >>> class UserService:
    ...     pass
    >>>
    >>> class UserController:
    ...     def __init__(self, user_service: UserService):
    ...         self.user_service = user_service
    >>>
    >>> container = make_container({UserController, UserService})
    >>> controller = container.get_bean(UserController)
    >>> controller.user_service is container.get_bean(UserService)
    True

The framework consists of several core modules:
    - container: the Container and its lifecycle
    - builders: high-level container construction
    - instance_builder: constructor argument resolution
    - selector: constructor selection
    - metadata: type metadata providers and the inject/constructor markers
    - type_registry: the write-once type to instance mapping
    - domain: core domain models (ParameterDescriptor, ConstructorDescriptor)
    - errors: framework-specific exceptions
"""
