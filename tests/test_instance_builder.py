from typing import Callable, Optional, Protocol

import pytest

from beanfactory.errors import (
    BeanCreationError,
    CircularDependencyError,
    DependencyError,
    UnresolvableDependencyError,
)
from beanfactory.instance_builder import InstanceBuilder
from beanfactory.metadata import ReflectiveTypeMetadata, constructor, inject
from beanfactory.selector import ConstructorSelector
from beanfactory.type_registry import TypeRegistry


class Clock:
    pass


FALLBACK_CLOCK = Clock()


class Mailer:
    pass


class Scheduler:
    def __init__(self, clock: Clock, *args, mailer: Mailer, **kwargs):
        self.clock = clock
        self.mailer = mailer
        self.args = args
        self.kwargs = kwargs


class Retrying:
    def __init__(self, retries: int = 3, clock: Clock = FALLBACK_CLOCK, label="retrying"):
        self.retries = retries
        self.clock = clock
        self.label = label


class Untyped:
    def __init__(self, clock):
        self.clock = clock


class Greeter(Protocol):
    def greet(self) -> str: ...


class Welcome:
    def __init__(self, greeter: Greeter):
        self.greeter = greeter


class Factoried:
    def __init__(self, clock: Clock, source: str):
        self.clock = clock
        self.source = source

    @constructor
    @inject
    def create(cls, clock: Clock) -> "Factoried":
        return cls(clock, "factory")


class ReturnsNothing:
    @constructor
    @inject
    def create(cls) -> "ReturnsNothing":
        return None


class ReturnsSomethingElse:
    @constructor
    @inject
    def create(cls) -> "ReturnsSomethingElse":
        return Clock()


class Tick:
    def __init__(self, tock: "Tock"):
        self.tock = tock


class Tock:
    def __init__(self, tick: Tick):
        self.tick = tick


class Ticker:
    def __init__(self, tick: Tick):
        self.tick = tick


@pytest.fixture
def registry() -> TypeRegistry:
    return TypeRegistry()


def make_builder(registry: TypeRegistry, *candidates: type) -> InstanceBuilder:
    return InstanceBuilder(
        registry, frozenset(candidates), ConstructorSelector(ReflectiveTypeMetadata())
    )


def test_created_instance_is_not_registered_but_its_dependencies_are(registry):
    builder = make_builder(registry, Scheduler)

    scheduler = builder.create_instance(Scheduler)

    assert isinstance(scheduler, Scheduler)
    assert Scheduler not in registry
    assert registry.get(Clock) is scheduler.clock
    assert registry.get(Mailer) is scheduler.mailer


def test_registered_dependencies_are_reused(registry):
    clock = Clock()
    registry.register(Clock, clock)

    scheduler = make_builder(registry).create_instance(Scheduler)

    assert scheduler.clock is clock


def test_variadic_parameters_are_left_empty(registry):
    scheduler = make_builder(registry).create_instance(Scheduler)

    assert scheduler.args == ()
    assert scheduler.kwargs == {}


def test_get_or_create_registers_once(registry):
    builder = make_builder(registry, Clock)

    first = builder.get_or_create(Clock)

    assert builder.get_or_create(Clock) is first
    assert registry.get(Clock) is first


def test_defaults_are_kept_for_unmanaged_types(registry):
    retrying = make_builder(registry).create_instance(Retrying)

    assert retrying.retries == 3
    assert retrying.clock is FALLBACK_CLOCK
    assert retrying.label == "retrying"
    assert Clock not in registry


def test_defaults_are_overridden_by_candidates(registry):
    retrying = make_builder(registry, Clock).create_instance(Retrying)

    assert retrying.retries == 3
    assert retrying.clock is registry.get(Clock)


def test_defaults_are_kept_when_a_non_candidate_is_registered(registry):
    registry.register(Clock, Clock())

    assert make_builder(registry).create_instance(Retrying).clock is FALLBACK_CLOCK


def test_registered_candidates_override_defaults(registry):
    clock = Clock()
    registry.register(Clock, clock)

    assert make_builder(registry, Clock).create_instance(Retrying).clock is clock


def test_unannotated_parameter_without_default_raises(registry):
    with pytest.raises(DependencyError, match="Dependency clock of Untyped.* is not annotated"):
        make_builder(registry).create_instance(Untyped)


def test_alternate_constructor_receives_resolved_arguments(registry):
    factoried = make_builder(registry).create_instance(Factoried)

    assert factoried.source == "factory"
    assert factoried.clock is registry.get(Clock)


def test_constructor_returning_none_raises(registry):
    with pytest.raises(BeanCreationError, match="returned None"):
        make_builder(registry).create_instance(ReturnsNothing)


def test_constructor_returning_wrong_type_raises(registry):
    with pytest.raises(BeanCreationError, match="returned Clock, not an instance of ReturnsSomethingElse"):
        make_builder(registry).create_instance(ReturnsSomethingElse)


@pytest.mark.parametrize(
    "bean_type, message",
    [
        (int, "Builtin type int cannot be managed"),
        (Optional[Clock], "is not a class"),
        (Callable[[], Clock], "is not a class"),
        (Greeter, "Greeter is a protocol"),
    ],
)
def test_uninstantiable_types_are_rejected(registry, bean_type, message):
    with pytest.raises(UnresolvableDependencyError, match=message):
        make_builder(registry).create_instance(bean_type)


def test_protocol_dependency_is_unresolvable(registry):
    with pytest.raises(UnresolvableDependencyError, match="Greeter is a protocol"):
        make_builder(registry, Welcome).create_instance(Welcome)


def test_cycle_path_starts_at_the_repeated_type(registry):
    with pytest.raises(CircularDependencyError) as e:
        make_builder(registry).create_instance(Ticker)

    assert e.value.path == (Tick, Tock, Tick)
    assert str(e.value) == "Circular dependency: Tick -> Tock -> Tick"


def test_builder_recovers_after_a_cycle(registry):
    builder = make_builder(registry)

    with pytest.raises(CircularDependencyError):
        builder.create_instance(Tick)

    assert isinstance(builder.create_instance(Clock), Clock)
