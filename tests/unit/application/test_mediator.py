"""Unit tests for the Mediator: dispatch, resolution and pipeline execution."""

from __future__ import annotations

import asyncio
import dataclasses

import pytest
from structlog.testing import capture_logs

from mp_dispatch.application.cqrs import (
    BehaviorRegistry,
    Command,
    CommandHandler,
    HandlerRegistry,
    Mediator,
    Query,
    QueryHandler,
)
from mp_dispatch.application.pipeline import (
    ExceptionLoggingBehavior,
    Pipeline,
    TimingBehavior,
    ValidationBehavior,
)
from mp_dispatch.application.validation import RequestValidationError, RuleValidator
from mp_dispatch.kernel.errors import (
    AmbiguousHandlerError,
    HandlerFailureError,
    HandlerNotFoundError,
    ValidationError,
)
from mp_dispatch.testing import CountingBehavior, RecordingBehavior, ShortCircuitBehavior


# ---------------------------------------------------------------------------
# Requests and handlers used across tests
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class Ping(Command):
    pass


@dataclasses.dataclass(frozen=True)
class CreateUser(Command):
    email: str


@dataclasses.dataclass(frozen=True)
class GetGreeting(Query[str]):
    name: str


class EchoHandler(CommandHandler[Ping]):
    def __init__(self) -> None:
        self.calls = 0

    async def handle(self, command: Ping) -> None:
        self.calls += 1


class CreateUserHandler(CommandHandler[CreateUser]):
    def __init__(self) -> None:
        self.created: list[str] = []

    async def handle(self, command: CreateUser) -> None:
        self.created.append(command.email)


class GreetingHandler(QueryHandler[GetGreeting, str]):
    def __init__(self) -> None:
        self.calls = 0

    async def handle(self, query: GetGreeting) -> str:
        self.calls += 1
        return f"hello {query.name}"


class ExplodingHandler(QueryHandler[GetGreeting, str]):
    async def handle(self, query: GetGreeting) -> str:
        raise RuntimeError("db down")


def _mediator(*behaviors: object, registry: HandlerRegistry | None = None) -> Mediator:
    return Mediator(registry or HandlerRegistry(), Pipeline(behaviors))  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class TestSendCommand:
    def test_invokes_handler_and_returns_none(self) -> None:
        registry = HandlerRegistry()
        handler = EchoHandler()
        registry.register_command(Ping, handler)

        result = asyncio.run(_mediator(registry=registry).send_command(Ping()))
        assert result is None
        assert handler.calls == 1

    def test_handler_return_value_is_discarded(self) -> None:
        class ChattyHandler(CommandHandler[Ping]):
            async def handle(self, command: Ping) -> None:
                return "ignored"  # type: ignore[return-value]

        registry = HandlerRegistry()
        registry.register_command(Ping, ChattyHandler())
        assert asyncio.run(_mediator(registry=registry).send_command(Ping())) is None

    def test_unregistered_command_raises_handler_not_found(self) -> None:
        counter = CountingBehavior()
        mediator = _mediator(counter)

        with pytest.raises(HandlerNotFoundError, match="Ping") as exc_info:
            asyncio.run(mediator.send_command(Ping()))
        assert exc_info.value.request_type == "Ping"
        assert counter.calls == 0

    def test_handler_class_is_instantiated_per_dispatch(self) -> None:
        instances: list[EchoHandler] = []

        def factory() -> EchoHandler:
            handler = EchoHandler()
            instances.append(handler)
            return handler

        registry = HandlerRegistry()
        registry.register_command(Ping, factory)
        mediator = _mediator(registry=registry)

        async def _run() -> None:
            await mediator.send_command(Ping())
            await mediator.send_command(Ping())

        asyncio.run(_run())
        assert len(instances) == 2
        assert all(h.calls == 1 for h in instances)

    def test_ambiguous_registration_is_surfaced(self) -> None:
        counter = CountingBehavior()
        registry = HandlerRegistry()
        registry.register_command(Ping, EchoHandler())
        registry.register_command(Ping, EchoHandler())

        with pytest.raises(AmbiguousHandlerError):
            asyncio.run(_mediator(counter, registry=registry).send_command(Ping()))
        assert counter.calls == 0


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class TestSendQuery:
    def test_zero_behaviors_returns_handler_result_unchanged(self) -> None:
        registry = HandlerRegistry()
        registry.register_query(GetGreeting, GreetingHandler())
        result = asyncio.run(_mediator(registry=registry).send_query(GetGreeting("ada")))
        assert result == "hello ada"

    def test_unregistered_query_raises_handler_not_found(self) -> None:
        counter = CountingBehavior()
        with pytest.raises(HandlerNotFoundError, match="GetGreeting"):
            asyncio.run(_mediator(counter).send_query(GetGreeting("x")))
        assert counter.calls == 0

    def test_lookup_is_keyed_by_result_type(self) -> None:
        registry = HandlerRegistry()
        registry.register_query(GetGreeting, GreetingHandler(), result_type=int)

        with pytest.raises(HandlerNotFoundError):
            asyncio.run(_mediator(registry=registry).send_query(GetGreeting("x")))

    def test_lookup_uses_runtime_type_not_value(self) -> None:
        @dataclasses.dataclass(frozen=True)
        class GetLoudGreeting(GetGreeting):
            pass

        registry = HandlerRegistry()
        registry.register_query(GetGreeting, GreetingHandler())

        with pytest.raises(HandlerNotFoundError, match="GetLoudGreeting"):
            asyncio.run(_mediator(registry=registry).send_query(GetLoudGreeting("x")))

    def test_behavior_can_transform_response(self) -> None:
        from mp_dispatch.application.pipeline import PipelineBehavior

        class Upper(PipelineBehavior[object, str]):
            async def __call__(self, request, next_):  # type: ignore[override]
                return (await next_()).upper()

        registry = HandlerRegistry()
        registry.register_query(GetGreeting, GreetingHandler())
        result = asyncio.run(_mediator(Upper(), registry=registry).send_query(GetGreeting("ada")))
        assert result == "HELLO ADA"

    def test_short_circuit_never_reaches_handler(self) -> None:
        handler = GreetingHandler()
        registry = HandlerRegistry()
        registry.register_query(GetGreeting, handler)

        result = asyncio.run(
            _mediator(ShortCircuitBehavior("cached"), registry=registry).send_query(GetGreeting("ada"))
        )
        assert result == "cached"
        assert handler.calls == 0


# ---------------------------------------------------------------------------
# send() routing
# ---------------------------------------------------------------------------


class TestSend:
    def test_routes_commands_and_queries(self) -> None:
        registry = HandlerRegistry()
        echo = EchoHandler()
        registry.register_command(Ping, echo)
        registry.register_query(GetGreeting, GreetingHandler())
        mediator = _mediator(registry=registry)

        async def _run() -> tuple[object, object]:
            return await mediator.send(Ping()), await mediator.send(GetGreeting("bob"))

        assert asyncio.run(_run()) == (None, "hello bob")
        assert echo.calls == 1

    def test_rejects_non_requests(self) -> None:
        with pytest.raises(TypeError, match="neither a Command nor a Query"):
            asyncio.run(_mediator().send("not a request"))  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# Pipeline ordering through the mediator
# ---------------------------------------------------------------------------


class TestPipelineOrdering:
    def test_behaviors_nest_in_registration_order(self) -> None:
        log: list[str] = []

        class LoggingHandler(QueryHandler[GetGreeting, str]):
            async def handle(self, query: GetGreeting) -> str:
                log.append("handler")
                return "x"

        registry = HandlerRegistry()
        registry.register_query(GetGreeting, LoggingHandler())
        mediator = _mediator(
            RecordingBehavior("B1", log),
            RecordingBehavior("B2", log),
            RecordingBehavior("B3", log),
            registry=registry,
        )

        assert asyncio.run(mediator.send_query(GetGreeting("a"))) == "x"
        assert log == [
            "B1:before", "B2:before", "B3:before",
            "handler",
            "B3:after", "B2:after", "B1:after",
        ]

    def test_behavior_registry_scopes_by_request_type(self) -> None:
        log: list[str] = []
        registry = HandlerRegistry()
        registry.register_command(Ping, EchoHandler())
        registry.register_query(GetGreeting, GreetingHandler())

        behaviors = (
            BehaviorRegistry()
            .add(RecordingBehavior("all", log))
            .add(RecordingBehavior("queries", log), request_types=[Query])
        )
        mediator = Mediator(registry, behaviors)

        async def _run() -> None:
            await mediator.send_command(Ping())
            log.append("|")
            await mediator.send_query(GetGreeting("a"))

        asyncio.run(_run())
        assert log == [
            "all:before", "all:after",
            "|",
            "all:before", "queries:before", "queries:after", "all:after",
        ]

    def test_default_provider_is_empty_pipeline(self) -> None:
        registry = HandlerRegistry()
        registry.register_query(GetGreeting, GreetingHandler())
        assert asyncio.run(Mediator(registry).send_query(GetGreeting("z"))) == "hello z"


# ---------------------------------------------------------------------------
# Failure propagation
# ---------------------------------------------------------------------------


class TestFailures:
    def test_handler_exception_is_wrapped_with_cause(self) -> None:
        registry = HandlerRegistry()
        registry.register_query(GetGreeting, ExplodingHandler())

        with pytest.raises(HandlerFailureError) as exc_info:
            asyncio.run(_mediator(registry=registry).send_query(GetGreeting("a")))
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert exc_info.value.request_type == "GetGreeting"

    def test_kernel_errors_from_handler_propagate_unchanged(self) -> None:
        boom = ValidationError("email taken")

        class RejectingHandler(CommandHandler[CreateUser]):
            async def handle(self, command: CreateUser) -> None:
                raise boom

        registry = HandlerRegistry()
        registry.register_command(CreateUser, RejectingHandler())

        with pytest.raises(ValidationError) as exc_info:
            asyncio.run(_mediator(registry=registry).send_command(CreateUser("a@b.c")))
        assert exc_info.value is boom

    def test_failure_passes_every_active_behavior_once(self) -> None:
        log: list[str] = []
        registry = HandlerRegistry()
        registry.register_query(GetGreeting, ExplodingHandler())
        mediator = _mediator(RecordingBehavior("outer", log), RecordingBehavior("inner", log), registry=registry)

        with pytest.raises(HandlerFailureError):
            asyncio.run(mediator.send_query(GetGreeting("a")))
        assert log == ["outer:before", "inner:before", "inner:error", "outer:error"]

    def test_cancellation_is_not_wrapped(self) -> None:
        class CancelledHandler(CommandHandler[Ping]):
            async def handle(self, command: Ping) -> None:
                raise asyncio.CancelledError

        registry = HandlerRegistry()
        registry.register_command(Ping, CancelledHandler())

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(_mediator(registry=registry).send_command(Ping()))


# ---------------------------------------------------------------------------
# Validation short-circuit
# ---------------------------------------------------------------------------


class TestValidationThroughMediator:
    def test_invalid_request_never_reaches_handler(self) -> None:
        handler = CreateUserHandler()
        registry = HandlerRegistry()
        registry.register_command(CreateUser, handler)
        validator = RuleValidator(CreateUser).rule("email", lambda v: "@" in v, "must be an email address")
        mediator = _mediator(ValidationBehavior([validator]), registry=registry)

        with pytest.raises(RequestValidationError) as exc_info:
            asyncio.run(mediator.send_command(CreateUser("nope")))

        assert handler.created == []
        assert [(v.field, v.message) for v in exc_info.value.violations] == [
            ("email", "must be an email address"),
        ]

    def test_valid_request_reaches_handler(self) -> None:
        handler = CreateUserHandler()
        registry = HandlerRegistry()
        registry.register_command(CreateUser, handler)
        validator = RuleValidator(CreateUser).rule("email", lambda v: "@" in v, "must be an email address")

        asyncio.run(_mediator(ValidationBehavior([validator]), registry=registry).send_command(CreateUser("a@b.c")))
        assert handler.created == ["a@b.c"]


# ---------------------------------------------------------------------------
# Concrete scenario: Ping through Timing + ExceptionLogging
# ---------------------------------------------------------------------------


class TestPingScenario:
    def test_timing_record_and_no_error_record(self) -> None:
        registry = HandlerRegistry()
        registry.register_command(Ping, EchoHandler())
        mediator = _mediator(TimingBehavior(), ExceptionLoggingBehavior(), registry=registry)

        with capture_logs() as logs:
            asyncio.run(mediator.send_command(Ping()))

        timed = [e for e in logs if e["event"] == "request.timed"]
        assert len(timed) == 1
        assert timed[0]["request"] == "Ping"
        assert timed[0]["elapsed_ms"] >= 0
        assert not [e for e in logs if e["event"] == "request.failed"]

    def test_handler_not_found_is_logged(self) -> None:
        with capture_logs() as logs:
            with pytest.raises(HandlerNotFoundError):
                asyncio.run(_mediator().send_command(Ping()))

        missing = [e for e in logs if e["event"] == "dispatch.handler_not_found"]
        assert missing and missing[0]["log_level"] == "error"
        assert missing[0]["request"] == "Ping"


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


class TestConcurrentDispatch:
    def test_concurrent_calls_are_independent(self) -> None:
        class SlowGreeting(QueryHandler[GetGreeting, str]):
            async def handle(self, query: GetGreeting) -> str:
                await asyncio.sleep(0)
                return query.name

        registry = HandlerRegistry()
        registry.register_query(GetGreeting, SlowGreeting())
        mediator = _mediator(CountingBehavior(), registry=registry)

        async def _run() -> list[str]:
            return await asyncio.gather(*(mediator.send_query(GetGreeting(str(i))) for i in range(20)))

        assert asyncio.run(_run()) == [str(i) for i in range(20)]
