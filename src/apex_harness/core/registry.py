"""Closed primitive registry and dispatcher."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Union

from ..models import PrimitiveResult
from .errors import RegistryFrozenError
from .primitive import Primitive
from .spec import PrimitiveCall

HandlerResult = Union[PrimitiveResult, dict, Awaitable[Union[PrimitiveResult, dict]]]
Handler = Callable[[dict[str, Any]], HandlerResult]


class PrimitiveKind(str, Enum):
    """The finite set of primitive types a NodeSpec may reference."""
    SCREENSHOT_EVAL = "screenshotEval"
    NETWORK_INTERCEPT = "networkIntercept"

    @classmethod
    def parse(cls, value: "str | PrimitiveKind") -> "PrimitiveKind | None":
        """Map a type string to a kind, or None if it names no kind."""
        if isinstance(value, PrimitiveKind):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class DispatchStatus(Enum):
    DISPATCHED = "dispatched"  # handler ran and returned a result
    UNKNOWN = "unknown"        # no handler for the requested type
    RAISED = "raised"          # handler raised or returned garbage


@dataclass
class DispatchOutcome:
    """Result of dispatching one PrimitiveCall. Never carries an exception."""
    status: DispatchStatus
    call: PrimitiveCall
    result: PrimitiveResult

    @property
    def passed(self) -> bool:
        return self.result.passed


# Primitive classes declared with @register_primitive, keyed by kind
_CATALOG: dict[PrimitiveKind, type[Primitive]] = {}


def register_primitive(kind: PrimitiveKind):
    """
    Decorator to declare the Primitive class implementing a kind.

    Usage:
        @register_primitive(PrimitiveKind.SCREENSHOT_EVAL)
        class ScreenshotEvalPrimitive(Primitive):
            ...
    """
    def decorator(cls: type[Primitive]) -> type[Primitive]:
        if kind in _CATALOG and _CATALOG[kind] is not cls:
            raise ValueError(f"Primitive kind already declared: {kind.value}")
        _CATALOG[kind] = cls
        return cls
    return decorator


def primitive_catalog() -> dict[PrimitiveKind, type[Primitive]]:
    """Declared primitive classes (import apex_harness.primitives first)."""
    return dict(_CATALOG)


class PrimitiveRegistry:
    """
    Mapping from PrimitiveKind to an executable handler.

    Handlers are ``Primitive`` instances or any callable taking the inputs
    mapping and returning a PrimitiveResult (or a dict shaped like one),
    synchronously or as an awaitable. The registry is filled before a run
    and frozen for its duration.
    """

    def __init__(self, logger: logging.Logger | None = None):
        self._handlers: dict[PrimitiveKind, Handler] = {}
        self._frozen = False
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_catalog(cls, logger: logging.Logger | None = None, **kwargs: Any) -> "PrimitiveRegistry":
        """Instantiate every declared Primitive class with ``kwargs``."""
        registry = cls(logger=logger)
        for kind, primitive_class in primitive_catalog().items():
            registry.register(kind, primitive_class(**kwargs))
        return registry

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def register(self, kind: PrimitiveKind | str, handler: Handler) -> None:
        """
        Register a handler for a kind.

        Raises:
            RegistryFrozenError: If the registry has been frozen
            ValueError: If ``kind`` is not a PrimitiveKind
        """
        if self._frozen:
            raise RegistryFrozenError("Primitive registry is frozen for this run")
        parsed = PrimitiveKind.parse(kind)
        if parsed is None:
            raise ValueError(f"Not a primitive kind: {kind!r}")
        self._handlers[parsed] = handler

    def get(self, kind: PrimitiveKind | str) -> Handler | None:
        parsed = PrimitiveKind.parse(kind)
        if parsed is None:
            return None
        return self._handlers.get(parsed)

    def kinds(self) -> list[PrimitiveKind]:
        return list(self._handlers)

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, (str, PrimitiveKind)) and self.get(kind) is not None

    async def dispatch(self, call: PrimitiveCall) -> DispatchOutcome:
        """Run the handler for ``call.type``. Never raises."""
        handler = self.get(call.type)
        if handler is None:
            return DispatchOutcome(
                status=DispatchStatus.UNKNOWN,
                call=call,
                result=PrimitiveResult.failure(f"Unknown primitive: {call.type}"),
            )

        try:
            result = handler(dict(call.inputs))
            if inspect.isawaitable(result):
                result = await result
            return DispatchOutcome(
                status=DispatchStatus.DISPATCHED,
                call=call,
                result=PrimitiveResult.coerce(result),
            )
        except Exception as e:
            self.logger.warning(f"Primitive '{call.type}' raised {type(e).__name__}: {e}")
            return DispatchOutcome(
                status=DispatchStatus.RAISED,
                call=call,
                result=PrimitiveResult.failure(f"{type(e).__name__}: {e}"),
            )

    async def execute(self, call: PrimitiveCall) -> PrimitiveResult:
        """Dispatch ``call`` and return only its result."""
        return (await self.dispatch(call)).result
