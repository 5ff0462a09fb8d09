"""In-process tool provider for testing and development."""

import inspect
from collections.abc import Awaitable, Callable
from typing import Any

from warden.tools.gateway import ToolExecutionError

ActionHandler = Callable[
    [dict[str, Any]], dict[str, Any] | Awaitable[dict[str, Any]]
]


class InMemoryToolProvider:
    """Tool provider backed by registered Python callables.

    Every call is recorded in `calls` as (action, params, conversation_id),
    so tests can assert exactly what ran.
    """

    def __init__(self, handlers: dict[str, ActionHandler] | None = None) -> None:
        self._handlers: dict[str, ActionHandler] = dict(handlers or {})
        self.calls: list[tuple[str, dict[str, Any], str]] = []

    def register(self, action: str, handler: ActionHandler) -> None:
        """Register (or replace) the handler for an action."""
        self._handlers[action] = handler

    async def call(
        self,
        action: str,
        params: dict[str, Any],
        conversation_id: str,
    ) -> dict[str, Any]:
        self.calls.append((action, params, conversation_id))

        handler = self._handlers.get(action)
        if handler is None:
            raise ToolExecutionError(action, "no handler registered")

        result = handler(params)
        if inspect.isawaitable(result):
            result = await result
        return result
