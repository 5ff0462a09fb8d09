"""ToolGateway for routing action executions to providers.

Infrastructure-level tool execution. Knows nothing about policies or
confirmation: callers decide whether an action may run.
"""

import asyncio
import time
from typing import Any, Protocol

from warden.observability.logging import get_logger
from warden.observability.metrics import TOOL_EXECUTIONS, TOOL_LATENCY
from warden.tools.models import ToolExecutionResult

logger = get_logger(__name__)


class ToolProvider(Protocol):
    """Provider for executing actions against external services.

    Each provider knows how to call its specific backend.
    """

    async def call(
        self,
        action: str,
        params: dict[str, Any],
        conversation_id: str,
    ) -> dict[str, Any]:
        """Execute an action and return its result.

        Args:
            action: Name of the action to execute
            params: Validated action parameters
            conversation_id: Conversation the action belongs to

        Returns:
            Action result data

        Raises:
            ToolExecutionError: On execution failure
        """
        ...


class ToolExecutionError(Exception):
    """Error during tool execution."""

    def __init__(
        self,
        tool_name: str,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        """Initialize error.

        Args:
            tool_name: Name of tool that failed
            message: Error message
            details: Additional error details
        """
        self.tool_name = tool_name
        self.details = details or {}
        super().__init__(f"Tool '{tool_name}' failed: {message}")


class ToolGateway:
    """Routes actions to providers and bounds every call with a timeout.

    Actions are routed by name through `routes`; anything unrouted goes to
    the default provider.
    """

    def __init__(
        self,
        providers: dict[str, ToolProvider],
        default_provider: str = "internal",
        routes: dict[str, str] | None = None,
        timeout: float = 30.0,
    ):
        """Initialize gateway.

        Args:
            providers: Map of provider names to provider instances
            default_provider: Provider used for actions without a route
            routes: Map of action names to provider names
            timeout: Upper bound for one tool call in seconds
        """
        self._providers = providers
        self._default_provider = default_provider
        self._routes = routes or {}
        self._timeout = timeout

    async def execute(
        self,
        action: str,
        params: dict[str, Any],
        conversation_id: str,
    ) -> ToolExecutionResult:
        """Execute an action.

        Args:
            action: Name of the action
            params: Validated parameters
            conversation_id: Owning conversation

        Returns:
            ToolExecutionResult; never raises for provider failures
        """
        provider_name = self._routes.get(action, self._default_provider)
        provider = self._providers.get(provider_name)
        if provider is None:
            logger.error(
                "tool_provider_not_found",
                provider=provider_name,
                action=action,
            )
            TOOL_EXECUTIONS.labels(action=action, status="error").inc()
            return ToolExecutionResult(
                executed=False,
                error=f"Unknown tool provider: {provider_name}",
            )

        start_time = time.perf_counter()
        logger.debug(
            "tool_execution_started",
            action=action,
            provider=provider_name,
            conversation_id=conversation_id,
        )

        try:
            result_data = await asyncio.wait_for(
                provider.call(action, params, conversation_id),
                timeout=self._timeout,
            )
        except TimeoutError:
            execution_time = self._elapsed_ms(start_time)
            logger.error(
                "tool_execution_timeout",
                action=action,
                timeout=self._timeout,
                conversation_id=conversation_id,
            )
            TOOL_EXECUTIONS.labels(action=action, status="timeout").inc()
            return ToolExecutionResult(
                executed=False,
                error=f"Tool '{action}' timed out after {self._timeout}s",
                execution_time_ms=execution_time,
            )
        except ToolExecutionError as e:
            execution_time = self._elapsed_ms(start_time)
            logger.error(
                "tool_execution_failed",
                action=action,
                error=str(e),
                details=e.details,
                conversation_id=conversation_id,
                execution_time_ms=execution_time,
            )
            TOOL_EXECUTIONS.labels(action=action, status="error").inc()
            return ToolExecutionResult(
                executed=False,
                error=str(e),
                execution_time_ms=execution_time,
            )
        except Exception as e:
            execution_time = self._elapsed_ms(start_time)
            logger.error(
                "tool_execution_error",
                action=action,
                error=str(e),
                error_type=type(e).__name__,
                conversation_id=conversation_id,
                execution_time_ms=execution_time,
            )
            TOOL_EXECUTIONS.labels(action=action, status="error").inc()
            return ToolExecutionResult(
                executed=False,
                error=f"Tool '{action}' failed: {type(e).__name__}: {e}",
                execution_time_ms=execution_time,
            )

        execution_time = self._elapsed_ms(start_time)
        TOOL_EXECUTIONS.labels(action=action, status="success").inc()
        TOOL_LATENCY.labels(action=action).observe(execution_time / 1000)
        logger.info(
            "tool_execution_completed",
            action=action,
            provider=provider_name,
            conversation_id=conversation_id,
            execution_time_ms=execution_time,
        )

        return ToolExecutionResult(
            executed=True,
            result=result_data,
            execution_time_ms=execution_time,
        )

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.perf_counter() - start_time) * 1000)
