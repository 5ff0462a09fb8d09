"""Tool execution data models."""

from typing import Any

from pydantic import BaseModel, Field


class ToolExecutionResult(BaseModel):
    """Outcome of a single tool execution.

    Failures are captured here instead of raised, so the caller always
    gets a result it can render for the user.
    """

    executed: bool = Field(..., description="Whether the tool ran successfully")
    result: dict[str, Any] | None = Field(
        default=None, description="Provider result data"
    )
    error: str | None = Field(default=None, description="Failure description")
    execution_time_ms: int | None = Field(default=None)
