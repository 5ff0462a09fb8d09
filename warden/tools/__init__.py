"""Tool execution gateway.

Routes validated actions to providers and reports every outcome as a
ToolExecutionResult.
"""

from warden.tools.gateway import ToolExecutionError, ToolGateway, ToolProvider
from warden.tools.inmemory import InMemoryToolProvider
from warden.tools.models import ToolExecutionResult

__all__ = [
    "ToolGateway",
    "ToolProvider",
    "ToolExecutionError",
    "ToolExecutionResult",
    "InMemoryToolProvider",
]
