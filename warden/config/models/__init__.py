"""Configuration model exports.

    from warden.config.models import ReasoningConfig, StorageConfig
"""

from warden.config.models.observability import (
    LoggingConfig,
    MetricsConfig,
    ObservabilityConfig,
)
from warden.config.models.reasoning import (
    CritiqueConfig,
    LLMStepConfig,
    MessagingConfig,
    ReasoningConfig,
)
from warden.config.models.storage import (
    PendingIntentStoreConfig,
    StorageConfig,
    ToolsConfig,
)

__all__ = [
    # Observability
    "LoggingConfig",
    "MetricsConfig",
    "ObservabilityConfig",
    # Reasoning
    "CritiqueConfig",
    "LLMStepConfig",
    "MessagingConfig",
    "ReasoningConfig",
    # Storage
    "PendingIntentStoreConfig",
    "StorageConfig",
    "ToolsConfig",
]
