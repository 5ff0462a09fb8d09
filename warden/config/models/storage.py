"""Storage backend configuration models."""

from typing import Literal

from pydantic import BaseModel, Field

BackendType = Literal["inmemory", "redis"]


class PendingIntentStoreConfig(BaseModel):
    """Pending-intent store configuration."""

    backend: BackendType = Field(
        default="inmemory",
        description="Backend type",
    )
    connection_url: str | None = Field(
        default=None,
        description="Connection URL (from env var)",
    )
    ttl_seconds: int = Field(
        default=900,  # 15 minutes
        gt=0,
        description="Unconfirmed intents expire after this many seconds",
    )
    key_prefix: str = Field(
        default="pending_intent",
        description="Redis key prefix",
    )


class StorageConfig(BaseModel):
    """Storage configuration for all stores."""

    pending_intents: PendingIntentStoreConfig = Field(
        default_factory=PendingIntentStoreConfig,
        description="Pending-intent store backend",
    )


class ToolsConfig(BaseModel):
    """Tool execution gateway configuration."""

    timeout: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound for a single tool call (seconds)",
    )
