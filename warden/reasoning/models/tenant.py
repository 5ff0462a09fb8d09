"""Tenant context and turn request models."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from warden.reasoning.models.catalog import ActionCatalog


class HistoryMessage(BaseModel):
    """A prior message in the conversation."""

    model_config = ConfigDict(frozen=True)

    role: Literal["user", "assistant"]
    content: str


class TenantContext(BaseModel):
    """Everything the engine needs to know about the business it serves."""

    model_config = ConfigDict(frozen=True)

    tenant_id: str
    name: str = ""
    language: str = Field(default="en", description="Conversation language code")
    system_prompt: str = Field(default="", description="Tenant persona and instructions")
    catalog: ActionCatalog = Field(default_factory=ActionCatalog)
    knowledge: dict[str, Any] = Field(
        default_factory=dict, description="Business knowledge for context lookups"
    )


class TurnRequest(BaseModel):
    """One inbound user message."""

    tenant: TenantContext
    conversation_id: str = Field(..., min_length=1)
    message: str
    history: list[HistoryMessage] = Field(
        default_factory=list,
        description="Prior messages, oldest first, excluding `message`",
    )
