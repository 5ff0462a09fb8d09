"""Action catalog models.

A tenant's catalog lists the actions the assistant may take, their
parameter schemas and the safety policy attached to each.
"""

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic import ValidationError as PydanticValidationError


class CatalogError(Exception):
    """Raised when a catalog definition is malformed."""

    pass


class ActionPolicy(BaseModel):
    """Safety attributes of one action."""

    model_config = ConfigDict(frozen=True)

    max_confidence: int = Field(
        default=7,
        ge=1,
        le=10,
        description="Upper bound on the confidence accepted for this action",
    )
    is_destructive: bool = Field(default=False, description="Action cannot be undone")
    requires_confirmation: bool = Field(
        default=False, description="User must confirm before execution"
    )


# Permissive policy for actions with neither an explicit policy nor a preset
DEFAULT_POLICY = ActionPolicy()

_DESTRUCTIVE = {"is_destructive": True, "requires_confirmation": True}

# Presets for well-known actions whose definition omits a policy
STANDARD_POLICIES: dict[str, ActionPolicy] = {
    "cancel_order": ActionPolicy(max_confidence=6, **_DESTRUCTIVE),
    "refund": ActionPolicy(max_confidence=5, **_DESTRUCTIVE),
    "delete_account": ActionPolicy(max_confidence=4, **_DESTRUCTIVE),
    "delete_booking": ActionPolicy(max_confidence=5, **_DESTRUCTIVE),
    "book_appointment": ActionPolicy(max_confidence=7),
    "update_profile": ActionPolicy(max_confidence=7),
    "place_order": ActionPolicy(max_confidence=7),
    "get_order_status": ActionPolicy(max_confidence=9),
    "check_inventory": ActionPolicy(max_confidence=9),
    "get_business_hours": ActionPolicy(max_confidence=9),
    "search_products": ActionPolicy(max_confidence=9),
}


class ActionDefinition(BaseModel):
    """One action available to the assistant."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    description: str = ""
    parameter_schema: dict[str, Any] = Field(
        default_factory=dict, description="JSON schema for the action parameters"
    )
    policy: ActionPolicy = DEFAULT_POLICY

    @property
    def required_params(self) -> list[str]:
        """Required parameter names, in schema order."""
        required = self.parameter_schema.get("required", [])
        if not isinstance(required, list):
            return []
        return [name for name in required if isinstance(name, str)]


class ActionCatalog(BaseModel):
    """Read-only set of actions for one tenant."""

    model_config = ConfigDict(frozen=True)

    actions: tuple[ActionDefinition, ...] = Field(default_factory=tuple)

    _by_name: dict[str, ActionDefinition] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        names = [action.name for action in self.actions]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise CatalogError(f"Duplicate action names: {', '.join(duplicates)}")
        self._by_name = {action.name: action for action in self.actions}

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self.actions)

    def get(self, name: str) -> ActionDefinition | None:
        return self._by_name.get(name)

    @property
    def names(self) -> list[str]:
        return [action.name for action in self.actions]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActionCatalog":
        """Build a catalog from a plain definition.

        Accepts either {"actions": [{name, ...}, ...]} or a mapping of
        action name to definition. Definitions without a policy get the
        standard preset for their name, or the default policy.

        Raises:
            CatalogError: If the definition is malformed
        """
        raw_actions = data.get("actions", data)
        if isinstance(raw_actions, dict):
            raw_actions = [
                {"name": name, **(body or {})} for name, body in raw_actions.items()
            ]
        if not isinstance(raw_actions, list):
            raise CatalogError("Catalog actions must be a list or a mapping")

        definitions = []
        for index, raw in enumerate(raw_actions):
            if not isinstance(raw, dict):
                raise CatalogError(f"Action #{index} is not a mapping")
            raw = dict(raw)
            if "policy" not in raw:
                raw["policy"] = STANDARD_POLICIES.get(raw.get("name"), DEFAULT_POLICY)
            try:
                definitions.append(ActionDefinition.model_validate(raw))
            except PydanticValidationError as e:
                raise CatalogError(f"Invalid action #{index}: {e}") from e

        return cls(actions=tuple(definitions))

    @classmethod
    def from_toml(cls, path: Path) -> "ActionCatalog":
        """Load a catalog from a TOML file with [actions.<name>] tables."""
        try:
            with path.open("rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise CatalogError(f"Cannot read catalog {path}: {e}") from e
        return cls.from_dict(data)
