"""Tenant knowledge lookups for context augmentation.

Keys are dotted paths into the tenant's knowledge object:

    policies.returns   -> knowledge["policies"]["returns"]
    contact.full       -> knowledge["contact"] (".full" names the whole section)
    all                -> the entire knowledge object
"""

from typing import Any

from pydantic import BaseModel, Field

FULL_SUFFIX = ".full"
ALL_KEY = "all"


class KnowledgeLookup(BaseModel):
    """Resolved and unresolved context keys, in request order."""

    found: dict[str, Any] = Field(default_factory=dict)
    missing: list[str] = Field(default_factory=list)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (str, list, dict)) and not value:
        return True
    return False


def _title(key: str) -> str:
    parts = [part for part in key.split(".") if part and part != "full"]
    return " / ".join(part.replace("_", " ").title() for part in parts) or "Business Information"


class KnowledgeBase:
    """Read-only view over one tenant's knowledge object."""

    def __init__(self, knowledge: dict[str, Any], business_name: str = "") -> None:
        self._knowledge = knowledge
        self._business_name = business_name

    @property
    def is_empty(self) -> bool:
        return _is_empty(self._knowledge)

    def resolve(self, keys: list[str]) -> KnowledgeLookup:
        """Resolve context keys against the knowledge object.

        Keys with no value (absent, null or empty) are reported as missing.
        Duplicate keys are resolved once.
        """
        lookup = KnowledgeLookup()
        for key in dict.fromkeys(keys):
            value = self._lookup(key)
            if _is_empty(value):
                lookup.missing.append(key)
            else:
                lookup.found[key] = value
        return lookup

    def _lookup(self, key: str) -> Any:
        key = key.strip()
        if key == ALL_KEY:
            return self._knowledge
        if key.endswith(FULL_SUFFIX):
            key = key[: -len(FULL_SUFFIX)]

        node: Any = self._knowledge
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def format(self, lookup: KnowledgeLookup) -> str:
        """Render a lookup as a prompt section.

        Found values become markdown sections. Missing keys produce an
        explicit note so the model tells the user the information is not
        available instead of guessing.
        """
        sections = []
        for key, value in lookup.found.items():
            if key == ALL_KEY:
                sections.append(self.format_full())
            else:
                sections.append(self._format_section(_title(key), value))

        if lookup.missing:
            sections.append(
                "## Note\nThe following information was requested but is not "
                f"configured for this business: {', '.join(lookup.missing)}. "
                "Let the customer know it is not available and suggest they "
                "contact the business directly."
            )

        return "\n\n".join(section for section in sections if section)

    def format_full(self) -> str:
        """Render the whole knowledge object, one section per top-level key."""
        sections = []
        if self._business_name:
            sections.append(f"## About {self._business_name}")
        for key, value in self._knowledge.items():
            if not _is_empty(value):
                sections.append(self._format_section(_title(key), value))
        return "\n\n".join(sections)

    def _format_section(self, title: str, value: Any) -> str:
        return f"## {title}\n{self._format_value(value)}"

    def _format_value(self, value: Any, depth: int = 0) -> str:
        indent = "  " * depth
        if isinstance(value, dict):
            lines = []
            for key, item in value.items():
                if _is_empty(item):
                    continue
                label = str(key).replace("_", " ").capitalize()
                if isinstance(item, (dict, list)):
                    lines.append(f"{indent}- **{label}:**")
                    lines.append(self._format_value(item, depth + 1))
                else:
                    lines.append(f"{indent}- **{label}:** {item}")
            return "\n".join(lines)

        if isinstance(value, list):
            if all(isinstance(item, dict) and "question" in item for item in value):
                return "\n".join(
                    f"{indent}{index}. Q: {item.get('question')}\n"
                    f"{indent}   A: {item.get('answer', '')}"
                    for index, item in enumerate(value, 1)
                )
            return "\n".join(
                f"{indent}- {self._format_value(item, depth + 1).strip()}"
                for item in value
                if not _is_empty(item)
            )

        return f"{indent}{value}"
