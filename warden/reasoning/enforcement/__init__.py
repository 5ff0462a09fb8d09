"""Server-side policy enforcement."""

from warden.reasoning.enforcement.models import PolicyResult
from warden.reasoning.enforcement.policy_enforcer import PolicyEnforcer

__all__ = [
    "PolicyEnforcer",
    "PolicyResult",
]
