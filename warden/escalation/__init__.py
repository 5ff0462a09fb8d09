"""Human handoff when the automated path cannot safely continue."""

from warden.escalation.models import EscalationRequest
from warden.escalation.notifier import EscalationNotifier, InMemoryEscalationNotifier

__all__ = [
    "EscalationRequest",
    "EscalationNotifier",
    "InMemoryEscalationNotifier",
]
