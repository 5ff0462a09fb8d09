"""EscalationNotifier interface and in-memory implementation."""

from abc import ABC, abstractmethod

from warden.escalation.models import EscalationRequest


class EscalationNotifier(ABC):
    """Receives conversations that need a human operator."""

    @abstractmethod
    async def notify(self, request: EscalationRequest) -> None:
        """Hand the conversation off."""
        pass


class InMemoryEscalationNotifier(EscalationNotifier):
    """Collects escalation requests in a list for testing and development."""

    def __init__(self) -> None:
        self.requests: list[EscalationRequest] = []

    async def notify(self, request: EscalationRequest) -> None:
        self.requests.append(request)
