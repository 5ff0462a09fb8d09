"""Warden: adaptive reasoning core for conversational agents.

Turns one language-model turn into a validated, policy-compliant action:
execute, ask the user, or escalate to a human.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
