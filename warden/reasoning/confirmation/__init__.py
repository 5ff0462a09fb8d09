"""Confirmation of pending destructive actions."""

from warden.reasoning.confirmation.matcher import (
    ConfirmationMatch,
    ConfirmationMatcher,
    ConfirmationStatus,
    is_confirmation,
    normalize,
)
from warden.reasoning.confirmation.phrases import CONFIRMATION_PHRASES, phrases_for

__all__ = [
    "CONFIRMATION_PHRASES",
    "ConfirmationMatch",
    "ConfirmationMatcher",
    "ConfirmationStatus",
    "is_confirmation",
    "normalize",
    "phrases_for",
]
