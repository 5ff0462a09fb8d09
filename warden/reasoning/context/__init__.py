"""Context augmentation: tenant knowledge lookups and the bounded fetch loop."""

from warden.reasoning.context.augmentation import (
    AugmentationResult,
    ContextAugmentationLoop,
    ContextFetch,
)
from warden.reasoning.context.knowledge import KnowledgeBase, KnowledgeLookup

__all__ = [
    "AugmentationResult",
    "ContextAugmentationLoop",
    "ContextFetch",
    "KnowledgeBase",
    "KnowledgeLookup",
]
