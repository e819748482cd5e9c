"""Sync module - synchronizacja reguł i akcji z cyklem życia itema."""

from .synchronizer import (
    PromptRequest,
    SyncReport,
    EffectPlan,
    LifecycleSynchronizer,
)

__all__ = [
    "PromptRequest",
    "SyncReport",
    "EffectPlan",
    "LifecycleSynchronizer",
]
