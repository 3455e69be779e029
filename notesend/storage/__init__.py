"""Persistent storage for publish state."""

from .state import NoteStatus, PluginState, PublishRecord, StateStorage, classify

__all__ = [
    "NoteStatus",
    "PluginState",
    "PublishRecord",
    "StateStorage",
    "classify",
]
