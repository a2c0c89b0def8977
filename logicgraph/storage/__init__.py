"""
Persistence helpers and example graphs.
"""

from .presets import GraphPreset, get_preset, get_presets
from .workspace_store import WorkspaceStore

__all__ = ["GraphPreset", "WorkspaceStore", "get_preset", "get_presets"]
