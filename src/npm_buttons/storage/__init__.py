from npm_buttons.storage.workspace_state import (
    JsonWorkspaceState,
    MemoryWorkspaceState,
    WorkspaceState,
)

__all__ = [
    "JsonWorkspaceState",
    "MemoryWorkspaceState",
    "WorkspaceState",
]
