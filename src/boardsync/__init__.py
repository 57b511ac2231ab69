"""boardsync - drag-and-drop kanban board with optimistic sync."""

__version__ = "0.1.0"
