"""Widget components."""

from .section_column import EmptySectionMessage, SectionColumn, SectionHeader
from .task_card import TaskCard
from .task_detail_modal import TaskDetailModal

__all__ = [
    "EmptySectionMessage",
    "SectionColumn",
    "SectionHeader",
    "TaskCard",
    "TaskDetailModal",
]
