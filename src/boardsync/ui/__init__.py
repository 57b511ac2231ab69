"""UI components."""

from .screens.board import BoardScreen
from .widgets.section_column import SectionColumn
from .widgets.task_card import TaskCard

__all__ = [
    "BoardScreen",
    "SectionColumn",
    "TaskCard",
]
