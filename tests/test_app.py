"""Tests for app action handlers.

Actions are exercised on an app built with ``__new__`` so no terminal is
needed; the current screen is replaced with a spec'd mock.
"""

from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import pytest

from boardsync.app import BoardSyncApp
from boardsync.drag import ActivationConstraint
from boardsync.models import BoardOptions, Task
from boardsync.ui.screens.board import BoardScreen, activation_constraint
from boardsync.ui.widgets import TaskDetailModal


def make_app() -> BoardSyncApp:
    app = BoardSyncApp.__new__(BoardSyncApp)
    app.notify = MagicMock()
    app.board_service = MagicMock()
    return app


def board_screen(dragging: bool = False) -> MagicMock:
    screen = MagicMock(spec=BoardScreen)
    screen.is_dragging = dragging
    return screen


def with_screen(screen):
    return patch.object(BoardSyncApp, "screen", new_callable=PropertyMock, return_value=screen)


class TestNavigation:
    """Arrow keys navigate, or steer the drop target while dragging."""

    def test_navigates_sections_and_tasks(self):
        app = make_app()
        screen = board_screen()

        with with_screen(screen):
            app.action_nav_right()
            app.action_nav_up()

        screen.navigate_section.assert_called_once_with(1)
        screen.navigate_task.assert_called_once_with(-1)
        screen.move_drop_target.assert_not_called()

    def test_moves_drop_target_while_dragging(self):
        app = make_app()
        screen = board_screen(dragging=True)

        with with_screen(screen):
            app.action_nav_left()
            app.action_nav_down()

        assert [c.args for c in screen.move_drop_target.call_args_list] == [("left",), ("down",)]
        screen.navigate_section.assert_not_called()

    def test_ignored_on_other_screens(self):
        app = make_app()
        modal = MagicMock(spec=TaskDetailModal)

        with with_screen(modal):
            app.action_nav_right()

        assert modal.method_calls == []


class TestDragActions:
    def test_select_drops_while_dragging(self):
        app = make_app()
        screen = board_screen(dragging=True)

        with with_screen(screen):
            app.action_select()

        screen.drop.assert_called_once_with()
        app.board_service.edit_task.assert_not_called()

    def test_select_opens_task_otherwise(self):
        app = make_app()
        screen = board_screen()
        screen.get_current_task.return_value = Task(id="t1", title="First")

        with with_screen(screen):
            app.action_select()

        screen.drop.assert_not_called()
        app.board_service.edit_task.assert_called_once_with("t1")

    def test_pick_up_task(self):
        app = make_app()
        screen = board_screen()

        with with_screen(screen):
            app.action_pick_up_task()

        screen.pick_up_task.assert_called_once_with()

    def test_pick_up_ignored_while_dragging(self):
        app = make_app()
        screen = board_screen(dragging=True)

        with with_screen(screen):
            app.action_pick_up_task()
            app.action_pick_up_section()

        screen.pick_up_task.assert_not_called()
        screen.pick_up_section.assert_not_called()

    def test_pick_up_section_requires_permission(self):
        app = make_app()
        app.board_service.session.can_drag_sections = False
        screen = board_screen()

        with with_screen(screen):
            app.action_pick_up_section()

        screen.pick_up_section.assert_not_called()
        app.notify.assert_called_once_with(
            "You don't have permission to reorder sections", severity="warning"
        )

    def test_pick_up_section(self):
        app = make_app()
        app.board_service.session.can_drag_sections = True
        screen = board_screen()

        with with_screen(screen):
            app.action_pick_up_section()

        screen.pick_up_section.assert_called_once_with()

    def test_escape_cancels_drag(self):
        app = make_app()
        screen = board_screen(dragging=True)

        with with_screen(screen):
            app.action_escape()

        screen.cancel_drag.assert_called_once_with()

    def test_escape_dismisses_modal(self):
        app = make_app()
        modal = MagicMock(spec=TaskDetailModal)

        with with_screen(modal):
            app.action_escape()

        modal.dismiss.assert_called_once_with()


class TestTaskActions:
    """Task actions go through the board service callbacks."""

    def test_delete_focused_task(self):
        app = make_app()
        screen = board_screen()
        screen.get_current_task.return_value = Task(id="t2", title="Second")

        with with_screen(screen):
            app.action_delete_task()

        app.board_service.delete_task.assert_called_once_with("t2")

    def test_no_focused_task(self):
        app = make_app()
        screen = board_screen()
        screen.get_current_task.return_value = None

        with with_screen(screen):
            app.action_edit_task()
            app.action_delete_task()

        app.board_service.edit_task.assert_not_called()
        app.board_service.delete_task.assert_not_called()

    def test_new_task_in_current_section(self):
        app = make_app()
        screen = board_screen()
        screen.current_section_id = "B"

        with with_screen(screen):
            app.action_new_task()

        app.board_service.add_task.assert_called_once_with("B")

    def test_request_delete_notifies(self):
        app = make_app()

        app._request_delete("t1")

        message = app.notify.call_args.args[0]
        assert "press r to refresh" in message
        assert app.notify.call_args.kwargs["severity"] == "warning"

    def test_open_task_pushes_detail(self):
        app = make_app()
        app.push_screen = MagicMock()

        task = Task(id="t1", title="First")

        with patch("boardsync.app.TaskDetailModal") as modal_cls:
            app._open_task(task)

        modal_cls.assert_called_once_with(task)
        app.push_screen.assert_called_once_with(modal_cls.return_value)


@pytest.mark.anyio
class TestRefresh:
    async def test_poll_skipped_while_busy(self):
        app = make_app()
        app.board_service.busy = True
        app.board_service.refresh = AsyncMock()

        await app._poll()

        app.board_service.refresh.assert_not_awaited()

    async def test_poll_refreshes_when_idle(self):
        app = make_app()
        app.board_service.busy = False
        app.board_service.refresh = AsyncMock()

        await app._poll()

        app.board_service.refresh.assert_awaited_once()

    async def test_refresh_action_notifies(self):
        app = make_app()
        app.board_service.refresh = AsyncMock(return_value=MagicMock())

        await app.action_refresh()

        app.notify.assert_called_once_with("Board refreshed", timeout=2)

    async def test_failed_refresh_stays_quiet(self):
        app = make_app()
        app.board_service.refresh = AsyncMock(return_value=None)

        await app.action_refresh()

        app.notify.assert_not_called()


class TestActivationConstraint:
    def test_distance_by_default(self):
        assert activation_constraint(BoardOptions(mouse_distance=3)) == ActivationConstraint.mouse(3)

    def test_delay(self):
        options = BoardOptions(activation="delay", touch_delay=0.25, touch_tolerance=4)

        assert activation_constraint(options) == ActivationConstraint.touch(0.25, 4)


class TestTaskDetail:
    def test_formats_payload_fields(self):
        from boardsync.ui.widgets.task_detail_modal import format_task_for_detail

        text = format_task_for_detail(
            Task(id="t1", title="First", section_id="A", due_date="2026-01-02T00:00:00Z")
        )

        assert "_id: t1" in text
        assert "sectionId: A" in text
        assert "dueDate:" in text
        assert "description" not in text
