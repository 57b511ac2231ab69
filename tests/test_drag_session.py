"""Tests for the drag session state machine."""

from boardsync.drag import DragSessionController, DragState, DropResult, subject_key
from boardsync.models import ContainerRef, PlaceholderRef, SectionRef, TaskRef


class TestDragStart:
    """Tests for picking items up."""

    def test_start_task(self):
        """A task token starts a task drag."""
        session = DragSessionController()

        subject = session.start("A::t1::0")

        assert subject == TaskRef(section_id="A", task_id="t1", index=0)
        assert session.state == DragState.ACTIVE
        assert session.is_active
        assert not session.is_section_drag

    def test_start_section(self):
        session = DragSessionController()

        subject = session.start("section::A")

        assert subject == SectionRef(section_id="A")
        assert session.is_section_drag

    def test_placeholder_and_container_are_not_draggable(self):
        """Only sections and tasks can be picked up."""
        session = DragSessionController()

        assert session.start("A::empty") is None
        assert session.start("A") is None
        assert session.state == DragState.IDLE

    def test_invalid_token_is_ignored(self):
        session = DragSessionController()

        assert session.start("A::t1::x") is None
        assert session.state == DragState.IDLE

    def test_only_one_session_at_a_time(self):
        session = DragSessionController()
        session.start("A::t1::0")

        assert session.start("A::t2::1") is None
        assert session.subject == TaskRef(section_id="A", task_id="t1", index=0)

    def test_section_drag_requires_permission(self):
        """Without section management, section tokens are refused."""
        session = DragSessionController(can_drag_sections=False)

        assert session.start("section::A") is None
        assert not session.is_draggable("section::A")
        assert session.is_draggable("A::t1::0")

    def test_locked_subject_is_refused(self):
        """A subject whose previous move is in flight cannot be picked up."""
        locked = {("task", "t1")}
        session = DragSessionController(is_locked=lambda key: key in locked)

        assert session.start("A::t1::0") is None
        assert not session.is_draggable("B::t1::3")
        assert session.start("A::t2::1") is not None

    def test_tasks_not_draggable_during_section_drag(self):
        session = DragSessionController()
        session.start("section::A")

        assert not session.is_draggable("A::t1::0")
        assert session.is_draggable("section::B")


class TestDragOver:
    """Tests for target tracking."""

    def test_tracks_any_token_shape(self):
        session = DragSessionController()
        session.start("A::t1::0")

        assert session.over("B::empty") == PlaceholderRef(section_id="B")
        assert session.over("B") == ContainerRef(section_id="B")
        assert session.over_target == ContainerRef(section_id="B")

    def test_none_or_invalid_clears_target(self):
        session = DragSessionController()
        session.start("A::t1::0")
        session.over("B")

        assert session.over(None) is None
        assert session.over_target is None
        session.over("B")
        assert session.over("::bad") is None
        assert session.over_target is None

    def test_over_ignored_when_idle(self):
        session = DragSessionController()

        assert session.over("B") is None


class TestDragEnd:
    """Tests for dropping and cancelling."""

    def test_end_with_explicit_target(self):
        session = DragSessionController()
        session.start("A::t1::0")

        result = session.end("B::empty")

        assert result == DropResult(
            subject=TaskRef(section_id="A", task_id="t1", index=0),
            target=PlaceholderRef(section_id="B"),
        )
        assert session.state == DragState.RESOLVED
        assert session.result == result
        assert session.subject is None

    def test_end_uses_tracked_target(self):
        session = DragSessionController()
        session.start("section::A")
        session.over("section::B")

        result = session.end()

        assert result is not None
        assert result.target == SectionRef(section_id="B")

    def test_end_without_target_cancels(self):
        """Dropping outside every droppable returns to idle."""
        session = DragSessionController()
        session.start("A::t1::0")

        assert session.end() is None
        assert session.state == DragState.IDLE

    def test_end_with_invalid_target_cancels(self):
        session = DragSessionController()
        session.start("A::t1::0")

        assert session.end("A::t1::nope") is None
        assert session.state == DragState.IDLE

    def test_end_when_idle(self):
        assert DragSessionController().end("B") is None

    def test_cancel_resets(self):
        session = DragSessionController()
        session.start("A::t1::0")
        session.over("B")

        session.cancel()

        assert session.state == DragState.IDLE
        assert session.subject is None
        assert session.over_target is None

    def test_new_session_after_resolve(self):
        session = DragSessionController()
        session.start("A::t1::0")
        session.end("B")

        assert session.start("A::t2::1") is not None
        assert session.result is None


class TestSubjectKey:
    def test_task_key_ignores_position(self):
        """The same task keeps its key across sections and indexes."""
        a = subject_key(TaskRef(section_id="A", task_id="t1", index=0))
        b = subject_key(TaskRef(section_id="B", task_id="t1", index=4))

        assert a == b == ("task", "t1")

    def test_section_key(self):
        assert subject_key(SectionRef(section_id="A")) == ("section", "A")
