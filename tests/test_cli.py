"""Tests for the command line entry point and board commands."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from boardsync.__main__ import build_settings, main, parse_args
from boardsync.cli.board import run_drop, run_show
from boardsync.config import Settings


def seed_project(project_root: Path) -> None:
    """File-backed project 'default' with sections A (t1, t2) and empty B."""
    store = project_root / ".boardsync" / "board.yaml"
    store.parent.mkdir(parents=True)
    store.write_text(
        yaml.safe_dump(
            {
                "version": 1,
                "projects": {
                    "default": {
                        "sections": [
                            {"_id": "A", "name": "To Do", "order": 0},
                            {"_id": "B", "name": "Done", "order": 1},
                        ],
                        "tasks": [
                            {"_id": "t1", "title": "First", "order": 0, "sectionId": "A"},
                            {"_id": "t2", "title": "Second", "order": 1, "sectionId": "A"},
                        ],
                    }
                },
            }
        )
    )


def stored_tasks(project_root: Path) -> dict[str, tuple[str, int]]:
    data = yaml.safe_load((project_root / ".boardsync" / "board.yaml").read_text())
    return {t["_id"]: (t["sectionId"], t["order"]) for t in data["projects"]["default"]["tasks"]}


class TestParseArgs:
    def test_defaults(self):
        args = parse_args([])

        assert args.project_root is None
        assert args.drop is None
        assert args.verbose == 0

    def test_flags_build_settings(self, tmp_path: Path):
        args = parse_args(
            ["--project-root", str(tmp_path), "--project", "roadmap", "--backend", "http", "-vv"]
        )

        settings = build_settings(args)

        assert settings.project_root == tmp_path
        assert settings.project_id == "roadmap"
        assert settings.backend == "http"
        assert settings.verbose == 2

    def test_drop_takes_two_tokens(self):
        args = parse_args(["--drop", "A::t1::0", "B::empty"])

        assert args.drop == ["A::t1::0", "B::empty"]

    def test_rejects_unknown_backend(self):
        with pytest.raises(SystemExit):
            parse_args(["--backend", "github"])


class TestShow:
    def test_prints_tokens(self, tmp_path: Path, capsys):
        seed_project(tmp_path)

        exit_code = run_show(Settings(project_root=tmp_path))

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "section::A" in out
        assert "A::t1::0" in out
        assert "A::t2::1" in out
        assert "B::empty" in out

    def test_store_error(self, tmp_path: Path, capsys):
        store = tmp_path / ".boardsync" / "board.yaml"
        store.parent.mkdir(parents=True)
        store.write_text("- not a mapping\n")

        assert run_show(Settings(project_root=tmp_path)) == 1
        assert "Failed to load board" in capsys.readouterr().err


class TestDrop:
    """Scripted drops go through the same engine as the TUI."""

    def test_move_task_to_empty_section(self, tmp_path: Path, capsys):
        seed_project(tmp_path)

        exit_code = run_drop(Settings(project_root=tmp_path), "A::t1::0", "B::empty")

        assert exit_code == 0
        assert "Move saved" in capsys.readouterr().out
        assert stored_tasks(tmp_path) == {"t1": ("B", 0), "t2": ("A", 0)}

    def test_reorder_sections(self, tmp_path: Path):
        seed_project(tmp_path)

        assert run_drop(Settings(project_root=tmp_path), "section::B", "section::A") == 0

        data = yaml.safe_load((tmp_path / ".boardsync" / "board.yaml").read_text())
        sections = {s["_id"]: s["order"] for s in data["projects"]["default"]["sections"]}
        assert sections == {"B": 0, "A": 1}

    def test_noop(self, tmp_path: Path, capsys):
        seed_project(tmp_path)

        assert run_drop(Settings(project_root=tmp_path), "A::t1::0", "A::t1::0") == 0
        assert "Nothing to move" in capsys.readouterr().out

    def test_not_draggable(self, tmp_path: Path, capsys):
        seed_project(tmp_path)

        assert run_drop(Settings(project_root=tmp_path), "B::empty", "A") == 1
        assert "Cannot drag" in capsys.readouterr().err

    def test_section_drag_without_permission(self, tmp_path: Path):
        seed_project(tmp_path)
        (tmp_path / "boardsync.yml").write_text("board:\n  can_manage_sections: false\n")

        assert run_drop(Settings(project_root=tmp_path), "section::B", "section::A") == 1


class TestMain:
    def test_show_exits_with_code(self, tmp_path: Path):
        seed_project(tmp_path)

        with pytest.raises(SystemExit) as exc:
            main(["--project-root", str(tmp_path), "--show"])

        assert exc.value.code == 0

    def test_runs_tui_by_default(self, tmp_path: Path):
        with patch("boardsync.app.run") as run:
            main(["--project-root", str(tmp_path)])

        (settings,), _ = run.call_args
        assert settings.project_root == tmp_path
