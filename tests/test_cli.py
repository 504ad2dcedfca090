"""Tests for the command line interface."""

import json

from fakes import run_cli, write_note


def test_ls_lists_newest_first(storage):
    result = run_cli("--storage", str(storage), "ls", "--notebook", "Work", "--chapter", "Meetings")

    assert result.returncode == 0
    lines = result.stdout.strip().splitlines()
    assert [line.split("\t")[0] for line in lines] == [
        "20240103-0900.json",
        "20240102-0900.json",
        "20240101-0900.json",
    ]
    assert lines[0].endswith("\tReview")
    assert lines[1].endswith("\t20240102-0900.json")


def test_ls_json(storage):
    result = run_cli(
        "--storage", str(storage), "ls", "--notebook", "Work", "--chapter", "Meetings", "--json"
    )

    assert result.returncode == 0
    rows = json.loads(result.stdout)
    kickoff = rows[-1]
    assert kickoff["title"] == "Kickoff"
    assert kickoff["people"] == ["Ana", "Bo"]
    assert kickoff["labels"] == ["plan"]
    assert kickoff["created"] is not None


def test_ls_ascending_from_config(storage):
    (storage / "notepile.toml").write_text('[viewer]\nsort_order = "ascending"\n')

    result = run_cli(
        "--storage", str(storage), "ls", "--notebook", "Work", "--chapter", "Meetings",
        cwd=storage,
    )

    assert result.returncode == 0
    assert result.stdout.splitlines()[0].startswith("20240101-0900.json")


def test_ls_reports_unreadable_notes(storage):
    notes_dir = storage / "Work" / "Meetings" / "notes"
    (notes_dir / "20240104-0900.json").write_text("{oops")

    result = run_cli("--storage", str(storage), "ls", "--notebook", "Work", "--chapter", "Meetings")

    assert result.returncode == 0
    assert "20240104-0900.json\t(failed to read:" in result.stdout


def test_ls_missing_chapter(storage):
    result = run_cli("--storage", str(storage), "ls", "--notebook", "Work", "--chapter", "Nope")

    assert result.returncode == 1
    assert "No notes directory found" in result.stderr


def test_render_prints_document(tmp_path):
    path = write_note(tmp_path / "notes", "a.json", title="A", content="line one\nline two")

    result = run_cli("--storage", str(tmp_path), "render", str(path), "--width", "468")

    assert result.returncode == 0
    assert '<div id="notepile-root">' in result.stdout
    assert "line one<br" in result.stdout
    assert 'content="width=468"' in result.stdout
    assert (tmp_path / "notes").resolve().as_uri() + "/" in result.stdout


def test_render_unreadable_note(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("nope")

    result = run_cli("--storage", str(tmp_path), "render", str(path))

    assert result.returncode == 1
    assert result.stderr.startswith("Error:")


def test_bad_config_is_reported(tmp_path):
    config = tmp_path / "bad.toml"
    config.write_text("[layout]\nmax_height = -1\n")

    result = run_cli("--config", str(config), "ls", "--notebook", "x", "--chapter", "y")

    assert result.returncode == 1
    assert "max_height" in result.stderr
