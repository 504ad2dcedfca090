"""Shared test fixtures."""

import pytest

from fakes import EchoRenderer, FakeHost, FakeSurfaceFactory, ManualScheduler, write_note
from notepile.core.engine import RenderEngine


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def host():
    return FakeHost(width=800, header=24)


@pytest.fixture
def factory():
    return FakeSurfaceFactory()


@pytest.fixture
def engine(host, factory, scheduler):
    return RenderEngine(host, factory, scheduler, EchoRenderer())


@pytest.fixture
def storage(tmp_path):
    """Storage root with one notebook/chapter holding three notes."""
    notes_dir = tmp_path / "Work" / "Meetings" / "notes"
    write_note(
        notes_dir, "20240101-0900.json",
        notebook="Work", chapter="Meetings", title="Kickoff", date="2024-01-01",
        people="Ana, Bo", labels="plan", content="First line\nSecond line",
        createdAt=1704099600000,
    )
    write_note(
        notes_dir, "20240102-0900.json",
        notebook="Work", chapter="Meetings", title="", date="2024-01-02",
        content="Untitled body",
    )
    write_note(
        notes_dir, "20240103-0900.json",
        notebook="Work", chapter="Meetings", title="Review", date="2024-01-03",
        content="![plot](attachments/plot.png)",
    )
    (tmp_path / "Work" / "Archive" / "notes").mkdir(parents=True)
    (tmp_path / "Personal").mkdir()
    (tmp_path / ".garbage").mkdir()
    return tmp_path
