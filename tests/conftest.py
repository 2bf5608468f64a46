from pathlib import Path

import pytest


@pytest.fixture
def notes_directory(tmp_path: Path) -> Path:
    """Create an empty input directory for notes."""
    notes_dir = tmp_path / "notes"
    notes_dir.mkdir()
    return notes_dir


@pytest.fixture
def output_directory(tmp_path: Path) -> Path:
    """Output root; not created up front so writers must create it."""
    return tmp_path / "compressed"


@pytest.fixture
def mixed_topic_note(notes_directory: Path) -> Path:
    """A note covering two topics with two open questions."""
    note = notes_directory / "lecture.md"
    note.write_text(
        "eigenvalues are the roots of the characteristic polynom\n"
        "why is det(A - lI) = 0 ?\n\n"
        "the french revolution started 1789\n"
        "what caused the fall of the bastille ?\n"
    )
    return note
