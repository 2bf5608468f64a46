"""Tests for grouping enhanced segments and writing output files."""

import itertools
from pathlib import Path

import pytest

from notex.domain.note import OutputFormat
from notex.exceptions import WriterError
from notex.processing.writer import (
    build_file_content,
    group_by_output_path,
    normalize_output_path,
    write_outputs,
)
from tests.fakes import make_enhanced


def test_segment_fans_out_to_primary_and_cross_file_paths() -> None:
    segment = make_enhanced("Bayes rule", ["a.md", "b.md"])

    grouped = group_by_output_path([segment])

    assert grouped == {"a.md": [segment], "b.md": [segment]}


def test_shared_path_concatenates_instead_of_overwriting(output_directory: Path) -> None:
    first = make_enhanced("First", ["math/algebra.md"], order=(0, 0))
    second = make_enhanced("Second", ["math/algebra.md", "math/linear.md"], order=(1, 0))

    written = write_outputs(
        output_directory, group_by_output_path([first, second]), OutputFormat.MARKDOWN
    )

    assert sorted(p.relative_to(output_directory).as_posix() for p in written) == [
        "math/algebra.md",
        "math/linear.md",
    ]
    assert (output_directory / "math/algebra.md").read_text() == "First\n\n---\n\nSecond\n"
    assert (output_directory / "math/linear.md").read_text() == "Second\n"


def test_output_is_independent_of_completion_order(tmp_path: Path) -> None:
    segments = [
        make_enhanced("note0 seg0", ["shared.md", "a.md"], order=(0, 0)),
        make_enhanced("note0 seg1", ["shared.md"], order=(0, 1)),
        make_enhanced("note1 seg0", ["a.md", "shared.md"], order=(1, 0)),
        make_enhanced("note2 seg0", ["shared.md"], order=(2, 0)),
    ]

    outputs = set()
    for i, permutation in enumerate(itertools.permutations(segments)):
        out = tmp_path / f"run{i}"
        write_outputs(out, group_by_output_path(list(permutation)), OutputFormat.MARKDOWN)
        outputs.add(((out / "shared.md").read_bytes(), (out / "a.md").read_bytes()))

    assert len(outputs) == 1
    shared, _ = outputs.pop()
    assert shared == b"note0 seg0\n\n---\n\nnote0 seg1\n\n---\n\nnote1 seg0\n\n---\n\nnote2 seg0\n"


def test_plain_format_uses_rule_separator() -> None:
    segments = [make_enhanced("one", ["x.txt"]), make_enhanced("two\n\n", ["x.txt"], order=(1, 0))]

    content = build_file_content(segments, OutputFormat.PLAIN)

    assert content == "one\n\n" + "=" * 80 + "\n\ntwo\n"


@pytest.mark.parametrize("text", ["body", "body\n", "body\n\n\n"])
def test_file_ends_with_exactly_one_newline(text: str) -> None:
    assert build_file_content([make_enhanced(text, ["a.md"])], OutputFormat.MARKDOWN) == "body\n"


@pytest.mark.parametrize(
    "raw,output_format,expected",
    [
        ("math/algebra.md", None, "math/algebra.md"),
        ("./math/algebra.md", None, "math/algebra.md"),
        ("/math/algebra.md", None, "math/algebra.md"),
        ("math\\algebra.md", None, "math/algebra.md"),
        ("math/algebra.md", OutputFormat.PLAIN, "math/algebra.txt"),
        ("math/algebra", OutputFormat.MARKDOWN, "math/algebra.md"),
        ("../outside.md", None, None),
        ("math/../../outside.md", None, None),
        ("", None, None),
    ],
)
def test_normalize_output_path(raw: str, output_format: OutputFormat | None, expected: str | None) -> None:
    assert normalize_output_path(raw, output_format) == expected


def test_unsafe_paths_are_dropped_from_groups() -> None:
    segment = make_enhanced("x", ["../escape.md", "ok.md"])

    assert list(group_by_output_path([segment])) == ["ok.md"]


def test_equivalent_paths_do_not_duplicate_a_segment() -> None:
    segment = make_enhanced("x", ["ok.md", "./ok.md"])

    assert group_by_output_path([segment]) == {"ok.md": [segment]}


def test_write_failure_raises_writer_error(tmp_path: Path) -> None:
    blocker = tmp_path / "math"
    blocker.write_text("a file where a directory should be")

    with pytest.raises(WriterError):
        write_outputs(
            tmp_path, group_by_output_path([make_enhanced("x", ["math/algebra.md"])]), OutputFormat.MARKDOWN
        )
