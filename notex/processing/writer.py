"""Grouping of enhanced segments by output file and writing them to disk."""

from pathlib import Path, PurePosixPath

from loguru import logger

from notex.domain.note import EnhancedSegment, OutputFormat
from notex.exceptions import WriterError

NOTE_EXTENSIONS = {".md", ".txt"}


def normalize_output_path(raw_path: str, output_format: OutputFormat | None = None) -> str | None:
    """Normalize a model-suggested relative path.

    Backslashes become forward slashes and leading ``/`` or ``./`` are dropped.
    When ``output_format`` is given the note extension is set to match it.
    Paths that would leave the output root are rejected.

    Returns:
        The normalized relative path, or None if the path is unusable
    """
    cleaned = raw_path.strip().replace("\\", "/")
    parts = [p for p in PurePosixPath(cleaned).parts if p not in ("/", ".", "")]
    if not parts or ".." in parts:
        return None

    path = PurePosixPath(*parts)
    if output_format is not None:
        if path.suffix in NOTE_EXTENSIONS:
            path = path.with_suffix(output_format.extension)
        elif not path.suffix:
            path = path.with_name(path.name + output_format.extension)
    return str(path)


def group_by_output_path(
    segments: list[EnhancedSegment], output_format: OutputFormat | None = None
) -> dict[str, list[EnhancedSegment]]:
    """Build an inverted index from output path to the segments written there.

    Segments are ordered by their discovery order first, so the order in which
    the enhancement calls completed never affects the written content.

    Args:
        segments: Enhanced segments in any order
        output_format: If given, output paths get this format's extension

    Returns:
        Mapping of relative output path to its segments in discovery order
    """
    grouped: dict[str, list[EnhancedSegment]] = {}

    for segment in sorted(segments, key=lambda s: s.order):
        paths: dict[str, None] = {}
        for raw_path in segment.target_paths:
            path = normalize_output_path(raw_path, output_format)
            if path is None:
                logger.warning(f"Skipping unsafe output path {raw_path!r} from {segment.source_path}")
                continue
            paths[path] = None

        for path in paths:
            grouped.setdefault(path, []).append(segment)

    return grouped


def build_file_content(segments: list[EnhancedSegment], output_format: OutputFormat) -> str:
    content = output_format.separator.join(segment.content for segment in segments)
    return content.rstrip("\n") + "\n"


def write_outputs(
    output_dir: Path,
    grouped: dict[str, list[EnhancedSegment]],
    output_format: OutputFormat,
) -> list[Path]:
    """Write every output group to its file under ``output_dir``.

    Raises:
        WriterError: If a directory or file cannot be written
    """
    written_files = []

    for rel_path in sorted(grouped):
        file_path = output_dir / rel_path
        content = build_file_content(grouped[rel_path], output_format)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise WriterError(f"Could not write {file_path}: {e}") from e

        logger.debug(f"Wrote {len(grouped[rel_path])} segment(s) to {file_path}")
        written_files.append(file_path)

    return written_files
