"""Orchestration service for the complete note processing pipeline."""

from pathlib import Path

from loguru import logger
from pydantic import BaseModel
from tqdm import tqdm

from notex.domain.note import EnhancedSegment, Note, OutputFormat, Segment
from notex.llms.base import ModelGateway

from .categorizer import categorize_note
from .cross_reference import run_cross_referencing
from .discovery import NoteDiscovery
from .enhancer import enhance_segment
from .reorganizer import run_reorganization
from .scheduler import run_bounded
from .writer import group_by_output_path, write_outputs


class CategorizedNote(BaseModel):
    """A note together with the segments the model split it into."""

    index: int
    note: Note
    segments: list[Segment]


class SegmentTask(BaseModel):
    note_index: int
    segment_index: int
    source_path: Path
    segment: Segment


class PipelineResult(BaseModel):
    notes: int = 0
    segments: int = 0
    enhanced: int = 0
    written_files: list[Path] = []
    dry_run: bool = False


class PipelineOrchestrator:
    """Orchestrates discovery, categorization, enhancement, writing and the advisory passes."""

    def __init__(
        self,
        *,
        gateway: ModelGateway,
        output_dir: Path,
        output_format: OutputFormat = OutputFormat.MARKDOWN,
        parallel: int = 8,
        exclude_patterns: list[str] | None = None,
        dry_run: bool = False,
        reorganize: bool = False,
        cross_ref: bool = False,
        summary_chars: int = 500,
        show_progress: bool = True,
    ):
        """Initialize the orchestrator.

        Args:
            gateway: Model gateway shared by every model call
            output_dir: Root directory for written files
            output_format: Markdown or plain text output
            parallel: Maximum number of concurrent model calls per phase
            exclude_patterns: Glob patterns for input files to skip
            dry_run: Stop after categorization and print the plan
            reorganize: Run the reorganization pass after writing
            cross_ref: Run the cross-reference pass after writing
            summary_chars: Characters of each file shown to the cross-reference pass
            show_progress: Render progress bars
        """
        if parallel < 1:
            raise ValueError(f"parallel must be at least 1, got {parallel}")

        self.gateway = gateway
        self.output_dir = output_dir
        self.output_format = output_format
        self.parallel = parallel
        self.dry_run = dry_run
        self.reorganize = reorganize
        self.cross_ref = cross_ref
        self.summary_chars = summary_chars
        self.show_progress = show_progress

        self.discovery = NoteDiscovery(exclude_patterns=exclude_patterns)

    async def run(self, input_dir: Path) -> PipelineResult:
        """Run the full pipeline over ``input_dir``.

        Per-note and per-segment failures are logged and skipped. Errors while
        writing output propagate.

        Args:
            input_dir: Directory containing the notes to process

        Returns:
            PipelineResult describing what was processed and written
        """
        logger.info(f"Phase 1: Discovering notes in {input_dir}")
        notes = self.discovery.discover(input_dir)
        logger.info(f"Found {len(notes)} notes")

        if not notes:
            logger.warning("No notes found to process")
            return PipelineResult(dry_run=self.dry_run)

        logger.info("Phase 2: Categorizing notes...")
        categorized = await self._categorize_all(notes)
        total_segments = sum(len(c.segments) for c in categorized)
        logger.info(f"Categorized into {total_segments} segments")

        if self.dry_run:
            self._print_plan(categorized, total_segments)
            return PipelineResult(notes=len(categorized), segments=total_segments, dry_run=True)

        logger.info("Phase 3: Enhancing segments...")
        enhanced = await self._enhance_all(categorized, total_segments)
        logger.info(f"Enhanced {len(enhanced)} segments")

        logger.info("Phase 4: Writing output files...")
        grouped = group_by_output_path(enhanced, self.output_format)
        written = write_outputs(self.output_dir, grouped, self.output_format)
        logger.info(f"Wrote {len(written)} files to {self.output_dir}")

        if self.reorganize:
            logger.info("Phase 5: Running reorganization pass...")
            written = await run_reorganization(self.gateway, self.output_dir, written)

        if self.cross_ref:
            logger.info("Phase 6: Adding cross-references...")
            await run_cross_referencing(self.gateway, self.output_dir, written, self.summary_chars)

        return PipelineResult(
            notes=len(categorized),
            segments=total_segments,
            enhanced=len(enhanced),
            written_files=written,
        )

    async def _categorize_all(self, notes: list[Note]) -> list[CategorizedNote]:
        """Categorize every note, keeping each note's discovery index."""

        async def categorize(item: tuple[int, Note]) -> CategorizedNote:
            index, note = item
            logger.debug(f"Categorizing: {note.path}")
            segments = await categorize_note(self.gateway, note)
            logger.debug(f"Categorized {note.path} into {len(segments)} segments")
            return CategorizedNote(index=index, note=note, segments=segments)

        with tqdm(total=len(notes), desc="Categorizing", disable=not self.show_progress) as bar:
            batch = await run_bounded(
                list(enumerate(notes)),
                categorize,
                parallel=self.parallel,
                describe=lambda item: f"note {item[1].path}",
                progress=bar,
            )

        if batch.failed:
            logger.warning(f"{batch.failed} of {len(notes)} notes could not be categorized")
        return batch.results

    async def _enhance_all(
        self, categorized: list[CategorizedNote], total_segments: int
    ) -> list[EnhancedSegment]:
        """Enhance every segment of every categorized note."""
        tasks = [
            SegmentTask(
                note_index=c.index,
                segment_index=i,
                source_path=c.note.path,
                segment=segment,
            )
            for c in categorized
            for i, segment in enumerate(c.segments)
        ]

        async def enhance(task: SegmentTask) -> EnhancedSegment:
            logger.debug(f"Enhancing segment from: {task.source_path}")
            return await enhance_segment(
                self.gateway,
                task.segment,
                task.source_path,
                self.output_format,
                order=(task.note_index, task.segment_index),
            )

        with tqdm(total=total_segments, desc="Enhancing", disable=not self.show_progress) as bar:
            batch = await run_bounded(
                tasks,
                enhance,
                parallel=self.parallel,
                describe=lambda task: f"segment {task.segment_index} from {task.source_path}",
                progress=bar,
            )

        if batch.failed:
            logger.warning(f"{batch.failed} of {total_segments} segments could not be enhanced")
        return batch.results

    @staticmethod
    def _print_plan(categorized: list[CategorizedNote], total_segments: int) -> None:
        print("\n=== DRY RUN: Categorization Plan ===\n")
        for c in categorized:
            print(f"  {c.note.path}")
            for segment in c.segments:
                print(
                    f"   → {segment.category}/{segment.subcategory or 'general'} → {segment.paths}"
                )
        print(f"\nTotal: {len(categorized)} notes → {total_segments} segments")
        print("Run without --dry-run to process and write files.")
