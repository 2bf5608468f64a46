"""Note and segment domain models."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from notex.domain.category import Category


class OutputFormat(str, Enum):
    MARKDOWN = "markdown"
    PLAIN = "plain"

    @property
    def extension(self) -> str:
        return ".md" if self is OutputFormat.MARKDOWN else ".txt"

    @property
    def separator(self) -> str:
        """Separator placed between segments written to the same file."""
        if self is OutputFormat.MARKDOWN:
            return "\n\n---\n\n"
        return "\n\n" + "=" * 80 + "\n\n"


class Note(BaseModel):
    """A raw note loaded from disk.

    Attributes:
        path: Path of the source file
        content: Full text content of the file
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    content: str


class Segment(BaseModel):
    """A categorized unit of content extracted from a note by the model.

    Attributes:
        content: The extracted content
        category: Known or custom category
        subcategory: Optional finer grained topic, e.g. "topology"
        paths: Primary output paths relative to the output root
        cross_file_to: Additional output paths for content spanning several topics
    """

    model_config = ConfigDict(frozen=True)

    content: str
    category: Category
    subcategory: str | None = None
    paths: list[str] = Field(..., min_length=1)
    cross_file_to: list[str] = []

    @field_validator("cross_file_to", mode="before")
    @classmethod
    def _null_as_empty(cls, value: list[str] | None) -> list[str]:
        return value or []

    @property
    def all_paths(self) -> list[str]:
        """Primary paths followed by cross-file paths, without duplicates."""
        return list(dict.fromkeys([*self.paths, *self.cross_file_to]))


class EnhancedSegment(BaseModel):
    """A segment rewritten by the enhancement stage, ready for output.

    Attributes:
        source_path: Path of the note the segment came from
        content: Enhanced content
        category: Category carried over from the segment
        subcategory: Subcategory carried over from the segment
        target_paths: Every output path the segment is written to
        order: (note discovery index, segment index) used to order segments
            that share an output file
    """

    model_config = ConfigDict(frozen=True)

    source_path: Path
    content: str
    category: Category
    subcategory: str | None = None
    target_paths: list[str]
    order: tuple[int, int] = (0, 0)
