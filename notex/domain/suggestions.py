"""Response models for the structured model calls."""

from pydantic import BaseModel

from notex.domain.note import Segment


class CategorizationResponse(BaseModel):
    segments: list[Segment]


class ReorgSuggestion(BaseModel):
    """Suggestion for moving a written file."""

    current_path: str
    suggested_path: str
    reason: str = ""


class CategorySuggestion(BaseModel):
    """Suggestion for a new category or subcategory."""

    category: str
    subcategory: str | None = None
    affected_files: list[str] = []
    reason: str = ""


class ReorgResponse(BaseModel):
    file_moves: list[ReorgSuggestion] = []
    new_categories: list[CategorySuggestion] = []


class CrossReference(BaseModel):
    """A "see also" link from one written file to another."""

    from_file: str
    to_file: str
    context: str = ""


class CrossRefResponse(BaseModel):
    references: list[CrossReference]
