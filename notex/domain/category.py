"""Category domain model.

The model is asked to pick from a fixed taxonomy but is free to invent its own
top-level category, so a category is either one of the known values or a
custom lowercase name.
"""

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer


class KnownCategory(str, Enum):
    # Sciences
    MATHEMATICS = "mathematics"
    STATISTICS = "statistics"
    PHYSICS = "physics"
    CHEMISTRY = "chemistry"
    BIOLOGY = "biology"
    COMPUTER_SCIENCE = "computer_science"

    # Applied
    MACHINE_LEARNING = "machine_learning"
    ENGINEERING = "engineering"
    FINANCE = "finance"

    # Humanities
    PHILOSOPHY = "philosophy"
    HISTORY = "history"
    LITERATURE = "literature"
    LANGUAGES = "languages"

    # Personal
    JOURNAL = "journal"
    IDEAS = "ideas"
    TODO = "todo"

    # Media
    BOOKS = "books"
    VIDEOS = "videos"
    ARTICLES = "articles"
    PODCASTS = "podcasts"

    # Misc
    REFERENCE = "reference"
    LINKS = "links"
    UNCATEGORIZED = "uncategorized"

    def __str__(self) -> str:
        return self.value


class CustomCategory(BaseModel):
    """A category suggested by the model that is not part of the known taxonomy."""

    model_config = ConfigDict(frozen=True)

    name: str

    def __str__(self) -> str:
        return self.name


def parse_category(value: Any) -> KnownCategory | CustomCategory:
    """Parse a raw category string, preferring the known taxonomy.

    Matching is case-insensitive: the value is stripped and lowercased before
    it is compared with the known values or stored as a custom name.
    """
    if isinstance(value, (KnownCategory, CustomCategory)):
        return value
    if not isinstance(value, str):
        raise ValueError(f"Category must be a string, got {type(value).__name__}")

    normalized = value.strip().lower()
    if not normalized:
        raise ValueError("Category must not be empty")

    try:
        return KnownCategory(normalized)
    except ValueError:
        return CustomCategory(name=normalized)


def category_to_str(category: KnownCategory | CustomCategory) -> str:
    return str(category)


Category = Annotated[
    KnownCategory | CustomCategory,
    BeforeValidator(parse_category),
    PlainSerializer(category_to_str, return_type=str),
]
