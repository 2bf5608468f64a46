from pydantic import ValidationError

from notex.domain.note import Note, Segment
from notex.domain.suggestions import CategorizationResponse
from notex.exceptions import CategorizationError, NotexError
from notex.llms.base import ModelGateway
from notex.llms.extraction import extract_json
from notex.processing.prompts import CATEGORIZATION_SYSTEM_PROMPT


async def categorize_note(gateway: ModelGateway, note: Note) -> list[Segment]:
    """Ask the model to split a note into categorized segments.

    Raises:
        CategorizationError: If the model call fails or the reply does not
            match the segment schema
    """
    user_prompt = f"Original file path: {note.path}\n\nNote content:\n{note.content}"

    try:
        response = await gateway.send_json(CATEGORIZATION_SYSTEM_PROMPT, user_prompt)
    except NotexError as e:
        raise CategorizationError(f"LLM client error: {e}") from e

    try:
        categorization = CategorizationResponse.model_validate_json(extract_json(response))
    except ValidationError as e:
        raise CategorizationError(f"Failed to parse categorization response: {e}") from e

    return categorization.segments
