from pathlib import Path

from notex.domain.note import EnhancedSegment, OutputFormat, Segment
from notex.exceptions import EnhancementError, NotexError
from notex.llms.base import ModelGateway
from notex.processing.prompts import get_enhancement_system_prompt


async def enhance_segment(
    gateway: ModelGateway,
    segment: Segment,
    source_path: Path,
    output_format: OutputFormat,
    order: tuple[int, int] = (0, 0),
) -> EnhancedSegment:
    """Rewrite a segment for its target format.

    The enhanced segment is written to both the segment's primary paths and
    its cross-file paths.

    Raises:
        EnhancementError: If the model call fails
    """
    system_prompt = get_enhancement_system_prompt(output_format)
    user_prompt = (
        f"Category: {segment.category} ({segment.subcategory or 'general'})\n\n"
        f"Original note segment:\n{segment.content}"
    )

    try:
        enhanced_content = await gateway.send(system_prompt, user_prompt)
    except NotexError as e:
        raise EnhancementError(f"LLM client error: {e}") from e

    return EnhancedSegment(
        source_path=source_path,
        content=enhanced_content.strip(),
        category=segment.category,
        subcategory=segment.subcategory,
        target_paths=segment.all_paths,
        order=order,
    )
