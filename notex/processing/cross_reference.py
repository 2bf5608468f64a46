"""Advisory pass that links related written files with "see also" blocks."""

from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from notex.domain.suggestions import CrossReference, CrossRefResponse
from notex.exceptions import NotexError, WriterError
from notex.llms.base import ModelGateway
from notex.llms.extraction import extract_json
from notex.processing.prompts import CROSS_REFERENCE_SYSTEM_PROMPT
from notex.processing.reorganizer import relative_paths
from notex.processing.writer import normalize_output_path


def relative_link(from_file: str, to_file: str) -> str:
    """Compute the link from one output file to another.

    Walks up from the directory of ``from_file`` to the deepest common
    ancestor, then descends into ``to_file``.

    Example:
        relative_link("ml/backprop.md", "math/calculus/chain_rule.md")
        -> "../math/calculus/chain_rule.md"
    """
    from_parts = from_file.split("/")
    to_parts = to_file.split("/")

    common = 0
    for a, b in zip(from_parts[:-1], to_parts[:-1]):
        if a != b:
            break
        common += 1

    ups = [".."] * (len(from_parts) - common - 1)
    return "/".join(ups + to_parts[common:])


def build_summaries(output_dir: Path, files: list[Path], summary_chars: int = 500) -> dict[str, str]:
    """Read the first ``summary_chars`` characters of every readable written file."""
    summaries = {}
    for file, rel_path in sorted(zip(files, relative_paths(output_dir, files)), key=lambda x: x[1]):
        try:
            content = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.debug(f"Skipping summary of {file}: {e}")
            continue
        summaries[rel_path] = content[:summary_chars]
    return summaries


def format_see_also(reference: CrossReference) -> str:
    link = relative_link(reference.from_file, reference.to_file)
    return f"\n\n---\n\n**See also:** [{reference.to_file}](./{link}) - {reference.context}\n"


async def suggest_cross_references(
    gateway: ModelGateway, summaries: dict[str, str]
) -> CrossRefResponse | None:
    """Ask the model for relationships between written files.

    Returns:
        The parsed references, or None if the call or parsing failed
    """
    summaries_str = "\n".join(f"=== {path} ===\n{summary}\n" for path, summary in summaries.items())
    user_prompt = f"Notes to analyze:\n\n{summaries_str}"

    try:
        response = await gateway.send_json(CROSS_REFERENCE_SYSTEM_PROMPT, user_prompt)
    except NotexError as e:
        logger.warning(f"Cross-referencing pass failed: {e}")
        return None

    try:
        return CrossRefResponse.model_validate_json(extract_json(response))
    except ValidationError as e:
        logger.warning(f"Failed to parse cross-reference response: {e}")
        return None


def apply_cross_references(output_dir: Path, references: list[CrossReference]) -> list[CrossReference]:
    """Append a "see also" block to the source file of every reference.

    References whose source file does not exist are skipped.

    Returns:
        The references that were added

    Raises:
        WriterError: If a source file cannot be updated
    """
    added = []

    for reference in references:
        from_file = normalize_output_path(reference.from_file)
        to_file = normalize_output_path(reference.to_file)
        if from_file is None or to_file is None:
            logger.warning(f"Ignoring unsafe reference {reference.from_file} → {reference.to_file}")
            continue

        src_path = output_dir / from_file
        if not src_path.is_file():
            logger.debug(f"Skipping reference from missing file {reference.from_file}")
            continue

        reference = reference.model_copy(update={"from_file": from_file, "to_file": to_file})
        try:
            with open(src_path, "a", encoding="utf-8") as f:
                f.write(format_see_also(reference))
        except OSError as e:
            raise WriterError(f"Could not add cross-reference to {src_path}: {e}") from e

        print(f"   {reference.from_file} → {reference.to_file} ({reference.context})")
        added.append(reference)

    return added


async def run_cross_referencing(
    gateway: ModelGateway, output_dir: Path, files: list[Path], summary_chars: int = 500
) -> list[CrossReference]:
    """Run the cross-reference pass over the written files.

    Returns:
        The references that were added
    """
    summaries = build_summaries(output_dir, files, summary_chars)
    refs = await suggest_cross_references(gateway, summaries)
    if refs is None:
        return []

    if not refs.references:
        logger.info("No cross-references found")
        return []

    print("\n=== Cross-References Added ===\n")
    return apply_cross_references(output_dir, refs.references)
