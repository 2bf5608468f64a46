"""Advisory pass that lets the model restructure the written tree."""

from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from notex.domain.suggestions import ReorgResponse, ReorgSuggestion
from notex.exceptions import NotexError, WriterError
from notex.llms.base import ModelGateway
from notex.llms.extraction import extract_json
from notex.processing.prompts import REORGANIZATION_SYSTEM_PROMPT
from notex.processing.writer import normalize_output_path


def relative_paths(output_dir: Path, files: list[Path]) -> list[str]:
    paths = []
    for file in files:
        try:
            paths.append(file.relative_to(output_dir).as_posix())
        except ValueError:
            paths.append(file.as_posix())
    return paths


async def suggest_reorganization(
    gateway: ModelGateway, output_dir: Path, files: list[Path]
) -> ReorgResponse | None:
    """Ask the model for file moves and new categories.

    Returns:
        The parsed suggestions, or None if the call or parsing failed
    """
    user_prompt = "Current file structure:\n" + "\n".join(relative_paths(output_dir, files))

    try:
        response = await gateway.send_json(REORGANIZATION_SYSTEM_PROMPT, user_prompt)
    except NotexError as e:
        logger.warning(f"Reorganization pass failed: {e}")
        return None

    try:
        return ReorgResponse.model_validate_json(extract_json(response))
    except ValidationError as e:
        logger.warning(f"Failed to parse reorganization response: {e}")
        return None


def print_suggestions(reorg: ReorgResponse) -> None:
    print("\n=== Reorganization Suggestions ===\n")

    if reorg.file_moves:
        print("File moves:")
        for move in reorg.file_moves:
            print(f"   {move.current_path} → {move.suggested_path}\n      Reason: {move.reason}")

    if reorg.new_categories:
        print("\nNew categories:")
        for category in reorg.new_categories:
            name = category.category
            if category.subcategory:
                name += f"/{category.subcategory}"
            print(f"   {name}\n      Files: {category.affected_files}\n      Reason: {category.reason}")


def apply_moves(output_dir: Path, moves: list[ReorgSuggestion]) -> list[tuple[Path, Path]]:
    """Rename files as suggested, skipping moves whose source no longer exists.

    Returns:
        (source, destination) pairs of the moves that were applied, in order

    Raises:
        WriterError: If a rename fails
    """
    applied = []

    for move in moves:
        current = normalize_output_path(move.current_path)
        suggested = normalize_output_path(move.suggested_path)
        if current is None or suggested is None:
            logger.warning(f"Ignoring unsafe move {move.current_path} → {move.suggested_path}")
            continue

        src = output_dir / current
        dst = output_dir / suggested
        if not src.is_file():
            logger.debug(f"Skipping move of missing file {move.current_path}")
            continue
        if src == dst:
            continue

        try:
            dst.parent.mkdir(parents=True, exist_ok=True)
            src.rename(dst)
        except OSError as e:
            raise WriterError(f"Could not move {src} to {dst}: {e}") from e

        logger.info(f"Moved {move.current_path} → {move.suggested_path}")
        applied.append((src, dst))

    return applied


async def run_reorganization(
    gateway: ModelGateway, output_dir: Path, files: list[Path]
) -> list[Path]:
    """Run the reorganization pass over the written files.

    Args:
        gateway: Model gateway
        output_dir: Output root the files were written under
        files: Paths written by the previous phase

    Returns:
        The written file paths after the moves were applied
    """
    reorg = await suggest_reorganization(gateway, output_dir, files)
    if reorg is None:
        return files

    if not reorg.file_moves and not reorg.new_categories:
        logger.info("No reorganization needed - structure looks good!")
        return files

    print_suggestions(reorg)
    moved = list(files)
    for src, dst in apply_moves(output_dir, reorg.file_moves):
        moved = [dst if file == src else file for file in moved]
    return list(dict.fromkeys(moved))
