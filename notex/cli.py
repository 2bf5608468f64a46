"""CLI for compressing and enhancing a directory of notes with an LLM."""

import argparse
import asyncio
import sys
from pathlib import Path

from loguru import logger

from notex.config import settings
from notex.domain.note import OutputFormat
from notex.exceptions import NotexError
from notex.llms.openai_gateway import OpenAIGateway
from notex.processing.orchestrator import PipelineOrchestrator, PipelineResult


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notex", description="AI-powered note compressor and enhancer"
    )
    parser.add_argument(
        "input", type=Path, metavar="INPUT_DIR", help="Input directory containing notes to process"
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=settings.output_dir, help="Output directory for processed notes"
    )
    parser.add_argument("-m", "--model", default=settings.model, help="Model name to use")
    parser.add_argument(
        "-u",
        "--url",
        default=settings.base_url,
        help="API base URL (e.g., http://localhost:8080/v1 for llama-server)",
    )
    parser.add_argument(
        "-k",
        "--api-key",
        default=settings.api_key,
        help='API key (use "sk-no-key-required" for local servers)',
    )
    parser.add_argument(
        "-p",
        "--parallel",
        type=int,
        default=settings.parallel,
        help="Maximum concurrent LLM requests (match your server's -np value)",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=[f.value for f in OutputFormat],
        default=settings.output_format,
        help="Output format",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Only categorize and show plan, don't enhance or write",
    )
    parser.add_argument(
        "-x",
        "--exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Exclude pattern (glob syntax, can be specified multiple times)",
    )
    parser.add_argument(
        "--retries", type=int, default=settings.retries, help="Number of attempts for failed LLM calls"
    )
    parser.add_argument(
        "--reorganize", action="store_true", help="Run reorganization pass to optimize file structure"
    )
    parser.add_argument(
        "--cross-ref", action="store_true", help="Add cross-references between related notes"
    )
    return parser


def configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else settings.log_level
    logger.configure(handlers=[{"sink": sys.stderr, "level": level}])


async def main(args: argparse.Namespace) -> PipelineResult:
    gateway = OpenAIGateway(
        base_url=args.url,
        api_key=args.api_key,
        model=args.model,
        max_retries=args.retries,
        timeout=settings.request_timeout,
        backoff_base=settings.backoff_base,
    )
    orchestrator = PipelineOrchestrator(
        gateway=gateway,
        output_dir=args.output,
        output_format=OutputFormat(args.format),
        parallel=args.parallel,
        exclude_patterns=args.exclude,
        dry_run=args.dry_run,
        reorganize=args.reorganize,
        cross_ref=args.cross_ref,
        summary_chars=settings.summary_chars,
    )
    return await orchestrator.run(args.input)


def run(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    logger.info("notex - AI-powered note compressor")
    logger.info(f"Input: {args.input}")
    logger.info(f"Output: {args.output}")
    logger.info(f"Model: {args.model} @ {args.url}")
    logger.info(f"Parallel: {args.parallel} | Retries: {args.retries}")
    logger.info(f"Format: {args.format}")
    if args.dry_run:
        logger.info("Mode: DRY RUN (no files will be written)")
    if args.exclude:
        logger.info(f"Excluding: {args.exclude}")
    if args.reorganize:
        logger.info("Reorganization pass: ENABLED")
    if args.cross_ref:
        logger.info("Cross-referencing: ENABLED")

    try:
        result = asyncio.run(main(args))
    except (NotexError, ValueError) as e:
        logger.error(f"Processing failed: {e}")
        return 1

    if not result.dry_run:
        logger.info("Successfully processed notes!")
        for file in result.written_files:
            print(f"  {file}")
        print(f"\nWrote {len(result.written_files)} files")
    return 0


if __name__ == "__main__":
    sys.exit(run())
