"""Tests for the categorization and enhancement stages."""

import json
from pathlib import Path

import pytest

from notex.domain.category import CustomCategory, KnownCategory
from notex.domain.note import Note, OutputFormat, Segment
from notex.exceptions import CategorizationError, EnhancementError, GatewayError
from notex.processing.categorizer import categorize_note
from notex.processing.enhancer import enhance_segment
from notex.processing.prompts import CATEGORIZATION_SYSTEM_PROMPT
from tests.fakes import FakeGateway

NOTE = Note(path=Path("/notes/mixed.md"), content="topology and cooking")

SEGMENTS_JSON = json.dumps(
    {
        "segments": [
            {
                "content": "open sets",
                "category": "mathematics",
                "subcategory": "topology",
                "paths": ["mathematics/topology.md"],
                "cross_file_to": [],
            },
            {"content": "bread", "category": "Cooking", "paths": ["cooking/bread.md"]},
        ]
    }
)


async def test_categorize_note_parses_fenced_reply() -> None:
    gateway = FakeGateway(lambda system, user: f"```json\n{SEGMENTS_JSON}\n```")

    segments = await categorize_note(gateway, NOTE)

    assert [s.category for s in segments] == [KnownCategory.MATHEMATICS, CustomCategory(name="cooking")]
    assert segments[0].subcategory == "topology"
    assert segments[1].subcategory is None

    system, user = gateway.calls[0]
    assert system.startswith(CATEGORIZATION_SYSTEM_PROMPT)
    assert "valid JSON only" in system
    assert user == "Original file path: /notes/mixed.md\n\nNote content:\ntopology and cooking"


@pytest.mark.parametrize(
    "reply",
    [
        "I could not categorize this note.",
        '{"segments": [{"content": "x"}]}',
        '{"notes": []}',
        '{"segments": [{"content": "x", "category": "ideas", "paths": []}]}',
    ],
)
async def test_categorize_note_rejects_malformed_reply(reply: str) -> None:
    gateway = FakeGateway(lambda system, user: reply)

    with pytest.raises(CategorizationError, match="Failed to parse"):
        await categorize_note(gateway, NOTE)


async def test_categorize_note_wraps_gateway_errors() -> None:
    gateway = FakeGateway(lambda system, user: GatewayError(3, ConnectionError("down")))

    with pytest.raises(CategorizationError) as exc_info:
        await categorize_note(gateway, NOTE)

    assert isinstance(exc_info.value.__cause__, GatewayError)


def make_segment(**overrides: object) -> Segment:
    data = {
        "content": "what is a fourier transform ?",
        "category": "mathematics",
        "subcategory": "analysis",
        "paths": ["mathematics/analysis.md"],
        "cross_file_to": ["engineering/signals.md"],
    }
    data.update(overrides)
    return Segment.model_validate(data)


async def test_enhance_segment_merges_paths_and_strips_reply() -> None:
    gateway = FakeGateway(lambda system, user: "\n[Q: what is a fourier transform] A change of basis.\n\n")

    enhanced = await enhance_segment(
        gateway, make_segment(), Path("/notes/a.md"), OutputFormat.MARKDOWN, order=(2, 1)
    )

    assert enhanced.content == "[Q: what is a fourier transform] A change of basis."
    assert enhanced.target_paths == ["mathematics/analysis.md", "engineering/signals.md"]
    assert enhanced.category is KnownCategory.MATHEMATICS
    assert enhanced.subcategory == "analysis"
    assert enhanced.source_path == Path("/notes/a.md")
    assert enhanced.order == (2, 1)

    system, user = gateway.calls[0]
    assert "Format: Markdown" in system
    assert "[Q: original question]" in system
    assert user == "Category: mathematics (analysis)\n\nOriginal note segment:\nwhat is a fourier transform ?"


async def test_enhance_segment_plain_prompt_and_general_subcategory() -> None:
    gateway = FakeGateway(lambda system, user: "ok")

    await enhance_segment(
        gateway, make_segment(subcategory=None), Path("a.md"), OutputFormat.PLAIN
    )

    system, user = gateway.calls[0]
    assert "Format: Plain text" in system
    assert "ASCII" in system
    assert user.startswith("Category: mathematics (general)")


async def test_enhance_segment_wraps_gateway_errors() -> None:
    gateway = FakeGateway(lambda system, user: GatewayError(1, TimeoutError()))

    with pytest.raises(EnhancementError):
        await enhance_segment(gateway, make_segment(), Path("a.md"), OutputFormat.MARKDOWN)
