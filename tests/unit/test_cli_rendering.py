"""Unit tests for CLI output and error rendering helpers."""

from __future__ import annotations

import pytest
import typer

from bookflow.cli_rendering import (
    echo_chapter_list,
    echo_search_results,
    echo_segmentation_source,
    echo_units,
    exit_with_command_error,
)
from bookflow.errors import ReaderStageError
from bookflow.models.datatypes import BookSearchResult, Chapter, GutenbergMatch, SegmentationReport


def test_exit_with_command_error_renders_stage_error_with_hint(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print stage diagnostics and hint before exiting with code 1."""

    error = ReaderStageError(
        stage="library",
        detail="Unknown book id `moby`.",
        hint="Register it first with `bookflow add <book-id> --url <text-url>`.",
    )

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("read", error)

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "read failed at stage `library`: Unknown book id `moby`." in captured.err
    assert "Hint: Register it first with `bookflow add <book-id> --url <text-url>`." in captured.err


def test_exit_with_command_error_renders_non_stage_fallback(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Renderer should print fallback exception text for non-stage failures."""

    with pytest.raises(typer.Exit) as exc_info:
        exit_with_command_error("chapters", RuntimeError("unexpected row error"))

    captured = capsys.readouterr()
    assert exc_info.value.exit_code == 1
    assert "chapters failed: unexpected row error" in captured.err


def test_echo_chapter_list_prints_header_and_rows(capsys: pytest.CaptureFixture[str]) -> None:
    echo_chapter_list(
        [
            Chapter(index=1, title="CHAPTER II", content="b"),
            Chapter(index=0, title="CHAPTER I", content="a"),
        ]
    )

    assert capsys.readouterr().out.splitlines() == [
        "2 Chapters Available",
        "0. CHAPTER I",
        "1. CHAPTER II",
    ]


def test_echo_chapter_list_prints_empty_state(capsys: pytest.CaptureFixture[str]) -> None:
    echo_chapter_list([])

    assert capsys.readouterr().out == "No chapters available for this book.\n"


def test_echo_segmentation_source_reports_fallback_and_truncation(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Paging fallback should surface its reason and any dropped content."""

    echo_segmentation_source(
        SegmentationReport(
            chapters=(),
            source="pages",
            fallback_reason="found 1 heading(s); need at least 2",
            truncated=True,
        )
    )

    output = capsys.readouterr().out
    assert "Chapter source: pages" in output
    assert "Chapter fallback reason: found 1 heading(s); need at least 2" in output
    assert "Warning: text exceeds the page cap" in output


def test_echo_segmentation_source_is_terse_for_headings(
    capsys: pytest.CaptureFixture[str],
) -> None:
    echo_segmentation_source(SegmentationReport(chapters=(), source="headings"))

    assert capsys.readouterr().out == "Chapter source: headings\n"


def test_echo_search_results_with_and_without_gutenberg_matches(
    capsys: pytest.CaptureFixture[str],
) -> None:
    results = [
        BookSearchResult(
            title="Emma",
            author="Jane Austen",
            cover_url=None,
            description="",
            google_books_id="g1",
        ),
        BookSearchResult(
            title="Obscure",
            author="Unknown Author",
            cover_url=None,
            description="",
            google_books_id="g2",
        ),
    ]

    echo_search_results(results)
    assert capsys.readouterr().out.splitlines() == [
        "1. Emma by Jane Austen [g1]",
        "2. Obscure by Unknown Author [g2]",
    ]

    echo_search_results(
        results, {"g1": GutenbergMatch(id="158", text_url="https://g.example/158.txt")}
    )
    assert capsys.readouterr().out.splitlines() == [
        "1. Emma by Jane Austen [g1]",
        "   Gutenberg 158: https://g.example/158.txt",
        "2. Obscure by Unknown Author [g2]",
        "   Gutenberg: not available",
    ]

    echo_search_results([])
    assert capsys.readouterr().out == "No results found.\n"


def test_echo_units_numbers_units_from_zero(capsys: pytest.CaptureFixture[str]) -> None:
    echo_units(["First sentence here.", "Second sentence here."])
    assert capsys.readouterr().out.splitlines() == [
        "[0] First sentence here.",
        "[1] Second sentence here.",
    ]

    echo_units([])
    assert capsys.readouterr().out == "No readable sentences in this chapter.\n"
