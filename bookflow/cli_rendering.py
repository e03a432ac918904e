"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
chapter listings, search results, and playback progress.
"""

from __future__ import annotations

from typing import NoReturn

import typer

from .errors import ReaderStageError
from .models.datatypes import BookSearchResult, Chapter, GutenbergMatch, SegmentationReport


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, ReaderStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_segmentation_source(report: SegmentationReport) -> None:
    """Print which segmentation strategy produced the chapters."""

    typer.echo(f"Chapter source: {report.source}")
    if report.fallback_reason:
        typer.echo(f"Chapter fallback reason: {report.fallback_reason}")
    if report.truncated:
        typer.secho(
            "Warning: text exceeds the page cap; trailing content was dropped.",
            fg=typer.colors.YELLOW,
        )


def echo_chapter_list(chapters: list[Chapter]) -> None:
    """Print compact deterministic chapter index/title rows, or an empty state."""

    if not chapters:
        typer.echo("No chapters available for this book.")
        return
    typer.echo(f"{len(chapters)} Chapters Available")
    for chapter in sorted(chapters, key=lambda item: item.index):
        typer.echo(f"{chapter.index}. {chapter.title}")


def echo_search_results(
    results: list[BookSearchResult],
    matches: dict[str, GutenbergMatch | None] | None = None,
) -> None:
    """Print search hits, with resolved Gutenberg text URLs when provided."""

    if not results:
        typer.echo("No results found.")
        return
    for position, result in enumerate(results, start=1):
        typer.echo(f"{position}. {result.title} by {result.author} [{result.google_books_id}]")
        if matches is None:
            continue
        match = matches.get(result.google_books_id)
        if match is None:
            typer.echo("   Gutenberg: not available")
        else:
            typer.echo(f"   Gutenberg {match.id}: {match.text_url}")


def echo_units(units: list[str]) -> None:
    """Print numbered speakable units."""

    if not units:
        typer.echo("No readable sentences in this chapter.")
        return
    for position, unit in enumerate(units):
        typer.echo(f"[{position}] {unit}")
