"""Command-line interface for Bookflow.

Responsibilities:
- Expose user-facing commands for search, chapter listing, and reading aloud.
- Convert CLI options into `BookflowConfig` and wire collaborators together.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
import sys
from typing import Annotated

import typer

from .cli_rendering import (
    echo_chapter_list,
    echo_search_results,
    echo_segmentation_source,
    echo_units,
    exit_with_command_error,
)
from .config import BookflowConfig, ConfigLoader
from .errors import ReaderStageError
from .io.storage import LibraryStore
from .library import ChapterLoader
from .models.datatypes import BookRecord, GutenbergMatch, PlaybackState, SessionSnapshot
from .parsing import normalize_optional_string
from .playback.bridge import SessionBridge
from .playback.session import PlaybackSessionManager
from .playback.speech import TimedSpeechEngine
from .sources.gutenberg import GutenbergClient
from .telemetry.logger import ReaderLogger
from .text.boundaries import BoundaryStripper
from .text.segmenter import ChapterSegmenter
from .text.sentences import SentenceTokenizer

app = typer.Typer(
    name="bookflow",
    no_args_is_help=True,
    help="Bookflow CLI.",
)

ConfigOption = Annotated[
    Path | None,
    typer.Option("--config", help="Path to YAML config file with reader defaults."),
]
LibraryOption = Annotated[
    Path | None,
    typer.Option("--library", help="Library directory (overrides config file value)."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", help="Log debug events to stderr."),
]


@dataclass(slots=True)
class _Runtime:
    """Collaborators wired from one resolved configuration."""

    config: BookflowConfig
    logger: ReaderLogger
    store: LibraryStore
    client: GutenbergClient
    loader: ChapterLoader
    tokenizer: SentenceTokenizer


def _load_config(config_path: Path | None, library: Path | None) -> BookflowConfig:
    """Load YAML or environment config and map failures to stage errors."""

    try:
        if config_path is None:
            config = ConfigLoader.from_env()
        else:
            config = ConfigLoader.from_yaml(config_path)
        return config.with_overrides(library_dir=library)
    except FileNotFoundError as exc:
        raise ReaderStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise ReaderStageError(
            stage="config",
            detail=f"Invalid configuration: {exc}",
            hint="Fix config schema/values and rerun.",
        ) from exc


def _build_runtime(
    config_path: Path | None,
    library: Path | None,
    verbose: bool = False,
    **overrides: object,
) -> _Runtime:
    """Resolve config and construct the shared reader collaborators."""

    config = _load_config(config_path, library)
    if overrides:
        try:
            config = config.with_overrides(**overrides)
        except ValueError as exc:
            raise ReaderStageError(
                stage="config",
                detail=f"Invalid option value: {exc}",
            ) from exc
    logger = ReaderLogger(sink=sys.stderr, level="DEBUG" if verbose else "WARNING")
    store = LibraryStore(config.library_dir)
    client = GutenbergClient(
        timeout_seconds=config.fetch_timeout_seconds,
        user_agent=config.user_agent,
        max_results=config.search_max_results,
        logger=logger,
    )
    loader = ChapterLoader(
        store,
        client,
        BoundaryStripper(),
        ChapterSegmenter(
            page_size_chars=config.page_size_chars,
            max_pages=config.max_pages,
            logger=logger,
        ),
        logger=logger,
    )
    return _Runtime(
        config=config,
        logger=logger,
        store=store,
        client=client,
        loader=loader,
        tokenizer=SentenceTokenizer(min_sentence_chars=config.min_sentence_chars),
    )


def _require_book(runtime: _Runtime, book_id: str) -> BookRecord:
    book = runtime.store.get_book(book_id)
    if book is None:
        raise ReaderStageError(
            stage="library",
            detail=f"Unknown book id `{book_id}`.",
            hint="Register it first with `bookflow add <book-id> --url <text-url>`.",
        )
    return book


def _require_chapter_index(chapters_count: int, chapter: int) -> None:
    if chapters_count == 0:
        raise ReaderStageError(
            stage="chapters",
            detail="No chapters available for this book.",
            hint="Check the text URL and your internet connection.",
        )
    if not 0 <= chapter < chapters_count:
        raise ReaderStageError(
            stage="chapters",
            detail=f"Chapter index {chapter} is out of range (0-{chapters_count - 1}).",
            hint="Use `bookflow chapters <book-id>` to list chapter indices.",
        )


@app.command("search")
def search_command(
    query: Annotated[str, typer.Argument(help="Title and/or author to search for.")],
    gutenberg: Annotated[
        bool,
        typer.Option("--gutenberg", help="Also resolve a Project Gutenberg text URL per hit."),
    ] = False,
    config_file: ConfigOption = None,
    library: LibraryOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Search the book catalog."""

    runtime: _Runtime | None = None
    try:
        runtime = _build_runtime(config_file, library, verbose)
        results = runtime.client.search_books(query)
        matches: dict[str, GutenbergMatch | None] | None = None
        if gutenberg:
            matches = {
                result.google_books_id: runtime.client.find_gutenberg_book(
                    result.title, result.author
                )
                for result in results
            }
    except Exception as exc:
        exit_with_command_error("search", exc)
    finally:
        if runtime is not None:
            runtime.logger.close()

    echo_search_results(results, matches)


@app.command("add")
def add_command(
    book_id: Annotated[str, typer.Argument(help="Identifier to store the book under.")],
    url: Annotated[str, typer.Option("--url", help="Remote plain-text URL.")],
    title: Annotated[str | None, typer.Option("--title", help="Display title.")] = None,
    author: Annotated[str | None, typer.Option("--author", help="Author name.")] = None,
    config_file: ConfigOption = None,
    library: LibraryOption = None,
) -> None:
    """Record a book and its text URL in the library."""

    runtime: _Runtime | None = None
    try:
        runtime = _build_runtime(config_file, library)
        normalized_url = normalize_optional_string(url)
        if normalized_url is None:
            raise ReaderStageError(stage="add-input", detail="`--url` must not be blank.")
        record = BookRecord(
            id=book_id,
            title=normalize_optional_string(title) or book_id,
            author=normalize_optional_string(author),
            text_url=normalized_url,
        )
        path = runtime.store.save_book(record)
    except Exception as exc:
        exit_with_command_error("add", exc)
    finally:
        if runtime is not None:
            runtime.logger.close()

    typer.echo(f"Added `{record.id}`: {record.title}")
    typer.echo(f"Row: {path}")


@app.command("chapters")
def chapters_command(
    source: Annotated[
        str,
        typer.Argument(help="Local text file, remote text URL, or stored book id."),
    ],
    config_file: ConfigOption = None,
    library: LibraryOption = None,
    verbose: VerboseOption = False,
) -> None:
    """List chapter indices and titles for a document."""

    runtime: _Runtime | None = None
    report = None
    try:
        runtime = _build_runtime(config_file, library, verbose)
        path = Path(source)
        if path.is_file():
            report = runtime.loader.parse(path.read_text(encoding="utf-8"))
            chapters = list(report.chapters)
        elif source.startswith(("http://", "https://")):
            raw = runtime.client.fetch_text(source)
            chapters = []
            if raw is not None:
                report = runtime.loader.parse(raw)
                chapters = list(report.chapters)
        else:
            chapters = runtime.loader.load(_require_book(runtime, source))
    except Exception as exc:
        exit_with_command_error("chapters", exc)
    finally:
        if runtime is not None:
            runtime.logger.close()

    if report is not None:
        echo_segmentation_source(report)
    echo_chapter_list(chapters)


@app.command("sentences")
def sentences_command(
    book_id: Annotated[str, typer.Argument(help="Stored book id.")],
    chapter: Annotated[int, typer.Option("--chapter", help="0-based chapter index.")] = 0,
    config_file: ConfigOption = None,
    library: LibraryOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Print the speakable units of one chapter."""

    runtime: _Runtime | None = None
    try:
        runtime = _build_runtime(config_file, library, verbose)
        chapters = runtime.loader.load(_require_book(runtime, book_id))
        _require_chapter_index(len(chapters), chapter)
        units = runtime.tokenizer.tokenize(chapters[chapter].content)
    except Exception as exc:
        exit_with_command_error("sentences", exc)
    finally:
        if runtime is not None:
            runtime.logger.close()

    typer.echo(f"Chapter: {chapters[chapter].title}")
    echo_units(units)


@app.command("read")
def read_command(
    book_id: Annotated[str, typer.Argument(help="Stored book id.")],
    chapter: Annotated[int, typer.Option("--chapter", help="0-based chapter index.")] = 0,
    start: Annotated[int, typer.Option("--start", help="0-based unit to start from.")] = 0,
    rate: Annotated[
        float | None, typer.Option("--rate", help="Speech rate (overrides config).")
    ] = None,
    words_per_minute: Annotated[
        int | None,
        typer.Option("--wpm", help="Base speaking speed in words per minute."),
    ] = None,
    config_file: ConfigOption = None,
    library: LibraryOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Read one chapter aloud, printing each unit as it is spoken."""

    runtime: _Runtime | None = None
    loop = asyncio.new_event_loop()
    try:
        runtime = _build_runtime(
            config_file,
            library,
            verbose,
            speech_rate=rate,
            words_per_minute=words_per_minute,
        )
        book = _require_book(runtime, book_id)
        engine = TimedSpeechEngine(
            loop,
            words_per_minute=runtime.config.words_per_minute,
            on_utterance=lambda text: typer.echo(f"> {text}"),
        )
        manager = PlaybackSessionManager(
            engine,
            speech_rate=runtime.config.speech_rate,
            logger=runtime.logger,
        )
        bridge = SessionBridge(manager, runtime.loader, runtime.tokenizer)
        view = bridge.open_reader(book, chapter)
        _require_chapter_index(len(view.chapters), chapter)
        if not view.units:
            raise ReaderStageError(
                stage="sentences",
                detail="No readable sentences in this chapter.",
            )

        finished: asyncio.Future[SessionSnapshot] = loop.create_future()

        def _on_snapshot(snapshot: SessionSnapshot) -> None:
            if snapshot.state is PlaybackState.IDLE and not finished.done():
                finished.set_result(snapshot)

        manager.subscribe(_on_snapshot)
        view.seek(start)
        if view.chapter is not None:
            typer.echo(f"Reading: {view.chapter.title}")
        view.play()
        try:
            final = loop.run_until_complete(finished)
        except KeyboardInterrupt:
            final = manager.snapshot()
            manager.stop()
    except Exception as exc:
        exit_with_command_error("read", exc)
    finally:
        loop.close()
        if runtime is not None:
            runtime.logger.close()

    typer.echo(f"Stopped at unit {final.current_index + 1}/{len(final.units)}.")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
