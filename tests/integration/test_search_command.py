"""Integration tests for the catalog `search` CLI command."""

import json

import requests
from pytest import MonkeyPatch
from typer.testing import CliRunner

from bookflow.cli import app
from bookflow.sources.gutenberg import GOOGLE_BOOKS_URL, GUTENDEX_URL

_SEARCH_PAYLOAD = {
    "items": [
        {
            "id": "vol-emma",
            "volumeInfo": {"title": "Emma", "authors": ["Jane Austen"]},
        },
        {
            "id": "vol-modern",
            "volumeInfo": {"title": "A Modern Novel: Volume One", "authors": ["Someone Now"]},
        },
    ]
}


def _json_response(payload: object) -> requests.Response:
    response = requests.Response()
    response.status_code = 200
    response._content = json.dumps(payload).encode("utf-8")
    response.encoding = "utf-8"
    return response


def _fake_catalog_get(url: str, **kwargs: object) -> requests.Response:
    """Answer Google Books and gutendex requests from canned payloads."""

    if url == GOOGLE_BOOKS_URL:
        return _json_response(_SEARCH_PAYLOAD)
    if url == GUTENDEX_URL:
        params = kwargs.get("params") or {}
        if isinstance(params, dict) and params.get("search") == "Emma Jane Austen":
            return _json_response(
                {
                    "results": [
                        {
                            "id": 158,
                            "formats": {
                                "text/plain; charset=us-ascii": "https://g.example/158.txt"
                            },
                        }
                    ]
                }
            )
        return _json_response({"results": []})
    raise AssertionError(f"unexpected URL {url}")


def test_search_command_lists_results(monkeypatch: MonkeyPatch) -> None:
    """Search should print one numbered row per catalog hit."""

    monkeypatch.setattr(requests, "get", _fake_catalog_get)
    runner = CliRunner()

    result = runner.invoke(app, ["search", "austen"])

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [
        "1. Emma by Jane Austen [vol-emma]",
        "2. A Modern Novel: Volume One by Someone Now [vol-modern]",
    ]


def test_search_command_resolves_gutenberg_text_urls(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr(requests, "get", _fake_catalog_get)
    runner = CliRunner()

    result = runner.invoke(app, ["search", "austen", "--gutenberg"])

    assert result.exit_code == 0, result.output
    assert "   Gutenberg 158: https://g.example/158.txt" in result.output
    assert "   Gutenberg: not available" in result.output


def test_search_command_degrades_to_no_results_when_offline() -> None:
    """A failed catalog request should render the empty state and exit cleanly."""

    runner = CliRunner()

    result = runner.invoke(app, ["search", "austen"])

    assert result.exit_code == 0, result.output
    assert "No results found." in result.output
