"""Configuration model and loaders for Bookflow.

Responsibilities:
- Define reader runtime configuration as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `BookflowConfig`: normalized settings for segmentation, playback, and fetching.
- `ConfigLoader`: static construction helpers for `BookflowConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import normalize_optional_string, parse_positive_float, parse_positive_int


_DEFAULT_LIBRARY_DIR = Path(".bookflow")
_DEFAULT_USER_AGENT = "BookFlowApp/1.0"


@dataclass(slots=True)
class BookflowConfig:
    """Runtime configuration for the reader.

    Attributes:
        library_dir: Root directory of the book row store and chapter cache.
        page_size_chars: Page size used when heading segmentation is rejected.
        max_pages: Maximum number of fallback pages kept per document.
        min_sentence_chars: Units of at most this many characters are dropped.
        speech_rate: Speech rate passed to the speech engine.
        words_per_minute: Base speaking speed used to estimate utterance length.
        fetch_timeout_seconds: Timeout applied to every remote request.
        search_max_results: Maximum catalog search hits requested.
        user_agent: `User-Agent` header sent to the Gutenberg catalog.
    """

    library_dir: Path = _DEFAULT_LIBRARY_DIR
    page_size_chars: int = 5000
    max_pages: int = 50
    min_sentence_chars: int = 10
    speech_rate: float = 0.9
    words_per_minute: int = 170
    fetch_timeout_seconds: float = 6.0
    search_max_results: int = 8
    user_agent: str = _DEFAULT_USER_AGENT

    def validate(self) -> None:
        """Validate configuration values before use."""

        if self.page_size_chars <= 0:
            raise ValueError("`page_size_chars` must be a positive integer.")
        if self.max_pages <= 0:
            raise ValueError("`max_pages` must be a positive integer.")
        if self.min_sentence_chars < 0:
            raise ValueError("`min_sentence_chars` must be zero or a positive integer.")
        if not self.speech_rate > 0:
            raise ValueError("`speech_rate` must be a positive number.")
        if self.words_per_minute <= 0:
            raise ValueError("`words_per_minute` must be a positive integer.")
        if not self.fetch_timeout_seconds > 0:
            raise ValueError("`fetch_timeout_seconds` must be a positive number.")
        if self.search_max_results <= 0:
            raise ValueError("`search_max_results` must be a positive integer.")
        if not isinstance(self.user_agent, str) or not self.user_agent.strip():
            raise ValueError("`user_agent` must be a non-empty string.")

    def with_overrides(self, **overrides: object) -> BookflowConfig:
        """Return a validated copy with non-`None` overrides applied."""

        applied = {key: value for key, value in overrides.items() if value is not None}
        config = replace(self, **applied)
        config.validate()
        return config


class ConfigLoader:
    """Factory methods for creating `BookflowConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "library_dir",
            "page_size_chars",
            "max_pages",
            "min_sentence_chars",
            "speech_rate",
            "words_per_minute",
            "fetch_timeout_seconds",
            "search_max_results",
            "user_agent",
        }
    )
    _INT_KEYS = ("page_size_chars", "max_pages", "words_per_minute", "search_max_results")
    _FLOAT_KEYS = ("speech_rate", "fetch_timeout_seconds")

    @staticmethod
    def from_yaml(path: Path) -> BookflowConfig:
        """Create a validated config from a YAML file."""

        path_text = path.read_text(encoding="utf-8")
        payload = yaml.safe_load(path_text)
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> BookflowConfig:
        """Create a validated config from `BOOKFLOW_*` environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        payload: dict[str, Any] = {}
        for key in ConfigLoader._SUPPORTED_YAML_KEYS:
            value = normalize_optional_string(env_map.get(f"BOOKFLOW_{key.upper()}"))
            if value is not None:
                payload[key] = value
        return ConfigLoader._build_config_from_mapping(payload, source_label="environment")

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> BookflowConfig:
        """Build a validated config from a normalized mapping payload."""

        unknown = sorted(str(key) for key in payload if key not in ConfigLoader._SUPPORTED_YAML_KEYS)
        if unknown:
            raise ValueError(
                f"{source_label} contains unsupported key(s): {', '.join(unknown)}."
            )

        values: dict[str, Any] = {}
        library_dir = normalize_optional_string(payload.get("library_dir"))
        if library_dir is not None:
            values["library_dir"] = Path(library_dir)
        for key in ConfigLoader._INT_KEYS:
            if payload.get(key) is not None:
                values[key] = ConfigLoader._wrap(parse_positive_int, payload[key], key, source_label)
        for key in ConfigLoader._FLOAT_KEYS:
            if payload.get(key) is not None:
                values[key] = ConfigLoader._wrap(
                    parse_positive_float, payload[key], key, source_label
                )
        if payload.get("min_sentence_chars") is not None:
            values["min_sentence_chars"] = ConfigLoader._parse_non_negative_int(
                payload["min_sentence_chars"], source_label
            )
        user_agent = normalize_optional_string(payload.get("user_agent"))
        if user_agent is not None:
            values["user_agent"] = user_agent

        config = BookflowConfig(**values)
        config.validate()
        return config

    @staticmethod
    def _wrap(parser: Any, value: object, key: str, source_label: str) -> Any:
        """Run a field parser and prefix validation errors with the source label."""

        try:
            return parser(value, key)
        except ValueError as exc:
            raise ValueError(f"{source_label}: {exc}") from exc

    @staticmethod
    def _parse_non_negative_int(value: object, source_label: str) -> int:
        """Parse `min_sentence_chars`, which may legitimately be zero."""

        if normalize_optional_string(value) == "0":
            return 0
        return ConfigLoader._wrap(parse_positive_int, value, "min_sentence_chars", source_label)
