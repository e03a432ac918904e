"""Unit tests for YAML/environment configuration loader behavior."""

from __future__ import annotations

from pathlib import Path

import pytest

from bookflow.config import BookflowConfig, ConfigLoader


def test_config_loader_from_yaml_loads_valid_config_and_normalizes_values(
    tmp_path: Path,
) -> None:
    """YAML loader should parse valid payloads and normalize typed values."""

    config_path = tmp_path / "bookflow.yml"
    config_path.write_text(
        """
library_dir: " shelf "
page_size_chars: " 2400 "
max_pages: 12
min_sentence_chars: "0"
speech_rate: " 1.25 "
words_per_minute: 200
fetch_timeout_seconds: 2
search_max_results: "3"
user_agent: " ReaderTest/0.1 "
""".strip(),
        encoding="utf-8",
    )

    config = ConfigLoader.from_yaml(config_path)

    assert config.library_dir == Path("shelf")
    assert config.page_size_chars == 2400
    assert config.max_pages == 12
    assert config.min_sentence_chars == 0
    assert config.speech_rate == 1.25
    assert config.words_per_minute == 200
    assert config.fetch_timeout_seconds == 2.0
    assert config.search_max_results == 3
    assert config.user_agent == "ReaderTest/0.1"


def test_config_loader_from_yaml_uses_defaults_for_empty_file(tmp_path: Path) -> None:
    """An empty YAML document should yield the default configuration."""

    config_path = tmp_path / "empty.yml"
    config_path.write_text("", encoding="utf-8")

    assert ConfigLoader.from_yaml(config_path) == BookflowConfig()


def test_config_loader_from_yaml_rejects_unknown_keys_and_non_mapping_root(
    tmp_path: Path,
) -> None:
    """YAML loader should fail clearly on unknown fields or a non-mapping document."""

    unknown_path = tmp_path / "unknown.yml"
    unknown_path.write_text(
        "max_pages: 3\nvoice: echo\nalpha: 1\nextra:\n  profile: nightly\n", encoding="utf-8"
    )

    with pytest.raises(ValueError, match=r"contains unsupported key\(s\): alpha, extra, voice\."):
        ConfigLoader.from_yaml(unknown_path)

    list_path = tmp_path / "list.yml"
    list_path.write_text("- max_pages\n", encoding="utf-8")

    with pytest.raises(ValueError, match="must contain a top-level mapping/object"):
        ConfigLoader.from_yaml(list_path)


@pytest.mark.parametrize(
    ("yaml_text", "message"),
    [
        ("page_size_chars: 0\n", r"`page_size_chars` must be a positive integer"),
        ("max_pages: many\n", r"`max_pages` must be a positive integer"),
        ("words_per_minute: true\n", r"`words_per_minute` must be a positive integer"),
        ("min_sentence_chars: -1\n", r"`min_sentence_chars` must be a positive integer"),
        ("speech_rate: 0\n", r"`speech_rate` must be a positive number"),
        ("fetch_timeout_seconds: soon\n", r"`fetch_timeout_seconds` must be a positive number"),
    ],
)
def test_config_loader_from_yaml_rejects_invalid_values(
    tmp_path: Path, yaml_text: str, message: str
) -> None:
    """Invalid values should raise errors prefixed with the YAML source label."""

    config_path = tmp_path / "invalid.yml"
    config_path.write_text(yaml_text, encoding="utf-8")

    with pytest.raises(ValueError, match=message) as exc_info:
        ConfigLoader.from_yaml(config_path)

    assert str(exc_info.value).startswith(f"YAML `{config_path}`")


def test_config_loader_from_yaml_propagates_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        ConfigLoader.from_yaml(tmp_path / "missing.yml")


def test_config_loader_from_env_reads_prefixed_variables() -> None:
    """Environment loader should read `BOOKFLOW_*` keys and ignore blanks and strangers."""

    config = ConfigLoader.from_env(
        {
            "BOOKFLOW_LIBRARY_DIR": "/tmp/shelf",
            "BOOKFLOW_MAX_PAGES": "7",
            "BOOKFLOW_SPEECH_RATE": "1.1",
            "BOOKFLOW_USER_AGENT": "   ",
            "BOOKFLOW_UNRELATED": "ignored",
            "HOME": "/root",
        }
    )

    assert config.library_dir == Path("/tmp/shelf")
    assert config.max_pages == 7
    assert config.speech_rate == 1.1
    assert config.user_agent == "BookFlowApp/1.0"


def test_config_loader_from_env_reports_environment_source() -> None:
    with pytest.raises(ValueError, match=r"^environment: `max_pages` must be"):
        ConfigLoader.from_env({"BOOKFLOW_MAX_PAGES": "zero"})


def test_with_overrides_skips_none_and_validates() -> None:
    """Overrides should apply only non-`None` values and revalidate the copy."""

    base = BookflowConfig()

    updated = base.with_overrides(speech_rate=1.5, words_per_minute=None)

    assert updated.speech_rate == 1.5
    assert updated.words_per_minute == 170
    assert base.speech_rate == 0.9
    with pytest.raises(ValueError, match="`words_per_minute` must be a positive integer"):
        base.with_overrides(words_per_minute=0)
