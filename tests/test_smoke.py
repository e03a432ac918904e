"""Basic smoke tests for project wiring.

These tests intentionally verify only import-level and basic object creation
behavior.
"""

import bookflow
from bookflow.config import BookflowConfig
from bookflow.models.datatypes import PlaybackState


def test_manager_can_be_instantiated(manager) -> None:
    """Manager should start idle with no session loaded."""

    assert manager.state is PlaybackState.IDLE
    assert manager.snapshot().has_session is False


def test_config_dataclass_defaults() -> None:
    """Config should keep the documented reader defaults."""

    config = BookflowConfig()
    assert config.page_size_chars == 5000
    assert config.max_pages == 50
    assert config.min_sentence_chars == 10
    assert config.speech_rate == 0.9
    assert config.user_agent == "BookFlowApp/1.0"


def test_package_exports_public_entrypoints() -> None:
    assert bookflow.__version__ == "0.1.0"
    assert bookflow.ChapterLoader is not None
    assert bookflow.PlaybackSessionManager is not None
