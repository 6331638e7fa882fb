"""
Shared pytest fixtures for all tests.
"""

import pytest
from pathlib import Path

# Add repo root to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from taleweaver.config import ParserSettings
from taleweaver.parser.conclusion import ConclusionParser
from taleweaver.parser.encounter import EncounterParser
from taleweaver.session import CollectingErrorSink, FixedPlayerState


# =============================================================================
# Collaborator Fixtures
# =============================================================================

@pytest.fixture
def error_sink():
    """Error sink that records reported messages."""
    return CollectingErrorSink()


@pytest.fixture
def player_state():
    """Live player state with non-default stats."""
    return FixedPlayerState(health=7, luck=4, skill_modifier=1)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep tests away from the user's real config directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.delenv("TALEWEAVER_CONFIG", raising=False)


# =============================================================================
# Parser Fixtures
# =============================================================================

@pytest.fixture
def encounter_parser(error_sink):
    """Encounter parser with no live player state."""
    return EncounterParser(error_sink=error_sink, settings=ParserSettings())


@pytest.fixture
def live_encounter_parser(error_sink, player_state):
    """Encounter parser reading stats from a live player."""
    return EncounterParser(state_provider=player_state, error_sink=error_sink)


@pytest.fixture
def conclusion_parser(player_state):
    """Conclusion parser reading stats from a live player."""
    return ConclusionParser(state_provider=player_state)
