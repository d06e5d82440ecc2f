import pytest
from pydantic import ValidationError

from draughts.config import (
    DraughtsConfig,
    EngineSettings,
    GameRulesSettings,
    LoggingSettings,
    get_config,
    reset_config,
)


@pytest.fixture(autouse=True)
def fresh_config():
    reset_config()
    yield
    reset_config()


def test_defaults():
    cfg = DraughtsConfig()
    assert cfg.engine.time_budget_ms == 1000
    assert cfg.engine.max_depth is None
    assert cfg.rules.board_size == 8
    assert cfg.rules.player_rows == 3
    assert cfg.logging.log_level == "INFO"


def test_from_env(monkeypatch):
    monkeypatch.setenv("DRAUGHTS_TIME_BUDGET_MS", "250")
    monkeypatch.setenv("DRAUGHTS_MAX_DEPTH", "4")
    monkeypatch.setenv("DRAUGHTS_LOG_LEVEL", "debug")
    cfg = get_config()
    assert cfg.engine.time_budget_ms == 250
    assert cfg.engine.max_depth == 4
    assert cfg.logging.log_level == "DEBUG"
    assert get_config() is cfg


def test_invalid_settings_rejected():
    with pytest.raises(ValidationError):
        LoggingSettings(log_level="LOUD")
    with pytest.raises(ValidationError):
        EngineSettings(time_budget_ms=0)
    with pytest.raises(ValidationError):
        GameRulesSettings(board_size=9)
    with pytest.raises(ValidationError):
        GameRulesSettings(board_size=6, player_rows=3)


def test_save_and_load(tmp_path):
    path = str(tmp_path / "draughts.json")
    cfg = DraughtsConfig(engine=EngineSettings(time_budget_ms=300, max_depth=2),
                         rules=GameRulesSettings(board_size=10, player_rows=4))
    cfg.save_to_file(path)
    loaded = DraughtsConfig.load_from_file(path)
    assert loaded.engine == cfg.engine
    assert loaded.rules == cfg.rules
    assert loaded.config_file == path
