"""
Central configuration for engine and rule tunables.
Pydantic models give type-safe settings loaded from the environment or JSON.
"""
from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class EngineSettings(BaseModel):
    """Search engine configuration settings."""

    time_budget_ms: int = Field(default=1000, ge=1, description="Wall-clock budget per turn in milliseconds")
    timeout_check_depth: int = Field(default=2, ge=0, description="Only nodes with more remaining depth than this check the clock")
    max_depth: Optional[int] = Field(default=None, ge=1, description="Stop deepening after this depth (None: until the deadline)")

    @field_validator('time_budget_ms', 'timeout_check_depth', mode='before')
    @classmethod
    def validate_int_fields(cls, v):
        return int(v)


class GameRulesSettings(BaseModel):
    """Board geometry settings."""

    board_size: int = Field(default=8, ge=4, description="Squares per board edge")
    player_rows: int = Field(default=3, ge=1, description="Rows of men each side starts with")

    @field_validator('board_size')
    @classmethod
    def validate_board_size(cls, v):
        if v % 2:
            raise ValueError("board_size must be even")
        return v

    @model_validator(mode='after')
    def validate_rows_fit(self):
        if 2 * self.player_rows >= self.board_size:
            raise ValueError("player_rows must leave at least one empty row between the sides")
        return self


class LoggingSettings(BaseModel):
    """Logging configuration."""

    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")

    @field_validator('log_level', mode='before')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR']
        v_upper = v.upper() if isinstance(v, str) else str(v).upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper


class DraughtsConfig(BaseModel):
    """Main configuration model for the draughts engine."""

    engine: EngineSettings = Field(default_factory=EngineSettings)
    rules: GameRulesSettings = Field(default_factory=GameRulesSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    version: str = Field(default="1.0.0", description="Configuration version")
    config_file: Optional[str] = Field(default=None, description="Path to config file")

    @classmethod
    def from_env(cls) -> 'DraughtsConfig':
        """Create configuration from environment variables."""
        max_depth = os.getenv('DRAUGHTS_MAX_DEPTH')
        return cls(
            engine=EngineSettings(
                time_budget_ms=int(os.getenv('DRAUGHTS_TIME_BUDGET_MS', '1000')),
                timeout_check_depth=int(os.getenv('DRAUGHTS_TIMEOUT_CHECK_DEPTH', '2')),
                max_depth=int(max_depth) if max_depth else None,
            ),
            rules=GameRulesSettings(
                board_size=int(os.getenv('DRAUGHTS_BOARD_SIZE', '8')),
                player_rows=int(os.getenv('DRAUGHTS_PLAYER_ROWS', '3')),
            ),
            logging=LoggingSettings(
                log_level=os.getenv('DRAUGHTS_LOG_LEVEL', 'INFO'),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            'engine': self.engine.model_dump(),
            'rules': self.rules.model_dump(),
            'logging': self.logging.model_dump(),
            'version': self.version,
            'config_file': self.config_file,
        }

    def save_to_file(self, filepath: str) -> None:
        """Save configuration to JSON file."""
        config_dict = self.to_dict()
        config_dict['config_file'] = filepath

        with open(filepath, 'w') as f:
            json.dump(config_dict, f, indent=2)

    @classmethod
    def load_from_file(cls, filepath: str) -> 'DraughtsConfig':
        """Load configuration from JSON file."""
        with open(filepath, 'r') as f:
            data = json.load(f)

        return cls(
            engine=EngineSettings(**data.get('engine', {})),
            rules=GameRulesSettings(**data.get('rules', {})),
            logging=LoggingSettings(**data.get('logging', {})),
            version=data.get('version', '1.0.0'),
            config_file=filepath,
        )


# Global configuration instance
_config: Optional[DraughtsConfig] = None


def get_config() -> DraughtsConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = DraughtsConfig.from_env()
    return _config


def load_config_from_file(filepath: str) -> DraughtsConfig:
    """Load configuration from file and update global instance."""
    global _config
    _config = DraughtsConfig.load_from_file(filepath)
    return _config


def reset_config() -> None:
    """Reset the global configuration to defaults."""
    global _config
    _config = None


def get_engine_settings() -> EngineSettings:
    """Get engine configuration settings."""
    return get_config().engine


def get_game_rules() -> GameRulesSettings:
    """Get board geometry settings."""
    return get_config().rules


def get_logging_settings() -> LoggingSettings:
    """Get logging configuration settings."""
    return get_config().logging


def setup_logging() -> None:
    """Configure root logging once, controlled by DRAUGHTS_LOG_LEVEL."""
    if getattr(setup_logging, "_configured", False):
        return
    level: int = getattr(logging, get_logging_settings().log_level, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    setup_logging._configured = True  # type: ignore[attr-defined]
