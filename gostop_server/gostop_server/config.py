"""Configuration management."""

from pathlib import Path

import yaml
from pydantic import BaseModel


class RulesConfig(BaseModel):
    """Rules configuration."""

    # Minimum base score before Go or Stop may be declared
    go_threshold: int = 3


class ConcurrencyConfig(BaseModel):
    """Optimistic concurrency configuration."""

    max_retries: int = 3


class AdvisorConfig(BaseModel):
    """Strategy advisor configuration."""

    timeout_seconds: float = 2.0
    # Threads left behind by a hung backend never exceed this
    max_workers: int = 2
    fallback_message: str = "No advice available right now."


class GameConfig(BaseModel):
    """Self-play configuration."""

    num_games: int = 10
    seed: int | None = None


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    show_hands: bool = False


class GameLogSettings(BaseModel):
    """Game log (JSONL) configuration."""

    enabled: bool = False
    output_dir: str = "logs"


class Config(BaseModel):
    """Root configuration."""

    rules: RulesConfig = RulesConfig()
    concurrency: ConcurrencyConfig = ConcurrencyConfig()
    advisor: AdvisorConfig = AdvisorConfig()
    game: GameConfig = GameConfig()
    logging: LoggingConfig = LoggingConfig()
    game_log: GameLogSettings = GameLogSettings()


def load_config(path: Path | str | None = None) -> Config:
    """Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses default config.

    Returns:
        Config object.
    """
    if path is None:
        return Config()

    config_path = Path(path)
    if not config_path.exists():
        return Config()

    with open(config_path) as f:
        data = yaml.safe_load(f)

    return Config(**data) if data else Config()
