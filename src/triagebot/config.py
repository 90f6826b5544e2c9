"""Configuration loading for triagebot."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from triagebot.pr_info.models import DerivationRules

CONFIG_FILE_NAME = "triagebot.yaml"
DEFAULT_GRAPHQL_URL = "https://api.github.com/graphql"
DEFAULT_ARCHIVE_COLUMN = "Recently Merged"
DEFAULT_ARCHIVE_KEEP = 50


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"{key} must be a mapping, got {type(section).__name__}")
    return section


def _int_setting(section: str, data: dict[str, Any], key: str, default: int) -> int:
    try:
        return int(data.get(key, default))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{section}.{key} must be an integer: {e}") from e


@dataclass
class BoardConfig:
    """Project board settings used by the cleanup phase."""

    archive_column: str = DEFAULT_ARCHIVE_COLUMN
    archive_keep: int = DEFAULT_ARCHIVE_KEEP


@dataclass
class TriageConfig:
    """triagebot configuration.

    The GitHub token is never stored in the config file; it is read from the
    GITHUB_TOKEN environment variable when the client is built.
    """

    repo: str
    project_number: int
    graphql_url: str = DEFAULT_GRAPHQL_URL
    board: BoardConfig = field(default_factory=BoardConfig)
    rules: DerivationRules = field(default_factory=DerivationRules)

    @property
    def owner(self) -> str:
        return self.repo.split("/")[0]

    @property
    def repo_name(self) -> str:
        return self.repo.split("/")[1]

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TriageConfig:
        """Create config from dictionary.

        Args:
            data: Configuration dictionary from YAML.

        Returns:
            Parsed configuration object.

        Raises:
            ConfigError: If required fields are missing or malformed.
        """
        required_fields = ["repo", "project_number"]
        missing = [f for f in required_fields if f not in data]
        if missing:
            raise ConfigError(f"Missing required fields: {', '.join(missing)}")

        repo = str(data["repo"])
        if repo.count("/") != 1 or not all(repo.split("/")):
            raise ConfigError(f"repo must be in 'owner/name' format, got {repo!r}")

        try:
            project_number = int(data["project_number"])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"project_number must be an integer: {e}") from e

        board_data = _section(data, "board")
        board = BoardConfig(
            archive_column=board_data.get("archive_column", DEFAULT_ARCHIVE_COLUMN),
            archive_keep=_int_setting("board", board_data, "archive_keep", DEFAULT_ARCHIVE_KEEP),
        )
        if board.archive_keep < 0:
            raise ConfigError("board.archive_keep must not be negative")

        defaults = DerivationRules()
        rules_data = _section(data, "rules")
        rules = DerivationRules(
            huge_change_lines=_int_setting(
                "rules", rules_data, "huge_change_lines", defaults.huge_change_lines
            ),
            nearly_abandoned_days=_int_setting(
                "rules", rules_data, "nearly_abandoned_days", defaults.nearly_abandoned_days
            ),
            abandoned_days=_int_setting(
                "rules", rules_data, "abandoned_days", defaults.abandoned_days
            ),
        )
        if rules.nearly_abandoned_days > rules.abandoned_days:
            raise ConfigError("rules.nearly_abandoned_days must not exceed rules.abandoned_days")

        return cls(
            repo=repo,
            project_number=project_number,
            graphql_url=data.get("graphql_url", DEFAULT_GRAPHQL_URL),
            board=board,
            rules=rules,
        )


def load_config(config_path: Path | str) -> TriageConfig:
    """Load triagebot configuration from a YAML file.

    Args:
        config_path: Path to triagebot.yaml file.

    Returns:
        Parsed configuration object.

    Raises:
        ConfigError: If file doesn't exist or is invalid.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a YAML mapping, got {type(data).__name__}")

    return TriageConfig.from_dict(data)


def find_config(start_path: Path | str | None = None) -> Path:
    """Find triagebot.yaml by walking up the directory tree.

    Args:
        start_path: Starting directory. Defaults to current directory.

    Returns:
        Path to triagebot.yaml file.

    Raises:
        ConfigError: If no config file is found.
    """
    start_path = Path.cwd() if start_path is None else Path(start_path)
    current = start_path.resolve()

    for directory in (current, *current.parents):
        config_path = directory / CONFIG_FILE_NAME
        if config_path.exists():
            return config_path

    raise ConfigError(f"No {CONFIG_FILE_NAME} found in {start_path} or any parent directory")


def get_token() -> str:
    """Read the GitHub token from the environment.

    Raises:
        ConfigError: If GITHUB_TOKEN is not set.
    """
    token = os.environ.get("GITHUB_TOKEN")
    if not token:
        raise ConfigError("GITHUB_TOKEN environment variable is not set")
    return token
