"""ConfigStore for the JSON config document under the prompt-plus home."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import AlreadyExistsError, ConfigParseError

logger = logging.getLogger(__name__)

HOME_ENV_VAR = "PROMPT_PLUS_HOME"
DEFAULT_BRANCH = "main"
DEFAULT_OUTPUT_DIR = ".prompts"


def default_home() -> Path:
    """Get the prompt-plus home directory, honoring PROMPT_PLUS_HOME."""
    env_home = os.environ.get(HOME_ENV_VAR)
    if env_home:
        return Path(env_home)
    return Path.home() / ".prompt-plus"


_REPO_KEYS = ("name", "url", "branch")
_CONFIG_KEYS = ("defaultRepo", "repos", "outputDir")


def _require_str(data: dict[str, Any], key: str, where: str) -> None:
    if key in data and not isinstance(data[key], str):
        raise ConfigParseError(f"{where}: '{key}' must be a string")


@dataclass
class RepoConfig:
    """A registered template repository."""

    name: str
    url: str
    # None when the config file does not set a branch; sync then uses DEFAULT_BRANCH.
    branch: str | None = DEFAULT_BRANCH
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RepoConfig":
        """
        Create a RepoConfig from one entry of the "repos" list.

        Keys other than name, url and branch are kept in extra.

        Raises:
            ConfigParseError: If the entry is not an object or a field is not a string.
        """
        if not isinstance(data, dict):
            raise ConfigParseError(f"repository entry must be an object, got {type(data).__name__}")
        if "name" not in data:
            raise ConfigParseError("repository entry has no 'name'")
        for key in _REPO_KEYS:
            _require_str(data, key, f"repository {data['name']!r}")

        return cls(
            name=data["name"],
            url=data.get("url", ""),
            branch=data.get("branch"),
            extra={k: v for k, v in data.items() if k not in _REPO_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "url": self.url}
        if self.branch is not None:
            result["branch"] = self.branch
        result.update(self.extra)
        return result


@dataclass
class Config:
    """The whole config document."""

    default_repo: str = ""
    repos: list[RepoConfig] = field(default_factory=list)
    output_dir: str = DEFAULT_OUTPUT_DIR
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Config":
        """
        Create a Config from a decoded JSON document.

        Unknown top-level keys are kept in extra so saving writes them back.
        """
        _require_str(data, "defaultRepo", "config")
        _require_str(data, "outputDir", "config")
        repos = data.get("repos", [])
        if not isinstance(repos, list):
            raise ConfigParseError("config: 'repos' must be a list")

        return cls(
            default_repo=data.get("defaultRepo", ""),
            repos=[RepoConfig.from_dict(r) for r in repos],
            output_dir=data.get("outputDir") or DEFAULT_OUTPUT_DIR,
            extra={k: v for k, v in data.items() if k not in _CONFIG_KEYS},
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for serialization."""
        result: dict[str, Any] = {
            "defaultRepo": self.default_repo,
            "repos": [r.to_dict() for r in self.repos],
            "outputDir": self.output_dir,
        }
        result.update(self.extra)
        return result

    def get_repo(self, name: str) -> RepoConfig | None:
        """Get a repository by exact name."""
        for repo in self.repos:
            if repo.name == name:
                return repo
        return None

    def __contains__(self, name: str) -> bool:
        return self.get_repo(name) is not None


class ConfigStore:
    """Reads and writes the config file and knows where repos are synced."""

    def __init__(self, root: str | Path | None = None):
        """
        Initialize the store.

        Args:
            root: The prompt-plus home directory.
                  Defaults to $PROMPT_PLUS_HOME or ~/.prompt-plus.
        """
        self.root = Path(root) if root is not None else default_home()

    @property
    def config_path(self) -> Path:
        return self.root / "config.json"

    @property
    def repos_dir(self) -> Path:
        return self.root / "repos"

    def repo_dir(self, name: str) -> Path:
        """Get the local working tree directory of a repository."""
        return self.repos_dir / name

    def exists(self) -> bool:
        return self.config_path.exists()

    def load(self) -> Config:
        """
        Load the config, or a default Config if the file does not exist.

        Nothing is written to disk when the file is missing.

        Raises:
            ConfigParseError: If the file is not a valid JSON object.
        """
        if not self.config_path.exists():
            return Config()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            raise ConfigParseError(f"Error parsing config {self.config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigParseError(f"Config {self.config_path} must contain a JSON object")

        return Config.from_dict(data)

    def save(self, config: Config) -> None:
        """Overwrite the config file with the whole config."""
        self.root.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2, ensure_ascii=False)

        logger.debug("Saved config to %s", self.config_path)

    def initialize(self) -> Path:
        """
        Write a default config file.

        Returns:
            Path to the config file.

        Raises:
            AlreadyExistsError: If the config file already exists.
        """
        if self.exists():
            raise AlreadyExistsError(f"Config already exists at {self.config_path}")

        self.save(Config())
        return self.config_path
