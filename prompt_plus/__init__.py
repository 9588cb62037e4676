"""prompt-plus - Prompt templates synced from git repositories."""

__version__ = "0.1.0"

from .config import Config, ConfigStore, RepoConfig
from .errors import (
    AlreadyExistsError,
    ConfigParseError,
    NotFoundError,
    PromptPlusError,
    SyncError,
    TemplateParseError,
)
from .git import GitClient
from .registry import SyncResult, TemplateRepository, group_templates
from .template import Template, TemplateWithRepo, load_templates_from_dir, parse_front_matter

__all__ = [
    "AlreadyExistsError",
    "Config",
    "ConfigParseError",
    "ConfigStore",
    "GitClient",
    "NotFoundError",
    "PromptPlusError",
    "RepoConfig",
    "SyncError",
    "SyncResult",
    "Template",
    "TemplateParseError",
    "TemplateRepository",
    "TemplateWithRepo",
    "group_templates",
    "load_templates_from_dir",
    "parse_front_matter",
]
