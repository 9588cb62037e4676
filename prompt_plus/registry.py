"""TemplateRepository: repository lifecycle, template aggregation and materialization."""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from .config import DEFAULT_BRANCH, Config, ConfigStore, RepoConfig
from .errors import AlreadyExistsError, NotFoundError, SyncError
from .git import GitClient
from .template import TemplateWithRepo, load_templates_from_dir

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of syncing one repository."""

    repo_name: str
    action: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class TemplateRepository:
    """Manages registered template repositories and the templates inside them."""

    def __init__(self, store: ConfigStore, git: GitClient | None = None):
        """
        Initialize the repository manager.

        Args:
            store: Config store for the prompt-plus home.
            git: Git client used by sync. Defaults to the git binary.
        """
        self.store = store
        self.git = git or GitClient()

    def _templates_for(self, repo: RepoConfig) -> list[TemplateWithRepo]:
        repo_dir = self.store.repo_dir(repo.name)
        if not repo_dir.exists():
            return []

        return [
            TemplateWithRepo(template=t, repo_name=repo.name)
            for t in load_templates_from_dir(repo_dir / "templates")
        ]

    def get_all_templates_with_repo(self, repo: str | None = None) -> list[TemplateWithRepo]:
        """
        Get templates from synced repositories.

        Args:
            repo: Only load this repository. Unknown or unsynced names
                  give an empty list.

        Returns:
            Templates tagged with their repository, in config order.
        """
        config = self.store.load()

        if repo:
            repo_config = config.get_repo(repo)
            return self._templates_for(repo_config) if repo_config else []

        templates: list[TemplateWithRepo] = []
        for repo_config in config.repos:
            templates.extend(self._templates_for(repo_config))
        return templates

    def find_template(self, name: str, repo: str | None = None) -> TemplateWithRepo:
        """
        Find a template by name. The first match in config order wins.

        Raises:
            NotFoundError: If no template has this name.
        """
        for template in self.get_all_templates_with_repo(repo):
            if template.name == name:
                return template
        raise NotFoundError(f"Template '{name}' not found")

    def use_template(self, template: TemplateWithRepo, output_dir: str | Path | None = None) -> Path:
        """
        Write a template's content into the output directory.

        Creates <output_dir>/templates and <output_dir>/generated, then writes
        the content to templates/<output_file_name>, overwriting any file there.

        Returns:
            Path to the written file.
        """
        base_dir = Path(output_dir if output_dir else self.store.load().output_dir)
        templates_dir = base_dir / "templates"
        generated_dir = base_dir / "generated"

        templates_dir.mkdir(parents=True, exist_ok=True)
        generated_dir.mkdir(parents=True, exist_ok=True)

        filepath = templates_dir / template.output_file_name
        filepath.write_text(template.content, encoding="utf-8")
        logger.debug("Wrote template %s to %s", template.name, filepath)

        return filepath

    def add_repo(self, name: str, url: str, branch: str = DEFAULT_BRANCH) -> RepoConfig:
        """
        Register a repository.

        Raises:
            AlreadyExistsError: If a repository with this name exists.
        """
        config = self.store.load()
        if name in config:
            raise AlreadyExistsError(f"Repository '{name}' already exists")

        repo = RepoConfig(name=name, url=url, branch=branch or DEFAULT_BRANCH)
        config.repos.append(repo)
        self.store.save(config)
        return repo

    def remove_repo(self, name: str) -> RepoConfig:
        """
        Unregister a repository and delete its local working tree.

        Raises:
            NotFoundError: If no repository has this name.
        """
        config = self.store.load()
        repo = config.get_repo(name)
        if repo is None:
            raise NotFoundError(f"Repository '{name}' not found")

        config.repos.remove(repo)
        self.store.save(config)

        repo_dir = self.store.repo_dir(name)
        if repo_dir.exists():
            shutil.rmtree(repo_dir, ignore_errors=True)

        return repo

    def list_repos(self) -> list[tuple[RepoConfig, bool]]:
        """Get all repositories with whether each one has been synced."""
        config = self.store.load()
        return [(repo, self.store.repo_dir(repo.name).exists()) for repo in config.repos]

    def sync(self, name: str | None = None) -> list[SyncResult]:
        """
        Clone or pull repositories one after another.

        A failure is recorded in that repository's result and does not stop
        the remaining repositories.

        Raises:
            NotFoundError: If name is given and no repository has it.
        """
        config = self.store.load()
        targets = self._sync_targets(config, name)

        self.store.repos_dir.mkdir(parents=True, exist_ok=True)

        results = []
        for repo in targets:
            results.append(self._sync_one(repo))
        return results

    def _sync_targets(self, config: Config, name: str | None) -> list[RepoConfig]:
        if name is None:
            return list(config.repos)

        repo = config.get_repo(name)
        if repo is None:
            raise NotFoundError(f"Repository '{name}' not found")
        return [repo]

    def _sync_one(self, repo: RepoConfig) -> SyncResult:
        repo_dir = self.store.repo_dir(repo.name)
        branch = repo.branch or DEFAULT_BRANCH

        if repo_dir.exists():
            action = "updated"
        else:
            action = "cloned"

        try:
            if action == "updated":
                self.git.pull(repo_dir, branch)
            else:
                self.git.clone(repo.url, branch, repo_dir)
        except SyncError as e:
            logger.debug("Sync of %s failed: %s", repo.name, e)
            return SyncResult(repo_name=repo.name, action=action, error=str(e))

        return SyncResult(repo_name=repo.name, action=action)


def group_templates(
    templates: list[TemplateWithRepo],
) -> dict[str, dict[str, list[TemplateWithRepo]]]:
    """Group templates by repository, then by category, in first-seen order."""
    groups: dict[str, dict[str, list[TemplateWithRepo]]] = {}
    for template in templates:
        categories = groups.setdefault(template.repo_name, {})
        categories.setdefault(template.category, []).append(template)
    return groups
