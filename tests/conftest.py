"""Shared fixtures for prompt-plus tests."""

from pathlib import Path

import pytest

from prompt_plus.config import ConfigStore
from prompt_plus.errors import SyncError
from prompt_plus.registry import TemplateRepository


class FakeGit:
    """Records git calls; clone creates the destination unless told to fail."""

    def __init__(self, fail: set[str] | None = None):
        self.fail = fail or set()
        self.calls: list[tuple] = []

    def clone(self, url: str, branch: str, dest: Path) -> None:
        self.calls.append(("clone", url, branch, dest))
        if dest.name in self.fail:
            raise SyncError(f"could not clone {url}")
        (dest / "templates").mkdir(parents=True)

    def pull(self, dest: Path, branch: str) -> None:
        self.calls.append(("pull", dest, branch))
        if dest.name in self.fail:
            raise SyncError(f"could not pull {dest.name}")


def write_template(directory: Path, filename: str, text: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_text(text, encoding="utf-8")
    return path


def front_matter(name: str, category: str = "backend", body: str = "Body text") -> str:
    return f"---\nname: {name}\ncategory: {category}\n---\n{body}\n"


@pytest.fixture
def home(tmp_path) -> Path:
    return tmp_path / "home"


@pytest.fixture
def store(home) -> ConfigStore:
    return ConfigStore(home)


@pytest.fixture
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture
def repository(store, fake_git) -> TemplateRepository:
    return TemplateRepository(store, fake_git)
