"""Tests for the prompt-plus command line interface."""

import json

import pytest
from click.testing import CliRunner

from prompt_plus.cli import cli
from prompt_plus.config import Config, RepoConfig

from conftest import FakeGit, front_matter, write_template


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, home, fake_git):
    def _invoke(*args, **kwargs):
        return runner.invoke(cli, ["--home", str(home), *args], obj={"git": fake_git}, **kwargs)

    return _invoke


@pytest.fixture
def synced(store):
    store.save(Config(repos=[RepoConfig(name="a", url="https://example.com/a.git")]))
    templates_dir = store.repo_dir("a") / "templates"
    write_template(templates_dir, "api.md", front_matter("api-design", body="Design the API."))
    write_template(templates_dir, "ui.md", front_matter("ui-review", category="frontend"))
    return store


def test_version(invoke):
    result = invoke("--version")
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_init(invoke, store):
    result = invoke("init")

    assert result.exit_code == 0
    assert "Created config file" in result.output
    assert json.loads(store.config_path.read_text()) == Config().to_dict()


def test_init_existing(invoke, store):
    store.save(Config(output_dir="keep"))

    result = invoke("init")

    assert result.exit_code == 0
    assert "already exists" in result.output
    assert store.load().output_dir == "keep"


def test_home_from_env(runner, tmp_path, fake_git):
    result = runner.invoke(cli, ["init"], obj={"git": fake_git}, env={"PROMPT_PLUS_HOME": str(tmp_path)})

    assert result.exit_code == 0
    assert (tmp_path / "config.json").exists()


def test_list_empty(invoke):
    result = invoke("list")
    assert result.exit_code == 0
    assert "No templates found" in result.output


def test_list_groups_templates(invoke, synced):
    result = invoke("ls")

    assert result.exit_code == 0
    assert "api-design" in result.output
    assert "ui-review" in result.output
    assert "frontend" in result.output


def test_list_bad_config(invoke, store):
    store.root.mkdir(parents=True)
    store.config_path.write_text("{broken")

    result = invoke("list")

    assert result.exit_code == 1


def test_repo_list_reports_undecodable_config(invoke, store):
    store.root.mkdir(parents=True)
    store.config_path.write_bytes(b"\xff\xfe{")

    result = invoke("repo", "list")

    assert result.exit_code == 1
    assert "Error loading config" in result.output
    assert not isinstance(result.exception, UnicodeDecodeError)


def test_use_by_name(invoke, synced, tmp_path):
    out = tmp_path / "out"

    result = invoke("use", "api-design", "--output", str(out))

    assert result.exit_code == 0
    assert (out / "templates" / "api-design-prompt.md").read_text() == "Design the API."
    assert (out / "generated").is_dir()


def test_use_missing_template_writes_nothing(invoke, synced, tmp_path):
    out = tmp_path / "out"

    result = invoke("use", "missing-template", "--output", str(out))

    assert result.exit_code == 1
    assert "not found" in result.output
    assert not out.exists()


def test_use_interactive(invoke, synced, tmp_path):
    out = tmp_path / "out"

    result = invoke("use", "--output", str(out), input="2\n")

    assert result.exit_code == 0
    written = [p.name for p in (out / "templates").iterdir()]
    assert len(written) == 1
    assert written[0] in {"api-design-prompt.md", "ui-review-prompt.md"}


def test_use_interactive_no_templates(invoke, tmp_path):
    result = invoke("use", "--output", str(tmp_path / "out"))

    assert result.exit_code == 0
    assert "No templates available" in result.output


def test_show(invoke, synced):
    result = invoke("show", "api-design")

    assert result.exit_code == 0
    assert "Design the API." in result.output
    assert "api-design-prompt.md" in result.output


def test_show_missing(invoke, synced):
    result = invoke("show", "nope")
    assert result.exit_code == 1


def test_repo_add_and_list(invoke, store):
    assert invoke("repo", "add", "official", "https://example.com/o.git", "-b", "dev").exit_code == 0

    assert store.load().repos == [RepoConfig(name="official", url="https://example.com/o.git", branch="dev")]

    result = invoke("repo", "list")
    assert result.exit_code == 0
    assert "official" in result.output
    assert "not synced" in result.output


def test_repo_add_duplicate(invoke, store):
    invoke("repo", "add", "official", "u1")

    result = invoke("repo", "add", "official", "u2")

    assert result.exit_code == 0
    assert "already exists" in result.output
    assert store.load().repos == [RepoConfig(name="official", url="u1")]


def test_repo_remove(invoke, synced):
    result = invoke("repo", "rm", "a")

    assert result.exit_code == 0
    assert synced.load().repos == []
    assert not synced.repo_dir("a").exists()


def test_repo_remove_missing(invoke, store):
    result = invoke("repo", "remove", "missing")

    assert result.exit_code == 1
    assert "not found" in result.output
    assert not store.config_path.exists()


def test_repo_sync(invoke, store, fake_git):
    invoke("repo", "add", "a", "https://example.com/a.git")

    result = invoke("repo", "sync")

    assert result.exit_code == 0
    assert "Cloned" in result.output
    assert fake_git.calls[0][0] == "clone"


def test_repo_sync_reports_failures(runner, home, store):
    store.save(Config(repos=[RepoConfig(name="a", url="ua"), RepoConfig(name="b", url="ub")]))
    git = FakeGit(fail={"a"})

    result = runner.invoke(cli, ["--home", str(home), "repo", "sync"], obj={"git": git})

    assert result.exit_code == 1
    assert "Sync failed" in result.output
    assert "Cloned" in result.output
    assert len(git.calls) == 2


def test_repo_sync_unknown(invoke):
    result = invoke("repo", "sync", "missing")
    assert result.exit_code == 1
