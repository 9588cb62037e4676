"""CLI for prompt-plus - manage prompt templates from git repositories."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Prompt
from rich.syntax import Syntax
from rich import box

from . import __version__
from .config import DEFAULT_BRANCH, HOME_ENV_VAR, ConfigStore
from .errors import AlreadyExistsError, ConfigParseError, NotFoundError
from .registry import TemplateRepository, group_templates
from .template import TemplateWithRepo


console = Console()
error_console = Console(stderr=True)

EXAMPLE_REPO_HINT = "prompt-plus repo add official https://github.com/LeeSeaside/prompt-plus-templates.git"


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
    )


def _repository(ctx: click.Context) -> TemplateRepository:
    return ctx.obj["repository"]


def _load_templates(ctx: click.Context, repo: Optional[str]) -> list[TemplateWithRepo]:
    try:
        return _repository(ctx).get_all_templates_with_repo(repo)
    except ConfigParseError as e:
        error_console.print(f"[red]Error loading config:[/red] {e}")
        sys.exit(1)


@click.group()
@click.option(
    "--home",
    type=click.Path(path_type=Path),
    envvar=HOME_ENV_VAR,
    default=None,
    help="prompt-plus home directory (default: ~/.prompt-plus)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.version_option(__version__, prog_name="prompt-plus")
@click.pass_context
def cli(ctx: click.Context, home: Optional[Path], verbose: bool) -> None:
    """Prompt Plus - Prompt templates synced from git repositories."""
    _setup_logging(verbose)
    ctx.ensure_object(dict)
    store = ConfigStore(home)
    ctx.obj["store"] = store
    ctx.obj["repository"] = TemplateRepository(store, ctx.obj.get("git"))


@cli.command("list")
@click.option("--repo", "-r", default=None, help="Only list templates from this repository")
@click.pass_context
def list_templates(ctx: click.Context, repo: Optional[str]) -> None:
    """List all available prompt templates."""
    templates = _load_templates(ctx, repo)

    if not templates:
        console.print("[yellow]No templates found.[/yellow]")
        console.print("[dim]Add and sync a template repository first:[/dim]")
        console.print(f"[dim]  {EXAMPLE_REPO_HINT}[/dim]")
        console.print("[dim]  prompt-plus repo sync[/dim]")
        return

    for repo_name, categories in group_templates(templates).items():
        table = Table(title=f"📦 {repo_name}", box=box.ROUNDED, title_justify="left")
        table.add_column("Category", style="yellow")
        table.add_column("Name", style="cyan")
        table.add_column("Description", style="dim")

        for category, category_templates in categories.items():
            for i, template in enumerate(category_templates):
                table.add_row(category if i == 0 else "", template.name, template.description)

        console.print(table)

    console.print("[dim]Run 'prompt-plus use <name>' or 'prompt-plus use' to pick one.[/dim]")


cli.add_command(list_templates, "ls")


def _choose_template(templates: list[TemplateWithRepo]) -> TemplateWithRepo:
    """Ask the user to pick one template from a numbered list."""
    console.print("\n[bold]Available templates:[/bold]")
    for i, template in enumerate(templates, start=1):
        console.print(
            f"  [green]{i}.[/green] [magenta][{template.repo_name}][/magenta] "
            f"{template.name} [dim]- {template.description}[/dim]"
        )

    choice = Prompt.ask(
        "\nSelect a template",
        choices=[str(i) for i in range(1, len(templates) + 1)],
        console=console,
    )
    return templates[int(choice) - 1]


@cli.command()
@click.argument("name", required=False)
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output directory (default: outputDir from config, .prompts)",
)
@click.option("--repo", "-r", default=None, help="Only use templates from this repository")
@click.pass_context
def use(ctx: click.Context, name: Optional[str], output: Optional[Path], repo: Optional[str]) -> None:
    """Copy a prompt template into the output directory."""
    repository = _repository(ctx)

    if name:
        try:
            template = repository.find_template(name, repo)
        except NotFoundError:
            error_console.print(f"[red]Template '{name}' not found.[/red]")
            console.print("[dim]Run 'prompt-plus list' to see available templates.[/dim]")
            sys.exit(1)
        except ConfigParseError as e:
            error_console.print(f"[red]Error loading config:[/red] {e}")
            sys.exit(1)
    else:
        templates = _load_templates(ctx, repo)
        if not templates:
            console.print("[yellow]No templates available.[/yellow]")
            console.print("[dim]Add and sync a template repository first.[/dim]")
            return
        template = _choose_template(templates)

    try:
        path = repository.use_template(template, output)
    except OSError as e:
        error_console.print(f"[red]Error writing template:[/red] {e}")
        sys.exit(1)

    base_dir = path.parent.parent
    console.print(f"[green]Template written to:[/green] {path}")
    console.print(
        Panel(
            "1. Open the generated prompt file\n"
            "2. Paste its content into your AI editor\n"
            "3. Let the AI analyze your project and write a concrete prompt\n"
            f"4. Save that prompt under [yellow]{base_dir / 'generated'}[/yellow]\n"
            "5. Use it for the actual work",
            title="Next steps",
            box=box.ROUNDED,
        )
    )


@cli.command()
@click.argument("name")
@click.option("--repo", "-r", default=None, help="Only search this repository")
@click.pass_context
def show(ctx: click.Context, name: str, repo: Optional[str]) -> None:
    """Show details of a specific prompt template."""
    try:
        template = _repository(ctx).find_template(name, repo)
    except NotFoundError:
        error_console.print(f"[red]Template '{name}' not found.[/red]")
        sys.exit(1)
    except ConfigParseError as e:
        error_console.print(f"[red]Error loading config:[/red] {e}")
        sys.exit(1)

    console.print(
        Panel(
            f"[bold cyan]{template.name}[/bold cyan] [magenta]({template.repo_name})[/magenta]\n"
            f"Category: {template.category}\n"
            f"Output file: {template.output_file_name}",
            subtitle=template.description or "No description",
        )
    )
    console.print(Syntax(template.content, "markdown", theme="monokai", line_numbers=True))


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create the config file."""
    store: ConfigStore = ctx.obj["store"]

    try:
        path = store.initialize()
    except AlreadyExistsError:
        console.print("[yellow]Config file already exists.[/yellow]")
        console.print(f"[dim]Path: {store.config_path}[/dim]")
        return

    console.print(f"[green]Created config file at:[/green] {path}")
    console.print("[dim]Next: add a template repository[/dim]")
    console.print(f"[dim]  {EXAMPLE_REPO_HINT}[/dim]")


@cli.group()
def repo() -> None:
    """Manage template repositories."""


@repo.command("add")
@click.argument("name")
@click.argument("url")
@click.option("--branch", "-b", default=DEFAULT_BRANCH, show_default=True, help="Branch to sync")
@click.pass_context
def repo_add(ctx: click.Context, name: str, url: str, branch: str) -> None:
    """Register a template repository."""
    try:
        _repository(ctx).add_repo(name, url, branch)
    except AlreadyExistsError:
        console.print(f"[yellow]Repository '{name}' already exists.[/yellow]")
        return
    except ConfigParseError as e:
        error_console.print(f"[red]Error loading config:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]Added repository:[/green] {name}")
    console.print(f"[dim]Run 'prompt-plus repo sync {name}' to fetch its templates.[/dim]")


@repo.command("remove")
@click.argument("name")
@click.pass_context
def repo_remove(ctx: click.Context, name: str) -> None:
    """Unregister a template repository and delete its local copy."""
    try:
        _repository(ctx).remove_repo(name)
    except NotFoundError:
        error_console.print(f"[red]Repository '{name}' not found.[/red]")
        sys.exit(1)
    except ConfigParseError as e:
        error_console.print(f"[red]Error loading config:[/red] {e}")
        sys.exit(1)

    console.print(f"[green]Removed repository:[/green] {name}")


repo.add_command(repo_remove, "rm")


@repo.command("list")
@click.pass_context
def repo_list(ctx: click.Context) -> None:
    """List all template repositories."""
    try:
        repos = _repository(ctx).list_repos()
    except ConfigParseError as e:
        error_console.print(f"[red]Error loading config:[/red] {e}")
        sys.exit(1)

    if not repos:
        console.print("[yellow]No repositories configured.[/yellow]")
        console.print(f"[dim]  {EXAMPLE_REPO_HINT}[/dim]")
        return

    table = Table(title="Template Repositories", box=box.ROUNDED)
    table.add_column("Name", style="cyan")
    table.add_column("URL", style="dim")
    table.add_column("Branch", style="magenta")
    table.add_column("Status")

    for repo_config, synced in repos:
        status = "[green]✓ synced[/green]" if synced else "[yellow]not synced[/yellow]"
        table.add_row(repo_config.name, repo_config.url, repo_config.branch or DEFAULT_BRANCH, status)

    console.print(table)
    console.print("[dim]Run 'prompt-plus repo sync [name]' to sync repositories.[/dim]")


repo.add_command(repo_list, "ls")


@repo.command("sync")
@click.argument("name", required=False)
@click.pass_context
def repo_sync(ctx: click.Context, name: Optional[str]) -> None:
    """Clone or update template repositories (all of them if no name is given)."""
    try:
        results = _repository(ctx).sync(name)
    except NotFoundError:
        error_console.print(f"[red]Repository '{name}' not found.[/red]")
        sys.exit(1)
    except ConfigParseError as e:
        error_console.print(f"[red]Error loading config:[/red] {e}")
        sys.exit(1)

    if not results:
        console.print("[yellow]No repositories configured.[/yellow]")
        console.print("[dim]Run 'prompt-plus repo add <name> <url>' to add one.[/dim]")
        return

    failed = 0
    for result in results:
        if result.ok:
            console.print(f"[green]✓ {result.action.capitalize()}:[/green] {result.repo_name}")
        else:
            failed += 1
            error_console.print(f"[red]✗ Sync failed:[/red] {result.repo_name}")
            error_console.print(f"[dim]  {result.error}[/dim]")

    if failed:
        sys.exit(1)


def main() -> None:
    """Entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
