"""CLI entry point for fileinfo."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from fileinfo.assembler import FileInfo, create_assembler
from fileinfo.config import FileInfoConfig, GitLabConfig, ResolverConfig, load_config
from fileinfo.config.loader import check_service_urls, render_config_template
from fileinfo.errors import FileInfoError
from fileinfo.gitlab import CodeView, PageSnapshot, classify

app = typer.Typer(
    name="fileinfo",
    help="Resolve GitLab file, diff and commit pages to commit-pinned file locations.",
)

config_app = typer.Typer(help="Manage fileinfo configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: FileInfoConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


def _get_config() -> FileInfoConfig:
    if _config is None:
        return load_config()
    return _config


class _JsonFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def _configure_logging(cfg: FileInfoConfig, verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else _LOG_LEVELS[cfg.log_level]
    if cfg.log_format == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(show_path=False)
    logging.basicConfig(level=level, handlers=[handler], force=True)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to fileinfo.yaml")
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log every workflow step")
    ] = False,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    _configure_logging(_config, verbose)


def _display_file_info(info: FileInfo) -> None:
    """Display a resolved FileInfo as a Rich table."""
    table = Table(title=info.repository, show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for name, value in info.model_dump().items():
        if value is None or name == "repository":
            continue
        table.add_row(name, f"[cyan]{value}[/cyan]" if "commit_id" in name else str(value))
    rprint(table)


async def _resolve_page(cfg: FileInfoConfig, page: PageSnapshot) -> FileInfo | None:
    assembler = create_assembler(cfg)
    kind = classify(page.url)
    if kind == "file":
        return await assembler.resolve_file_info(page)
    if kind == "diff":
        return await assembler.resolve_diff_file_info(page)
    return await assembler.resolve_commit_file_info(page)


@app.command()
def resolve(
    url: str = typer.Argument(..., help="GitLab blob, merge request or commit URL"),
    view_file_href: str | None = typer.Option(
        None, "--view-file-href", help='href of the "View file @" link in the diff header'
    ),
    file_title: str | None = typer.Option(
        None, "--file-title", help='Diff header text, "old → new" for renames'
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Resolve a page to a FileInfo with concrete commit IDs."""
    cfg = _get_config()
    if classify(url) is None:
        rprint(f"[red]Error:[/red] not a GitLab file, merge request or commit page: {url}")
        raise typer.Exit(1)

    code_view = None
    if view_file_href or file_title:
        code_view = CodeView(view_file_href=view_file_href, file_title=file_title)
    page = PageSnapshot(url=url, code_view=code_view)

    try:
        info = asyncio.run(_resolve_page(cfg, page))
    except (FileInfoError, ValueError) as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    if info is None:
        rprint("[yellow]No file on this page.[/yellow]")
        raise typer.Exit(0)
    if as_json:
        typer.echo(info.model_dump_json(indent=2))
    else:
        _display_file_info(info)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
    resolver_url: str = typer.Option(
        "https://sourcegraph.com", "--resolver-url", help="Revision resolver base URL"
    ),
    gitlab_url: str = typer.Option("https://gitlab.com", "--gitlab-url", help="GitLab base URL"),
) -> None:
    """Create fileinfo.yaml in current directory."""
    target = Path("fileinfo.yaml")
    if target.exists() and not force:
        rprint("[yellow]fileinfo.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    problems = check_service_urls(
        FileInfoConfig(resolver=ResolverConfig(url=resolver_url), gitlab=GitLabConfig(url=gitlab_url))
    )
    if problems:
        rprint(f"[red]Error:[/red] {escape('; '.join(problems))}")
        raise typer.Exit(1)
    target.write_text(render_config_template(resolver_url, gitlab_url))
    rprint(f"[green]Created[/green] {target}")
