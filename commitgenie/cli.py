"""CLI entry point for commitgenie.

Prints the suggested commit messages for the staged changes and can commit
with one of them. There is no interactive prompting. The `config`
subcommands show the resolved configuration and write a starter rc file.
"""

import asyncio
import json
import logging
from dataclasses import replace

import typer

from commitgenie import __version__
from commitgenie.config import ConfigError, config_to_dict, get_config, init_config_file
from commitgenie.engine import collect_facts, generate_suggestions, generate_suggestions_with_ai
from commitgenie.git import GitError, commit

app = typer.Typer(
    name="commitgenie",
    help="commitgenie: rule-based commit message suggestions",
    add_completion=False,
)

config_app = typer.Typer(
    name="config",
    help="Show or create the commitgenie configuration file",
    add_completion=False,
)
app.add_typer(config_app, name="config")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"commitgenie {__version__}")
        raise typer.Exit()


@config_app.command("show")
def config_show() -> None:
    """Print the resolved configuration as JSON."""
    typer.echo(json.dumps(config_to_dict(get_config()), indent=2, ensure_ascii=False))


@config_app.command("init")
def config_init() -> None:
    """Write a starter .commitgenierc.json to the repository root."""
    try:
        path = init_config_file()
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Created {path}")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    do_commit: bool = typer.Option(
        False,
        "--commit",
        "-c",
        help="Commit the staged changes with the chosen suggestion",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        "-d",
        help="With --commit, report the commit without making it",
    ),
    pick: int = typer.Option(
        1,
        "--pick",
        "-p",
        min=1,
        help="Suggestion number to print alone or commit with",
    ),
    message_only: bool = typer.Option(
        False,
        "--message-only",
        "-m",
        help="Print only the chosen message, without labels",
    ),
    ai: bool = typer.Option(
        False,
        "--ai",
        help="Also ask the configured AI provider for a description",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Suggest commit messages for the staged changes."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if ctx.invoked_subcommand is not None:
        return

    try:
        config = get_config()
        facts = collect_facts()
        if not facts.change_set.changes:
            typer.echo("No staged changes found. Stage files with `git add` first.", err=True)
            raise typer.Exit(1)

        if ai:
            config = replace(config, ai=replace(config.ai, enabled=True))
            variants = asyncio.run(generate_suggestions_with_ai(facts, config))
        else:
            variants = generate_suggestions(facts, config)

        if pick > len(variants):
            typer.echo(f"Only {len(variants)} suggestion(s) available.", err=True)
            raise typer.Exit(1)
        chosen = variants[pick - 1]

        if message_only:
            typer.echo(chosen.full)
        else:
            for variant in variants:
                typer.echo(f"[{variant.id}] {variant.label}")
                typer.echo("=" * 60)
                typer.echo(variant.full)
                typer.echo("")

        if do_commit and dry_run:
            typer.echo(f"Dry run: would commit with suggestion {chosen.id} ({chosen.label}).", err=True)
        elif do_commit:
            commit(chosen.full)
            typer.echo(f"Committed with suggestion {chosen.id} ({chosen.label}).", err=True)

    except GitError as e:
        typer.echo(f"Git error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
