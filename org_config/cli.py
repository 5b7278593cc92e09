import json
import sys
from collections.abc import Callable

import click

from org_config.config import settings
from org_config.fs import LocalFileSystem
from org_config.loader import OrgConfig, load_org_config
from org_config.logger import setup_logging


def log_level(function: Callable) -> Callable:
    function = click.option(
        "--log-level",
        help="log-level of the command. Defaults to INFO.",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    )(function)
    return function


def output(function: Callable) -> Callable:
    function = click.option(
        "--output",
        "-o",
        help="output type",
        default="text",
        type=click.Choice(["text", "json"]),
    )(function)
    return function


def report(org: OrgConfig) -> dict:
    return {
        "teams": sorted(org.teams),
        "external_users": sorted(org.external_users),
        "rulesets": sorted(org.rulesets),
        "repositories": {
            name: {
                "owner": repo.owner,
                "archived": repo.archived,
                "path": repo.location.path if repo.location else None,
            }
            for name, repo in sorted(org.repositories.items())
        },
        "errors": [{"path": e.path, "message": str(e)} for e in org.errors],
        "warnings": [{"path": w.path, "message": str(w)} for w in org.warnings],
    }


@click.group()
@log_level
@click.pass_context
def root(ctx: click.Context, log_level: str | None) -> None:
    ctx.ensure_object(dict)
    setup_logging(log_level=log_level)


@root.command(short_help="Load and validate a configuration tree.")
@click.argument(
    "directory", type=click.Path(exists=True, file_okay=False), default="."
)
@output
def validate(directory: str, output: str) -> None:
    org = load_org_config(LocalFileSystem(directory), settings)

    if output == "json":
        click.echo(json.dumps(report(org), indent=2))
    else:
        for warning in org.warnings:
            click.echo(f"warning: {warning}")
        for error in org.errors:
            click.echo(f"error: {error}")
        click.echo(
            f"{len(org.repositories)} repositories, {len(org.rulesets)} rulesets, "
            f"{len(org.teams)} teams, {len(org.external_users)} external users"
        )

    if not org.ok:
        sys.exit(1)
