"""
cli/app.py - Main CLI entry point

Click-based command line interface over the inventory cache and filter
engine. Every command configures a ProviderContext (which performs the
initial refresh) and runs one read-only query against it.

Commands:
    quake-inventory kinds                       # kinds and filterable attributes
    quake-inventory images -f flavor=gpu        # available images
    quake-inventory list machine_sizes -f name~m2.*
    quake-inventory usage --format json

Usage:
    $ quake-inventory --rest-url https://portal.example/rest --token ... images
    $ quake-inventory --inventory-file inventory.yaml list networks
    $ python -m cli.app kinds
"""

from __future__ import annotations

import json
import logging
from typing import Any

import click

from cli.ui import get_logger, print_error, print_table
from core.config import LogConfig, ProviderConfig, get_version
from core.data.inventory import RESOURCE_KINDS
from core.data.query import (
    DataSourceResult,
    describe_kinds,
    read_available_images,
    read_available_resources,
    read_usage,
)
from core.exceptions import QuakeInventoryError, format_error_for_user
from core.provider import ProviderContext

_log_config = LogConfig.from_env()
logging.basicConfig(
    level=logging.WARNING,
    format=_log_config.format,
    datefmt=_log_config.date_format,
)

VERSION = get_version()

FORMAT_CHOICES = ["table", "json"]


def _filter_option(func):
    return click.option(
        "-f",
        "--filter",
        "filters",
        multiple=True,
        metavar="EXPR",
        help="name=v1,v2 (exact), name~glob or name~=regex; repeatable",
    )(func)


def _format_option(func):
    return click.option(
        "--format",
        "output_format",
        type=click.Choice(FORMAT_CHOICES),
        default="table",
        show_default=True,
    )(func)


def _fail(error: Exception) -> None:
    print_error(format_error_for_user(error))
    raise SystemExit(1)


def _open_context(ctx: click.Context) -> ProviderContext:
    """Configure the provider from CLI options, env and config file"""
    options: dict[str, Any] = ctx.obj
    try:
        config = ProviderConfig.from_file(options["config"]) if options["config"] else ProviderConfig.from_env()
        config = config.merged(
            rest_url=options["rest_url"],
            token=options["token"],
            project_id=options["project"],
            inventory_file=options["inventory_file"],
            timeout=options["timeout"],
        )
        provider = ProviderContext.configure(config)
    except QuakeInventoryError as e:
        _fail(e)
    return provider


def _emit(result: DataSourceResult, output_format: str) -> None:
    if output_format == "json":
        payload: Any = result.by_kind if result.kind is None else result.items
        click.echo(json.dumps({"id": result.id, "items": payload}, indent=2, ensure_ascii=False))
        return

    sections = result.by_kind if result.kind is None else {result.kind: result.items}
    for kind, rows in sections.items():
        columns = list(RESOURCE_KINDS[kind].attribute_names())
        print_table(
            f"{kind} ({len(rows)})",
            columns,
            [[row[column] for column in columns] for row in rows],
        )


@click.group(invoke_without_command=False)
@click.version_option(VERSION, prog_name="quake-inventory")
@click.option("--config", "config", type=click.Path(dir_okay=False), help="YAML provider configuration")
@click.option("--rest-url", "rest_url", envvar="QUAKE_REST_URL", help="REST API base URL")
@click.option("--token", "token", envvar="QUAKE_TOKEN", help="API bearer token")
@click.option("--project", "project", envvar="QUAKE_PROJECT", help="Project ID")
@click.option(
    "--inventory-file",
    "inventory_file",
    type=click.Path(dir_okay=False),
    help="Read the inventory payload from a JSON/YAML file",
)
@click.option("--timeout", "timeout", type=float, default=None, help="Request timeout in seconds")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging")
@click.pass_context
def cli(ctx, config, rest_url, token, project, inventory_file, timeout, verbose):
    """Query the resources available to a provisioning project"""
    get_logger("core", "DEBUG" if verbose else "WARNING")
    ctx.obj = {
        "config": config,
        "rest_url": rest_url,
        "token": token,
        "project": project,
        "inventory_file": inventory_file,
        "timeout": timeout,
    }


@cli.command("kinds")
def kinds_cmd():
    """List resource kinds and their filterable attributes"""
    rows = [[kind, ", ".join(names)] for kind, names in describe_kinds().items()]
    print_table("resource kinds", ["kind", "attributes"], rows)


@cli.command("images")
@_filter_option
@_format_option
@click.pass_context
def images_cmd(ctx, filters, output_format):
    """Available images (flavor, category, version)"""
    provider = _open_context(ctx)
    try:
        result = read_available_images(provider, list(filters))
    except QuakeInventoryError as e:
        _fail(e)
    _emit(result, output_format)


@cli.command("list")
@click.argument("kind", required=False, type=click.Choice(sorted(RESOURCE_KINDS)))
@_filter_option
@_format_option
@click.pass_context
def list_cmd(ctx, kind, filters, output_format):
    """Resources of KIND, or every kind when omitted"""
    provider = _open_context(ctx)
    try:
        result = read_available_resources(provider, kind, list(filters))
    except QuakeInventoryError as e:
        _fail(e)
    _emit(result, output_format)


@cli.command("usage")
@_filter_option
@_format_option
@click.pass_context
def usage_cmd(ctx, filters, output_format):
    """Resource usage against project limits"""
    provider = _open_context(ctx)
    try:
        result = read_usage(provider, list(filters))
    except QuakeInventoryError as e:
        _fail(e)
    _emit(result, output_format)


if __name__ == "__main__":
    cli()
