#!/usr/bin/env python3
"""
kubectl-tekton - Main Entry Point

This is the thin command layer that:
1. Loads configuration
2. Builds the Results client
3. Runs the get/logs/config commands

All protocol logic is in the modules, following black box principles.
"""

import functools
import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import click
import httpx
import yaml

from kubectl_tekton import __version__
from kubectl_tekton.config.provider import ConfigProvider, FileConfigProvider, ResultsConfig
from kubectl_tekton.errors import ResultsError
from kubectl_tekton.logging_config import configure_logging
from kubectl_tekton.modules.action import (
    ListOptions,
    fetch_log,
    iter_records,
    list_records,
    log_name_for,
)
from kubectl_tekton.modules.client import ResultsClient
from kubectl_tekton.modules.resolver import ResourceResolver
from kubectl_tekton.printer import HEADER, run_row

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@dataclass
class CommandContext:
    """Collaborators shared by every command."""

    provider: ConfigProvider
    http_transport: Optional[httpx.BaseTransport] = None

    @functools.cached_property
    def config(self) -> ResultsConfig:
        return self.provider.get_results_config()

    def client(self) -> ResultsClient:
        return ResultsClient.from_config(self.config, transport=self.http_transport)

    def resolver(self) -> ResourceResolver:
        return ResourceResolver(version_override=self.config.version_override)


def handle_errors(func):
    """Report client failures as a one-line error instead of a traceback."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ResultsError as e:
            logger.debug("Command failed", exc_info=True)
            raise click.ClickException(str(e)) from e

    return wrapper


def _default_namespace() -> str:
    return os.getenv("TEKTON_NAMESPACE", "default")


@click.group()
@click.version_option(__version__, prog_name="kubectl-tekton")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=lambda: os.getenv("LOG_LEVEL", "WARNING"),
    help="Log level for diagnostics on stderr.",
)
@click.option(
    "--config",
    "config_path",
    default=None,
    help="Results config file (default: $TEKTON_RESULTS_CONFIG or ~/.config/kubectl-tekton/results.yaml).",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str, config_path: Optional[str]):
    """Query Tekton Results for PipelineRuns, TaskRuns and their logs."""
    configure_logging(log_level)
    if ctx.obj is None:
        ctx.obj = CommandContext(provider=FileConfigProvider(config_path))


@cli.command("get")
@click.argument("resource")
@click.argument("name", required=False, default="")
@click.option("-n", "--namespace", default=_default_namespace, help="Namespace to query.")
@click.option("--limit", type=click.IntRange(5, 100), default=10, show_default=True,
              help="Page size.")
@click.option("--uid", default="", help="UID to select a unique item.")
@click.option("-l", "--labels", "--selector", "labels", default="",
              help="Filter items by labels (k=v,k2=v2).")
@click.option("--annotations", default="", help="Filter items by annotations (k=v,k2=v2).")
@click.option("--finalizers", default="", help="Filter items by finalizers (f1,f2).")
@click.option("--owner-references", default="",
              help="Filter items by owner references (name or kind/name, comma separated).")
@click.option("--filter", "raw_filter", default="", help="Raw CEL filter expression.")
@click.option("-o", "--output", type=click.Choice(["json", "yaml"]), default=None,
              help="Print the stored object of a named resource.")
@click.pass_obj
@handle_errors
def get_command(
    ctx: CommandContext,
    resource: str,
    name: str,
    namespace: str,
    limit: int,
    uid: str,
    labels: str,
    annotations: str,
    finalizers: str,
    owner_references: str,
    raw_filter: str,
    output: Optional[str],
):
    """Get or list RESOURCE [NAME] from Tekton Results.

    \b
    Examples:
      # List PipelineRuns in the default namespace
      kubectl tekton get pr -n default

      # Print a TaskRun definition
      kubectl tekton get tr build-xyz -o yaml
    """
    if output and not name:
        raise click.UsageError("resource name is required to print resource definition")

    gvk = ctx.resolver().resolve(resource)
    options = ListOptions(
        gvk=gvk,
        namespace=namespace,
        name=name,
        uid=uid,
        labels=labels,
        annotations=annotations,
        finalizers=finalizers,
        owner_references=owner_references,
        filter=raw_filter,
        limit=limit,
    )

    with ctx.client() as client:
        if output:
            page = list_records(client, options)
            if not page.records:
                click.echo(f"No {gvk.kind} found")
                return
            obj = page.records[0].decode_data()
            if output == "json":
                click.echo(json.dumps(obj, indent=2))
            else:
                click.echo(yaml.safe_dump(obj, sort_keys=False), nl=False)
            return

        found = False
        now = datetime.now(timezone.utc)
        for record in iter_records(client, options):
            row = run_row(record.decode_data(), now)
            if not found:
                click.echo("\t".join(HEADER))
                found = True
            click.echo("\t".join(row))
        if not found:
            click.echo(f"No {gvk.kind} found")


@click.command("logs")
@click.argument("resource")
@click.argument("name")
@click.option("-n", "--namespace", default=_default_namespace, help="Namespace to query.")
@click.option("--uid", default="", help="UID to select a specific run.")
@click.pass_obj
@handle_errors
def logs_command(ctx: CommandContext, resource: str, name: str, namespace: str, uid: str):
    """Display the stored logs of RESOURCE NAME.

    \b
    Examples:
      # Logs of a TaskRun
      kubectl tekton logs tr build-xyz

      # Logs of one specific run
      kubectl tekton logs pr release --uid f27a6d83-21d3-4256-a8f0-0875b123895f
    """
    gvk = ctx.resolver().resolve(resource)
    options = ListOptions(gvk=gvk, namespace=namespace, name=name, uid=uid)

    with ctx.client() as client:
        page = list_records(client, options)
        if not page.records:
            click.echo(f"No {gvk.kind} found")
            return
        log_name = log_name_for(page.records[0])
        if not log_name:
            click.echo("No logs found")
            return
        data = fetch_log(client, log_name)

    stdout = click.get_binary_stream("stdout")
    stdout.write(data)
    stdout.flush()


cli.add_command(logs_command)
cli.add_command(logs_command, name="log")


@cli.group("config")
def config_group():
    """Inspect the Tekton Results client configuration."""


@config_group.command("view")
@click.pass_obj
@handle_errors
def config_view(ctx: CommandContext):
    """Print the effective configuration with the token redacted."""
    click.echo(yaml.safe_dump(ctx.config.redacted(), sort_keys=False), nl=False)


def main():
    """Main entry point."""
    cli(prog_name="kubectl-tekton")


if __name__ == "__main__":
    main()
