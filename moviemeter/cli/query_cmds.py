"""Query composition and one-shot fetch commands."""

from __future__ import annotations
import json as _json
import click
import logging

from .helpers import cli, filter_options, build_filter, get_client, warn_invalid_list
from ..client import EndpointError
from ..formatting import ResultFormatter
from ..presets import PRESETS
from .. import query_codec

logger = logging.getLogger(__name__)


@cli.command(name="url")
@filter_options
@click.pass_context
def show_url(ctx: click.Context, query, preset, **fields):
    """Print the shareable URL and address-bar path for a filter."""
    cfg = ctx.obj
    flt = build_filter(query, preset, **fields)
    warn_invalid_list(flt)
    click.echo(query_codec.share_url(cfg['endpoint']['base_url'], flt))
    click.echo(query_codec.address_path(flt))


@cli.command(name="presets")
@click.pass_context
def list_presets(ctx: click.Context):
    """List the built-in presets with their URLs."""
    base_url = ctx.obj['endpoint']['base_url']
    for preset in PRESETS:
        click.echo(f"{click.style(preset.name, bold=True)}  {query_codec.share_url(base_url, preset.filter)}")


@cli.command(name="fetch")
@filter_options
@click.option('--json', 'as_json', is_flag=True, help='Print results as JSON instead of a table')
@click.pass_context
def fetch(ctx: click.Context, query, preset, as_json: bool, **fields):
    """Fetch results for a filter once and print them."""
    cfg = ctx.obj
    flt = build_filter(query, preset, **fields)
    warn_invalid_list(flt)

    client = get_client(cfg)
    try:
        items = client.fetch_results(query_codec.encode(flt))
    except EndpointError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(_json.dumps([item.to_dict() for item in items], indent=2))
        return

    formatter = ResultFormatter()
    click.echo(formatter.format_table(items))
    click.echo(click.style(f"{len(items)} results", fg='cyan'))


__all__ = ["show_url", "list_presets", "fetch"]
