from __future__ import annotations
import click
from typing import Any, Callable, Dict

from ..config import ConfigError, load_typed_config
from ..version import __version__
from ..models import Filter
from ..presets import find_preset
from ..state import apply_update
from ..client import ResultsAPIClient
from .. import query_codec


@click.group()
@click.version_option(version=__version__, prog_name="moviemeter")
@click.option('--base-url', default=None, help='Results endpoint origin (overrides config)')
@click.option('--log-level', default=None, help='Logging level (overrides config)')
@click.pass_context
def cli(ctx: click.Context, base_url: str | None, log_level: str | None):
    """Compose movie list queries and preview their results.

    \b
    TYPICAL WORKFLOWS:

    \b
    Share a query:
      moviemeter url --list top --max 10
      moviemeter presets

    \b
    Preview results:
      moviemeter fetch --preset Popular
      moviemeter fetch --query "list=ls027181777&year=2019"

    \b
    Interactive:
      moviemeter browse   # edit the filter line by line, results follow
    """
    overrides: Dict[str, Any] = {}
    if base_url:
        overrides['endpoint'] = {'base_url': base_url}
    if log_level:
        overrides['log_level'] = log_level

    # Tests inject a ready config dict as obj
    if not isinstance(ctx.obj, dict):
        try:
            ctx.obj = load_typed_config(overrides).to_dict()
        except ConfigError as e:
            raise click.ClickException(f"Invalid configuration: {e}") from e


def filter_options(func: Callable) -> Callable:
    """Attach the shared filter options (--list, --year, ...) to a command."""
    options = [
        click.option('--query', '-q', default=None, help='Start from an encoded query string (list=top&max=10)'),
        click.option('--preset', '-p', default=None, help='Start from a named preset (see `moviemeter presets`)'),
        click.option('--list', 'list_id', default=None, help='List identifier: popular, top or ls<digits>'),
        click.option('--year', type=int, default=None, help='Year threshold (negative values are endpoint sentinels)'),
        click.option('--rating', 'min_rating', type=click.FloatRange(0.0, 10.0), default=None, help='Minimum rating'),
        click.option('--votes', 'min_votes', type=click.IntRange(min=0), default=None, help='Minimum vote count'),
        click.option('--max', 'max_items', type=click.IntRange(min=0), default=None, help='Maximum items (0 = unlimited)'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_filter(query: str | None = None, preset: str | None = None, **fields: Any) -> Filter:
    """Build a filter from an optional query, an optional preset and explicit fields.

    Later sources win: query < preset < explicit options.

    Raises:
        click.BadParameter: If the preset name is unknown
    """
    current = query_codec.decode(query) if query else Filter()
    if preset:
        try:
            current = apply_update(current, find_preset(preset).filter)
        except KeyError:
            raise click.BadParameter(f"Unknown preset '{preset}'", param_hint='--preset') from None
    explicit = {k: v for k, v in fields.items() if v is not None}
    if explicit:
        current = apply_update(current, explicit)
    return current


def get_client(cfg: dict) -> ResultsAPIClient:
    """Build the results endpoint client from config."""
    endpoint = cfg.get('endpoint', {})
    return ResultsAPIClient(endpoint.get('base_url', 'http://127.0.0.1:3000'), timeout=endpoint.get('timeout_seconds', 30))


def warn_invalid_list(filter: Filter) -> None:
    if not query_codec.is_list_name_valid(filter.list_id):
        click.secho(
            f"Warning: list '{filter.list_id}' does not look like popular, top or ls<digits>",
            fg='yellow',
            err=True,
        )


__all__ = ["cli", "filter_options", "build_filter", "get_client", "warn_invalid_list"]
