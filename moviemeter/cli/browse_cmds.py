"""Interactive browse session.

Reads filter edits from stdin and drives a FilterSession on the Qt event
loop, so edits are debounced, mirrored to the session history and fetched
exactly like in the graphical front end.
"""

from __future__ import annotations
import sys
import threading
from typing import Callable, Optional, Tuple
import click
import logging
from PySide6.QtCore import QCoreApplication, QObject, Signal

from .helpers import cli, get_client
from ..formatting import ResultFormatter
from ..models import Filter
from ..presets import PRESETS, find_preset
from ..session import FilterSession
from ..state import parse_field_edit
from ..sync import NavigationHistory
from .. import query_codec

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  <field>=<value>   edit a field (list, year, rating, votes, max); empty value unsets it
  preset <name>     apply a preset ({presets})
  clear             unset every field
  back | forward    navigate the session history
  show              print the current filter and results
  url               print the shareable URL
  help              show this help
  quit              leave"""


def parse_command(line: str) -> Tuple[str, str]:
    """Split an input line into (command, argument).

    ``year=2019`` becomes ``("set", "year=2019")``; ``preset Top 10`` becomes
    ``("preset", "Top 10")``. Blank lines give ``("", "")``.
    """
    text = line.strip()
    if not text:
        return "", ""
    if "=" in text.split(" ", 1)[0]:
        return "set", text
    command, _, argument = text.partition(" ")
    return command.lower(), argument.strip()


def describe_filter(filter: Filter) -> str:
    return (
        f"list={filter.list_id or '-'} year={filter.year or '-'} rating={filter.min_rating or '-'} "
        f"votes={filter.min_votes or '-'} max={filter.max_items or '-'}"
    )


class BrowseConsole(QObject):
    """Text front end for a FilterSession.

    Signals:
        quit_requested: Emitted when the user asks to leave
    """

    quit_requested = Signal()

    def __init__(
        self,
        session: FilterSession,
        formatter: ResultFormatter,
        echo: Callable[..., None] = click.echo,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self.session = session
        self.formatter = formatter
        self.echo = echo

        session.debouncer.settled.connect(self._on_settled)
        session.orchestrator.resultsChanged.connect(self._on_results)
        session.orchestrator.errorChanged.connect(self._on_error)
        session.orchestrator.loadingChanged.connect(self._on_loading)

    def handle_line(self, line: str):
        """Execute one input line."""
        command, argument = parse_command(line)
        if not command:
            return
        if command == "set":
            field, _, value = argument.partition("=")
            try:
                self.session.update(**parse_field_edit(field.strip(), value))
            except ValueError as e:
                self.echo(click.style(f"Invalid input: {e}", fg="red"))
        elif command == "preset":
            try:
                self.session.apply_preset(find_preset(argument))
            except KeyError:
                self.echo(click.style(f"Unknown preset '{argument}'", fg="red"))
        elif command == "clear":
            self.session.store.clear()
        elif command == "back":
            if self.session.history.can_go_back:
                self.session.history.back()
            else:
                self.echo("Already at the oldest entry")
        elif command == "forward":
            if self.session.history.can_go_forward:
                self.session.history.forward()
            else:
                self.echo("Already at the newest entry")
        elif command == "show":
            self.echo(describe_filter(self.session.filter))
            self.echo(self.formatter.format_table(self.session.orchestrator.results))
        elif command == "url":
            self.echo(self.session.share_url())
        elif command == "help":
            self.echo(HELP_TEXT.format(presets=", ".join(p.name for p in PRESETS)))
        elif command in ("quit", "exit"):
            self.quit_requested.emit()
        else:
            self.echo(click.style(f"Unknown command '{command}' (try 'help')", fg="red"))

    def _on_settled(self, filter: Filter):
        self.echo(click.style(f"Address: {self.session.history.location}", fg="cyan"))
        if not query_codec.is_list_name_valid(filter.list_id):
            self.echo(click.style(f"Warning: list '{filter.list_id}' looks invalid", fg="yellow"))

    def _on_results(self, items):
        self.echo(self.formatter.format_table(items))
        self.echo(click.style(f"{len(items)} results", fg="cyan"))

    def _on_error(self, message):
        if message:
            self.echo(click.style(f"Error: {message}", fg="red"))

    def _on_loading(self, loading: bool):
        if loading:
            self.echo("Loading...")


class StdinLines(QObject):
    """Feeds stdin lines into the event loop from a daemon thread.

    Signals:
        line_read: One input line (without the newline)
        closed: End of input
    """

    line_read = Signal(str)
    closed = Signal()

    def start(self, stream=None):
        stream = stream or sys.stdin
        thread = threading.Thread(target=self._pump, args=(stream,), name="stdin-reader", daemon=True)
        thread.start()

    def _pump(self, stream):
        for line in stream:
            self.line_read.emit(line.rstrip("\n"))
        self.closed.emit()


@cli.command(name="browse")
@click.option('--query', '-q', default="", help='Initial address-bar query (list=top&max=10)')
@click.option('--delay-ms', type=click.IntRange(min=0), default=None, help='Debounce delay (overrides config)')
@click.pass_context
def browse(ctx: click.Context, query: str, delay_ms: int | None):
    """Edit a filter interactively and watch results follow."""
    cfg = ctx.obj
    app = QCoreApplication.instance() or QCoreApplication([])

    search = query.lstrip("?")
    history = NavigationHistory("/?" + search if search else "/")
    session = FilterSession(
        history,
        get_client(cfg),
        delay_ms=delay_ms if delay_ms is not None else cfg['debounce']['delay_ms'],
    )
    console = BrowseConsole(session, ResultFormatter())
    reader = StdinLines()

    reader.line_read.connect(console.handle_line)
    reader.closed.connect(app.quit)
    console.quit_requested.connect(app.quit)

    click.echo("Type 'help' for commands.")
    session.start()
    reader.start()
    try:
        app.exec()
    finally:
        session.close()


__all__ = ["browse", "BrowseConsole", "StdinLines", "parse_command", "describe_filter"]
