"""CLI package bootstrap.

Defines root group (`cli`) in helpers and imports submodules so their
decorators register commands. Keep this file minimal to avoid circular
imports and duplication.
"""
# Use absolute imports so `python -m moviemeter.cli` and the console script agree
from moviemeter.cli.helpers import cli  # root group
from moviemeter.cli import query_cmds  # noqa: F401
from moviemeter.cli import browse_cmds  # noqa: F401
from moviemeter.cli import config_cmds  # noqa: F401

__all__ = ["cli"]
