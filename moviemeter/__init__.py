"""Top-level package for moviemeter.

Version identifier is defined in :mod:`moviemeter.version` to keep a single source
of truth that can be imported without pulling heavier submodules (Qt, requests).
"""

from .version import __version__  # re-export

__all__ = ["__version__"]
