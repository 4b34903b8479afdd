"""Public package surface for lazyfindings.

Exports ``main`` for programmatic CLI invocation and ``browse_findings`` for
callers that already hold findings in memory.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def browse_findings(*args, **kwargs):
    """Lazily import the session driver and browse findings interactively."""
    from .session import browse_findings as _browse_findings

    return _browse_findings(*args, **kwargs)


__all__ = ["main", "browse_findings"]
