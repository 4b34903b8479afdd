"""Module entrypoint for ``python -m lazyfindings``.

This keeps module-mode execution behavior identical to the CLI script.
All argument parsing and session setup happen in ``lazyfindings.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
