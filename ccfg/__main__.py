"""Module entrypoint for ``python -m ccfg``."""

from .cli import main


if __name__ == "__main__":
    main()
