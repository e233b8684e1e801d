"""Module entrypoint for ``python -m lazymerge``."""

from .cli import main


if __name__ == "__main__":
    main()
