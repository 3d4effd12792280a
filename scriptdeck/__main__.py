"""Module entrypoint for ``python -m scriptdeck``."""

from .cli import main


if __name__ == "__main__":
    main()
