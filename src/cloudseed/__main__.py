"""Main entry point for ``python -m cloudseed``."""

from cloudseed.cli.main import main


if __name__ == "__main__":
    main()
