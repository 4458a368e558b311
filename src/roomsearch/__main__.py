"""Allows running the scraper via ``python -m roomsearch``."""

import sys

from roomsearch.cli import main

if __name__ == "__main__":
    sys.exit(main())
