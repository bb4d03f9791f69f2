"""Main module for running the extraction engine."""

import sys

from extractor_engine.cli import main

if __name__ == "__main__":
    sys.exit(main())
