"""Main entry point for running betteraudit as a module.

Examples
--------
$ python -m betteraudit --help
$ python -m betteraudit audit --production
"""
from __future__ import annotations

from .main import main


if __name__ == "__main__":
    main()
