"""Command-line entry point: ``python -m pr_pilot``."""

import sys

from .cli_handler import CLIHandler


def main() -> int:
    return CLIHandler().run()


if __name__ == "__main__":
    sys.exit(main())
