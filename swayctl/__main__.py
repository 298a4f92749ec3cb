"""Entry point for ``python -m swayctl``."""

import sys

from swayctl.cli.commands import cli_main


if __name__ == "__main__":
    sys.exit(cli_main())
