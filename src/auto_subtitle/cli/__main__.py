"""Allow running the CLI with ``python -m auto_subtitle.cli``."""

from .main import main

main()
