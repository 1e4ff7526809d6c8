"""Allow ``python -m escape_fix``."""

from .cli import main

main()
