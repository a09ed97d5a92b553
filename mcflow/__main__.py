"""Allow ``python -m mcflow``."""

from mcflow.cli import main

main()
