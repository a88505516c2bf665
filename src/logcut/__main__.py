"""Allow running as ``python -m logcut``."""

from .cli import main

main()
