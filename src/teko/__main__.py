"""Allow running as ``python -m teko``."""

from teko.main import main

main()
