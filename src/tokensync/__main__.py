"""Allow running as ``python -m tokensync``."""

from tokensync.cli import main

if __name__ == "__main__":
    main()
