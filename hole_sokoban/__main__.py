import sys

from .cli import main

if __name__ == "__main__":  # pragma: no cover - manual invocation entry point
    sys.exit(main())
