"""Entry point for ``python -m debtsnowball``."""

from .cli import main

if __name__ == "__main__":
    main()
