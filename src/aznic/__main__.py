"""Allow ``python -m aznic``."""

from aznic.cli import main

if __name__ == "__main__":
    main()
