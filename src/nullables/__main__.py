"""Allow ``python -m nullables``."""

from nullables.cli.app import main

if __name__ == "__main__":
    main()
