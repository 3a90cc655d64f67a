"""Allow ``python -m ditasmith``."""

from ditasmith.ui.cli import main


if __name__ == "__main__":
    main()
