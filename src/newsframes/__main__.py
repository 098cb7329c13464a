"""newsframes CLI entry point.

    python -m newsframes analyze "Dog attacks 4-year-old causing injuries"
"""

from newsframes.cli.app import cli

if __name__ == "__main__":
    cli()
