"""Run the validatable CLI.

Usage:
    python -m validatable rules validate --path rules/
"""

from validatable.cli.main import cli


def main():
    cli()


if __name__ == "__main__":
    main()
