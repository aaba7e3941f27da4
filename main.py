"""Main entry point for the examinator CLI."""

from examinator.cli.app import app


def main():
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    main()
