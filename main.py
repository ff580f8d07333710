"""Main entry point for the study-royale CLI."""

from study_royale.cli.app import app


def main():
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    main()
