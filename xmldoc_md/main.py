"""Entry point for the XML documentation converter."""

from xmldoc_md.cli.commands import xmldoc


def main() -> None:
    """Launch the CLI."""
    xmldoc()


if __name__ == "__main__":
    main()
