"""CLI commands for the XML documentation converter.

Provides the Click-based command group 'xmldoc' with subcommands for
generating the Markdown report and listing documented members.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from xmldoc_md import __version__
from xmldoc_md.converters.markdown import MarkdownConverter
from xmldoc_md.generators.member_doc import MemberDocExtractor
from xmldoc_md.output.markdown import DocumentAssembler, collect_source_files
from xmldoc_md.parsers.semantic import SemanticModel
from xmldoc_md.utils.config import AppConfig, load_config
from xmldoc_md.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def _collect_files(path: str, config: AppConfig) -> list[Path]:
    """Collect C# source files using the configured filters.

    Args:
        path: File or directory path to scan.
        config: Application configuration.

    Returns:
        Sorted list of source file paths.
    """
    return collect_source_files(
        path,
        extensions=config.parser.extensions,
        exclude_dirs=config.parser.exclude_dirs,
        exclude_files=config.parser.exclude_files,
    )


def _build_assembler(config: AppConfig) -> DocumentAssembler:
    """Create a DocumentAssembler from configuration."""
    converter = MarkdownConverter(
        code_language=config.render.code_language,
        preserve_paragraphs=config.render.preserve_paragraphs,
        inline_spacing=config.render.inline_spacing,
    )
    return DocumentAssembler(
        extractor=MemberDocExtractor(converter=converter),
        title=config.output.title,
    )


@click.group()
@click.version_option(version=__version__, prog_name="xmldoc-md")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Path to a YAML configuration file.",
)
@click.pass_context
def xmldoc(ctx: click.Context, config_path: Optional[str]) -> None:
    """XML Documentation to Markdown Converter for C# projects."""
    config = load_config(config_path)
    setup_logging(
        level=config.logging.level,
        log_format=config.logging.format,
        log_file=config.logging.file,
    )
    ctx.obj = config


@xmldoc.command()
@click.argument("path", type=click.Path(exists=True), default=".")
@click.option(
    "--output", "-o", type=click.Path(), default=None, help="Output file path."
)
@click.option(
    "--dry-run", is_flag=True, help="Show which files would be documented."
)
@click.pass_obj
def generate(
    config: AppConfig, path: str, output: Optional[str], dry_run: bool
) -> None:
    """Generate a consolidated Markdown file from XML doc comments.

    Scans PATH for C# files (skipping build output directories),
    renders every documented member and writes a single report.
    """
    try:
        files = _collect_files(path, config)
        if not files:
            click.echo("No C# source files found to document.")
            return

        click.echo(f"Found {len(files)} source files")
        if dry_run:
            for f in files:
                click.echo(f"  Would process: {f}")
            click.echo("Dry run complete. No files written.")
            return

        output_dir = Path(path).parent if Path(path).is_file() else Path(path)
        output_path = output or str(output_dir / config.output.output_file)
        assembler = _build_assembler(config)
        written = assembler.write(path, output_path, files=files)
    except Exception as e:
        logger.exception("Documentation generation failed")
        click.echo(f"An unexpected error occurred: {e}", err=True)
        raise SystemExit(1)

    click.echo(f"Successfully generated Markdown documentation at '{written}'")


@xmldoc.command()
@click.argument("path", type=click.Path(exists=True), default=".")
@click.pass_obj
def members(config: AppConfig, path: str) -> None:
    """List documented members with their documentation IDs.

    Useful for checking which declarations the report will cover and
    how cross-references resolve.
    """
    files = _collect_files(path, config)
    assembler = _build_assembler(config)
    source_files = assembler.parse_files(files)
    model = SemanticModel(source_files)

    total = 0
    for source_file in source_files:
        documented = source_file.documented_declarations
        if not documented:
            continue
        click.echo(source_file.file_path)
        for declaration in documented:
            symbol = model.resolve_symbol(declaration)
            if symbol is None:
                continue
            total += 1
            click.echo(
                f"  {symbol.display_signature}  [{symbol.documentation_id}]"
                f"  (line {declaration.line_number})"
            )

    click.echo(f"\nTotal: {total} documented members")
