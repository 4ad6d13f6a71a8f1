"""Markdown report assembly for a C# project.

Enumerates source files, parses them into one semantic model and
concatenates the sections of every documented member into a single
Markdown document.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Optional

from xmldoc_md.generators.member_doc import SEPARATOR, MemberDocExtractor
from xmldoc_md.parsers.csharp_parser import CSharpParser
from xmldoc_md.parsers.semantic import SemanticModel
from xmldoc_md.parsers.structure import SourceFile

logger = logging.getLogger(__name__)

NO_COMMENTS_PLACEHOLDER = "_No XML comments found in this file._"


def collect_source_files(
    root: str,
    extensions: Iterable[str] = (".cs",),
    exclude_dirs: Iterable[str] = ("bin", "obj"),
    exclude_files: Iterable[str] = (),
) -> list[Path]:
    """Collect source files below a directory in lexicographic order.

    Args:
        root: Directory (or single file) to scan.
        extensions: File suffixes to include.
        exclude_dirs: Directory names whose contents are skipped.
        exclude_files: File names that are never included.

    Returns:
        Sorted list of source file paths.
    """
    root_path = Path(root)
    if root_path.is_file():
        return [root_path]

    suffixes = {e.lower() for e in extensions}
    skip_dirs = set(exclude_dirs)
    skip_files = {name.lower() for name in exclude_files}
    files = []
    for path in sorted(root_path.rglob("*")):
        if not path.is_file() or path.suffix.lower() not in suffixes:
            continue
        relative_parts = path.relative_to(root_path).parts
        if any(part in skip_dirs for part in relative_parts[:-1]):
            continue
        if path.name.lower() in skip_files:
            continue
        files.append(path)
    return files


class DocumentAssembler:
    """Builds the consolidated Markdown report.

    Files are processed in the order given; within a file, members
    appear in declaration order.
    """

    def __init__(
        self,
        extractor: Optional[MemberDocExtractor] = None,
        parser: Optional[CSharpParser] = None,
        title: str = "Project Documentation",
    ) -> None:
        """Initialize the assembler.

        Args:
            extractor: Member section extractor; a default one if None.
            parser: C# parser; a default one if None.
            title: Top-level heading of the report.
        """
        self.extractor = extractor or MemberDocExtractor()
        self.parser = parser or CSharpParser()
        self.title = title

    def parse_files(self, files: Iterable[Path]) -> list[SourceFile]:
        """Parse source files, skipping those that cannot be decoded.

        Args:
            files: Paths of the files to parse.

        Returns:
            Parsed files in input order.
        """
        parsed = []
        for file_path in files:
            try:
                parsed.append(self.parser.parse_file(str(file_path)))
            except UnicodeDecodeError as e:
                logger.warning("Skipping %s: %s", file_path, e)
        return parsed

    def assemble(
        self,
        source_files: list[SourceFile],
        root: Optional[str] = None,
        generated_at: Optional[datetime] = None,
    ) -> str:
        """Render the report for already parsed files.

        Args:
            source_files: Files of the compilation, in output order.
            root: Directory that file headings are made relative to.
            generated_at: Timestamp for the header; defaults to now (UTC).

        Returns:
            The complete Markdown document.
        """
        timestamp = generated_at or datetime.now(timezone.utc)
        model = SemanticModel(source_files)

        lines = [
            f"# {self.title}",
            f"_Generated on {timestamp:%Y-%m-%d %H:%M:%S} UTC_",
            "",
        ]

        for source_file in source_files:
            relative_path = self._relative_path(source_file.file_path, root)
            logger.info("Processing '%s'...", relative_path)
            lines.append(f"# File: `{relative_path}`")
            lines.append("")

            members = source_file.documented_declarations
            if not members:
                lines.extend([NO_COMMENTS_PLACEHOLDER, "", SEPARATOR, ""])
                continue

            for declaration in members:
                section = self.extractor.extract(declaration, model.resolve_symbol)
                if section is not None:
                    lines.append(section.to_markdown())

        return "\n".join(lines) + "\n"

    def write(
        self, root: str, output_path: str, files: Optional[list[Path]] = None
    ) -> Path:
        """Parse a project and write its report to disk.

        Args:
            root: Project directory.
            output_path: Destination Markdown file.
            files: Source files to document; collected from root if None.

        Returns:
            Path to the written report.
        """
        if files is None:
            files = collect_source_files(root)
        content = self.assemble(self.parse_files(files), root=root)

        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

        logger.info("Wrote documentation: %s (%d files)", path, len(files))
        return path

    def _relative_path(self, file_path: str, root: Optional[str]) -> str:
        path = Path(file_path)
        if root is not None:
            root_path = Path(root)
            if root_path.is_file():
                root_path = root_path.parent
            if path.is_relative_to(root_path):
                path = path.relative_to(root_path)
        return path.as_posix()
