"""XML Documentation to Markdown Converter.

Parses C# sources with tree-sitter, resolves documented declarations
to symbols and renders their XML documentation comments as a single
Markdown report.
"""

__version__ = "0.1.0"
