"""Configuration loader for the XML documentation converter.

Loads settings from configs/config.yaml and provides typed access
to all configuration sections via dataclasses.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "configs" / "config.yaml"
_DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class ParserConfig:
    """Configuration for source file discovery and parsing."""

    extensions: list[str] = field(default_factory=lambda: [".cs"])
    exclude_dirs: list[str] = field(default_factory=lambda: ["bin", "obj"])
    exclude_files: list[str] = field(default_factory=list)


@dataclass
class RenderConfig:
    """Configuration for markup-to-Markdown rendering."""

    code_language: str = "csharp"
    preserve_paragraphs: bool = False
    inline_spacing: bool = False


@dataclass
class OutputConfig:
    """Configuration for the generated report."""

    output_file: str = "documentation.md"
    title: str = "Project Documentation"


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = _DEFAULT_LOG_FORMAT
    file: Optional[str] = None


@dataclass
class AppConfig:
    """Top-level application configuration."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load application configuration from a YAML file.

    Reads the YAML config file and constructs a fully typed AppConfig
    object. Falls back to defaults for any missing values.

    Args:
        config_path: Path to the YAML config file. If None, uses the
            default path at configs/config.yaml.

    Returns:
        A fully populated AppConfig instance.

    Raises:
        yaml.YAMLError: If the config file contains invalid YAML.
    """
    path = Path(config_path) if config_path else _DEFAULT_CONFIG_PATH

    if not path.exists():
        logger.warning("Config file not found at %s, using defaults", path)
        return AppConfig()

    with open(path) as f:
        raw = yaml.safe_load(f) or {}

    logger.info("Loaded configuration from %s", path)

    parser_data = raw.get("parser", {})
    parser_config = ParserConfig(
        extensions=parser_data.get("extensions", [".cs"]),
        exclude_dirs=parser_data.get("exclude_dirs", ["bin", "obj"]),
        exclude_files=parser_data.get("exclude_files", []),
    )

    render_data = raw.get("render", {})
    render_config = RenderConfig(
        code_language=render_data.get("code_language", "csharp"),
        preserve_paragraphs=render_data.get("preserve_paragraphs", False),
        inline_spacing=render_data.get("inline_spacing", False),
    )

    output_data = raw.get("output", {})
    output_config = OutputConfig(
        output_file=output_data.get("output_file", "documentation.md"),
        title=output_data.get("title", "Project Documentation"),
    )

    logging_data = raw.get("logging", {})
    logging_config = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        format=logging_data.get("format", _DEFAULT_LOG_FORMAT),
        file=logging_data.get("file"),
    )

    return AppConfig(
        parser=parser_config,
        render=render_config,
        output=output_config,
        logging=logging_config,
    )
