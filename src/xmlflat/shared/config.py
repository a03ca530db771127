"""Configuration classes for xmlflat.

This module provides configuration objects for the parser, the tree
projectors, tabular inference and the CSV renderer, plus an aggregate
ConverterConfig with presets and a JSON file loader.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

# The element parser recurses once per nesting level and must stay below
# Python's default recursion limit of 1000 frames. Projections and inference
# walk the tree with explicit stacks.
DEFAULT_MAX_DEPTH = 512
MAX_SUPPORTED_DEPTH = 800


def _check_option_type(section: str, option: str, default: Any, value: Any) -> None:
    """Reject a value whose JSON type differs from the option's default."""
    if value is None or default is None:
        return
    expected = type(default)
    # bool is a subclass of int; neither may stand in for the other.
    if isinstance(value, bool) != (expected is bool) or not isinstance(value, expected):
        raise ValueError(
            f"Option '{option}' in section '{section}' must be of type {expected.__name__}"
        )


@dataclass
class ParserConfig:
    """Configuration for the recursive-descent element parser."""

    max_depth: int = DEFAULT_MAX_DEPTH
    strict_attributes: bool = True
    decode_entities: bool = True
    allow_trailing_misc: bool = True

    def __post_init__(self) -> None:
        """Validate parser configuration."""
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")
        if self.max_depth > MAX_SUPPORTED_DEPTH:
            raise ValueError(f"max_depth must be <= {MAX_SUPPORTED_DEPTH}")


@dataclass
class ProjectionConfig:
    """Configuration for the JSON and YAML tree projectors."""

    json_indent: Optional[int] = 2
    json_ensure_ascii: bool = False
    yaml_indent: int = 2

    def __post_init__(self) -> None:
        """Validate projection configuration."""
        if self.json_indent is not None and self.json_indent < 0:
            raise ValueError("json_indent must be >= 0 or None")
        if self.yaml_indent < 1:
            raise ValueError("yaml_indent must be >= 1")


@dataclass
class TableConfig:
    """Configuration for tabular inference."""

    row_tag: Optional[str] = None
    value_column: str = "value"
    include_attributes: bool = False
    attribute_prefix: str = "@"

    def __post_init__(self) -> None:
        """Validate table configuration."""
        if self.row_tag is not None and not isinstance(self.row_tag, str):
            raise ValueError("row_tag must be a string")
        if self.row_tag is not None and not self.row_tag.strip():
            raise ValueError("row_tag cannot be blank")
        if not self.value_column:
            raise ValueError("value_column cannot be empty")


@dataclass
class CSVConfig:
    """Configuration for the CSV renderer."""

    delimiter: str = ","
    line_terminator: str = "\n"

    def __post_init__(self) -> None:
        """Validate CSV configuration."""
        if len(self.delimiter) != 1:
            raise ValueError("delimiter must be a single character")
        if self.delimiter in ('"', "\n", "\r"):
            raise ValueError("delimiter cannot be a quote or line break")
        if self.line_terminator not in ("\n", "\r\n"):
            raise ValueError("line_terminator must be '\\n' or '\\r\\n'")


@dataclass
class ConverterConfig:
    """Aggregate configuration for a full conversion."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)
    table: TableConfig = field(default_factory=TableConfig)
    csv: CSVConfig = field(default_factory=CSVConfig)

    correlation_id: Optional[str] = None

    @classmethod
    def strict(cls) -> "ConverterConfig":
        """Reject dangling attributes and anything after the root element."""
        config = cls()
        config.parser.strict_attributes = True
        config.parser.allow_trailing_misc = False
        return config

    @classmethod
    def lenient(cls) -> "ConverterConfig":
        """Drop dangling attributes instead of failing."""
        config = cls()
        config.parser.strict_attributes = False
        return config

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConverterConfig":
        """Build a configuration from a nested dictionary.

        Unknown sections or keys raise ValueError so that typos in a config
        file are not silently ignored.
        """
        preset = data.get("preset")
        if preset == "strict":
            config = cls.strict()
        elif preset == "lenient":
            config = cls.lenient()
        elif preset in (None, "default"):
            config = cls()
        else:
            raise ValueError(f"Unknown preset: {preset}")

        sections = {
            "parser": ParserConfig,
            "projection": ProjectionConfig,
            "table": TableConfig,
            "csv": CSVConfig,
        }
        for key, value in data.items():
            if key in ("preset", "correlation_id"):
                continue
            if key not in sections:
                raise ValueError(f"Unknown configuration section: {key}")
            if not isinstance(value, dict):
                raise ValueError(f"Section '{key}' must be an object")
            current = getattr(config, key)
            merged = dict(vars(current))
            for option, option_value in value.items():
                if option not in merged:
                    raise ValueError(f"Unknown option '{option}' in section '{key}'")
                _check_option_type(key, option, merged[option], option_value)
            merged.update(value)
            try:
                setattr(config, key, sections[key](**merged))
            except TypeError as e:
                raise ValueError(f"Invalid value in section '{key}': {e}") from e

        config.correlation_id = data.get("correlation_id")
        return config

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "ConverterConfig":
        """Load configuration from a JSON file."""
        path = Path(config_path)
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("Configuration file must contain a JSON object")
        return cls.from_dict(data)
