"""Shared utilities for xmlflat.

This module provides the configuration objects, error types, result types and
logging helpers used across all processing layers.
"""

from .config import (
    ConverterConfig,
    CSVConfig,
    ParserConfig,
    ProjectionConfig,
    TableConfig,
)
from .errors import (
    ErrorKind,
    InvalidLeadingCharacterError,
    InvalidTagNameError,
    MaxDepthExceededError,
    MismatchedClosingTagError,
    NoTabularDataFoundError,
    ParseError,
    TableError,
    TrailingContentError,
    UnexpectedEofError,
    UnterminatedAttributeError,
    UnterminatedSpecialConstructError,
    UnterminatedTagError,
    XMLFlatError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
)

__all__ = [
    "ConverterConfig",
    "CSVConfig",
    "ParserConfig",
    "ProjectionConfig",
    "TableConfig",
    "ErrorKind",
    "InvalidLeadingCharacterError",
    "InvalidTagNameError",
    "MaxDepthExceededError",
    "MismatchedClosingTagError",
    "NoTabularDataFoundError",
    "ParseError",
    "TableError",
    "TrailingContentError",
    "UnexpectedEofError",
    "UnterminatedAttributeError",
    "UnterminatedSpecialConstructError",
    "UnterminatedTagError",
    "XMLFlatError",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
]
