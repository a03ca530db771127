"""Conversion API with a never-fail boundary.

The core functions (``parse``, ``infer_table``, the projectors) raise typed
errors. This module wraps them for callers that prefer a result object: the
``convert`` family never raises for bad input and instead reports the failure
as a diagnostic on an unsuccessful ConvertResult.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from xmlflat.projection import (
    to_graph_json,
    to_json_text,
    to_tree_json,
    to_yaml_text,
)
from xmlflat.shared import (
    ConverterConfig,
    DiagnosticEntry,
    DiagnosticSeverity,
    ErrorKind,
    ParserConfig,
    PerformanceMetrics,
    XMLFlatError,
    get_logger,
)
from xmlflat.tabular import Table, infer_table, to_csv_text
from xmlflat.tree import Element, ElementParser

MS_PER_SECOND = 1000
DEFAULT_ENCODING = "utf-8"

PathType = Union[str, Path]


class OutputFormat(Enum):
    """Renderings produced by convert()."""

    JSON = "json"
    YAML = "yaml"
    CSV = "csv"
    TREE = "tree"
    GRAPH = "graph"

    @classmethod
    def from_value(cls, value: Union[str, "OutputFormat"]) -> "OutputFormat":
        """Resolve a format from an enum member or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown output format '{value}' (choose from {choices})") from None


@dataclass
class ConvertResult:
    """Outcome of a single conversion.

    On failure ``output`` is empty, ``element`` and ``table`` are None and
    ``error_kind`` names the first error when it was a known XMLFlatError.
    """

    success: bool = True
    output: str = ""
    output_format: Optional[OutputFormat] = None
    element: Optional[Element] = None
    table: Optional[Table] = None

    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)

    correlation_id: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add a diagnostic entry to the result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            position=position,
            details=details,
            correlation_id=self.correlation_id,
        ))

    @property
    def errors(self) -> List[DiagnosticEntry]:
        """Diagnostics at ERROR severity or above."""
        return [
            diagnostic for diagnostic in self.diagnostics
            if diagnostic.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
        ]

    @property
    def error_message(self) -> Optional[str]:
        errors = self.errors
        return errors[0].message if errors else None

    @property
    def element_count(self) -> int:
        return self.performance.elements_built

    def to_dict(self) -> Dict[str, Any]:
        """Summarize the result without the rendered output."""
        return {
            "success": self.success,
            "output_format": self.output_format.value if self.output_format else None,
            "root": self.element.name if self.element is not None else None,
            "element_count": self.element_count,
            "rows": self.performance.rows_produced,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "processing_time_ms": self.performance.processing_time_ms,
            "diagnostics": [diagnostic.to_dict() for diagnostic in self.diagnostics],
            "correlation_id": self.correlation_id,
        }


def read_xml_file(file_path: PathType, encoding: str = DEFAULT_ENCODING) -> str:
    """Read a whole XML file as text.

    Raises:
        OSError: the file cannot be read
        UnicodeDecodeError: the content does not match ``encoding``
    """
    path_obj = Path(file_path)
    with path_obj.open(encoding=encoding) as file:
        return file.read()


def parse_file(
    file_path: PathType,
    encoding: str = DEFAULT_ENCODING,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Element:
    """Read and parse an XML file.

    Raises:
        OSError: the file cannot be read
        ParseError: the content is not well-formed enough to build a tree
    """
    logger = get_logger(__name__, correlation_id, "parse_file")
    logger.debug("Reading XML file", extra={"file_path": str(file_path), "encoding": encoding})
    content = read_xml_file(file_path, encoding)
    parser = ElementParser(content, config, correlation_id)
    with logger.timed("parse_file", {"file_path": str(file_path)}):
        return parser.parse_document()


def render(
    element: Element,
    output_format: OutputFormat,
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None
) -> Tuple[str, Optional[Table]]:
    """Render an element tree in ``output_format``.

    Returns:
        ``(text, table)``; ``table`` is set only for CSV output

    Raises:
        TableError: CSV output was requested and no table can be inferred
    """
    config = config or ConverterConfig()
    if output_format is OutputFormat.JSON:
        return to_json_text(element, config.projection), None
    if output_format is OutputFormat.YAML:
        return to_yaml_text(element, config.projection), None
    if output_format is OutputFormat.TREE:
        return to_tree_json(element, config.projection.json_indent), None
    if output_format is OutputFormat.GRAPH:
        return to_graph_json(element, config.projection.json_indent), None
    table = infer_table(element, config.table, correlation_id)
    return to_csv_text(table, config=config.csv), table


class XMLConverter:
    """Reusable converter holding one configuration and usage statistics.

    Examples:
        >>> converter = XMLConverter()
        >>> result = converter.convert('<r><i>1</i><i>2</i></r>', OutputFormat.CSV)
        >>> result.output
        'value\\n1\\n2\\n'
        >>> converter.convert('<r>', "json").success
        False
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ConverterConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self.logger = get_logger(__name__, self.correlation_id, "converter")

        self._conversion_count = 0
        self._successful_conversions = 0
        self._total_processing_time = 0.0

    def convert(
        self,
        xml_text: str,
        output_format: Union[str, OutputFormat]
    ) -> ConvertResult:
        """Parse ``xml_text`` and render it; never raises for bad input."""
        start_time = time.time()
        result = ConvertResult(correlation_id=self.correlation_id)
        result.performance.characters_processed = len(xml_text)

        self.logger.info(
            "Starting conversion",
            extra={"output_format": str(output_format), "content_length": len(xml_text)}
        )

        try:
            fmt = OutputFormat.from_value(output_format)
            result.output_format = fmt
            parser = ElementParser(xml_text, self.config.parser, self.correlation_id)
            try:
                element = parser.parse_document()
            finally:
                result.performance.elements_built = parser.elements_built
            output, table = render(element, fmt, self.config, self.correlation_id)
        except XMLFlatError as e:
            self._fail(result, e)
        except ValueError as e:
            result.success = False
            result.add_diagnostic(DiagnosticSeverity.ERROR, str(e), "converter")
        except Exception as e:
            # Never-fail boundary: unexpected errors are logged and reported.
            self.logger.exception("Conversion failed unexpectedly")
            result.success = False
            result.add_diagnostic(
                DiagnosticSeverity.CRITICAL,
                f"Conversion failed: {e}",
                "converter",
                details={"exception_type": type(e).__name__},
            )
        else:
            result.output = output
            result.element = element
            result.table = table
            if table is not None:
                result.performance.rows_produced = table.row_count

        return self._finish(result, start_time)

    def convert_file(
        self,
        file_path: PathType,
        output_format: Union[str, OutputFormat],
        encoding: str = DEFAULT_ENCODING
    ) -> ConvertResult:
        """Read ``file_path`` and convert it; I/O errors give a failed result."""
        start_time = time.time()
        try:
            content = read_xml_file(file_path, encoding)
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning(
                "Could not read input file",
                extra={"file_path": str(file_path), "error": str(e)}
            )
            result = ConvertResult(success=False, correlation_id=self.correlation_id)
            result.add_diagnostic(
                DiagnosticSeverity.ERROR,
                f"Could not read {file_path}: {e}",
                "file_reader",
                details={"file_path": str(file_path), "encoding": encoding},
            )
            return self._finish(result, start_time)

        result = self.convert(content, output_format)
        result.add_diagnostic(
            DiagnosticSeverity.INFO,
            f"Read {file_path}",
            "file_reader",
            details={"file_path": str(file_path), "encoding": encoding},
        )
        return result

    def _fail(self, result: ConvertResult, error: XMLFlatError) -> None:
        result.success = False
        result.error_kind = error.kind
        result.add_diagnostic(
            DiagnosticSeverity.ERROR,
            str(error),
            "converter",
            position=error.position,
            details={"kind": error.kind_name, "tag": error.tag},
        )
        self.logger.warning(
            "Conversion rejected input",
            extra={"error_kind": error.kind_name}
        )

    def _finish(self, result: ConvertResult, start_time: float) -> ConvertResult:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        result.performance.processing_time_ms = processing_time

        self._conversion_count += 1
        self._total_processing_time += processing_time
        if result.success:
            self._successful_conversions += 1

        self.logger.info(
            "Conversion completed",
            extra={
                "success": result.success,
                "processing_time_ms": processing_time,
                "elements_built": result.performance.elements_built,
            }
        )
        return result

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get converter usage statistics."""
        return {
            "total_conversions": self._conversion_count,
            "successful_conversions": self._successful_conversions,
            "success_rate": (
                self._successful_conversions / self._conversion_count
                if self._conversion_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset converter usage statistics."""
        self._conversion_count = 0
        self._successful_conversions = 0
        self._total_processing_time = 0.0


def convert(
    xml_text: str,
    output_format: Union[str, OutputFormat],
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None
) -> ConvertResult:
    """Convert XML text to one of the supported renderings.

    Examples:
        >>> result = convert('<a><b>1</b></a>', "json")
        >>> result.success, result.element.name
        (True, 'a')

        >>> result = convert('<a><b></a>', "json")
        >>> result.success, result.error_kind.value
        (False, 'MismatchedClosingTag')
    """
    return XMLConverter(config, correlation_id).convert(xml_text, output_format)


def convert_file(
    file_path: PathType,
    output_format: Union[str, OutputFormat],
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None,
    encoding: str = DEFAULT_ENCODING
) -> ConvertResult:
    """Convert an XML file to one of the supported renderings."""
    return XMLConverter(config, correlation_id).convert_file(file_path, output_format, encoding)
