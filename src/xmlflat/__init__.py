"""xmlflat: hand-written XML parsing and flattening.

Parses XML into an immutable element tree with a recursive-descent parser and
projects that tree into JSON, YAML, visualization graphs or, through
structural inference, a CSV table.

Progressive API Disclosure:
- Level 1: Core functions - parse(), infer_table(), to_json_text(),
  to_yaml_text(), to_csv_text()
- Level 2: Never-fail conversion - convert(), convert_file(), XMLConverter
- Level 3: Integration adapters - ElementTree, lxml and pandas bridges
"""

__version__ = "0.1.0"
__author__ = "xmlflat developers"

# Level 1: Core functions
from .projection import (
    to_graph_dict,
    to_json_dict,
    to_json_text,
    to_tree_dict,
    to_yaml_text,
)
from .tabular import Table, infer_table, to_csv_text
from .tree import Element, parse

# Level 2: Never-fail conversion
from .api import (
    ConvertResult,
    OutputFormat,
    XMLConverter,
    convert,
    convert_file,
    parse_file,
)

# Configuration and errors
from .shared import (
    ConverterConfig,
    CSVConfig,
    ErrorKind,
    ParseError,
    ParserConfig,
    ProjectionConfig,
    TableConfig,
    TableError,
    XMLFlatError,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Core functions
    "parse",
    "parse_file",
    "infer_table",
    "to_json_dict",
    "to_json_text",
    "to_yaml_text",
    "to_csv_text",
    "to_tree_dict",
    "to_graph_dict",

    # Never-fail conversion
    "convert",
    "convert_file",
    "XMLConverter",
    "ConvertResult",
    "OutputFormat",

    # Data structures
    "Element",
    "Table",

    # Configuration
    "ConverterConfig",
    "CSVConfig",
    "ParserConfig",
    "ProjectionConfig",
    "TableConfig",

    # Errors
    "ErrorKind",
    "ParseError",
    "TableError",
    "XMLFlatError",
]
