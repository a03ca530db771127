"""Public API for xmlflat.

Key Components:
    convert / convert_file: Never-fail conversion to JSON, YAML, CSV, tree or graph
    XMLConverter: Reusable converter with usage statistics
    parse_file: Read and parse an XML file into an Element tree
    Integration adapters: ElementTree, lxml and pandas bridges
"""

from .adapters import (
    AdapterMetadata,
    AdapterRegistry,
    AdapterType,
    ConversionDirection,
    ConversionResult,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    PandasAdapter,
    get_adapter,
    get_adapters_by_type,
    list_available_adapters,
    register_adapter,
)
from .converter import (
    ConvertResult,
    OutputFormat,
    XMLConverter,
    convert,
    convert_file,
    parse_file,
    read_xml_file,
    render,
)

__all__ = [
    "AdapterMetadata",
    "AdapterRegistry",
    "AdapterType",
    "ConversionDirection",
    "ConversionResult",
    "ConvertResult",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "OutputFormat",
    "PandasAdapter",
    "XMLConverter",
    "convert",
    "convert_file",
    "get_adapter",
    "get_adapters_by_type",
    "list_available_adapters",
    "parse_file",
    "read_xml_file",
    "register_adapter",
    "render",
]
