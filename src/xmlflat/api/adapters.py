"""Integration adapters for exchanging trees and tables with other libraries.

Adapters convert xmlflat Element trees to and from ``xml.etree.ElementTree``
and ``lxml`` elements, and inferred Tables to and from pandas DataFrames.
Optional libraries are imported lazily, so the adapters can be registered
whether or not those libraries are installed. Conversions return a
ConversionResult and never raise.
"""

import threading
import time
import weakref
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional, Type

from xmlflat.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    TableConfig,
    get_logger,
)
from xmlflat.tabular import Table, infer_table
from xmlflat.tree import Element, parse

MS_PER_SECOND = 1000
MAX_RECORDED_CONVERSIONS = 1000


class AdapterType(Enum):
    """Types of integration adapters."""

    XML_LIBRARY = auto()
    DATA_FRAME = auto()


class ConversionDirection(Enum):
    """Direction of data conversion."""

    TO_TARGET = auto()
    FROM_TARGET = auto()


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    version: str
    adapter_type: AdapterType
    target_library: str
    supported_versions: List[str]
    description: str
    author: str = "xmlflat"


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    direction: ConversionDirection = ConversionDirection.TO_TARGET
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)


class AdapterPerformanceProfiler:
    """Keeps recent conversion timings per adapter."""

    def __init__(self) -> None:
        self._metrics: Dict[str, List[float]] = {}
        self._lock = threading.RLock()

    def record_conversion(self, adapter_name: str, conversion_time_ms: float) -> None:
        """Record one conversion time, keeping only the most recent ones."""
        with self._lock:
            times = self._metrics.setdefault(adapter_name, [])
            times.append(conversion_time_ms)
            if len(times) > MAX_RECORDED_CONVERSIONS:
                del times[:-MAX_RECORDED_CONVERSIONS]

    def get_statistics(self, adapter_name: str) -> Dict[str, float]:
        """Get timing statistics for an adapter (empty if none recorded)."""
        with self._lock:
            times = self._metrics.get(adapter_name)
            if not times:
                return {}
            return {
                "count": len(times),
                "average_ms": sum(times) / len(times),
                "min_ms": min(times),
                "max_ms": max(times),
                "total_ms": sum(times),
            }


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters.

    Subclasses implement ``to_target`` (xmlflat object to library object) and
    ``from_target`` (library object back to xmlflat) and report failures via
    ``_create_error_result`` instead of raising.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)
        self._profiler = AdapterPerformanceProfiler()

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def to_target(self, source: Any) -> ConversionResult:
        """Convert an xmlflat object to the target library's representation."""

    @abstractmethod
    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert the target library's representation back to xmlflat."""

    def get_performance_stats(self) -> Dict[str, float]:
        """Get timing statistics for this adapter."""
        return self._profiler.get_statistics(self.metadata.name)

    def _record_performance(self, operation_time_ms: float) -> None:
        self._profiler.record_conversion(self.metadata.name, operation_time_ms)

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        start_time: float,
        direction: ConversionDirection = ConversionDirection.TO_TARGET
    ) -> ConversionResult:
        """Create a failed ConversionResult with one ERROR diagnostic."""
        self._logger.warning(
            "Adapter conversion failed",
            extra={"adapter": self.metadata.name, "error": error_message}
        )
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=(time.time() - start_time) * MS_PER_SECOND,
            direction=direction,
            errors=[error_message],
            diagnostics=[
                DiagnosticEntry(
                    severity=DiagnosticSeverity.ERROR,
                    message=error_message,
                    component=self.__class__.__name__,
                    correlation_id=self.correlation_id
                )
            ]
        )

    def _create_success_result(
        self,
        converted_data: Any,
        original_data: Any,
        start_time: float,
        direction: ConversionDirection,
        metadata: Dict[str, Any]
    ) -> ConversionResult:
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self._record_performance(processing_time)
        return ConversionResult(
            success=True,
            converted_data=converted_data,
            original_data=original_data,
            conversion_time_ms=processing_time,
            direction=direction,
            metadata=metadata,
        )


class _EtreeStyleAdapter(IntegrationAdapter):
    """Shared conversion logic for ElementTree-compatible libraries."""

    library_label = "ElementTree"

    @abstractmethod
    def _etree_module(self) -> Any:
        """Import and return the etree module."""

    def is_available(self) -> bool:
        try:
            self._etree_module()
        except ImportError:
            return False
        return True

    def to_target(self, source: Any) -> ConversionResult:
        """Convert an xmlflat Element tree to an etree element."""
        start_time = time.time()
        if not isinstance(source, Element):
            return self._create_error_result(
                "Source is not an xmlflat Element", source, start_time
            )
        try:
            etree = self._etree_module()
            target = self._build(source, etree)
        except Exception as e:
            return self._create_error_result(
                f"Failed to convert to {self.library_label}: {e}", source, start_time
            )
        return self._create_success_result(
            target,
            source,
            start_time,
            ConversionDirection.TO_TARGET,
            {"element_count": source.count_elements()},
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert an etree element to an xmlflat Element tree.

        The element is serialized and parsed again, so trimming and entity
        handling match documents parsed from text.
        """
        start_time = time.time()
        direction = ConversionDirection.FROM_TARGET
        if not hasattr(target_data, "tag"):
            return self._create_error_result(
                f"Target data is not a valid {self.library_label} element",
                target_data,
                start_time,
                direction,
            )
        try:
            etree = self._etree_module()
            xml_string = etree.tostring(target_data, encoding="unicode")
            element = parse(xml_string, correlation_id=self.correlation_id)
        except Exception as e:
            return self._create_error_result(
                f"Failed to convert from {self.library_label}: {e}",
                target_data,
                start_time,
                direction,
            )
        return self._create_success_result(
            element,
            target_data,
            start_time,
            direction,
            {"original_tag": str(target_data.tag), "xml_length": len(xml_string)},
        )

    def _build(self, element: Element, etree: Any) -> Any:
        target = etree.Element(element.name)
        for key, value in element.attributes.items():
            target.set(key, value)
        if element.text:
            target.text = element.text
        for child in element.children:
            target.append(self._build(child, etree))
        return target


class ElementTreeAdapter(_EtreeStyleAdapter):
    """Adapter for bidirectional conversion with xml.etree.ElementTree."""

    library_label = "ElementTree"

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="elementtree",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="xml.etree.ElementTree",
            supported_versions=["3.8+"],
            description="Bidirectional conversion between Element and ElementTree"
        )

    def _etree_module(self) -> Any:
        import xml.etree.ElementTree as ET
        return ET


class LxmlAdapter(_EtreeStyleAdapter):
    """Adapter for bidirectional conversion with lxml.etree."""

    library_label = "lxml"

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="lxml",
            supported_versions=["4.0+"],
            description="Bidirectional conversion between Element and lxml.etree"
        )

    def _etree_module(self) -> Any:
        import lxml.etree
        return lxml.etree


class PandasAdapter(IntegrationAdapter):
    """Adapter between inferred Tables and pandas DataFrames.

    ``to_target`` also accepts an Element, in which case the table is
    inferred first with ``table_config``.
    """

    def __init__(
        self,
        correlation_id: Optional[str] = None,
        table_config: Optional[TableConfig] = None
    ) -> None:
        super().__init__(correlation_id)
        self.table_config = table_config

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="pandas",
            version="1.0.0",
            adapter_type=AdapterType.DATA_FRAME,
            target_library="pandas",
            supported_versions=["1.0+"],
            description="Bidirectional conversion between Table and pandas DataFrame"
        )

    def is_available(self) -> bool:
        try:
            import pandas  # noqa: F401
        except ImportError:
            return False
        return True

    def to_target(self, source: Any) -> ConversionResult:
        """Convert a Table (or an Element, via inference) to a DataFrame."""
        start_time = time.time()
        try:
            import pandas as pd

            if isinstance(source, Element):
                table = infer_table(source, self.table_config, self.correlation_id)
            elif isinstance(source, Table):
                table = source
            else:
                return self._create_error_result(
                    "Source is not an xmlflat Table or Element", source, start_time
                )
            df = pd.DataFrame(table.rows, columns=table.headers)
        except Exception as e:
            return self._create_error_result(
                f"Failed to convert to pandas DataFrame: {e}", source, start_time
            )
        return self._create_success_result(
            df,
            source,
            start_time,
            ConversionDirection.TO_TARGET,
            {
                "dataframe_shape": df.shape,
                "row_count": len(df),
                "columns": list(df.columns),
                "row_tag": table.row_tag,
            },
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert a DataFrame to a Table of strings; missing values become ""."""
        start_time = time.time()
        direction = ConversionDirection.FROM_TARGET
        try:
            import pandas as pd

            if not isinstance(target_data, pd.DataFrame):
                return self._create_error_result(
                    "Target data is not a pandas DataFrame", target_data, start_time, direction
                )
            headers = [str(column) for column in target_data.columns]
            rows = [
                ["" if pd.isna(value) else str(value) for value in record]
                for record in target_data.itertuples(index=False, name=None)
            ]
            table = Table(headers=headers, rows=rows)
        except Exception as e:
            return self._create_error_result(
                f"Failed to convert from pandas DataFrame: {e}",
                target_data,
                start_time,
                direction,
            )
        return self._create_success_result(
            table,
            target_data,
            start_time,
            direction,
            {"dataframe_shape": target_data.shape},
        )


class AdapterRegistry:
    """Thread-safe registry of integration adapters."""

    def __init__(self) -> None:
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}
        self._instances: "weakref.WeakValueDictionary[str, IntegrationAdapter]" = (
            weakref.WeakValueDictionary()
        )
        self._lock = threading.RLock()
        self._logger = get_logger(__name__, None, "adapter_registry")

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class under its metadata name."""
        with self._lock:
            metadata = adapter_class().metadata
            self._adapters[metadata.name] = adapter_class
            self._logger.debug("Adapter registered", extra={"adapter": metadata.name})

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None
    ) -> Optional[IntegrationAdapter]:
        """Get an adapter instance, or None if unknown or unavailable.

        Instances are cached per name and correlation id while referenced.
        """
        with self._lock:
            adapter_class = self._adapters.get(adapter_name)
            if adapter_class is None:
                return None

            instance_key = f"{adapter_name}_{correlation_id or 'default'}"
            instance = self._instances.get(instance_key)
            if instance is not None:
                return instance

            instance = adapter_class(correlation_id)
            if not instance.is_available():
                return None
            self._instances[instance_key] = instance
            return instance

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """List metadata of the adapters whose libraries are importable."""
        with self._lock:
            instances = [adapter_class() for adapter_class in self._adapters.values()]
        return [instance.metadata for instance in instances if instance.is_available()]

    def get_adapters_by_type(self, adapter_type: AdapterType) -> List[str]:
        """Get names of available adapters of one type."""
        return [
            metadata.name for metadata in self.list_available_adapters()
            if metadata.adapter_type == adapter_type
        ]


_adapter_registry = AdapterRegistry()


def register_adapter(adapter_class: Type[IntegrationAdapter]) -> None:
    """Register an integration adapter globally."""
    _adapter_registry.register(adapter_class)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get a registered adapter instance.

    Returns:
        Adapter instance if registered and available, None otherwise
    """
    return _adapter_registry.get_adapter(adapter_name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """List all available integration adapters."""
    return _adapter_registry.list_available_adapters()


def get_adapters_by_type(adapter_type: AdapterType) -> List[str]:
    """Get adapter names by type."""
    return _adapter_registry.get_adapters_by_type(adapter_type)


register_adapter(ElementTreeAdapter)
register_adapter(LxmlAdapter)
register_adapter(PandasAdapter)
