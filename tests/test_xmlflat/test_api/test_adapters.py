"""Tests for the integration adapters."""

import time
import xml.etree.ElementTree as ET
from typing import Any

import pytest

from xmlflat.api.adapters import (
    AdapterMetadata,
    AdapterPerformanceProfiler,
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
)
from xmlflat.shared import DiagnosticSeverity, TableConfig
from xmlflat.tabular import Table
from xmlflat.tree import parse


class EchoAdapter(IntegrationAdapter):
    """Adapter that returns its input, used to exercise the base class."""

    available = True

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="echo",
            version="1.0.0",
            adapter_type=AdapterType.XML_LIBRARY,
            target_library="echo",
            supported_versions=["1.0"],
            description="Echo adapter for unit testing"
        )

    def is_available(self) -> bool:
        return self.available

    def to_target(self, source: Any) -> ConversionResult:
        start_time = time.time()
        if source is None:
            return self._create_error_result("nothing to echo", source, start_time)
        return self._create_success_result(
            source, source, start_time, ConversionDirection.TO_TARGET, {}
        )

    def from_target(self, target_data: Any) -> ConversionResult:
        return self.to_target(target_data)


class UnavailableAdapter(EchoAdapter):
    """Echo adapter whose library is missing."""

    available = False

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="unavailable",
            version="1.0.0",
            adapter_type=AdapterType.DATA_FRAME,
            target_library="missing",
            supported_versions=["1.0"],
            description="Adapter without its library"
        )


class TestAdapterBase:
    """Test the shared adapter behavior."""

    def test_success_records_performance(self):
        """Test that successful conversions are profiled."""
        adapter = EchoAdapter()
        result = adapter.to_target("x")

        assert result.success
        assert result.converted_data == "x"
        assert adapter.get_performance_stats()["count"] == 1

    def test_error_result(self):
        """Test the failed result shape."""
        adapter = EchoAdapter(correlation_id="c-1")
        result = adapter.to_target(None)

        assert not result.success
        assert result.converted_data is None
        assert result.errors == ["nothing to echo"]
        assert result.diagnostics[0].severity is DiagnosticSeverity.ERROR
        assert result.diagnostics[0].component == "EchoAdapter"
        assert result.diagnostics[0].correlation_id == "c-1"
        assert adapter.get_performance_stats() == {}


class TestProfiler:
    """Test the performance profiler."""

    def test_statistics(self):
        """Test aggregate timing values."""
        profiler = AdapterPerformanceProfiler()
        profiler.record_conversion("a", 1.0)
        profiler.record_conversion("a", 3.0)

        stats = profiler.get_statistics("a")
        assert stats["count"] == 2
        assert stats["average_ms"] == 2.0
        assert stats["min_ms"] == 1.0
        assert stats["max_ms"] == 3.0
        assert profiler.get_statistics("b") == {}

    def test_history_is_bounded(self):
        """Test that only recent timings are kept."""
        profiler = AdapterPerformanceProfiler()
        for _ in range(1005):
            profiler.record_conversion("a", 1.0)
        assert profiler.get_statistics("a")["count"] == 1000


class TestAdapterRegistry:
    """Test adapter registration and lookup."""

    def test_register_and_get(self):
        """Test that instances are cached per correlation id."""
        registry = AdapterRegistry()
        registry.register(EchoAdapter)

        first = registry.get_adapter("echo")
        assert isinstance(first, EchoAdapter)
        assert registry.get_adapter("echo") is first
        assert registry.get_adapter("echo", "other") is not first

    def test_unknown_and_unavailable(self):
        """Test that missing adapters yield None."""
        registry = AdapterRegistry()
        registry.register(UnavailableAdapter)

        assert registry.get_adapter("nope") is None
        assert registry.get_adapter("unavailable") is None
        assert registry.list_available_adapters() == []

    def test_adapters_by_type(self):
        """Test filtering by adapter type."""
        registry = AdapterRegistry()
        registry.register(EchoAdapter)
        registry.register(UnavailableAdapter)

        assert registry.get_adapters_by_type(AdapterType.XML_LIBRARY) == ["echo"]
        assert registry.get_adapters_by_type(AdapterType.DATA_FRAME) == []

    def test_global_registry(self):
        """Test the built-in registrations."""
        assert isinstance(get_adapter("elementtree"), ElementTreeAdapter)
        assert "elementtree" in get_adapters_by_type(AdapterType.XML_LIBRARY)
        assert "elementtree" in [metadata.name for metadata in list_available_adapters()]


class TestElementTreeAdapter:
    """Test conversion to and from xml.etree.ElementTree."""

    def test_to_target(self):
        """Test building an ElementTree element."""
        element = parse('<r id="1">top<i>a</i><i>b</i></r>')
        result = ElementTreeAdapter().to_target(element)

        assert result.success
        target = result.converted_data
        assert target.tag == "r"
        assert target.get("id") == "1"
        assert target.text == "top"
        assert [child.text for child in target] == ["a", "b"]
        assert result.metadata == {"element_count": 3}

    def test_to_target_rejects_other_types(self):
        """Test that only Elements are accepted."""
        result = ElementTreeAdapter().to_target("<r/>")
        assert not result.success
        assert "not an xmlflat Element" in result.errors[0]

    def test_from_target(self):
        """Test parsing back an ElementTree element."""
        target = ET.fromstring('<r a="x &amp; y"><i> 1 </i></r>')
        result = ElementTreeAdapter().from_target(target)

        assert result.success
        assert result.direction is ConversionDirection.FROM_TARGET
        element = result.converted_data
        assert element.attributes == {"a": "x & y"}
        assert element.children[0].text == "1"
        assert result.metadata["original_tag"] == "r"

    def test_from_target_rejects_other_types(self):
        """Test that objects without a tag are rejected."""
        result = ElementTreeAdapter().from_target(42)
        assert not result.success
        assert result.direction is ConversionDirection.FROM_TARGET

    def test_metadata(self):
        """Test adapter metadata."""
        metadata = ElementTreeAdapter().metadata
        assert metadata.name == "elementtree"
        assert metadata.adapter_type is AdapterType.XML_LIBRARY
        assert metadata.author == "xmlflat"


class TestLxmlAdapter:
    """Test conversion to and from lxml."""

    def test_round_trip(self):
        """Test conversion in both directions."""
        pytest.importorskip("lxml")
        adapter = LxmlAdapter()
        element = parse('<r><i k="v">a</i></r>')

        to_result = adapter.to_target(element)
        assert to_result.success
        assert to_result.converted_data[0].get("k") == "v"

        from_result = adapter.from_target(to_result.converted_data)
        assert from_result.success
        assert from_result.converted_data == element


class TestPandasAdapter:
    """Test conversion to and from pandas DataFrames."""

    def test_table_to_dataframe(self):
        """Test building a DataFrame from a Table."""
        pytest.importorskip("pandas")
        table = Table(headers=["x", "y"], rows=[["1", "2"], ["3", "4"]], row_tag="row")

        result = PandasAdapter().to_target(table)

        assert result.success
        df = result.converted_data
        assert list(df.columns) == ["x", "y"]
        assert df.shape == (2, 2)
        assert result.metadata["row_tag"] == "row"

    def test_element_to_dataframe(self):
        """Test inferring the table from an Element first."""
        pytest.importorskip("pandas")
        element = parse('<r><i id="1"><v>a</v></i><i id="2"><v>b</v></i></r>')

        result = PandasAdapter(table_config=TableConfig(include_attributes=True)).to_target(element)

        assert result.success
        assert list(result.converted_data.columns) == ["@id", "v"]
        assert result.converted_data["v"].tolist() == ["a", "b"]

    def test_element_without_table(self):
        """Test that inference errors become failed results."""
        pytest.importorskip("pandas")
        result = PandasAdapter().to_target(parse("<r/>"))
        assert not result.success
        assert "NoTabularDataFound" in result.errors[0]

    def test_dataframe_to_table(self):
        """Test converting a DataFrame to a string Table."""
        pd = pytest.importorskip("pandas")
        df = pd.DataFrame({"a": [1, None], "b": ["x", "y"]})

        result = PandasAdapter().from_target(df)

        assert result.success
        table = result.converted_data
        assert table.headers == ["a", "b"]
        assert table.rows == [["1.0", "x"], ["", "y"]]

    def test_rejects_other_types(self):
        """Test invalid inputs in both directions."""
        pytest.importorskip("pandas")
        adapter = PandasAdapter()
        assert not adapter.to_target("text").success
        assert not adapter.from_target([1, 2]).success
