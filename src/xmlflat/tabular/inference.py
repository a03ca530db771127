"""Structural inference of a table from an element tree.

The engine looks at the direct children of one element. When some tag
repeats, the most frequent tag (first in document order on a tie) is taken as
the row element and each occurrence becomes a row. When no tag repeats the
element itself becomes a single row. Columns are derived from the first row
only; later rows that lack a column get an empty cell and extra fields of
later rows are ignored.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from xmlflat.shared import (
    NoTabularDataFoundError,
    TableConfig,
    get_logger,
)
from xmlflat.tree.element import Element


class ColumnSource(Enum):
    """Where a column's cell values are read from."""

    CHILD = "child"
    ATTRIBUTE = "attribute"
    TEXT = "text"


@dataclass(frozen=True)
class Column:
    """One inferred column."""

    header: str
    source: ColumnSource
    key: str = ""

    def cell(self, row: Element) -> str:
        """Extract this column's value from a row element."""
        if self.source is ColumnSource.CHILD:
            child = row.find_child(self.key)
            return child.text if child is not None else ""
        if self.source is ColumnSource.ATTRIBUTE:
            return row.attributes.get(self.key, "")
        return row.text


@dataclass
class Table:
    """Rectangular result of tabular inference.

    Every row has exactly ``len(headers)`` cells, all strings.
    """

    headers: List[str]
    rows: List[List[str]] = field(default_factory=list)
    row_tag: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate that every row matches the header width."""
        width = len(self.headers)
        for index, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {index} has {len(row)} cells, expected {width}"
                )

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def to_records(self) -> List[Dict[str, str]]:
        """Return rows as header-keyed dictionaries.

        With duplicate headers the rightmost cell wins.
        """
        return [dict(zip(self.headers, row)) for row in self.rows]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headers": list(self.headers),
            "rows": [list(row) for row in self.rows],
            "row_tag": self.row_tag,
        }


class TableInferenceEngine:
    """Chooses the row element and column set for an element."""

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or TableConfig()
        self.logger = get_logger(__name__, correlation_id, "table_inference")

    def infer(self, root: Element) -> Table:
        """Infer a table from ``root``'s direct children.

        Raises:
            NoTabularDataFoundError: no column can be derived
        """
        if self.config.row_tag is not None:
            row_tag: Optional[str] = self.config.row_tag
            rows = root.find_children(self.config.row_tag)
            if not rows:
                raise NoTabularDataFoundError(
                    f"no <{row_tag}> children to use as rows", tag=root.name
                )
        else:
            row_tag = self.select_row_tag(root)
            if row_tag is None:
                return self._single_row_table(root)
            rows = root.find_children(row_tag)

        columns = self.columns_for(rows[0])
        table = Table(
            headers=[column.header for column in columns],
            rows=[[column.cell(row) for column in columns] for row in rows],
            row_tag=row_tag,
        )
        self.logger.debug(
            "Table inferred",
            extra={"row_tag": row_tag, "rows": table.row_count, "columns": table.column_count}
        )
        return table

    @staticmethod
    def select_row_tag(root: Element) -> Optional[str]:
        """Return the most repeated child tag, or None when no tag repeats.

        Ties go to the tag that appears first in document order.
        """
        counts = root.child_tag_counts()
        if not counts:
            return None
        highest = max(counts.values())
        if highest <= 1:
            return None
        for tag, count in counts.items():
            if count == highest:
                return tag
        return None

    def columns_for(self, row: Element) -> List[Column]:
        """Derive the column set from one row element.

        Raises:
            NoTabularDataFoundError: the row is empty
        """
        child_tags = list(dict.fromkeys(child.name for child in row.children))
        if child_tags:
            columns: List[Column] = []
            if self.config.include_attributes:
                columns.extend(self._attribute_columns(row, self.config.attribute_prefix))
            columns.extend(Column(tag, ColumnSource.CHILD, tag) for tag in child_tags)
            return columns
        if row.attributes:
            return self._attribute_columns(row, "")
        if row.text:
            return [Column(self.config.value_column, ColumnSource.TEXT)]
        raise NoTabularDataFoundError(
            "row element has no children, attributes or text", tag=row.name
        )

    def _single_row_table(self, root: Element) -> Table:
        if root.text:
            columns = [Column(self.config.value_column, ColumnSource.TEXT)]
        elif root.children:
            columns = self.columns_for(root)
        elif root.attributes:
            columns = self._attribute_columns(root, "")
        else:
            raise NoTabularDataFoundError(
                "element has no text, children or attributes", tag=root.name
            )
        return Table(
            headers=[column.header for column in columns],
            rows=[[column.cell(root) for column in columns]],
        )

    @staticmethod
    def _attribute_columns(row: Element, prefix: str) -> List[Column]:
        return [
            Column(f"{prefix}{name}", ColumnSource.ATTRIBUTE, name)
            for name in row.attributes
        ]


def infer_table(
    root: Element,
    config: Optional[TableConfig] = None,
    correlation_id: Optional[str] = None
) -> Table:
    """Infer a table from an element's direct children.

    Examples:
        >>> from xmlflat import parse
        >>> table = infer_table(parse('<r><i><x>1</x></i><i><x>2</x></i></r>'))
        >>> table.headers, table.rows
        (['x'], [['1'], ['2']])
    """
    return TableInferenceEngine(config, correlation_id).infer(root)
