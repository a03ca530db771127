"""Tabular inference and CSV rendering for xmlflat.

Key Components:
    TableInferenceEngine: Picks the row element and column set of a tree
    Table: Headers plus rectangular string rows
    to_csv_text: Renders a Table (or headers and rows) as CSV
"""

from .csv_renderer import escape_field, format_row, to_csv_text
from .inference import (
    Column,
    ColumnSource,
    Table,
    TableInferenceEngine,
    infer_table,
)

__all__ = [
    "Column",
    "ColumnSource",
    "Table",
    "TableInferenceEngine",
    "escape_field",
    "format_row",
    "infer_table",
    "to_csv_text",
]
