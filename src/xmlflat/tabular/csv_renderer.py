"""CSV rendering of inferred tables.

Fields are quoted only when they contain the delimiter, a double quote or a
line break; embedded quotes are doubled. Every line, the last one included,
ends with the configured terminator.
"""

from typing import Iterable, List, Optional, Sequence, Union

from xmlflat.shared import CSVConfig
from xmlflat.tabular.inference import Table

QUOTE = '"'


def escape_field(value: str, delimiter: str = ",") -> str:
    """Quote a single CSV field when required.

    Examples:
        >>> escape_field("a,b")
        '"a,b"'
        >>> print(escape_field('say "hi" twice'))
        "say ""hi"" twice"
    """
    if delimiter in value or QUOTE in value or "\n" in value or "\r" in value:
        return QUOTE + value.replace(QUOTE, QUOTE * 2) + QUOTE
    return value


def format_row(fields: Iterable[str], config: Optional[CSVConfig] = None) -> str:
    """Render one row, line terminator included."""
    config = config or CSVConfig()
    line = config.delimiter.join(escape_field(field, config.delimiter) for field in fields)
    return line + config.line_terminator


def to_csv_text(
    table_or_headers: Union[Table, Sequence[str]],
    rows: Optional[Sequence[Sequence[str]]] = None,
    config: Optional[CSVConfig] = None
) -> str:
    """Render a header line followed by one line per row.

    Args:
        table_or_headers: A Table, or the header names
        rows: Row cells when headers are given directly; ignored for a Table
        config: Optional CSV configuration

    Returns:
        CSV text; every line is terminated
    """
    if isinstance(table_or_headers, Table):
        headers: Sequence[str] = table_or_headers.headers
        rows = table_or_headers.rows
    else:
        headers = table_or_headers

    lines: List[str] = [format_row(headers, config)]
    lines.extend(format_row(row, config) for row in rows or ())
    return "".join(lines)
