#!/usr/bin/env python3
"""
Quick Start Guide for xmlflat.

Parses a small catalog document, renders it as JSON and YAML, infers a table
and shows how failures are reported by the never-fail conversion API.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xmlflat import (
    ConverterConfig,
    TableConfig,
    convert,
    infer_table,
    parse,
    to_csv_text,
    to_json_text,
    to_yaml_text,
)

CATALOG = """<?xml version="1.0"?>
<catalog>
  <book id="b1"><title>Dune</title><price>9.99</price></book>
  <book id="b2"><title>Emma</title><price>4.50</price></book>
  <book id="b3"><title>Ulysses</title></book>
</catalog>
"""


def quick_start_example():
    """Quick start example showing basic usage."""

    print("QUICK START - xmlflat")
    print("=" * 45)

    # Step 1: Parse
    print("\nStep 1: Parsing")
    print("-" * 30)
    root = parse(CATALOG)
    print(f"Root <{root.name}> with {root.count_elements()} elements")

    # Step 2: Project the tree
    print("\nStep 2: JSON and YAML")
    print("-" * 30)
    print(to_json_text(root.children[0]))
    print(to_yaml_text(root.children[0]))

    # Step 3: Flatten to a table
    print("Step 3: Tabular inference")
    print("-" * 30)
    table = infer_table(root, TableConfig(include_attributes=True))
    print(f"Rows of <{table.row_tag}>: {table.row_count}, columns: {table.headers}")
    print(to_csv_text(table))

    # Step 4: Errors as results
    print("Step 4: Reporting malformed input")
    print("-" * 30)
    result = convert("<catalog><book></catalog>", "csv", ConverterConfig.strict())
    print(f"Success: {result.success}")
    print(f"Error kind: {result.error_kind.value}")
    print(f"Message: {result.error_message}")


if __name__ == "__main__":
    quick_start_example()
