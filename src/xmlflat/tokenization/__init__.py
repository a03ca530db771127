"""Tokenization helpers for xmlflat.

Key Components:
    AttributeParser: Parses the attribute list of an opening tag
    skip_construct: Skips comments, CDATA sections, PIs and DOCTYPE declarations
    ConstructKind: Enumeration of the recognized special constructs
"""

from .attributes import AttributeParser, parse_attributes
from .markup import (
    ConstructKind,
    SpecialConstruct,
    detect_construct,
    skip_construct,
)

__all__ = [
    "AttributeParser",
    "ConstructKind",
    "SpecialConstruct",
    "detect_construct",
    "parse_attributes",
    "skip_construct",
]
