"""Element tree construction for xmlflat.

Key Components:
    Element: Immutable XML element with attributes, text and children
    ElementParser: Recursive-descent parser producing one Element tree
    parse: Convenience function wrapping ElementParser
"""

from .builder import ElementParser, parse
from .element import Element

__all__ = [
    "Element",
    "ElementParser",
    "parse",
]
