"""Character layer for xmlflat: the source scanner and entity decoding."""

from .entities import PREDEFINED_ENTITIES, decode_entities
from .scanner import XML_WHITESPACE, Scanner, is_xml_whitespace

__all__ = [
    "PREDEFINED_ENTITIES",
    "XML_WHITESPACE",
    "Scanner",
    "decode_entities",
    "is_xml_whitespace",
]
