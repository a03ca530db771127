"""Error types raised by the xmlflat parser and tabular inference.

Every error carries an ErrorKind, a human-readable message and, where it is
known, the offending tag name and the character offset in the source text.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(Enum):
    """Kinds of terminal failures."""

    INVALID_LEADING_CHARACTER = "InvalidLeadingCharacter"
    UNTERMINATED_TAG = "UnterminatedTag"
    UNTERMINATED_ATTRIBUTE = "UnterminatedAttribute"
    UNTERMINATED_SPECIAL_CONSTRUCT = "UnterminatedSpecialConstruct"
    MISMATCHED_CLOSING_TAG = "MismatchedClosingTag"
    UNEXPECTED_EOF = "UnexpectedEof"
    INVALID_TAG_NAME = "InvalidTagName"
    TRAILING_CONTENT = "TrailingContent"
    MAX_DEPTH_EXCEEDED = "MaxDepthExceeded"
    NO_TABULAR_DATA_FOUND = "NoTabularDataFound"


class XMLFlatError(Exception):
    """Base class for all xmlflat errors."""

    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        tag: Optional[str] = None,
        offset: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.message = message
        self.tag = tag
        self.offset = offset
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        parts = [f"{self.kind_name}: {self.message}"]
        if self.tag is not None:
            parts.append(f"tag '{self.tag}'")
        if self.line is not None and self.column is not None:
            parts.append(f"line {self.line}, column {self.column}")
        elif self.offset is not None:
            parts.append(f"offset {self.offset}")
        return " | ".join(parts)

    @property
    def kind_name(self) -> str:
        """Name of the error kind, falling back to the class name."""
        return self.kind.value if self.kind is not None else type(self).__name__

    @property
    def position(self) -> Optional[Dict[str, int]]:
        """Position dictionary in the shape used by diagnostics."""
        if self.offset is None:
            return None
        position = {"offset": self.offset}
        if self.line is not None and self.column is not None:
            position["line"] = self.line
            position["column"] = self.column
        return position

    def to_dict(self) -> Dict[str, Any]:
        """Convert the error to a JSON-friendly dictionary."""
        return {
            "kind": self.kind_name,
            "message": self.message,
            "tag": self.tag,
            "position": self.position,
        }


class ParseError(XMLFlatError):
    """Base class for errors raised while building the element tree."""


class InvalidLeadingCharacterError(ParseError):
    kind = ErrorKind.INVALID_LEADING_CHARACTER


class UnterminatedTagError(ParseError):
    kind = ErrorKind.UNTERMINATED_TAG


class UnterminatedAttributeError(ParseError):
    kind = ErrorKind.UNTERMINATED_ATTRIBUTE


class UnterminatedSpecialConstructError(ParseError):
    kind = ErrorKind.UNTERMINATED_SPECIAL_CONSTRUCT


class MismatchedClosingTagError(ParseError):
    kind = ErrorKind.MISMATCHED_CLOSING_TAG


class UnexpectedEofError(ParseError):
    kind = ErrorKind.UNEXPECTED_EOF


class InvalidTagNameError(ParseError):
    kind = ErrorKind.INVALID_TAG_NAME


class TrailingContentError(ParseError):
    kind = ErrorKind.TRAILING_CONTENT


class MaxDepthExceededError(ParseError):
    kind = ErrorKind.MAX_DEPTH_EXCEEDED


class TableError(XMLFlatError):
    """Base class for errors raised by tabular inference."""


class NoTabularDataFoundError(TableError):
    kind = ErrorKind.NO_TABULAR_DATA_FOUND
