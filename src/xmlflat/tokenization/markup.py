"""Recognition and skipping of XML special constructs.

Comments, CDATA sections, processing instructions and DOCTYPE declarations are
consumed as a unit wherever they may appear, so they are never mistaken for
child elements and never change the element depth of the parser.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

from xmlflat.character.scanner import QUOTE_CHARS, Scanner
from xmlflat.shared.errors import UnterminatedSpecialConstructError

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"
PI_OPEN = "<?"
PI_CLOSE = "?>"
DOCTYPE_OPEN = "<!DOCTYPE"


class ConstructKind(Enum):
    """Special constructs recognized by content prefix."""

    COMMENT = auto()
    CDATA = auto()
    PROCESSING_INSTRUCTION = auto()
    DOCTYPE = auto()


# CDATA and DOCTYPE are checked before the shorter "<!" style prefixes they share.
_DELIMITED_CONSTRUCTS: Tuple[Tuple[str, str, ConstructKind], ...] = (
    (CDATA_OPEN, CDATA_CLOSE, ConstructKind.CDATA),
    (COMMENT_OPEN, COMMENT_CLOSE, ConstructKind.COMMENT),
    (PI_OPEN, PI_CLOSE, ConstructKind.PROCESSING_INSTRUCTION),
)


@dataclass(frozen=True)
class SpecialConstruct:
    """A skipped construct and its raw content (without delimiters)."""

    kind: ConstructKind
    content: str
    offset: int


def detect_construct(scanner: Scanner, allow_doctype: bool = False) -> Optional[ConstructKind]:
    """Return the kind of construct starting at the cursor, if any."""
    if scanner.peek() != "<":
        return None
    for opener, _closer, kind in _DELIMITED_CONSTRUCTS:
        if scanner.startswith(opener):
            return kind
    if allow_doctype and scanner.startswith(DOCTYPE_OPEN):
        return ConstructKind.DOCTYPE
    return None


def skip_construct(scanner: Scanner, allow_doctype: bool = False) -> Optional[SpecialConstruct]:
    """Consume the construct at the cursor through its terminator.

    Returns None without moving when no construct starts at the cursor.

    Raises:
        UnterminatedSpecialConstructError: the terminator is missing
    """
    kind = detect_construct(scanner, allow_doctype)
    if kind is None:
        return None

    offset = scanner.pos
    if kind is ConstructKind.DOCTYPE:
        scanner.advance(len(DOCTYPE_OPEN))
        return SpecialConstruct(kind, _read_doctype_body(scanner, offset), offset)

    for opener, closer, candidate in _DELIMITED_CONSTRUCTS:
        if candidate is kind:
            scanner.advance(len(opener))
            content = scanner.read_through(closer)
            if content is None:
                raise scanner.error(
                    UnterminatedSpecialConstructError,
                    f"{kind.name.lower()} is missing its '{closer}' terminator",
                    offset=offset,
                )
            return SpecialConstruct(kind, content, offset)

    return None


def _read_doctype_body(scanner: Scanner, offset: int) -> str:
    """Read a DOCTYPE declaration up to its ``>``.

    The internal subset in ``[...]`` may itself contain ``>`` characters, as
    may quoted system and public identifiers.
    """
    begin = scanner.pos
    depth = 0
    quote: Optional[str] = None
    while not scanner.at_end:
        char = scanner.advance()
        if quote is not None:
            if char == quote:
                quote = None
        elif char in QUOTE_CHARS:
            quote = char
        elif char == "[":
            depth += 1
        elif char == "]":
            depth = max(0, depth - 1)
        elif char == ">" and depth == 0:
            return scanner.text[begin:scanner.pos - 1]
    raise scanner.error(
        UnterminatedSpecialConstructError,
        "DOCTYPE declaration is missing its '>' terminator",
        offset=offset,
    )
