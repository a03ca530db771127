"""Decoding of the predefined XML entities and numeric character references.

Only ``&lt; &gt; &amp; &quot; &apos;`` and ``&#NN; / &#xHH;`` are expanded.
Any other ``&name;`` is left untouched since DTD-declared entities are not
resolved.
"""

import re

PREDEFINED_ENTITIES = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "quot": '"',
    "apos": "'",
}

MAX_CODE_POINT = 0x10FFFF
SURROGATE_RANGE_START = 0xD800
SURROGATE_RANGE_END = 0xDFFF

_REFERENCE_PATTERN = re.compile(r"&(#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z]+);")


def _code_point_to_char(code_point: int) -> str:
    if code_point == 0 or code_point > MAX_CODE_POINT:
        return ""
    if SURROGATE_RANGE_START <= code_point <= SURROGATE_RANGE_END:
        return ""
    return chr(code_point)


def _replace_reference(match: "re.Match[str]") -> str:
    body = match.group(1)
    if body.startswith("#"):
        if body[1:2] in ("x", "X"):
            char = _code_point_to_char(int(body[2:], 16))
        else:
            char = _code_point_to_char(int(body[1:]))
        return char or match.group(0)
    return PREDEFINED_ENTITIES.get(body, match.group(0))


def decode_entities(text: str) -> str:
    """Expand predefined entities and character references in ``text``."""
    if "&" not in text:
        return text
    return _REFERENCE_PATTERN.sub(_replace_reference, text)
