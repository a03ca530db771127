"""YAML projection of element trees.

The document has a single top-level key, the root element's name. Under each
element key the body holds ``attributes:``, ``text:`` and ``children:``
entries, each present only when non-empty. Children are grouped by tag in
order of first appearance; a repeated tag becomes a block sequence. An element
with an empty body renders as ``{}``.

Output is written by hand rather than through a YAML library so that the
layout stays fixed regardless of which library version is installed.
"""

import re
from typing import Any, List, Optional, Tuple

from xmlflat.shared import ProjectionConfig
from xmlflat.tree.element import Element

ATTRIBUTES_KEY = "attributes"
TEXT_KEY = "text"
CHILDREN_KEY = "children"
EMPTY_MAPPING = "{}"
SEQUENCE_ITEM = "- "

# Render task kinds.
_LINE = 0
_ENTRY = 1
_ITEM = 2
_BODY = 3

# Characters that change the meaning of a plain scalar when they lead it.
_INDICATOR_CHARS = frozenset("-?:,[]{}#&*!|>'\"%@`")
_QUOTE_TRIGGERS = (":", "\n", "\r", '"')
_ESCAPES = (("\\", "\\\\"), ('"', '\\"'), ("\n", "\\n"), ("\r", "\\r"), ("\t", "\\t"))


# Plain scalars that YAML readers resolve to booleans, null, numbers or dates.
_TYPED_WORDS = frozenset(("null", "~", "true", "false", "yes", "no", "on", "off"))
_TYPED_SCALAR = re.compile(
    r"[-+]?(\.[0-9]+|[0-9][0-9_]*(\.[0-9_]*)?)([eE][-+]?[0-9]+)?"
    r"|0[xob][0-9a-fA-F_]+"
    r"|[-+]?\.(inf|Inf|INF)|\.(nan|NaN|NAN)"
    r"|[0-9]{4}-[0-9]{1,2}-[0-9]{1,2}([Tt ].*)?"
)


def needs_quotes(value: str) -> bool:
    """Check whether a scalar must be double-quoted to read back unchanged."""
    if not value:
        return True
    if any(trigger in value for trigger in _QUOTE_TRIGGERS):
        return True
    if value[0] in _INDICATOR_CHARS or " #" in value:
        return True
    if value.lower() in _TYPED_WORDS or _TYPED_SCALAR.fullmatch(value):
        return True
    return value != value.strip()


def format_scalar(value: str) -> str:
    """Render a key or value as a plain or double-quoted YAML scalar."""
    if not needs_quotes(value):
        return value
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return f'"{value}"'


class YAMLProjector:
    """Renders element trees as block-style YAML.

    Rendering works through an explicit stack of pending tasks, so trees as
    deep as the parser accepts never hit the recursion limit.
    """

    def __init__(self, config: Optional[ProjectionConfig] = None) -> None:
        self.config = config or ProjectionConfig()
        self.step = self.config.yaml_indent

    def render(self, element: Element) -> str:
        lines: List[str] = []
        stack: List[Tuple[Any, ...]] = [(_ENTRY, format_scalar(element.name), element, 0)]
        while stack:
            task = stack.pop()
            kind = task[0]
            if kind == _LINE:
                lines.append(task[1])
            elif kind == _ENTRY:
                stack.extend(self._entry(lines, *task[1:]))
            elif kind == _ITEM:
                stack.extend(self._sequence_item(lines, *task[1:]))
            else:
                stack.extend(self._body(lines, *task[1:]))
        return "\n".join(lines) + "\n"

    def _entry(self, lines: List[str], key: str, element: Element, indent: int) -> List[Tuple[Any, ...]]:
        pad = " " * indent
        if element.is_empty:
            lines.append(f"{pad}{key}: {EMPTY_MAPPING}")
            return []
        lines.append(f"{pad}{key}:")
        body_indent = indent + self.step
        return [(_BODY, element, body_indent, " " * body_indent)]

    def _sequence_item(self, lines: List[str], element: Element, indent: int) -> List[Tuple[Any, ...]]:
        pad = " " * indent
        if element.is_empty:
            lines.append(f"{pad}{SEQUENCE_ITEM}{EMPTY_MAPPING}")
            return []
        # The mapping starts on the dash line; its other keys align after "- ".
        return [(_BODY, element, indent + len(SEQUENCE_ITEM), pad + SEQUENCE_ITEM)]

    def _body(self, lines: List[str], element: Element, indent: int, lead: str) -> List[Tuple[Any, ...]]:
        """Write the element's own lines and return the child tasks, reversed.

        ``lead`` replaces the indentation of the first line.
        """
        pad = " " * indent
        own: List[str] = []
        pending: List[Tuple[Any, ...]] = []

        if element.attributes:
            own.append(f"{pad}{ATTRIBUTES_KEY}:")
            inner = " " * (indent + self.step)
            for name, value in element.attributes.items():
                own.append(f"{inner}{format_scalar(name)}: {format_scalar(value)}")

        if element.text:
            own.append(f"{pad}{TEXT_KEY}: {format_scalar(element.text)}")

        if element.children:
            own.append(f"{pad}{CHILDREN_KEY}:")
            group_indent = indent + self.step
            for tag, group in element.group_children().items():
                key = format_scalar(tag)
                if len(group) == 1:
                    pending.append((_ENTRY, key, group[0], group_indent))
                    continue
                pending.append((_LINE, f"{' ' * group_indent}{key}:"))
                pending.extend((_ITEM, child, group_indent + self.step) for child in group)

        own[0] = lead + own[0][indent:]
        lines.extend(own)
        return list(reversed(pending))


def to_yaml_text(element: Element, config: Optional[ProjectionConfig] = None) -> str:
    """Render an element tree as YAML text.

    Examples:
        >>> from xmlflat import parse
        >>> print(to_yaml_text(parse('<a id="1"><b>x</b><b>y</b></a>')), end="")
        a:
          attributes:
            id: "1"
          children:
            b:
              - text: x
              - text: y
    """
    return YAMLProjector(config).render(element)
