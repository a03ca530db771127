"""JSON text writer for arbitrarily deep projections.

``json.dumps`` nests one encoder call per container, so a projection of a
tree close to ``ParserConfig.max_depth`` can exhaust the interpreter's
recursion limit. ``dumps`` walks the value with an explicit stack instead and
produces the same text as ``json.dumps`` with the default separators.
Scalars are still encoded by the ``json`` module.
"""

import json
from collections.abc import Mapping
from typing import Any, List, Optional, Tuple

_TEXT = 0
_VALUE = 1

ITEM_SEPARATOR = ", "
PRETTY_ITEM_SEPARATOR = ","
KEY_SEPARATOR = ": "


def dumps(value: Any, indent: Optional[int] = None, ensure_ascii: bool = False) -> str:
    """Serialize dicts, lists and scalars to JSON text.

    Examples:
        >>> dumps({"a": [1, {"b": None}]})
        '{"a": [1, {"b": null}]}'
        >>> print(dumps({"a": []}, indent=2))
        {
          "a": []
        }
    """
    separator = ITEM_SEPARATOR if indent is None else PRETTY_ITEM_SEPARATOR

    def newline(level: int) -> str:
        if indent is None:
            return ""
        return "\n" + " " * (indent * level)

    parts: List[str] = []
    stack: List[Tuple[int, Any, int]] = [(_VALUE, value, 0)]
    while stack:
        kind, item, level = stack.pop()
        if kind == _TEXT:
            parts.append(item)
            continue

        if isinstance(item, Mapping):
            if not item:
                parts.append("{}")
                continue
            work: List[Tuple[int, Any, int]] = [(_TEXT, "{", level)]
            for index, (key, member) in enumerate(item.items()):
                lead = separator if index else ""
                encoded_key = json.dumps(str(key), ensure_ascii=ensure_ascii)
                work.append((_TEXT, f"{lead}{newline(level + 1)}{encoded_key}{KEY_SEPARATOR}", level))
                work.append((_VALUE, member, level + 1))
            work.append((_TEXT, newline(level) + "}", level))
            stack.extend(reversed(work))
        elif isinstance(item, (list, tuple)):
            if not item:
                parts.append("[]")
                continue
            work = [(_TEXT, "[", level)]
            for index, member in enumerate(item):
                lead = separator if index else ""
                work.append((_TEXT, lead + newline(level + 1), level))
                work.append((_VALUE, member, level + 1))
            work.append((_TEXT, newline(level) + "]", level))
            stack.extend(reversed(work))
        else:
            parts.append(json.dumps(item, ensure_ascii=ensure_ascii))

    return "".join(parts)
