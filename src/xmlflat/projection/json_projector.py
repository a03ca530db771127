"""JSON projection of element trees.

An element becomes an object with reserved keys ``_name``, ``_attributes``
and ``_text`` followed by one key per distinct child tag. A tag that occurs
once maps to the child's object; a tag that repeats maps to a list.
"""

from typing import Any, Dict, List, Optional, Tuple

from xmlflat.projection.encoding import dumps
from xmlflat.shared import ProjectionConfig
from xmlflat.tree.element import Element

NAME_KEY = "_name"
ATTRIBUTES_KEY = "_attributes"
TEXT_KEY = "_text"


def _shell(element: Element) -> Dict[str, Any]:
    result: Dict[str, Any] = {NAME_KEY: element.name}
    if element.attributes:
        result[ATTRIBUTES_KEY] = dict(element.attributes)
    if element.text:
        result[TEXT_KEY] = element.text
    return result


def to_json_dict(element: Element) -> Dict[str, Any]:
    """Project an element and its subtree into nested dictionaries.

    Child tag names that collide with the reserved keys are not renamed; the
    reserved key is written first and the child group overwrites it.
    """
    root = _shell(element)
    stack: List[Tuple[Element, Dict[str, Any]]] = [(element, root)]
    while stack:
        current, result = stack.pop()
        for tag, group in current.group_children().items():
            projected = [_shell(child) for child in group]
            result[tag] = projected[0] if len(projected) == 1 else projected
            stack.extend(zip(group, projected))
    return root


def to_json_text(element: Element, config: Optional[ProjectionConfig] = None) -> str:
    """Render an element tree as JSON text.

    Args:
        element: Root of the tree to render
        config: Optional projection configuration (indent, ensure_ascii)

    Returns:
        JSON document text

    Examples:
        >>> from xmlflat import parse
        >>> print(to_json_text(parse('<a id="1">x</a>'), ProjectionConfig(json_indent=None)))
        {"_name": "a", "_attributes": {"id": "1"}, "_text": "x"}
    """
    config = config or ProjectionConfig()
    return dumps(
        to_json_dict(element),
        indent=config.json_indent,
        ensure_ascii=config.json_ensure_ascii,
    )
