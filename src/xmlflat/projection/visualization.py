"""Tree and graph renderings of element trees for visual front ends.

``to_tree_dict`` produces a nested ``{"name", "value", "children"}`` structure
for hierarchical viewers. ``to_graph_dict`` flattens the same tree into a
node/link list for force-directed graph viewers. Node ids there are sequential
strings assigned in document order, starting at ``"1"`` for the root.
"""

from typing import Any, Dict, List, Optional, Tuple

from xmlflat.projection.encoding import dumps
from xmlflat.tree.element import Element

ROOT_LABEL = "Object"
FIRST_NODE_ID = 1


def _tree_node(element: Element) -> Dict[str, Any]:
    node: Dict[str, Any] = {"name": element.name}
    if element.is_leaf:
        if element.text:
            node["value"] = element.text
    else:
        node["children"] = []
    return node


def to_tree_dict(element: Element) -> Dict[str, Any]:
    """Build the hierarchical view of an element.

    ``value`` is present only on leaves with text, ``children`` only on
    elements that have children.
    """
    root = _tree_node(element)
    stack: List[Tuple[Element, Dict[str, Any]]] = [(element, root)]
    while stack:
        current, node = stack.pop()
        for child in current.children:
            child_node = _tree_node(child)
            node["children"].append(child_node)
            stack.append((child, child_node))
    return root


def to_graph_dict(element: Element) -> Dict[str, List[Dict[str, Any]]]:
    """Build the node/link view of an element tree.

    Returns:
        ``{"nodes": [...], "links": [...]}`` where every node carries ``id``,
        ``label``, ``value``, ``depth``, ``parent`` (omitted for the root) and
        ``is_leaf``, and every link connects a parent id to a child id
    """
    nodes: List[Dict[str, Any]] = []
    links: List[Dict[str, str]] = []
    next_id = FIRST_NODE_ID

    # Explicit stack; children are pushed reversed so ids follow document order.
    stack: List[Tuple[Element, Optional[str], int]] = [(element, None, 0)]
    while stack:
        current, parent_id, depth = stack.pop()
        node_id = str(next_id)
        next_id += 1

        if current.is_leaf:
            value = current.text
        else:
            value = f"{len(current.children)} items"

        node: Dict[str, Any] = {
            "id": node_id,
            "label": ROOT_LABEL if depth == 0 else current.name,
            "value": value,
            "depth": depth,
        }
        if parent_id is not None:
            node["parent"] = parent_id
            links.append({"source": parent_id, "target": node_id})
        node["is_leaf"] = current.is_leaf
        nodes.append(node)

        for child in reversed(current.children):
            stack.append((child, node_id, depth + 1))

    return {"nodes": nodes, "links": links}


def to_tree_json(element: Element, indent: Optional[int] = None) -> str:
    """Render to_tree_dict() output as JSON text."""
    return dumps(to_tree_dict(element), indent=indent)


def to_graph_json(element: Element, indent: Optional[int] = None) -> str:
    """Render to_graph_dict() output as JSON text."""
    return dumps(to_graph_dict(element), indent=indent)
