"""Element model for parsed XML documents."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class Element:
    """A single parsed XML element.

    Elements are immutable once built. ``children`` is always a tuple in
    document order, ``attributes`` is a read-only mapping and ``text`` holds
    the element's own trimmed character data. ``self_closing`` records
    ``<x/>`` syntax only; it takes no part in equality and no projection
    shows it.
    """

    name: str
    attributes: Mapping[str, str] = field(default_factory=dict)
    text: str = ""
    children: Tuple["Element", ...] = ()
    self_closing: bool = field(default=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        """Validate element values and freeze children and attributes."""
        if not self.name:
            raise ValueError("Element name cannot be empty")
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))
        if self.self_closing and (self.text or self.children):
            raise ValueError("Self-closing element cannot have text or children")
        for child in self.children:
            if not isinstance(child, Element):
                raise TypeError("Children must be Element instances")

    def __hash__(self) -> int:
        # Children contribute only their names; equal elements still hash equal.
        return hash((
            self.name,
            self.text,
            frozenset(self.attributes.items()),
            tuple(child.name for child in self.children),
        ))

    @property
    def is_leaf(self) -> bool:
        """Check if this element has no child elements."""
        return not self.children

    @property
    def is_empty(self) -> bool:
        """Check if the element has no attributes, text or children."""
        return not (self.attributes or self.text or self.children)

    def child_tag_counts(self) -> Dict[str, int]:
        """Count direct children per tag name, in order of first appearance."""
        counts: Dict[str, int] = {}
        for child in self.children:
            counts[child.name] = counts.get(child.name, 0) + 1
        return counts

    def group_children(self) -> Dict[str, List["Element"]]:
        """Group direct children by tag name, in order of first appearance."""
        groups: Dict[str, List[Element]] = {}
        for child in self.children:
            groups.setdefault(child.name, []).append(child)
        return groups

    def find_child(self, name: str) -> Optional["Element"]:
        """Find first direct child with matching tag name."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def find_children(self, name: str) -> List["Element"]:
        """Find all direct children with matching tag name."""
        return [child for child in self.children if child.name == name]

    def find(self, name: str) -> Optional["Element"]:
        """Find first descendant with matching tag name, in document order."""
        for element in self.iter():
            if element is not self and element.name == name:
                return element
        return None

    def find_all(self, name: str) -> List["Element"]:
        """Find all descendants with matching tag name, in document order."""
        return [
            element for element in self.iter()
            if element is not self and element.name == name
        ]

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def iter(self) -> Iterator["Element"]:
        """Iterate over this element and all descendants in document order.

        Uses an explicit stack so that deep trees do not hit the recursion
        limit.
        """
        stack: List[Element] = [self]
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.children))

    def count_elements(self) -> int:
        """Count this element and all of its descendants."""
        return sum(1 for _ in self.iter())

    def depth(self) -> int:
        """Height of the subtree rooted here (a leaf has depth 1)."""
        deepest = 0
        stack: List[Tuple[Element, int]] = [(self, 1)]
        while stack:
            element, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in element.children)
        return deepest

    def to_dict(self) -> Dict[str, Any]:
        """Convert element to a plain dictionary representation."""
        root = self._plain_dict()
        stack: List[Tuple[Element, Dict[str, Any]]] = [(self, root)]
        while stack:
            element, result = stack.pop()
            if element.children:
                result["children"] = [child._plain_dict() for child in element.children]
                stack.extend(zip(element.children, result["children"]))
        return root

    def _plain_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "attributes": dict(self.attributes),
            "text": self.text,
        }
