"""Tree projections for xmlflat.

Key Components:
    to_json_text / to_json_dict: Nested JSON objects keyed by child tag
    to_yaml_text: Block-style YAML with attributes, text and children keys
    to_tree_dict / to_graph_dict: Hierarchical and node/link visual views
"""

from .json_projector import to_json_dict, to_json_text
from .visualization import (
    to_graph_dict,
    to_graph_json,
    to_tree_dict,
    to_tree_json,
)
from .yaml_projector import YAMLProjector, format_scalar, to_yaml_text

__all__ = [
    "YAMLProjector",
    "format_scalar",
    "to_graph_dict",
    "to_graph_json",
    "to_json_dict",
    "to_json_text",
    "to_tree_dict",
    "to_tree_json",
    "to_yaml_text",
]
