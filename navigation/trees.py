# backend/navigation/trees.py
"""
Helpers for the nested node lists stored in NavigationTree.items and
NavigationTree.draft_items.

A node is a plain dict:

    {
        "navigation_item_id": 12,
        "expanded": False,
        "is_private": False,
        "is_secondary": False,
        "is_visible": True,
        "items": [<node>, ...],
    }

Everything here is pure: nodes in, new nodes out, no database access.
"""
from .exceptions import NavigationValidationError

NODE_FLAGS = ("expanded", "is_private", "is_secondary", "is_visible")

DEFAULT_NODE_FLAGS = {
    "expanded": False,
    "is_private": False,
    "is_secondary": False,
    "is_visible": True,
}


def parse_item_id(value):
    """Return an int primary key, or None if `value` can't be one."""
    if isinstance(value, bool):
        return None
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return parsed if parsed > 0 else None


def normalize_tree_items(raw_items, defaults=None):
    """
    Turn input nodes (flags may be missing or None, ids may be strings)
    into stored nodes. Missing flags are taken from `defaults`.
    """
    defaults = {**DEFAULT_NODE_FLAGS, **(defaults or {})}
    return [_normalize_node(raw, defaults, path=str(index)) for index, raw in enumerate(raw_items or [])]


def _normalize_node(raw, defaults, path):
    if not isinstance(raw, dict):
        raise NavigationValidationError(f"draftItems.{path}: must be an object")

    item_id = parse_item_id(raw.get("navigation_item_id"))
    if item_id is None:
        raise NavigationValidationError(
            f"draftItems.{path}.navigationItemId: invalid id {raw.get('navigation_item_id')!r}"
        )

    node = {"navigation_item_id": item_id}
    for flag in NODE_FLAGS:
        value = raw.get(flag)
        node[flag] = defaults[flag] if value is None else bool(value)

    children = raw.get("items") or []
    node["items"] = [
        _normalize_node(child, defaults, path=f"{path}.items.{index}")
        for index, child in enumerate(children)
    ]
    return node


def validate_tree_items(nodes, max_depth=None):
    """
    Reject an item that shows up among its own ancestors, and trees deeper
    than `max_depth` levels.
    """

    def visit(node, ancestors, depth):
        item_id = node["navigation_item_id"]
        if item_id in ancestors:
            raise NavigationValidationError(
                f"Navigation item {item_id} cannot be nested inside itself"
            )
        if max_depth is not None and depth > max_depth:
            raise NavigationValidationError(
                f"Navigation tree is deeper than {max_depth} levels"
            )
        for child in node.get("items") or []:
            visit(child, ancestors | {item_id}, depth + 1)

    for node in nodes:
        visit(node, frozenset(), 1)


def collect_item_ids(nodes):
    ids = set()
    stack = list(nodes or [])
    while stack:
        node = stack.pop()
        ids.add(node["navigation_item_id"])
        stack.extend(node.get("items") or [])
    return ids


def filter_tree_items(nodes, include_secondary=False, include_private=False, include_hidden=False):
    """
    Drop nodes the caller should not see. A dropped node takes its whole
    subtree with it.
    """
    visible = []
    for node in nodes or []:
        if node.get("is_secondary") and not include_secondary:
            continue
        if node.get("is_private") and not include_private:
            continue
        if not node.get("is_visible", True) and not include_hidden:
            continue
        visible.append(
            {
                **node,
                "items": filter_tree_items(
                    node.get("items"),
                    include_secondary=include_secondary,
                    include_private=include_private,
                    include_hidden=include_hidden,
                ),
            }
        )
    return visible


def prune_tree_items(nodes, keep):
    """
    Remove nodes whose item id fails `keep(item_id)`. Children of a removed
    node are spliced into its place.

    Returns (new_nodes, changed).
    """
    pruned = []
    changed = False
    for node in nodes or []:
        children, children_changed = prune_tree_items(node.get("items"), keep)
        changed = changed or children_changed
        if keep(node["navigation_item_id"]):
            pruned.append({**node, "items": children})
        else:
            changed = True
            pruned.extend(children)
    return pruned, changed
