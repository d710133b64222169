# core/namespace_tree.py
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional
from model.keys import KeyDescriptor, NamespaceNode

DEFAULT_DELIMITER = ":"


@dataclass
class _Draft:
    segment: str
    full_path: str
    descriptor: Optional[KeyDescriptor] = None
    # How many descriptors name this exact path (normally 0 or 1).
    leaf_hits: int = 0
    children: Dict[str, "_Draft"] = field(default_factory=dict)


def _freeze(draft: _Draft) -> NamespaceNode:
    children = [_freeze(child) for child in draft.children.values()]
    d = draft.descriptor
    return NamespaceNode(
        segment=draft.segment,
        fullPath=draft.full_path,
        isLeaf=d is not None,
        type=d.type if d is not None else None,
        ttl=d.ttl if d is not None else None,
        children=children,
        descendantKeyCount=draft.leaf_hits + sum(c.descendantKeyCount for c in children),
    )


def build_tree(
    descriptors: Iterable[KeyDescriptor], delimiter: str = DEFAULT_DELIMITER
) -> List[NamespaceNode]:
    """
    Group a flat batch of keys into a namespace tree.

    - "a:b" and "a:c" share the folder "a"; nodes keep first-seen order.
    - A path can be a key and a folder at once ("a" and "a:b"): the node keeps
      the key's type/ttl and its children.
    - descendantKeyCount counts the keys at or below a node, so the counts of
      the roots add up to the size of the batch.
    The tree is rebuilt from scratch on every call.
    """
    if not delimiter:
        raise ValueError("delimiter must not be empty")
    roots: Dict[str, _Draft] = {}
    for descriptor in descriptors:
        level = roots
        node: Optional[_Draft] = None
        path: List[str] = []
        for segment in descriptor.key.split(delimiter):
            path.append(segment)
            node = level.get(segment)
            if node is None:
                node = _Draft(segment=segment, full_path=delimiter.join(path))
                level[segment] = node
            level = node.children
        node.leaf_hits += 1
        if node.descriptor is None:
            node.descriptor = descriptor
    return [_freeze(root) for root in roots.values()]


def _own_count(node: NamespaceNode) -> int:
    return node.descendantKeyCount - sum(c.descendantKeyCount for c in node.children)


def _filter_node(node: NamespaceNode, needle: str) -> Optional[NamespaceNode]:
    if needle in node.segment.lower():
        return node
    kept = [c for c in (_filter_node(child, needle) for child in node.children) if c]
    if not kept:
        return None
    return node.model_copy(
        update={
            "children": kept,
            "descendantKeyCount": _own_count(node)
            + sum(c.descendantKeyCount for c in kept),
        }
    )


def filter_tree(nodes: List[NamespaceNode], text: str) -> List[NamespaceNode]:
    """
    Keep nodes whose segment contains `text` (case-insensitive) together with
    their whole subtree, plus the ancestors leading to them. Ancestor counts
    are recomputed over what is kept.
    """
    needle = (text or "").strip().lower()
    if not needle:
        return list(nodes)
    return [n for n in (_filter_node(node, needle) for node in nodes) if n]
