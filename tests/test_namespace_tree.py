"""Tests for the key namespace tree builder."""

import pytest

from core.namespace_tree import build_tree, filter_tree
from model.keys import KeyDescriptor, KeyType


def _d(key, key_type=KeyType.STRING, ttl=-1):
    return KeyDescriptor(key=key, type=key_type, ttl=ttl)


def _total(nodes):
    return sum(n.descendantKeyCount for n in nodes)


def test_empty_input_gives_no_roots():
    assert build_tree([]) == []


def test_folder_and_leaf_example():
    roots = build_tree([_d("a:b"), _d("a:c"), _d("d", KeyType.LIST)])

    assert [r.segment for r in roots] == ["a", "d"]
    a, d = roots
    assert not a.isLeaf
    assert a.type is None
    assert a.descendantKeyCount == 2
    assert [c.segment for c in a.children] == ["b", "c"]
    assert [c.fullPath for c in a.children] == ["a:b", "a:c"]
    assert d.isLeaf
    assert d.type == KeyType.LIST
    assert d.children == []
    assert d.descendantKeyCount == 1


def test_node_can_be_key_and_folder():
    roots = build_tree([_d("user", KeyType.HASH, 30), _d("user:1"), _d("user:2")])

    (user,) = roots
    assert user.isLeaf
    assert user.type == KeyType.HASH
    assert user.ttl == 30
    assert len(user.children) == 2
    assert user.descendantKeyCount == 3


def test_order_follows_input():
    roots = build_tree([_d("z"), _d("a"), _d("m:x")])
    assert [r.segment for r in roots] == ["z", "a", "m"]


def test_deep_paths_count_at_every_level():
    roots = build_tree([_d("a:b:c:d"), _d("a:b:e"), _d("a:f")])
    (a,) = roots
    assert a.descendantKeyCount == 3
    b = a.children[0]
    assert b.fullPath == "a:b"
    assert b.descendantKeyCount == 2
    assert b.children[0].children[0].fullPath == "a:b:c:d"


def test_empty_segments_are_kept():
    roots = build_tree([_d("a::b"), _d(":x")])
    assert [r.segment for r in roots] == ["a", ""]
    assert roots[0].children[0].segment == ""
    assert roots[0].children[0].children[0].fullPath == "a::b"


@pytest.mark.parametrize(
    "keys",
    [
        ["a"],
        ["a:b", "a:c", "d"],
        ["x", "x:y", "x:y:z", "q:r"],
        ["a:b", "a:b"],
        ["1:2:3", "1:2", "1", "4"],
    ],
)
def test_root_counts_sum_to_batch_size(keys):
    batch = [_d(k) for k in keys]
    assert _total(build_tree(batch)) == len(batch)


def test_custom_delimiter():
    roots = build_tree([_d("a/b"), _d("a/c")], delimiter="/")
    assert roots[0].segment == "a"
    assert roots[0].descendantKeyCount == 2


def test_empty_delimiter_rejected():
    with pytest.raises(ValueError):
        build_tree([_d("a")], delimiter="")


def test_first_descriptor_wins_for_duplicates():
    roots = build_tree([_d("k", KeyType.LIST, 5), _d("k", KeyType.SET, 9)])
    assert roots[0].type == KeyType.LIST
    assert roots[0].descendantKeyCount == 2


# ── Filtering ────────────────────────────────────────────


def test_filter_keeps_matching_subtree_and_ancestors():
    roots = build_tree(
        [_d("app:session:1"), _d("app:session:2"), _d("app:cache:1"), _d("other")]
    )
    filtered = filter_tree(roots, "SESS")

    (app,) = filtered
    assert [c.segment for c in app.children] == ["session"]
    assert app.descendantKeyCount == 2
    assert app.children[0].descendantKeyCount == 2


def test_filter_ancestor_key_keeps_own_count():
    roots = build_tree([_d("app"), _d("app:x:match"), _d("app:y")])
    (app,) = filter_tree(roots, "match")
    assert app.isLeaf
    assert app.descendantKeyCount == 2


def test_blank_filter_returns_everything():
    roots = build_tree([_d("a:b"), _d("c")])
    assert filter_tree(roots, "  ") == roots


def test_filter_without_match_is_empty():
    assert filter_tree(build_tree([_d("a:b")]), "zzz") == []
