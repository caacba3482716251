import pytest

import treesome_structures.builders as ts_builders
from treesome_structures import Tree, TreeConfig, TraversalOrder
from treesome_structures.exceptions import CorruptedTreeError, TreeParseError
from treesome_structures.render import as_string


def test_build_tree1():
    x = ts_builders.build_tree_from_string("(root (a (b d e) (c f)))")
    assert as_string(x) == "(root (a (b d e) (c f)))"
    assert len(x) == 7


def test_build_tree2():
    x = Tree(0)
    assert as_string(ts_builders.build_tree_from_string(as_string(x))) == as_string(x)


def test_build_tree_plain_string():
    x = ts_builders.build_tree_from_string("just a leaf")
    assert len(x) == 1
    assert x[x.root] == "just a leaf"


def test_build_tree_multiline_string():
    text = "(root\n  (a\n    b)\n  c)"
    x = ts_builders.build_tree_from_string(text)
    assert as_string(x) == "(root (a b) c)"


def test_build_tree_with_config():
    config = TreeConfig(default_order=TraversalOrder.LEVEL)
    x = ts_builders.build_tree_from_string("(r (a b) c)", config=config)
    assert x.config is config
    assert [x[h] for h in x] == ["r", "a", "c", "b"]


@pytest.mark.parametrize("text", ["(a (b c)", "(a b))", "(a) (b)", "(a ())", "()"])
def test_build_tree_bad_strings(text):
    with pytest.raises(TreeParseError):
        ts_builders.build_tree_from_string(text)


def test_build_tree_from_list():
    x = ts_builders.build_tree_from_list(["root", ["child1", "leaf1", "leaf2"], "child2"])
    assert as_string(x) == "(root (child1 leaf1 leaf2) child2)"
    assert [x[h] for h in x.children(x.root)] == ["child1", "child2"]


def test_build_tree_from_list_nested_head():
    x = ts_builders.build_tree_from_list([["a", "b"], "c"])
    assert as_string(x) == "(a b c)"


def test_build_tree_from_list_scalars():
    x = ts_builders.build_tree_from_list(42)
    assert x[x.root] == 42 and len(x) == 1
    x = ts_builders.build_tree_from_list([])
    assert x[x.root] == [] and len(x) == 1


class TestBuildFromArrays:
    """Test the dense child-index array builder."""

    def test_ternary(self):
        left = [1, 4, 7, 10, -1, -1, -1, -1, -1, -1, -1, -1, -1]
        mid = [2, 5, 8, 11, -1, -1, -1, -1, -1, -1, -1, -1, -1]
        right = [3, 6, 9, 12, -1, -1, -1, -1, -1, -1, -1, -1, -1]
        values = list(range(13))
        tree = ts_builders.build_tree_from_arrays([left, mid, right], values)
        assert len(tree) == 13
        assert [tree[h] for h in tree.children(tree.root)] == [1, 2, 3]
        node2 = tree.children(tree.root)[1]
        assert [tree[h] for h in tree.children(node2)] == [7, 8, 9]
        assert [p for _, p in tree.levelorder()] == values
        leaf = tree.find(lambda h, p: p == 6)[0]
        assert tree.is_leaf(leaf)
        assert tree[tree.parent(leaf)] == 1
        assert not tree.is_leaf(tree.root)

    def test_binary_with_gaps(self):
        left = [1, 3, -1, -1]
        right = [2, -1, -1, -1]
        tree = ts_builders.build_tree_from_arrays([left, right], ["r", "a", "b", "c"])
        assert as_string(tree) == "(r (a c) b)"

    def test_length_mismatch(self):
        with pytest.raises(CorruptedTreeError):
            ts_builders.build_tree_from_arrays([[1, -1], [2, -1, -1]], ["r", "a", "b"])

    def test_empty_values(self):
        with pytest.raises(CorruptedTreeError):
            ts_builders.build_tree_from_arrays([], [])

    def test_out_of_range(self):
        with pytest.raises(CorruptedTreeError):
            ts_builders.build_tree_from_arrays([[5, -1]], ["r", "a"])

    def test_root_as_child(self):
        with pytest.raises(CorruptedTreeError):
            ts_builders.build_tree_from_arrays([[1, 0]], ["r", "a"])

    def test_shared_child(self):
        with pytest.raises(CorruptedTreeError):
            ts_builders.build_tree_from_arrays([[1, -1, -1], [1, -1, -1]], ["r", "a", "b"])

    def test_unreachable(self):
        with pytest.raises(CorruptedTreeError) as exc_info:
            ts_builders.build_tree_from_arrays([[1, -1, -1]], ["r", "a", "b"])
        assert exc_info.value.context["unreachable"] == [2]
