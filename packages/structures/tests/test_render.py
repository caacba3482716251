from treesome_common.testing import requires_package

from treesome_structures import Tree, build_tree_from_string
from treesome_structures.render import as_indented_text, as_string, build_dot


def make_tree():
    return build_tree_from_string("(root (a b) c)")


def test_as_string():
    tree = make_tree()
    assert as_string(tree) == "(root (a b) c)"
    assert as_string(tree, delim="  ", multiline=True) == "(root\n  (a\n    b)\n  c)"
    a = tree.children(tree.root)[0]
    assert as_string(tree, a) == "(a b)"
    assert repr(tree) == "(root\n  (a\n    b)\n  c)"


def test_as_string_single_node():
    assert as_string(Tree("solo")) == "solo"


def test_as_indented_text():
    tree = make_tree()
    assert as_indented_text(tree) == "root\n  a\n    b\n  c"
    a = tree.children(tree.root)[0]
    assert as_indented_text(tree, a, indent="-") == "a\n-b"
    assert as_indented_text(tree, label_fn=str.upper).splitlines()[0] == "ROOT"


def test_rendering_does_not_mutate():
    tree = make_tree()
    before = tree.collect()
    as_string(tree)
    as_indented_text(tree)
    assert tree.collect() == before
    tree.insert_child(tree.root, "d")


@requires_package("graphviz")
def test_build_dot():
    tree = make_tree()
    dot = build_dot(tree, name="MyTree", label_fn=lambda p: f"[{p}]")
    source = dot.source
    assert "MyTree" in source
    for idx, label in enumerate(["[root]", "[a]", "[c]", "[b]"]):
        assert f"N_{idx:03}" in source
        assert label in source
    assert "N_000 -> N_001" in source
    assert "N_000 -> N_002" in source
    assert "N_001 -> N_003" in source
