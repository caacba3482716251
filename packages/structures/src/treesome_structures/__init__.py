"""Generic rooted trees with stable, generation-checked node handles.

The treesome-structures package provides an N-ary tree engine for building,
walking and reshaping trees of arbitrary shape.

## Modules

### Tree - The tree engine
- Insert children at any sibling position
- Remove, move (cycle-checked) and clone whole subtrees
- Lazy pre-order, post-order, level-order and ancestor traversals
- Depth, size, ancestry, sibling and leaf queries

### Arena - Node storage
Slot storage behind every Tree. Handles embed the slot generation, so a
handle to a removed node is always rejected, even after its slot is reused.

### TreeCursor - Navigation
Step from node to node (parent, children, siblings) without mutating.

### Builders and rendering
Build trees from nested lists, parenthesized strings or dense child-index
arrays; render them as text or as a Graphviz graph.

## Quick Example

```python
from treesome_structures import Tree

tree = Tree("R")
a = tree.insert_child(tree.root, "A")
b = tree.insert_child(tree.root, "B")
tree.insert_child(a, "C")

[p for _, p in tree.preorder()]    # ["R", "A", "C", "B"]
[p for _, p in tree.postorder()]   # ["C", "A", "B", "R"]
[p for _, p in tree.levelorder()]  # ["R", "A", "B", "C"]

copy = tree.clone_subtree(a)       # independent Tree rooted at "A"
tree.move_subtree(b, a)            # B now under A
tree.remove_subtree(a)             # ["A", "C", "B"]
```
"""

from treesome_structures.arena import Arena, NodeHandle
from treesome_structures.builders import (
    LEAF_NODE,
    build_tree_from_arrays,
    build_tree_from_list,
    build_tree_from_string,
)
from treesome_structures.config import TreeConfig
from treesome_structures.cursor import TreeCursor
from treesome_structures.exceptions import (
    AlreadyAttachedError,
    CannotMoveRootError,
    CannotRemoveRootError,
    ConcurrentModificationError,
    CorruptedTreeError,
    CycleDetectedError,
    InvalidHandleError,
    NoParentError,
    TreeError,
    TreeParseError,
)
from treesome_structures.render import as_indented_text, as_string, build_dot
from treesome_structures.traversal import TraversalOrder
from treesome_structures.tree import Tree

__version__ = "0.1.0"

__all__ = [
    "Arena",
    "NodeHandle",
    "Tree",
    "TreeConfig",
    "TreeCursor",
    "TraversalOrder",
    "LEAF_NODE",
    "build_tree_from_arrays",
    "build_tree_from_list",
    "build_tree_from_string",
    "as_indented_text",
    "as_string",
    "build_dot",
    "TreeError",
    "InvalidHandleError",
    "AlreadyAttachedError",
    "NoParentError",
    "CannotRemoveRootError",
    "CannotMoveRootError",
    "CycleDetectedError",
    "ConcurrentModificationError",
    "TreeParseError",
    "CorruptedTreeError",
]
