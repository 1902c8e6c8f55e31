"""nodes used by the trees.

note, nodes are pure data, the trees own every rule about them."""

from typing import List, Optional


class BNode:
    # a node of the multiway btree.
    #
    #       bnode:
    #           [keys  children]
    # btree recap: an internal node with n keys
    # has exactly n+1 children, a leaf has none.
    # keys[i] separates children[i] (smaller keys)
    # and children[i+1] (bigger keys).

    def __init__(self, order: int, leaf: bool = True):
        # order is the maximum number of children
        # , so a node holds at most order-1 keys.
        self.order = order
        self.leaf = leaf

        self.keys: List[int] = []
        self.children: List['BNode'] = []

    @property
    def n(self) -> int:
        # current number of keys
        return len(self.keys)

    def __repr__(self):
        kind = 'leaf' if self.leaf else 'internal'
        return f'BNode({kind}, keys={self.keys})'


class BinaryNode:
    __slots__ = 'data', 'left', 'right', 'height'

    def __init__(
        self,
        data: int,
        left: Optional['BinaryNode'] = None,
        right: Optional['BinaryNode'] = None,
    ):
        self.data = data
        self.left = left
        self.right = right

        # cached height, only kept up to date by AVLTree.
        # a node without children has height 0.
        self.height = 0

    def __repr__(self):
        return f'BinaryNode({self.data})'


class NAryNode:
    __slots__ = 'data', 'children'

    def __init__(self, data: int, children: Optional[List['NAryNode']] = None):
        self.data = data
        self.children = children if children is not None else []

    def add_child(self, child: 'NAryNode'):
        self.children.append(child)
        return child

    def __repr__(self):
        return f'NAryNode({self.data})'
