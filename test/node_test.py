# local imports
from motree.node import BNode, BinaryNode, NAryNode


def test_bnode_defaults():
    node = BNode(4)
    assert node.leaf
    assert node.n == 0
    assert node.keys == [] and node.children == []
    assert repr(node) == 'BNode(leaf, keys=[])'


def test_bnode_counts_keys():
    node = BNode(4, leaf=False)
    node.keys.extend([1, 2])
    assert node.n == 2
    assert repr(node) == 'BNode(internal, keys=[1, 2])'


def test_binary_node():
    node = BinaryNode(2, BinaryNode(1))
    assert node.left.data == 1
    assert node.right is None
    assert node.height == 0


def test_nary_node_children_are_not_shared():
    a, b = NAryNode(1), NAryNode(2)
    child = a.add_child(NAryNode(3))
    assert child.data == 3
    assert a.children == [child]
    assert b.children == []
