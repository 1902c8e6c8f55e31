"""motree, in-memory search trees.
binary search tree, AVL tree, multiway btree and N-ary tree
, plus traversal and diagnostic utilities.

note, motree stands for My Own TREEs."""

# note,
# the btree is the most core part, go and see motree.btree
# if you want some educational comment.
# the other trees live in motree.binary and motree.nary.

from motree.btree import BTree
from motree.binary import BinaryTree, BinarySearchTree, AVLTree
from motree.nary import NAryTree
from motree.node import BNode, BinaryNode, NAryNode
