"""binary trees: the plain one with its diagnostics, the binary search tree
and the AVL self-balancing tree.

note, these are the single-child-per-side relatives of motree.btree.BTree
, the AVL tree rebalances with rotations instead of splits and merges."""

from collections import deque

# local imports
from motree import error
from motree import util
from motree.node import BinaryNode
from motree.log import logger


class BinaryTree:
    # a plain binary tree, no ordering is assumed.
    # the caller builds it by hand using BinaryNode, for example:
    #
    #       tree = BinaryTree(BinaryNode(1, BinaryNode(2), BinaryNode(3)))
    #
    # every query walks the whole tree recursively.

    def __init__(self, root=None):
        self.root = root

    def __len__(self):
        return self.count()

    def __iter__(self):
        return iter(self.inorder())

    def __contains__(self, data):
        return self.contains(data)

    def is_empty(self):
        return self.root is None

    def height(self):
        # -1 for an empty tree, 0 for a single node
        return self._height(self.root)

    def preorder(self):
        result = []
        self._preorder(self.root, result)
        return result

    def inorder(self):
        result = []
        self._inorder(self.root, result)
        return result

    def postorder(self):
        result = []
        self._postorder(self.root, result)
        return result

    def levels(self):
        # data level by level, the root level first
        result = []
        if self.root is None:
            return result

        queue = deque([(self.root, 0)])
        while queue:
            node, depth = queue.popleft()
            if len(result) <= depth:
                result.append([])
            result[depth].append(node.data)
            for child in (node.left, node.right):
                if child is not None:
                    queue.append((child, depth + 1))
        return result

    def level(self, level):
        # data found at the given depth, left to right
        return [node.data for node in self.level_nodes(level)]

    def level_nodes(self, level):
        # nodes found at the given depth, left to right
        # , motree.error.LevelNotFoundError is raised if the
        # level is outside [0, height].
        if level < 0 or level > self.height():
            raise error.LevelNotFoundError(
                f'level {level} does not exist',
            )

        result = []
        self._collect_level(self.root, level, result)
        return result

    def contains(self, data):
        return self._search(self.root, data)

    def is_same_as(self, other):
        # same shape and same data
        return self._same(self.root, other.root)

    def is_similar_to(self, other):
        # same shape, data does not matter
        return self._similar(self.root, other.root)

    def sum(self):
        return self._sum(self.root)

    def is_balanced(self):
        # every node's subtrees differ in height by at most one
        return self._balanced(self.root)

    def count(self):
        return self._count(self.root)

    def smallest(self):
        if self.root is None:
            raise error.EmptyTreeError('the tree is empty.')
        return min(self.preorder())

    def largest(self):
        if self.root is None:
            raise error.EmptyTreeError('the tree is empty.')
        return max(self.preorder())

    def invert_children(self, node):
        # swap the two children of one node, not recursive
        if node is not None:
            node.left, node.right = node.right, node.left

    def is_full(self):
        # every node has either 0 or 2 children
        return self._full(self.root)

    def is_bst(self):
        return self._bst(self.root, None, None)

    def is_avl(self):
        return self.is_bst() and self.is_balanced()

    def render(self):
        # one line per node, children indented under their parent
        # , a missing child of a half-full node is shown as `-`.
        lines = []
        self._collect_lines(self.root, 0, lines)
        return util.render_lines(lines)

    # private method as follows
    # note, every helper takes the subtree root, None is an empty subtree.

    def _height(self, node):
        if node is None:
            return -1
        return 1 + max(self._height(node.left), self._height(node.right))

    def _preorder(self, node, result):
        if node is not None:
            result.append(node.data)
            self._preorder(node.left, result)
            self._preorder(node.right, result)

    def _inorder(self, node, result):
        if node is not None:
            self._inorder(node.left, result)
            result.append(node.data)
            self._inorder(node.right, result)

    def _postorder(self, node, result):
        if node is not None:
            self._postorder(node.left, result)
            self._postorder(node.right, result)
            result.append(node.data)

    def _collect_level(self, node, level, result):
        if node is None:
            return
        if level == 0:
            result.append(node)
        else:
            self._collect_level(node.left, level - 1, result)
            self._collect_level(node.right, level - 1, result)

    def _search(self, node, data):
        if node is None:
            return False
        if node.data == data:
            return True
        return self._search(node.left, data) or self._search(node.right, data)

    def _same(self, a, b):
        if a is None and b is None:
            return True
        if a is None or b is None:
            return False
        return (
            a.data == b.data
            and self._same(a.left, b.left)
            and self._same(a.right, b.right)
        )

    def _similar(self, a, b):
        if a is None and b is None:
            return True
        if a is None or b is None:
            return False
        return self._similar(a.left, b.left) and self._similar(a.right, b.right)

    def _sum(self, node):
        if node is None:
            return 0
        return node.data + self._sum(node.left) + self._sum(node.right)

    def _balanced(self, node):
        if node is None:
            return True
        if abs(self._height(node.left) - self._height(node.right)) > 1:
            return False
        return self._balanced(node.left) and self._balanced(node.right)

    def _count(self, node):
        if node is None:
            return 0
        return 1 + self._count(node.left) + self._count(node.right)

    def _full(self, node):
        if node is None:
            return True
        if node.left is None and node.right is None:
            return True
        if node.left is not None and node.right is not None:
            return self._full(node.left) and self._full(node.right)
        return False

    def _bst(self, node, low, high):
        # strict bounds, duplicates break the property
        if node is None:
            return True
        if low is not None and node.data <= low:
            return False
        if high is not None and node.data >= high:
            return False
        return (
            self._bst(node.left, low, node.data)
            and self._bst(node.right, node.data, high)
        )

    def _collect_lines(self, node, level, lines):
        if node is None:
            return
        lines.append((level, str(node.data)))
        if node.left is None and node.right is None:
            return
        for child in (node.left, node.right):
            if child is None:
                lines.append((level + 1, '-'))
            else:
                self._collect_lines(child, level + 1, lines)

    def _report(self, exc, strict):
        # same contract as BTree, see motree.btree
        if strict:
            raise exc
        logger.warning(exc)
        return False


class BinarySearchTree(BinaryTree):
    # left subtree < node < right subtree, no duplicates.

    def insert(self, data, strict=False):
        # return True if inserted, a duplicate is rejected.

        if self.root is None:
            logger.info('the tree is empty, creating tree with %s', data)
            self.root = self._make_node(data)
            return True

        if self._find(data) is not None:
            return self._report(
                error.DuplicateKeyError(
                    f'duplicated node {data}, it does not get inserted.',
                ),
                strict,
            )

        self.root = self._insert(self.root, data)
        return True

    def delete(self, data, strict=False):
        # return True if deleted.

        if self.root is None:
            return self._report(
                error.EmptyTreeError(
                    "the tree doesn't have anything to delete.",
                ),
                strict,
            )

        if self._find(data) is None:
            return self._report(
                error.KeyNotFoundError(
                    f"the node {data} doesn't exist in the tree.",
                ),
                strict,
            )

        self.root = self._delete(self.root, data)
        return True

    def contains(self, data):
        # the ordering makes this a single root-to-leaf walk
        return self._find(data) is not None

    def smallest(self):
        if self.root is None:
            raise error.EmptyTreeError('the tree is empty.')
        return self._find_min(self.root).data

    def largest(self):
        if self.root is None:
            raise error.EmptyTreeError('the tree is empty.')
        node = self.root
        while node.right is not None:
            node = node.right
        return node.data

    # private method as follows

    def _make_node(self, data):
        return BinaryNode(data)

    def _find(self, data):
        node = self.root
        while node is not None:
            if data == node.data:
                return node
            node = node.left if data < node.data else node.right
        return None

    def _find_min(self, node):
        while node.left is not None:
            node = node.left
        return node

    def _insert(self, node, data):
        # return the new root of the subtree
        if node is None:
            return self._make_node(data)

        if data < node.data:
            node.left = self._insert(node.left, data)
        else:
            node.right = self._insert(node.right, data)
        return node

    def _delete(self, node, data):
        # return the new root of the subtree
        if node is None:
            return None

        if data < node.data:
            node.left = self._delete(node.left, data)
        elif data > node.data:
            node.right = self._delete(node.right, data)
        else:
            if node.left is None:
                return node.right
            if node.right is None:
                return node.left

            # two children, take the in-order successor's place
            successor = self._find_min(node.right)
            node.data = successor.data
            node.right = self._delete(node.right, successor.data)

        return node


class AVLTree(BinarySearchTree):
    # binary search tree that keeps every balance factor
    # (height of left subtree - height of right subtree)
    # in [-1, 1] after each insert and delete.
    #
    # note, heights are cached in BinaryNode.height and only the
    # nodes on the modified path are updated, so a rebalance costs
    # O(log n) instead of walking whole subtrees.

    # the public insert/delete come from BinarySearchTree
    # , only the recursive helpers are rebalancing.

    def __init__(self, root=None):
        super().__init__(root)

        # a hand-built root carries no cached heights
        # , compute them bottom-up before the first rebalance.
        self._init_heights(self.root)

    def _init_heights(self, node):
        if node is None:
            return
        self._init_heights(node.left)
        self._init_heights(node.right)
        self._update_height(node)

    def _insert(self, node, data):
        node = super()._insert(node, data)
        return self._rebalance(node)

    def _delete(self, node, data):
        node = super()._delete(node, data)
        if node is None:
            return None
        return self._rebalance(node)

    def _node_height(self, node):
        if node is None:
            return -1
        return node.height

    def _update_height(self, node):
        node.height = 1 + max(
            self._node_height(node.left),
            self._node_height(node.right),
        )

    def balance(self, node):
        if node is None:
            return 0
        return self._node_height(node.left) - self._node_height(node.right)

    def _rotate_left(self, node):
        #     A                C
        #    / \              / \
        #   B   C     =>     A   E
        #      / \          / \
        #     D   E        B   D
        pivot = node.right
        node.right = pivot.left
        pivot.left = node
        self._update_height(node)
        self._update_height(pivot)
        return pivot

    def _rotate_right(self, node):
        #       A            B
        #      / \          / \
        #     B   C   =>   D   A
        #    / \              / \
        #   D   E            E   C
        pivot = node.left
        node.left = pivot.right
        pivot.right = node
        self._update_height(node)
        self._update_height(pivot)
        return pivot

    def _rebalance(self, node):
        # return the new root of the subtree
        self._update_height(node)
        balance = self.balance(node)

        if balance > 1:
            if self.balance(node.left) < 0:
                # left-right case
                node.left = self._rotate_left(node.left)
            return self._rotate_right(node)

        if balance < -1:
            if self.balance(node.right) > 0:
                # right-left case
                node.right = self._rotate_right(node.right)
            return self._rotate_left(node)

        return node
