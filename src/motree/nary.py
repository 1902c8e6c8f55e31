"""N-ary tree, any number of children per node, no ordering, no balancing."""

from collections import deque

# local imports
from motree import error
from motree import util
from motree.node import NAryNode
from motree.log import logger


class NAryTree:
    # the caller decides the shape: every new node is attached
    # under a parent node the caller already holds, for example:
    #
    #       tree = NAryTree()
    #       root = tree.add(None, 1)
    #       tree.add(root, 2)

    def __init__(self, root=None):
        self.root = root

    def __len__(self):
        return self.count()

    def __iter__(self):
        return iter(self.preorder())

    def __contains__(self, data):
        return self.contains(data)

    def is_empty(self):
        return self.root is None

    def add(self, parent, data):
        # attach a new node under parent and return it.

        # on an empty tree the new node becomes the root
        # and parent is ignored.
        if self.root is None:
            logger.info('the tree is empty, creating tree with %s', data)
            self.root = NAryNode(data)
            return self.root

        if parent is None:
            raise error.InvalidParentError(
                f'can not insert {data}, parent node is None.',
            )

        return parent.add_child(NAryNode(data))

    def find(self, data):
        # first node holding data in preorder, or None
        return self._find(self.root, data)

    def contains(self, data):
        return self.find(data) is not None

    def delete(self, data, strict=False):
        # remove the first node holding data in preorder
        # , together with its whole subtree.
        # return True if deleted.

        if self.root is not None and self.root.data == data:
            self.root = None
            return True

        if not self._delete(self.root, data):
            return self._report(
                error.KeyNotFoundError(
                    f"the node {data} doesn't exist in the tree.",
                ),
                strict,
            )

        return True

    def height(self):
        # -1 for an empty tree, 0 for a single node
        return self._height(self.root)

    def count(self):
        return self._count(self.root)

    def degree(self):
        # the largest number of children any node has
        return self._degree(self.root)

    def leaf_count(self):
        return self._leaf_count(self.root)

    def preorder(self):
        result = []
        self._preorder(self.root, result)
        return result

    def inorder(self):
        # the first half of the children, the node, then the rest
        result = []
        self._inorder(self.root, result)
        return result

    def postorder(self):
        result = []
        self._postorder(self.root, result)
        return result

    def levels(self):
        result = []
        if self.root is None:
            return result

        queue = deque([(self.root, 0)])
        while queue:
            node, depth = queue.popleft()
            if len(result) <= depth:
                result.append([])
            result[depth].append(node.data)
            queue.extend((child, depth + 1) for child in node.children)
        return result

    def level(self, level):
        # data found at the given depth
        # , motree.error.LevelNotFoundError is raised if the
        # level is outside [0, height].
        if level < 0 or level > self.height():
            raise error.LevelNotFoundError(
                f'level {level} does not exist',
            )
        return self.levels()[level]

    def render(self):
        lines = []
        self._collect_lines(self.root, 0, lines)
        return util.render_lines(lines)

    # private method as follows

    def _report(self, exc, strict):
        # same contract as BTree, see motree.btree
        if strict:
            raise exc
        logger.warning(exc)
        return False

    def _find(self, node, data):
        if node is None:
            return None
        if node.data == data:
            return node
        for child in node.children:
            found = self._find(child, data)
            if found is not None:
                return found
        return None

    def _delete(self, node, data):
        if node is None:
            return False

        for i, child in enumerate(node.children):
            if child.data == data:
                del node.children[i]
                return True
            if self._delete(child, data):
                return True

        return False

    def _height(self, node):
        if node is None:
            return -1
        return 1 + max(
            (self._height(child) for child in node.children),
            default=-1,
        )

    def _count(self, node):
        if node is None:
            return 0
        return 1 + sum(self._count(child) for child in node.children)

    def _degree(self, node):
        if node is None:
            return 0
        return max(
            [len(node.children)]
            + [self._degree(child) for child in node.children]
        )

    def _leaf_count(self, node):
        if node is None:
            return 0
        if not node.children:
            return 1
        return sum(self._leaf_count(child) for child in node.children)

    def _preorder(self, node, result):
        if node is not None:
            result.append(node.data)
            for child in node.children:
                self._preorder(child, result)

    def _inorder(self, node, result):
        if node is not None:
            half = len(node.children) // 2
            for child in node.children[:half]:
                self._inorder(child, result)
            result.append(node.data)
            for child in node.children[half:]:
                self._inorder(child, result)

    def _postorder(self, node, result):
        if node is not None:
            for child in node.children:
                self._postorder(child, result)
            result.append(node.data)

    def _collect_lines(self, node, level, lines):
        if node is None:
            return
        lines.append((level, str(node.data)))
        for child in node.children:
            self._collect_lines(child, level + 1, lines)
