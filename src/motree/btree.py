"""the multiway btree, the most core part."""

from collections import deque

# local imports
from motree import constant
from motree import error
from motree import util
from motree.node import BNode
from motree.log import logger


# note, in this source code, when I say `order` (or P), it is the maximum
# number of children a bnode can have, so a bnode holds at most order-1 keys.
#
# note, both insertion and deletion walk the tree top-down, from the root
# to a leaf, and fix the path on their way down:
#       insertion: a full child is split BEFORE we descend into it
#       , so there is always room for the promoted key in the parent.
#       deletion: a child holding the minimum number of keys is filled
#       (borrow or merge) BEFORE we descend into it, so the child can
#       always afford to lose one key.
# that is why no operation ever needs to walk back up to the root.
#
# note, the top-down split can only keep both halves at min_keys when the
# full node holds an odd number of keys, which is the case for even orders.
# for odd orders, a full node is not split before the descent, it is allowed
# to take one extra key first and is split right after the recursive call
# returns (see `relieve`). the same repair catches a merge that overflowed
# one key past max_keys. with even orders, `relieve` never has work to do.


class BTree:
    # the tree owns the root bnode and the order.

    def __init__(self, order=constant.DEFAULT_ORDER):
        # bool is a subclass of int, it is rejected too.
        if type(order) is not int:
            raise error.InvalidOrderError(
                f'order must be an int, got {type(order).__name__}',
            )
        if order < constant.MIN_ORDER:
            raise error.InvalidOrderError(
                f'order must be at least {constant.MIN_ORDER}, got {order}',
            )

        # immutable after construction
        self.order = order
        self.max_keys = constant.max_keys(order)
        self.min_keys = constant.min_keys(order)
        self.split_keys = constant.split_keys(order)

        # an empty tree is an empty leaf root
        self.root = BNode(order, leaf=True)

    def __repr__(self):
        return f'BTree(order={self.order}, keys={len(self)})'

    def __len__(self):
        return sum(node.n for node in self._nodes(self.root))

    def __iter__(self):
        return iter(self.keys())

    def __contains__(self, key):
        return self.contains(key)

    # public method as follows

    def is_empty(self):
        return self.root.leaf and self.root.n == 0

    def search(self, key):
        # if key found, return (node, idx) where node.keys[idx] == key
        # , otherwise, motree.error.KeyNotFoundError will be raised.

        node = self.root
        while True:
            idx = self.find_key_index(node, key)

            if idx < node.n and node.keys[idx] == key:
                return node, idx

            if node.leaf:
                raise error.KeyNotFoundError(
                    f"the key {key} doesn't exist in the tree.",
                )

            # idx is also the child to descend into
            node = node.children[idx]

    def contains(self, key):
        # pure query, the tree is never touched.
        try:
            self.search(key)
        except error.KeyNotFoundError:
            return False
        return True

    def insert(self, key, strict=False):
        # insert the key, return True if inserted.

        # a key that is already in the tree is not inserted twice
        # , False is returned and a warning is logged.
        # (or motree.error.DuplicateKeyError is raised in strict mode)
        # note, the check runs before any split, so a rejected
        # duplicate never changes the shape of the tree.
        if self.contains(key):
            return self._report(
                error.DuplicateKeyError(
                    f'duplicated key {key}, it does not get inserted.',
                ),
                strict,
            )

        root = self.root
        if self.is_full(root):
            # the root is split pre-emptively, the tree grows
            # by one level and that is the only way it grows.
            new_root = BNode(self.order, leaf=False)
            new_root.children.append(root)
            self.split_child(new_root, 0, root)
            self.root = new_root
            logger.debug('root split, tree height is now %s', self.height())

            # continue into whichever half should receive the key
            i = 0
            if new_root.keys[0] < key:
                i += 1
            self.insert_non_full(new_root.children[i], key)
            self.relieve(new_root, i)
        else:
            self.insert_non_full(root, key)

        self.fix_root()
        return True

    def delete(self, key, strict=False):
        # delete the key, return True if deleted.

        # deleting from an empty tree or deleting an absent key
        # is not fatal, False is returned and a warning is logged.
        # (or motree.error.EmptyTreeError / KeyNotFoundError is raised
        # in strict mode). either way the tree stays valid.

        if self.is_empty():
            return self._report(
                error.EmptyTreeError(
                    'the tree is empty, there is nothing to delete.',
                ),
                strict,
            )

        found = self.delete_from_node(self.root, key)

        # the root may have lost its last key to a merge
        # , that must be fixed whether the key was found or not.
        self.fix_root()

        if not found:
            return self._report(
                error.KeyNotFoundError(
                    f"the key {key} doesn't exist in the tree.",
                ),
                strict,
            )

        return True

    # node-level operations as follows
    # note, they are public so they can be tested one by one
    # , but only insert and delete keep the tree valid as a whole.

    def is_full(self, node):
        # a full node is split before we descend into it
        return node.n >= self.split_keys

    def find_key_index(self, node, key):
        # smallest idx such that node.keys[idx] >= key
        # , or node.n if every key is smaller.
        # note, linear scan, order is assumed small.
        idx = 0
        while idx < node.n and node.keys[idx] < key:
            idx += 1
        return idx

    def insert_non_full(self, node, key):
        # node is guaranteed to have room for one more key.

        i = node.n - 1

        if node.leaf:
            # shift bigger keys one position right
            # , then put the key in its sorted slot.
            while i >= 0 and key < node.keys[i]:
                i -= 1
            node.keys.insert(i + 1, key)
            return

        # find the child to descend into, scanning from the right
        while i >= 0 and key < node.keys[i]:
            i -= 1
        i += 1

        child = node.children[i]
        if self.is_full(child):
            self.split_child(node, i, child)

            # the promoted key now sits at node.keys[i]
            # , the key may belong to the new right half.
            if key > node.keys[i]:
                i += 1

        self.insert_non_full(node.children[i], key)
        self.relieve(node, i)

    def split_child(self, parent, index, full_child):
        # split full_child (which is parent.children[index]) in two
        # , the median is promoted to parent at `index` and the new
        # sibling becomes parent.children[index+1].
        # return the new sibling.

        # for a full child, mid is max_keys // 2
        mid = full_child.n // 2
        promoted = full_child.keys[mid]

        sibling = BNode(full_child.order, leaf=full_child.leaf)

        # keys strictly after mid move to the sibling
        sibling.keys = full_child.keys[mid + 1:]
        if not full_child.leaf:
            # the trailing children move together with their keys
            sibling.children = full_child.children[mid + 1:]
            full_child.children = full_child.children[:mid + 1]

        # the promoted key is removed from full_child too
        full_child.keys = full_child.keys[:mid]

        parent.keys.insert(index, promoted)
        parent.children.insert(index + 1, sibling)

        return sibling

    def relieve(self, node, idx):
        # split node.children[idx] if it went past max_keys.
        # only happens with odd orders, see the note on top.
        child = node.children[idx]
        if child.n > self.max_keys:
            self.split_child(node, idx, child)
            logger.debug('overflowed child %s split after descent', idx)

    def fix_root(self):
        # re-establish the root after a public operation:
        #       root over max_keys -> split it, tree grows by one level
        #       root without keys but with a child -> the child is the
        #       new root, tree shrinks by one level
        # an empty leaf root is just an empty tree.
        root = self.root

        if root.n > self.max_keys:
            new_root = BNode(self.order, leaf=False)
            new_root.children.append(root)
            self.split_child(new_root, 0, root)
            self.root = new_root
            logger.debug('root split, tree height is now %s', self.height())

        elif root.n == 0 and not root.leaf:
            self.root = root.children[0]
            root.children = []
            logger.debug('root collapsed, tree height is now %s', self.height())

    def delete_from_node(self, node, key):
        # remove key from the subtree rooted at node.
        # return True if found (and removed), False otherwise.

        idx = self.find_key_index(node, key)

        # key found in this node
        if idx < node.n and node.keys[idx] == key:
            if node.leaf:
                # shift the keys after idx left by one
                del node.keys[idx]
                return True

            left = node.children[idx]
            right = node.children[idx + 1]

            if left.n > self.min_keys:
                # replace the key by its predecessor
                # , then delete the predecessor from the left subtree.
                pred = self.get_predecessor(node, idx)
                node.keys[idx] = pred
                found = self.delete_from_node(left, pred)
                self.relieve(node, idx)
                return found

            if right.n > self.min_keys:
                # symmetric, using the successor
                succ = self.get_successor(node, idx)
                node.keys[idx] = succ
                found = self.delete_from_node(right, succ)
                self.relieve(node, idx + 1)
                return found

            # both children hold min_keys, the key itself is pulled
            # down as the separator of the merged node.
            self.merge(node, idx)
            found = self.delete_from_node(node.children[idx], key)
            self.relieve(node, idx)
            return found

        # key not found in this node
        if node.leaf:
            # nowhere to descend, the key is absent from the tree
            return False

        # make sure the child can afford to lose a key
        if node.children[idx].n <= self.min_keys:
            self.fill(node, idx)

            # if the last child was merged into its left sibling
            # , idx now points one past the last child.
            if idx > node.n:
                idx -= 1

        found = self.delete_from_node(node.children[idx], key)
        self.relieve(node, idx)
        return found

    def get_predecessor(self, node, idx):
        # the largest key of the left subtree of node.keys[idx]
        cur = node.children[idx]
        while not cur.leaf:
            cur = cur.children[cur.n]
        return cur.keys[cur.n - 1]

    def get_successor(self, node, idx):
        # the smallest key of the right subtree of node.keys[idx]
        cur = node.children[idx + 1]
        while not cur.leaf:
            cur = cur.children[0]
        return cur.keys[0]

    def fill(self, node, idx):
        # bring node.children[idx] above min_keys
        # , in priority order:
        #       1. borrow from the left sibling
        #       2. borrow from the right sibling
        #       3. merge with the right sibling (or the left one
        #       if the child is the last one)

        if idx != 0 and node.children[idx - 1].n > self.min_keys:
            self.borrow_from_prev(node, idx)

        elif idx != node.n and node.children[idx + 1].n > self.min_keys:
            self.borrow_from_next(node, idx)

        elif idx != node.n:
            self.merge(node, idx)

        else:
            self.merge(node, idx - 1)

    def borrow_from_prev(self, node, idx):
        # rotate one key from the left sibling through the parent.
        #
        #       parent:        [ .. S .. ]            [ .. L .. ]
        #                      /         \     =>     /         \
        #       [ .. x L ]      [ c .. ]      [ .. x ]      [ S c .. ]

        child = node.children[idx]
        sibling = node.children[idx - 1]

        # the separator goes down as the child's new first key
        child.keys.insert(0, node.keys[idx - 1])

        if not child.leaf:
            # the sibling's last child moves along
            child.children.insert(0, sibling.children.pop())

        # the sibling's last key goes up as the new separator
        node.keys[idx - 1] = sibling.keys.pop()

    def borrow_from_next(self, node, idx):
        # symmetric to borrow_from_prev, using the right sibling.

        child = node.children[idx]
        sibling = node.children[idx + 1]

        child.keys.append(node.keys[idx])

        if not child.leaf:
            child.children.append(sibling.children.pop(0))

        node.keys[idx] = sibling.keys.pop(0)

    def merge(self, node, idx):
        # fold node.children[idx+1] into node.children[idx]
        # with node.keys[idx] as separator in between.
        # node loses one key, this is the only operation that
        # can make node itself run short of keys.

        child = node.children[idx]
        sibling = node.children[idx + 1]

        child.keys.append(node.keys.pop(idx))
        child.keys.extend(sibling.keys)

        if not child.leaf:
            child.children.extend(sibling.children)

        del node.children[idx + 1]

        # the sibling is unreachable from now on
        # , drop its references so nothing is shared.
        sibling.keys = []
        sibling.children = []

        logger.debug('merged children %s and %s', idx, idx + 1)

    # traversal and diagnostic method as follows
    # note, the key groups are lists, one list per visited node.

    def keys(self):
        # every key, ascending
        if self.is_empty():
            return []
        return list(self._inorder_keys(self.root))

    def preorder(self):
        # node first, then its children
        if self.is_empty():
            return []
        return list(self._preorder(self.root))

    def inorder(self):
        # first child, then the node, then the remaining children
        if self.is_empty():
            return []
        return list(self._inorder(self.root))

    def postorder(self):
        # children first, then the node
        if self.is_empty():
            return []
        return list(self._postorder(self.root))

    def levels(self):
        # key groups level by level, the root level first
        if self.is_empty():
            return []

        result = []
        queue = deque([(self.root, 0)])
        while queue:
            node, depth = queue.popleft()
            if len(result) <= depth:
                result.append([])
            result[depth].append(list(node.keys))
            for child in node.children:
                queue.append((child, depth + 1))
        return result

    def height(self):
        # edges from the root to any leaf
        # , every leaf is at the same depth.
        height = 0
        node = self.root
        while not node.leaf:
            node = node.children[0]
            height += 1
        return height

    def render(self):
        # one `[ k1 k2 ]` line per node, children indented under parent
        lines = []
        self._collect_lines(self.root, 0, lines)
        return util.render_lines(lines)

    def check(self):
        # verify every structural invariant
        # , motree.error.TreeCorruptedError is raised on the first broken one.

        root = self.root
        if not root.leaf and root.n == 0:
            raise error.TreeCorruptedError('internal root without keys')

        leaf_depths = set()
        self._check(root, 0, None, None, leaf_depths)

        if len(leaf_depths) > 1:
            raise error.TreeCorruptedError(
                f'leaves found at different depths {sorted(leaf_depths)}',
            )

        return True

    # private method as follows

    def _report(self, exc, strict):
        if strict:
            raise exc
        logger.warning(exc)
        return False

    def _nodes(self, node):
        yield node
        for child in node.children:
            yield from self._nodes(child)

    def _inorder_keys(self, node):
        if node.leaf:
            yield from node.keys
            return

        for key, child in zip(node.keys, node.children):
            yield from self._inorder_keys(child)
            yield key

        yield from self._inorder_keys(node.children[-1])

    def _preorder(self, node):
        yield list(node.keys)
        for child in node.children:
            yield from self._preorder(child)

    def _inorder(self, node):
        if node.leaf:
            yield list(node.keys)
            return

        yield from self._inorder(node.children[0])
        yield list(node.keys)
        for child in node.children[1:]:
            yield from self._inorder(child)

    def _postorder(self, node):
        for child in node.children:
            yield from self._postorder(child)
        yield list(node.keys)

    def _collect_lines(self, node, level, lines):
        lines.append((level, util.format_keys(node.keys)))
        for child in node.children:
            self._collect_lines(child, level + 1, lines)

    def _check(self, node, depth, low, high, leaf_depths):
        if node.order != self.order:
            raise error.TreeCorruptedError(
                f'{node} was built for order {node.order}, not {self.order}',
            )

        if node.n > self.max_keys:
            raise error.TreeCorruptedError(
                f'{node} holds more than {self.max_keys} keys',
            )

        if node is not self.root and node.n < self.min_keys:
            raise error.TreeCorruptedError(
                f'{node} holds less than {self.min_keys} keys',
            )

        for a, b in zip(node.keys, node.keys[1:]):
            if a >= b:
                raise error.TreeCorruptedError(
                    f'{node} keys are not strictly ascending',
                )

        if node.keys:
            if low is not None and node.keys[0] <= low:
                raise error.TreeCorruptedError(
                    f'{node} has a key not greater than separator {low}',
                )
            if high is not None and node.keys[-1] >= high:
                raise error.TreeCorruptedError(
                    f'{node} has a key not less than separator {high}',
                )

        if node.leaf:
            if node.children:
                raise error.TreeCorruptedError(f'{node} is a leaf with children')
            leaf_depths.add(depth)
            return

        if len(node.children) != node.n + 1:
            raise error.TreeCorruptedError(
                f'{node} has {len(node.children)} children for {node.n} keys',
            )

        # each child lives between its two surrounding separators
        bounds = [low] + node.keys + [high]
        for i, child in enumerate(node.children):
            self._check(child, depth + 1, bounds[i], bounds[i + 1], leaf_depths)
