import logging
import random

import pytest

# local imports
import motree
from motree import error


def build(order, keys):
    tree = motree.BTree(order)
    for key in keys:
        tree.insert(key)
    return tree


def three_leaves():
    # root [20 40] over leaves [10] [30] [50], every leaf at min_keys
    tree = build(4, [10, 20, 30, 40, 50, 60])
    tree.delete(60)
    return tree


def shape(tree):
    return tree.root.keys, [child.keys for child in tree.root.children]


class TestScenario:
    # order 4, max_keys 3, min_keys 1

    @classmethod
    def setup_class(cls):
        cls.tree = build(4, [10, 20, 5, 6, 12, 30, 7, 17])

    def test_inorder_keys(self):
        assert self.tree.keys() == [5, 6, 7, 10, 12, 17, 20, 30]
        self.tree.check()

    def test_shape(self):
        assert shape(self.tree) == ([10, 20], [[5, 6, 7], [12, 17], [30]])

    def test_traversals(self):
        assert self.tree.preorder() == [[10, 20], [5, 6, 7], [12, 17], [30]]
        assert self.tree.inorder() == [[5, 6, 7], [10, 20], [12, 17], [30]]
        assert self.tree.postorder() == [[5, 6, 7], [12, 17], [30], [10, 20]]
        assert self.tree.levels() == [
            [[10, 20]],
            [[5, 6, 7], [12, 17], [30]],
        ]

    def test_render(self):
        assert self.tree.render() == (
            "[ 10 20 ]\n"
            "   [ 5 6 7 ]\n"
            "   [ 12 17 ]\n"
            "   [ 30 ]"
        )

    def test_delete_present(self):
        assert self.tree.delete(6) is True
        self.tree.check()

    def test_delete_absent(self, caplog):
        assert self.tree.delete(13) is False
        assert "doesn't exist" in caplog.text
        assert self.tree.keys() == [5, 7, 10, 12, 17, 20, 30]
        self.tree.check()


class TestEmptyTree:

    def test_fresh_tree_is_empty(self):
        tree = motree.BTree(4)
        assert tree.is_empty()
        assert len(tree) == 0
        assert tree.keys() == []
        assert tree.preorder() == []
        assert tree.height() == 0

    def test_contains_is_false(self):
        tree = motree.BTree(4)
        for key in [0, 1, -1, 42]:
            assert not tree.contains(key)
            assert key not in tree

    def test_delete_reports_empty(self, caplog):
        tree = motree.BTree(4)
        assert tree.delete(1) is False
        assert 'empty' in caplog.text
        assert tree.is_empty()

    def test_delete_strict_raises(self):
        tree = motree.BTree(4)
        with pytest.raises(error.EmptyTreeError):
            tree.delete(1, strict=True)
        assert tree.is_empty()

    def test_delete_everything(self):
        tree = build(4, range(1, 20))
        for key in range(1, 20):
            assert tree.delete(key)
            tree.check()
        assert tree.is_empty()
        assert tree.root.leaf
        assert tree.delete(1) is False


class TestOrder:

    @pytest.mark.parametrize('order', [-1, 0, 1, 2])
    def test_too_small(self, order):
        with pytest.raises(error.InvalidOrderError):
            motree.BTree(order)

    @pytest.mark.parametrize('order', ['4', 4.0, None, True])
    def test_not_an_int(self, order):
        with pytest.raises(error.InvalidOrderError):
            motree.BTree(order)

    @pytest.mark.parametrize('order, max_keys, min_keys', [
        (3, 2, 1),
        (4, 3, 1),
        (5, 4, 2),
        (6, 5, 2),
        (64, 63, 31),
    ])
    def test_capacities(self, order, max_keys, min_keys):
        tree = motree.BTree(order)
        assert tree.max_keys == max_keys
        assert tree.min_keys == min_keys

    def test_default_order(self):
        assert motree.BTree().order == 4


class TestLookup:

    def test_find_key_index(self):
        tree = motree.BTree(6)
        node = motree.BNode(6)
        node.keys = [10, 20, 30]
        assert tree.find_key_index(node, 5) == 0
        assert tree.find_key_index(node, 10) == 0
        assert tree.find_key_index(node, 15) == 1
        assert tree.find_key_index(node, 30) == 2
        assert tree.find_key_index(node, 31) == 3

    def test_search(self):
        tree = build(4, [10, 20, 5, 6, 12, 30, 7, 17])
        node, idx = tree.search(17)
        assert node.keys[idx] == 17
        with pytest.raises(error.KeyNotFoundError):
            tree.search(13)

    def test_contains_does_not_mutate(self):
        tree = build(4, [10, 20, 5, 6, 12, 30, 7, 17])
        before = tree.preorder()
        for _ in range(3):
            assert tree.contains(12)
            assert not tree.contains(13)
        assert tree.preorder() == before


class TestInsert:

    @pytest.mark.parametrize('order', [3, 4, 5, 6, 7, 8])
    def test_split_on_overflow(self, order):
        max_keys = order - 1
        mid = max_keys // 2

        tree = build(order, range(max_keys))
        assert tree.root.leaf
        assert tree.root.n == max_keys

        tree.insert(max_keys)
        assert tree.root.keys == [mid]
        left, right = tree.root.children
        assert left.n == mid
        # the right half plus the key that caused the split
        assert right.n == max_keys - mid - 1 + 1
        tree.check()

    def test_split_child(self):
        tree = motree.BTree(4)
        parent = motree.BNode(4, leaf=False)
        full = motree.BNode(4)
        full.keys = [1, 2, 3]
        parent.children = [full]

        sibling = tree.split_child(parent, 0, full)

        assert parent.keys == [2]
        assert parent.children == [full, sibling]
        assert full.keys == [1]
        assert sibling.keys == [3]
        assert sibling.leaf
        assert sibling.order == full.order

    def test_split_internal_child_moves_children(self):
        tree = motree.BTree(4)
        parent = motree.BNode(4, leaf=False)
        full = motree.BNode(4, leaf=False)
        full.keys = [10, 20, 30]
        full.children = [motree.BNode(4) for _ in range(4)]
        grandchildren = list(full.children)
        parent.children = [full]

        sibling = tree.split_child(parent, 0, full)

        assert full.children == grandchildren[:2]
        assert sibling.children == grandchildren[2:]
        assert not sibling.leaf

    def test_duplicate_is_rejected(self, caplog):
        tree = build(4, [1, 2, 3])
        before = tree.preorder()
        assert tree.insert(2) is False
        assert 'duplicated' in caplog.text
        assert tree.preorder() == before

    def test_duplicate_on_full_root_keeps_shape(self):
        tree = build(4, [1, 2, 3])
        tree.insert(3)
        assert tree.root.leaf
        assert tree.root.keys == [1, 2, 3]

    def test_duplicate_strict_raises(self):
        tree = build(4, [1, 2, 3])
        with pytest.raises(error.DuplicateKeyError):
            tree.insert(1, strict=True)

    def test_descending_and_negative_keys(self):
        keys = list(range(40, -40, -3))
        tree = build(5, keys)
        assert tree.keys() == sorted(keys)
        tree.check()


class TestDelete:

    def test_borrow_from_prev(self):
        tree = build(4, [10, 20, 30, 40, 50, 60, 5])
        tree.delete(60)
        assert shape(tree) == ([20, 40], [[5, 10], [30], [50]])

        tree.delete(30)
        assert shape(tree) == ([10, 40], [[5], [20], [50]])
        tree.check()

    def test_borrow_from_next(self):
        tree = build(4, [10, 20, 30, 40, 50, 60, 35])
        assert shape(tree) == ([20, 40], [[10], [30, 35], [50, 60]])

        tree.delete(10)
        assert shape(tree) == ([30, 40], [[20], [35], [50, 60]])
        tree.check()

    def test_internal_key_uses_predecessor(self):
        tree = build(4, [10, 20, 30, 40, 50, 60, 35])
        tree.delete(40)
        assert shape(tree) == ([20, 35], [[10], [30], [50, 60]])
        tree.check()

    def test_internal_key_uses_successor(self):
        tree = build(4, [10, 20, 30, 40, 50, 60, 35])
        tree.delete(20)
        assert shape(tree) == ([30, 40], [[10], [35], [50, 60]])
        tree.check()

    def test_internal_key_merges(self):
        tree = three_leaves()
        tree.delete(20)
        assert shape(tree) == ([40], [[10, 30], [50]])
        tree.check()

    def test_merge(self):
        tree = three_leaves()
        tree.merge(tree.root, 0)
        assert shape(tree) == ([40], [[10, 20, 30], [50]])
        merged = tree.root.children[0]
        assert merged.n == 2 * tree.min_keys + 1

    def test_fill_merges_before_descent(self):
        # the absent key still forces the merge on the way down
        tree = three_leaves()
        assert tree.delete(15) is False
        assert shape(tree) == ([40], [[10, 20, 30], [50]])
        tree.check()

    def test_last_child_merges_into_prev(self):
        tree = three_leaves()
        assert tree.delete(50)
        assert shape(tree) == ([20], [[10], [30, 40]])
        tree.check()

    def test_root_collapse(self):
        tree = build(4, [1, 2, 3, 4])
        assert shape(tree) == ([2], [[1], [3, 4]])

        tree.delete(3)
        tree.delete(4)
        assert tree.root.leaf
        assert tree.root.keys == [1, 2]
        assert tree.height() == 0

    def test_absent_key_strict_raises(self):
        tree = build(4, [10, 20, 5, 6, 12, 30, 7, 17])
        with pytest.raises(error.KeyNotFoundError):
            tree.delete(13, strict=True)
        assert tree.keys() == [5, 6, 7, 10, 12, 17, 20, 30]
        tree.check()

    def test_predecessor_and_successor(self):
        tree = build(4, [10, 20, 5, 6, 12, 30, 7, 17])
        assert tree.get_predecessor(tree.root, 0) == 7
        assert tree.get_successor(tree.root, 0) == 12
        assert tree.get_predecessor(tree.root, 1) == 17
        assert tree.get_successor(tree.root, 1) == 30


class TestOddOrder:
    # order 3: every node holds one or two keys

    def test_ascending(self):
        tree = build(3, range(1, 8))
        assert tree.levels() == [
            [[4]],
            [[2], [6]],
            [[1], [3], [5], [7]],
        ]
        tree.check()

    def test_absent_key_restores_overflowed_merge(self):
        tree = build(3, range(1, 8))
        assert tree.delete(0) is False
        assert tree.keys() == list(range(1, 8))
        tree.check()

    def test_delete_shrinks(self):
        tree = build(3, range(1, 8))
        tree.delete(1)
        assert tree.keys() == list(range(2, 8))
        assert tree.height() == 1
        tree.check()


class TestProperties:

    @pytest.mark.parametrize('order', [3, 4, 5, 6, 7, 10])
    def test_random_sequences_keep_invariants(self, order):
        rng = random.Random(order)
        tree = motree.BTree(order)
        present = set()

        for _ in range(300):
            key = rng.randrange(200)
            assert tree.insert(key) is (key not in present)
            present.add(key)
            tree.check()

        assert tree.keys() == sorted(present)
        assert len(tree) == len(present)

        for _ in range(400):
            key = rng.randrange(220)
            assert tree.delete(key) is (key in present)
            present.discard(key)
            tree.check()
            assert tree.keys() == sorted(present)

        for key in range(220):
            assert tree.contains(key) is (key in present)

    @pytest.mark.parametrize('order', [4, 5])
    def test_insert_then_delete_restores_keys(self, order):
        tree = build(order, range(0, 100, 2))
        before = tree.keys()
        for key in range(1, 100, 2):
            tree.insert(key)
            tree.delete(key)
            assert tree.keys() == before
        tree.check()

    def test_leaves_share_depth(self):
        tree = build(4, range(1000))
        levels = tree.levels()
        assert len(levels) == tree.height() + 1
        assert sum(len(group) for level in levels for group in level) == 1000
        for group in levels[-1]:
            assert group
        tree.check()

    def test_iteration(self):
        tree = build(4, [3, 1, 2])
        assert list(tree) == [1, 2, 3]
        assert len(tree) == 3
        assert 'keys=3' in repr(tree)


class TestCheck:

    def test_detects_unsorted_keys(self):
        tree = build(4, [1, 2, 3])
        tree.root.keys = [3, 2, 1]
        with pytest.raises(error.TreeCorruptedError):
            tree.check()

    def test_detects_underfull_node(self):
        tree = build(4, [1, 2, 3, 4])
        tree.root.children[0].keys = []
        with pytest.raises(error.TreeCorruptedError):
            tree.check()

    def test_detects_misplaced_key(self):
        tree = build(4, [1, 2, 3, 4])
        tree.root.children[1].keys = [0, 4]
        with pytest.raises(error.TreeCorruptedError):
            tree.check()

    def test_detects_node_of_another_order(self):
        tree = build(4, [1, 2, 3, 4])
        stray = motree.BNode(5)
        stray.keys = [3, 4]
        tree.root.children[1] = stray
        with pytest.raises(error.TreeCorruptedError):
            tree.check()


class TestLogging:

    def test_structural_events_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger='motree_logger')
        tree = build(4, [1, 2, 3, 4])
        assert 'root split' in caplog.text

        tree.delete(3)
        tree.delete(4)
        assert 'merged' in caplog.text
        assert 'root collapsed' in caplog.text
