"motree.constant holds the order bounds shared by the trees."

# the smallest order a btree accepts.
# note, order is the maximum number of children a bnode can have.
# with order 2, a node could hold just one key
# and a split would leave nothing for the new sibling.
MIN_ORDER = 3

# used when no order is passed to BTree
DEFAULT_ORDER = 4

# used by every .render method
INDENT_TEMPLATE = '   '


def max_keys(order):
    # used for btree insertion
    return order - 1


def min_keys(order):
    # used for btree deletion
    # (every node except the root keeps at least this many keys)
    return (order - 1) // 2


def split_keys(order):
    # the smallest key count that can be split into two
    # min_keys halves around one promoted key.
    # for even orders, it equals max_keys
    # , for odd orders, it is one more than max_keys.
    return 2 * min_keys(order) + 1
