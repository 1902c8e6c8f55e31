"""console demo, run it with `python -m motree`."""

import logging
import sys

# local imports
from motree import BTree
from motree import log


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv

    if '-v' in argv or '--verbose' in argv:
        # show splits, merges and root changes as they happen
        log.set_level(logging.DEBUG)

    tree = BTree(4)
    for key in [10, 20, 5, 6, 12, 30, 7, 17]:
        tree.insert(key)

    print("btree of order 4:")
    print(tree.render())
    print("preorder:", tree.preorder())
    print("inorder:", tree.inorder())
    print("postorder:", tree.postorder())
    print("keys:", tree.keys())

    for key in [6, 13]:
        deleted = tree.delete(key)
        print(f"\ndelete {key}:", "done" if deleted else "nothing deleted")

    print(tree.render())
    print("keys:", tree.keys())

    return 0


if __name__ == '__main__':
    sys.exit(main())
